"""
Contribution and vote ledgers.

Contribution history is an append-only chain per (subject, type) with
exactly one enabled version. Votes are immutable, one per voter and
contribution, and never cast by the author.
"""

from typing import Optional

from ..errors import DuplicateVote, InvariantViolation, PayloadMismatch, SelfVote
from ..log import get_logger
from ..models import Client, Contribution, ContributionType, Payload, Vote, VoteType, payload_class_for
from ..repositories.base import Repository
from .gate import EditGate
from .recalculation import ScoreRecalculator

logger = get_logger(__name__)


def check_vote_allowed(voter_uuid: str, author_uuid: str, target_uuid: str, already_voted: bool) -> None:
    """
    Vote rules shared by contributions and legacy trust items.

    Raises:
        SelfVote: voter authored the target
        DuplicateVote: voter already voted on the target
    """
    if voter_uuid == author_uuid:
        logger.info("vote_rejected", reason="self_vote", voter_uuid=voter_uuid, target_uuid=target_uuid)
        raise SelfVote(voter_uuid, target_uuid)
    if already_voted:
        logger.info("vote_rejected", reason="duplicate", voter_uuid=voter_uuid, target_uuid=target_uuid)
        raise DuplicateVote(voter_uuid, target_uuid)


class ContributionLedger:
    """Versioned contributions per (subject, type)."""

    def __init__(self, repository: Repository, gate: EditGate, recalculator: ScoreRecalculator):
        self._repo = repository
        self._gate = gate
        self._recalculator = recalculator

    def current_contribution(self, type: ContributionType, subject_uuid: str) -> Optional[Contribution]:
        """
        The enabled contribution for (subject, type), if any.

        Raises:
            InvariantViolation: more than one enabled version exists
        """
        enabled = self._repo.contributions.find_enabled(subject_uuid, type)
        if len(enabled) > 1:
            logger.error(
                "multiple_enabled_contributions",
                subject_uuid=subject_uuid,
                type=type.value,
                contribution_uuids=[c.uuid for c in enabled],
            )
            raise InvariantViolation(
                f"Expected only one enabled {type.value} contribution for {subject_uuid}, found {len(enabled)}"
            )
        return enabled[0] if enabled else None

    def history(self, type: ContributionType, subject_uuid: str) -> list[Contribution]:
        """Every version for (subject, type), oldest first."""
        versions = self._repo.contributions.find_by_subject(subject_uuid, type)
        return sorted(versions, key=lambda c: c.created_at)

    def create(self, type: ContributionType, author: Client, subject_uuid: str, payload: Payload) -> Contribution:
        """
        Propose a new value, replacing the current one.

        Raises:
            PayloadMismatch: payload kind does not fit the type
            InsufficientTrust: author may not replace the current value
        """
        expected = payload_class_for(type)
        if not isinstance(payload, expected):
            raise PayloadMismatch(type.value, expected.model_fields["kind"].default, payload.kind)

        with self._repo.transaction():
            author = self._repo.clients.get(author.uuid) or author
            current = self.current_contribution(type, subject_uuid)
            self._gate.assert_sufficient_trust(author, current)

            if current is not None:
                current.enabled = False
                self._repo.contributions.save(current)
                logger.info("contribution_disabled", contribution_uuid=current.uuid, subject_uuid=subject_uuid)

            contribution = Contribution(
                type=type,
                subject_uuid=subject_uuid,
                payload=payload,
                author_uuid=author.uuid,
                trust_score=author.trust_level,
            )
            self._repo.contributions.save(contribution)
            logger.info(
                "contribution_created",
                contribution_uuid=contribution.uuid,
                type=type.value,
                subject_uuid=subject_uuid,
                author_uuid=author.uuid,
                replaced=current.uuid if current else None,
            )

            return self._recalculator.recalculate(contribution.uuid)


class VoteLedger:
    """Peer votes on contributions."""

    def __init__(self, repository: Repository, recalculator: ScoreRecalculator):
        self._repo = repository
        self._recalculator = recalculator

    def cast_vote(self, voter: Client, contribution: Contribution, vote_type: VoteType) -> Vote:
        """
        Record a vote and recompute the contribution's score and the
        trust levels of its author and voters, all in one transaction.

        Raises:
            SelfVote: voter authored the contribution
            DuplicateVote: voter already voted on it
        """
        with self._repo.transaction():
            existing = self._repo.votes.find(voter.uuid, contribution.uuid)
            check_vote_allowed(voter.uuid, contribution.author_uuid, contribution.uuid, existing is not None)

            vote = Vote(vote_type=vote_type, voter_uuid=voter.uuid, contribution_uuid=contribution.uuid)
            self._repo.votes.save(vote)
            logger.info(
                "vote_cast",
                vote_uuid=vote.uuid,
                voter_uuid=voter.uuid,
                contribution_uuid=contribution.uuid,
                vote_type=vote_type.value,
            )

            updated = self._recalculator.recalculate(contribution.uuid)
            contribution.trust_score = updated.trust_score
            return vote

    def votes_for(self, contribution_uuid: str) -> list[Vote]:
        """All votes on a contribution, in cast order."""
        return self._repo.votes.find_for_contribution(contribution_uuid)
