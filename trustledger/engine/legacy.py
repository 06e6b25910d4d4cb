"""
Legacy trust items - fixed-weight scoring for structural subjects.

Kept alongside the live policy for subjects scored as a whole (e.g. a
product record) rather than per text field. Items remember the creator's
trust level at creation time and blend it 50/50 with the vote share.
Nothing here touches client trust levels.
"""

from typing import Optional

from ..errors import ClientNotFound, InsufficientTrust, TrustItemExists, TrustItemNotFound
from ..log import get_logger
from ..models import Client, TrustItem, TrustItemVote, VoteType
from ..repositories.base import Repository
from .ledger import check_vote_allowed
from .scoring import FixedWeightStrategy, VoteTally

logger = get_logger(__name__)


class LegacyTrustService:
    """Trust items and their votes under the fixed-weight policy."""

    def __init__(self, repository: Repository, strategy: Optional[FixedWeightStrategy] = None):
        self._repo = repository
        self._strategy = strategy or FixedWeightStrategy()

    def create_item(self, creator: Client, subject_uuid: str) -> TrustItem:
        """
        Start scoring a subject, freezing the creator's current trust level.

        Raises:
            TrustItemExists: the subject already has an item
        """
        with self._repo.transaction():
            existing = self._repo.trust_items.find_by_subject(subject_uuid)
            if existing is not None:
                raise TrustItemExists(subject_uuid, existing.uuid)

            creator = self._repo.clients.get(creator.uuid) or creator
            item = TrustItem(
                subject_uuid=subject_uuid,
                creator_uuid=creator.uuid,
                initial_trust_score=creator.trust_level,
                trust_score=creator.trust_level,
            )
            self._repo.trust_items.save(item)
            logger.info(
                "trust_item_created",
                item_uuid=item.uuid,
                subject_uuid=subject_uuid,
                creator_uuid=creator.uuid,
                initial_trust_score=item.initial_trust_score,
            )
            return item

    def item_for_subject(self, subject_uuid: str) -> Optional[TrustItem]:
        return self._repo.trust_items.find_by_subject(subject_uuid)

    def cast_vote(self, voter: Client, item_uuid: str, vote_type: VoteType) -> TrustItemVote:
        """
        Vote on a trust item and rescore it.

        Raises:
            SelfVote: voter created the item
            DuplicateVote: voter already voted on it
        """
        with self._repo.transaction():
            item = self._get_item(item_uuid)
            existing = self._repo.trust_item_votes.find(voter.uuid, item.uuid)
            check_vote_allowed(voter.uuid, item.creator_uuid, item.uuid, existing is not None)

            vote = TrustItemVote(vote_type=vote_type, voter_uuid=voter.uuid, item_uuid=item.uuid)
            self._repo.trust_item_votes.save(vote)
            logger.info(
                "trust_item_vote_cast",
                vote_uuid=vote.uuid,
                voter_uuid=voter.uuid,
                item_uuid=item.uuid,
                vote_type=vote_type.value,
            )

            self.recalculate_item_score(item.uuid)
            return vote

    def recalculate_item_score(self, item_uuid: str) -> TrustItem:
        """Rescore from votes and the frozen initial score."""
        item = self._get_item(item_uuid)
        tally = VoteTally(
            trusted=self._repo.trust_item_votes.count(item.uuid, VoteType.TRUSTED),
            untrusted=self._repo.trust_item_votes.count(item.uuid, VoteType.NOT_TRUSTED),
        )
        item.trust_score = self._strategy.score(tally, item.initial_trust_score)
        self._repo.trust_items.save(item)
        logger.info(
            "trust_item_score_recalculated",
            item_uuid=item.uuid,
            trusted=tally.trusted,
            untrusted=tally.untrusted,
            trust_score=item.trust_score,
        )
        return item

    def has_sufficient_trust_to_edit(self, client: Client, item: TrustItem) -> bool:
        """No tolerance here: the client must match the item's score."""
        return client.trust_level >= item.trust_score

    def assert_sufficient_trust_to_edit(self, client: Client, item: TrustItem) -> None:
        if not self.has_sufficient_trust_to_edit(client, item):
            logger.info(
                "edit_rejected",
                client_uuid=client.uuid,
                trust_level=client.trust_level,
                item_uuid=item.uuid,
                trust_score=item.trust_score,
            )
            raise InsufficientTrust(client.uuid, client.trust_level, item.uuid, item.trust_score)

    def recalculate_client_trust_level(self, client: Client) -> Client:
        """
        Intentionally a no-op: legacy votes do not move trust levels.

        Returns the client as stored.
        """
        stored = self._repo.clients.get(client.uuid)
        if stored is None:
            raise ClientNotFound(client.uuid)
        return stored

    def _get_item(self, item_uuid: str) -> TrustItem:
        item = self._repo.trust_items.get(item_uuid)
        if item is None:
            raise TrustItemNotFound(item_uuid)
        return item
