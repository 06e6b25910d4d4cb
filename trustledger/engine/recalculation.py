"""
Score recalculation - a contribution's trust score from its votes.
"""

from ..errors import ClientNotFound, ContributionNotFound
from ..log import get_logger
from ..models import Contribution
from ..repositories.base import Repository
from .aggregation import TrustAggregator, tally_votes
from .scoring import ScoringStrategy

logger = get_logger(__name__)


class ScoreRecalculator:
    """
    Recomputes one contribution's score, then fans out exactly one level:
    the author's trust level and each distinct voter's trust level. The
    fan-out is skipped for strategies that do not update client trust.

    The fan-out reads other contributions' stored scores and never calls
    back into this class, so there is no loop to converge.
    """

    def __init__(self, repository: Repository, strategy: ScoringStrategy, aggregator: TrustAggregator):
        self._repo = repository
        self._strategy = strategy
        self._aggregator = aggregator

    def recalculate(self, contribution_uuid: str) -> Contribution:
        """Recompute and persist the score. Idempotent for a fixed vote set."""
        contribution = self._repo.contributions.get(contribution_uuid)
        if contribution is None:
            raise ContributionNotFound(contribution_uuid)

        # Read live: a voteless contribution tracks its author's current level
        author = self._repo.clients.get(contribution.author_uuid)
        if author is None:
            raise ClientNotFound(contribution.author_uuid)

        tally = tally_votes(self._repo, contribution.uuid)
        previous = contribution.trust_score
        contribution.trust_score = self._strategy.score(tally, author.trust_level)
        self._repo.contributions.save(contribution)

        logger.info(
            "trust_score_recalculated",
            contribution_uuid=contribution.uuid,
            trusted=tally.trusted,
            untrusted=tally.untrusted,
            author_trust=author.trust_level,
            previous=previous,
            trust_score=contribution.trust_score,
        )

        if not self._strategy.updates_client_trust:
            return contribution

        self._aggregator.recompute_client_trust(author)

        voters = dict.fromkeys(v.voter_uuid for v in self._repo.votes.find_for_contribution(contribution.uuid))
        for voter_uuid in voters:
            voter = self._repo.clients.get(voter_uuid)
            if voter is None:
                raise ClientNotFound(voter_uuid)
            self._aggregator.recompute_client_trust(voter)

        return contribution
