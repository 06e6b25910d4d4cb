"""
Trust aggregation - a client's trust level from their track record.
"""

from ..log import get_logger
from ..models import Client, VoteType
from ..repositories.base import Repository
from .scoring import VoteTally, WeightedBlendStrategy, clamp_unit

logger = get_logger(__name__)


def tally_votes(repository: Repository, contribution_uuid: str) -> VoteTally:
    """Count Trusted/NotTrusted votes on a contribution."""
    return VoteTally(
        trusted=repository.votes.count(contribution_uuid, VoteType.TRUSTED),
        untrusted=repository.votes.count(contribution_uuid, VoteType.NOT_TRUSTED),
    )


class TrustAggregator:
    """
    Recomputes a client's trust level as a weighted average of:

    - the initial trust level, weight 1 (the prior)
    - the trust score of every contribution they authored, weight 1 each,
      disabled versions included
    - agreement with the majority on every contribution they voted on,
      weighted by how clear and well attended that vote was
    """

    def __init__(self, repository: Repository, strategy: WeightedBlendStrategy):
        self._repo = repository
        self._strategy = strategy

    def recompute_client_trust(self, client: Client) -> Client:
        """Recompute, persist and return the client's trust level."""
        client = self._repo.clients.get(client.uuid) or client

        total_score = self._strategy.policy.initial_trust
        total_weight = 1.0

        authored = self._repo.contributions.find_authored_by(client.uuid)
        for contribution in authored:
            total_score += contribution.trust_score
            total_weight += 1.0

        voted_on = 0
        for contribution in self._repo.contributions.find_voted_on_by(client.uuid):
            if contribution.author_uuid == client.uuid:
                continue

            tally = tally_votes(self._repo, contribution.uuid)
            if tally.total == 0:
                continue

            actual = self._repo.votes.find(client.uuid, contribution.uuid)
            if actual is None:
                continue

            agreement_score, weight = self._strategy.agreement(tally, actual.vote_type)
            total_score += agreement_score * weight
            total_weight += weight
            voted_on += 1

        previous = client.trust_level
        client.trust_level = clamp_unit(total_score / total_weight)
        self._repo.clients.save(client)

        logger.debug(
            "client_trust_recalculated",
            client_uuid=client.uuid,
            previous=previous,
            trust_level=client.trust_level,
            authored=len(authored),
            voted_on=voted_on,
        )
        return client
