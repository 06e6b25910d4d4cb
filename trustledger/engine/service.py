"""
TrustEngine - the interface exposed to domain services.

Wires the ledgers, the two scoring strategies, aggregation and the edit
gate over one repository. Callers pass UUIDs; every mutation runs in a
single repository transaction.
"""

from typing import Optional

from ..config import TrustPolicy, get_policy
from ..errors import ClientNotFound, ContributionNotFound
from ..log import get_logger
from ..models import Client, Contribution, ContributionType, Payload, Vote, VoteType
from ..repositories import get_repository
from ..repositories.base import Repository
from .aggregation import TrustAggregator
from .gate import EditGate
from .ledger import ContributionLedger, VoteLedger
from .legacy import LegacyTrustService
from .recalculation import ScoreRecalculator
from .scoring import FixedWeightStrategy, WeightedBlendStrategy

logger = get_logger(__name__)


class TrustEngine:
    """
    Usage:
        engine = TrustEngine()
        alice = engine.register_client()
        name = engine.create_or_edit_contribution(
            ContributionType.EDIT_COMPANY_NAME, alice.uuid, company_uuid,
            TextPayload(text="Acme"))
        engine.cast_vote(bob.uuid, name.uuid, VoteType.TRUSTED)
    """

    def __init__(self, repository: Optional[Repository] = None, policy: Optional[TrustPolicy] = None):
        self.repository = repository or get_repository()
        self.policy = policy or get_policy()

        self.strategy = WeightedBlendStrategy(self.policy)
        self.gate = EditGate(self.policy)
        self.aggregator = TrustAggregator(self.repository, self.strategy)
        self.recalculator = ScoreRecalculator(self.repository, self.strategy, self.aggregator)
        self.contributions = ContributionLedger(self.repository, self.gate, self.recalculator)
        self.votes = VoteLedger(self.repository, self.recalculator)
        self.legacy = LegacyTrustService(self.repository, FixedWeightStrategy(self.policy))

    # === Clients ===

    def register_client(self, uuid: Optional[str] = None) -> Client:
        """Create a client at the initial trust level."""
        with self.repository.transaction():
            fields = {"uuid": uuid} if uuid else {}
            client = Client(trust_level=self.policy.initial_trust, **fields)
            self.repository.clients.save(client)
            logger.info("client_registered", client_uuid=client.uuid, trust_level=client.trust_level)
            return client

    def get_client(self, client_uuid: str) -> Client:
        client = self.repository.clients.get(client_uuid)
        if client is None:
            raise ClientNotFound(client_uuid)
        return client

    def client_trust_level(self, client_uuid: str) -> float:
        return self.get_client(client_uuid).trust_level

    def recompute_client_trust(self, client_uuid: str) -> float:
        """Force a recompute of one client's trust level."""
        with self.repository.transaction():
            return self.aggregator.recompute_client_trust(self.get_client(client_uuid)).trust_level

    # === Contributions ===

    def get_contribution(self, contribution_uuid: str) -> Contribution:
        contribution = self.repository.contributions.get(contribution_uuid)
        if contribution is None:
            raise ContributionNotFound(contribution_uuid)
        return contribution

    def create_or_edit_contribution(
        self,
        type: ContributionType,
        author_uuid: str,
        subject_uuid: str,
        payload: Payload,
    ) -> Contribution:
        """Propose a value. Raises InsufficientTrust if a better-trusted value stands."""
        with self.repository.transaction():
            author = self.get_client(author_uuid)
            return self.contributions.create(type, author, subject_uuid, payload)

    def current_contribution(self, type: ContributionType, subject_uuid: str) -> Optional[Contribution]:
        return self.contributions.current_contribution(type, subject_uuid)

    def current_value(self, type: ContributionType, subject_uuid: str) -> Optional[Payload]:
        """Payload of the current contribution, e.g. a company's name."""
        current = self.current_contribution(type, subject_uuid)
        return current.payload if current else None

    def current_trust_score(self, type: ContributionType, subject_uuid: str) -> Optional[float]:
        current = self.current_contribution(type, subject_uuid)
        return current.trust_score if current else None

    def contribution_history(self, type: ContributionType, subject_uuid: str) -> list[Contribution]:
        return self.contributions.history(type, subject_uuid)

    def can_edit(self, client_uuid: str, type: ContributionType, subject_uuid: str) -> bool:
        """Whether the client may currently replace the value of (subject, type)."""
        client = self.get_client(client_uuid)
        return self.gate.has_sufficient_trust(client, self.current_contribution(type, subject_uuid))

    # === Votes ===

    def cast_vote(self, voter_uuid: str, contribution_uuid: str, vote_type: VoteType) -> Vote:
        """Vote on a contribution. Raises SelfVote or DuplicateVote."""
        with self.repository.transaction():
            voter = self.get_client(voter_uuid)
            contribution = self.get_contribution(contribution_uuid)
            return self.votes.cast_vote(voter, contribution, vote_type)

    def vote_on_current(
        self,
        voter_uuid: str,
        type: ContributionType,
        subject_uuid: str,
        vote_type: VoteType,
    ) -> Vote:
        """Vote on whatever value (subject, type) currently has."""
        with self.repository.transaction():
            current = self.current_contribution(type, subject_uuid)
            if current is None:
                raise ContributionNotFound(f"{type.value}:{subject_uuid}")
            return self.cast_vote(voter_uuid, current.uuid, vote_type)

    def votes_for(self, contribution_uuid: str) -> list[Vote]:
        return self.votes.votes_for(contribution_uuid)
