"""
Repository base classes - the storage contract consumed by the engine.

Every call is assumed to run inside the ambient transaction opened with
Repository.transaction(). Implementations hand out copies: mutating a
returned model has no effect until it is passed back to save().
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Generic, List, TypeVar, Optional

from ..models import (
    Client,
    Contribution,
    ContributionType,
    Vote,
    VoteType,
    TrustItem,
    TrustItemVote,
)

T = TypeVar("T")


class BaseRepository(ABC, Generic[T]):
    """
    Abstract base for entity repositories.

    No delete(): clients, contributions and votes are never removed.
    """

    @abstractmethod
    def get(self, uuid: str) -> Optional[T]:
        """Get entity by UUID."""
        pass

    @abstractmethod
    def save(self, entity: T) -> None:
        """Insert or update entity."""
        pass

    @abstractmethod
    def list(self) -> List[T]:
        """List all entities."""
        pass

    def exists(self, uuid: str) -> bool:
        """Check if entity exists."""
        return self.get(uuid) is not None


class ClientRepository(BaseRepository[Client]):
    """Repository for clients."""


class ContributionRepository(BaseRepository[Contribution]):
    """Repository for contributions."""

    @abstractmethod
    def find_enabled(self, subject_uuid: str, type: ContributionType) -> List[Contribution]:
        """All enabled contributions for (subject, type). Should be 0 or 1 long."""
        pass

    @abstractmethod
    def find_by_subject(self, subject_uuid: str, type: ContributionType) -> List[Contribution]:
        """Every version for (subject, type), oldest first."""
        pass

    @abstractmethod
    def find_authored_by(self, client_uuid: str) -> List[Contribution]:
        """Contributions authored by client, enabled or not."""
        pass

    @abstractmethod
    def find_voted_on_by(self, client_uuid: str) -> List[Contribution]:
        """Contributions the client has cast a vote on."""
        pass


class VoteRepository(BaseRepository[Vote]):
    """
    Repository for contribution votes.

    save() must reject a second vote by the same voter on the same
    contribution with DuplicateVote, whatever the caller pre-checked.
    """

    @abstractmethod
    def find(self, voter_uuid: str, contribution_uuid: str) -> Optional[Vote]:
        """The voter's vote on the contribution, if any."""
        pass

    @abstractmethod
    def find_for_contribution(self, contribution_uuid: str) -> List[Vote]:
        """All votes on a contribution, in cast order."""
        pass

    @abstractmethod
    def count(self, contribution_uuid: str, vote_type: VoteType) -> int:
        """Number of votes of one type on a contribution."""
        pass


class TrustItemRepository(BaseRepository[TrustItem]):
    """Repository for legacy trust items."""

    @abstractmethod
    def find_by_subject(self, subject_uuid: str) -> Optional[TrustItem]:
        """The trust item scoring a subject, if any."""
        pass


class TrustItemVoteRepository(BaseRepository[TrustItemVote]):
    """Repository for legacy trust item votes. Same uniqueness rule as votes."""

    @abstractmethod
    def find(self, voter_uuid: str, item_uuid: str) -> Optional[TrustItemVote]:
        """The voter's vote on the item, if any."""
        pass

    @abstractmethod
    def count(self, item_uuid: str, vote_type: VoteType) -> int:
        """Number of votes of one type on an item."""
        pass


class Repository(ABC):
    """
    Aggregate repository - provides access to all entity repositories.

    This is what the engine uses. Backend implementations provide
    concrete versions of each sub-repository plus transactions.
    """

    @property
    @abstractmethod
    def clients(self) -> ClientRepository:
        pass

    @property
    @abstractmethod
    def contributions(self) -> ContributionRepository:
        pass

    @property
    @abstractmethod
    def votes(self) -> VoteRepository:
        pass

    @property
    @abstractmethod
    def trust_items(self) -> TrustItemRepository:
        pass

    @property
    @abstractmethod
    def trust_item_votes(self) -> TrustItemVoteRepository:
        pass

    @abstractmethod
    def transaction(self) -> AbstractContextManager["Repository"]:
        """
        Open (or join) the atomic unit for one public mutation.

        Mutations are serialized. If the block raises, every write made
        inside it is discarded. Nested calls join the outermost one.
        """
        pass
