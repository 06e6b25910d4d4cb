"""
In-memory backend - dict tables guarded by one re-entrant lock.

Stored models are never mutated in place (save() stores a copy), so a
transaction snapshot only needs shallow copies of the tables.
"""

import threading
from contextlib import contextmanager
from typing import Iterator, List, Optional

from ..errors import DuplicateVote
from ..log import get_logger
from ..models import (
    Client,
    Contribution,
    ContributionType,
    Vote,
    VoteType,
    TrustItem,
    TrustItemVote,
)
from .base import (
    Repository,
    ClientRepository,
    ContributionRepository,
    VoteRepository,
    TrustItemRepository,
    TrustItemVoteRepository,
)

logger = get_logger(__name__)


class MemoryStore:
    """The tables plus the (voter, target) uniqueness indexes."""

    TABLES = ("clients", "contributions", "votes", "trust_items", "trust_item_votes")

    def __init__(self):
        self.clients: dict[str, Client] = {}
        self.contributions: dict[str, Contribution] = {}
        self.votes: dict[str, Vote] = {}
        self.trust_items: dict[str, TrustItem] = {}
        self.trust_item_votes: dict[str, TrustItemVote] = {}
        self.vote_keys: dict[tuple[str, str], str] = {}
        self.item_vote_keys: dict[tuple[str, str], str] = {}

    def snapshot(self) -> dict:
        names = self.TABLES + ("vote_keys", "item_vote_keys")
        return {name: dict(getattr(self, name)) for name in names}

    def restore(self, snapshot: dict) -> None:
        for name, table in snapshot.items():
            setattr(self, name, table)


class _MemoryTable:
    def __init__(self, owner: "InMemoryRepository"):
        self._owner = owner

    @property
    def _store(self) -> MemoryStore:
        return self._owner.store


class MemoryClientRepository(_MemoryTable, ClientRepository):

    def get(self, uuid: str) -> Optional[Client]:
        with self._owner.lock:
            client = self._store.clients.get(uuid)
            return client.model_copy(deep=True) if client else None

    def save(self, entity: Client) -> None:
        with self._owner.lock:
            entity.touch()
            self._store.clients[entity.uuid] = entity.model_copy(deep=True)

    def list(self) -> List[Client]:
        with self._owner.lock:
            return [c.model_copy(deep=True) for c in self._store.clients.values()]


class MemoryContributionRepository(_MemoryTable, ContributionRepository):

    def get(self, uuid: str) -> Optional[Contribution]:
        with self._owner.lock:
            contribution = self._store.contributions.get(uuid)
            return contribution.model_copy(deep=True) if contribution else None

    def save(self, entity: Contribution) -> None:
        with self._owner.lock:
            entity.touch()
            self._store.contributions[entity.uuid] = entity.model_copy(deep=True)

    def list(self) -> List[Contribution]:
        with self._owner.lock:
            return [c.model_copy(deep=True) for c in self._store.contributions.values()]

    def find_enabled(self, subject_uuid: str, type: ContributionType) -> List[Contribution]:
        return [c for c in self.find_by_subject(subject_uuid, type) if c.enabled]

    def find_by_subject(self, subject_uuid: str, type: ContributionType) -> List[Contribution]:
        with self._owner.lock:
            return [
                c.model_copy(deep=True)
                for c in self._store.contributions.values()
                if c.subject_uuid == subject_uuid and c.type == type
            ]

    def find_authored_by(self, client_uuid: str) -> List[Contribution]:
        with self._owner.lock:
            return [
                c.model_copy(deep=True)
                for c in self._store.contributions.values()
                if c.author_uuid == client_uuid
            ]

    def find_voted_on_by(self, client_uuid: str) -> List[Contribution]:
        with self._owner.lock:
            voted = [v.contribution_uuid for v in self._store.votes.values() if v.voter_uuid == client_uuid]
            return [
                self._store.contributions[uuid].model_copy(deep=True)
                for uuid in voted
                if uuid in self._store.contributions
            ]


class MemoryVoteRepository(_MemoryTable, VoteRepository):

    def get(self, uuid: str) -> Optional[Vote]:
        with self._owner.lock:
            vote = self._store.votes.get(uuid)
            return vote.model_copy(deep=True) if vote else None

    def save(self, entity: Vote) -> None:
        with self._owner.lock:
            key = (entity.voter_uuid, entity.contribution_uuid)
            existing = self._store.vote_keys.get(key)
            if existing is not None and existing != entity.uuid:
                raise DuplicateVote(entity.voter_uuid, entity.contribution_uuid)
            self._store.votes[entity.uuid] = entity.model_copy(deep=True)
            self._store.vote_keys[key] = entity.uuid

    def list(self) -> List[Vote]:
        with self._owner.lock:
            return [v.model_copy(deep=True) for v in self._store.votes.values()]

    def find(self, voter_uuid: str, contribution_uuid: str) -> Optional[Vote]:
        with self._owner.lock:
            uuid = self._store.vote_keys.get((voter_uuid, contribution_uuid))
            return self.get(uuid) if uuid else None

    def find_for_contribution(self, contribution_uuid: str) -> List[Vote]:
        with self._owner.lock:
            return [
                v.model_copy(deep=True)
                for v in self._store.votes.values()
                if v.contribution_uuid == contribution_uuid
            ]

    def count(self, contribution_uuid: str, vote_type: VoteType) -> int:
        with self._owner.lock:
            return sum(
                1 for v in self._store.votes.values()
                if v.contribution_uuid == contribution_uuid and v.vote_type == vote_type
            )


class MemoryTrustItemRepository(_MemoryTable, TrustItemRepository):

    def get(self, uuid: str) -> Optional[TrustItem]:
        with self._owner.lock:
            item = self._store.trust_items.get(uuid)
            return item.model_copy(deep=True) if item else None

    def save(self, entity: TrustItem) -> None:
        with self._owner.lock:
            entity.touch()
            self._store.trust_items[entity.uuid] = entity.model_copy(deep=True)

    def list(self) -> List[TrustItem]:
        with self._owner.lock:
            return [i.model_copy(deep=True) for i in self._store.trust_items.values()]

    def find_by_subject(self, subject_uuid: str) -> Optional[TrustItem]:
        with self._owner.lock:
            for item in self._store.trust_items.values():
                if item.subject_uuid == subject_uuid:
                    return item.model_copy(deep=True)
            return None


class MemoryTrustItemVoteRepository(_MemoryTable, TrustItemVoteRepository):

    def get(self, uuid: str) -> Optional[TrustItemVote]:
        with self._owner.lock:
            vote = self._store.trust_item_votes.get(uuid)
            return vote.model_copy(deep=True) if vote else None

    def save(self, entity: TrustItemVote) -> None:
        with self._owner.lock:
            key = (entity.voter_uuid, entity.item_uuid)
            existing = self._store.item_vote_keys.get(key)
            if existing is not None and existing != entity.uuid:
                raise DuplicateVote(entity.voter_uuid, entity.item_uuid)
            self._store.trust_item_votes[entity.uuid] = entity.model_copy(deep=True)
            self._store.item_vote_keys[key] = entity.uuid

    def list(self) -> List[TrustItemVote]:
        with self._owner.lock:
            return [v.model_copy(deep=True) for v in self._store.trust_item_votes.values()]

    def find(self, voter_uuid: str, item_uuid: str) -> Optional[TrustItemVote]:
        with self._owner.lock:
            uuid = self._store.item_vote_keys.get((voter_uuid, item_uuid))
            return self.get(uuid) if uuid else None

    def count(self, item_uuid: str, vote_type: VoteType) -> int:
        with self._owner.lock:
            return sum(
                1 for v in self._store.trust_item_votes.values()
                if v.item_uuid == item_uuid and v.vote_type == vote_type
            )


class InMemoryRepository(Repository):
    """
    In-memory backend implementation.

    One RLock serializes every transaction, which also serializes
    concurrent votes on the same contribution.
    """

    def __init__(self):
        self.lock = threading.RLock()
        self.store = MemoryStore()
        self._depth = 0
        self._clients = MemoryClientRepository(self)
        self._contributions = MemoryContributionRepository(self)
        self._votes = MemoryVoteRepository(self)
        self._trust_items = MemoryTrustItemRepository(self)
        self._trust_item_votes = MemoryTrustItemVoteRepository(self)

    @property
    def clients(self) -> ClientRepository:
        return self._clients

    @property
    def contributions(self) -> ContributionRepository:
        return self._contributions

    @property
    def votes(self) -> VoteRepository:
        return self._votes

    @property
    def trust_items(self) -> TrustItemRepository:
        return self._trust_items

    @property
    def trust_item_votes(self) -> TrustItemVoteRepository:
        return self._trust_item_votes

    @contextmanager
    def transaction(self) -> Iterator["InMemoryRepository"]:
        with self.lock:
            outermost = self._depth == 0
            snapshot = self.store.snapshot() if outermost else None
            self._depth += 1
            try:
                yield self
            except BaseException:
                self._depth -= 1
                if outermost:
                    self.store.restore(snapshot)
                    logger.debug("transaction_rolled_back")
                raise
            self._depth -= 1
            if outermost:
                try:
                    self._commit()
                except BaseException:
                    self.store.restore(snapshot)
                    raise

    def _commit(self) -> None:
        """Hook run when the outermost transaction succeeds."""
        pass
