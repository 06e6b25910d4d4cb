"""
JSON file backend - the in-memory tables persisted to one JSON file.

Directory structure:
    {base_path}/
        ledger.json       - clients, contributions, votes, trust items

The file is rewritten atomically when the outermost transaction
commits. A failed transaction never touches it.
"""

import json
import threading
from pathlib import Path
from typing import Optional

from ..config import DATA_DIR
from ..errors import StorageFailure
from ..log import get_logger
from ..models import Client, Contribution, Vote, TrustItem, TrustItemVote
from .memory_backend import InMemoryRepository, MemoryStore

logger = get_logger(__name__)

LEDGER_FILE = "ledger.json"

_MODELS = {
    "clients": Client,
    "contributions": Contribution,
    "votes": Vote,
    "trust_items": TrustItem,
    "trust_item_votes": TrustItemVote,
}


class WriteQueue:
    """Thread-safe write serialization."""

    def __init__(self):
        self._lock = threading.Lock()

    def write_json(self, path: Path, data: dict) -> None:
        """Atomic JSON write."""
        with self._lock:
            temp = path.with_suffix(".json.tmp")
            with open(temp, "w") as f:
                json.dump(data, f, indent=2, default=str)
            temp.replace(path)


_write_queue = WriteQueue()


class JsonRepository(InMemoryRepository):
    """JSON file backend implementation."""

    def __init__(self, base_path: Optional[Path] = None):
        super().__init__()
        self._base_path = Path(base_path or DATA_DIR)
        self._ledger_file = self._base_path / LEDGER_FILE
        self.store = self._load()

    def _load(self) -> MemoryStore:
        store = MemoryStore()
        if not self._ledger_file.exists():
            return store

        try:
            with open(self._ledger_file) as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error("ledger_load_failed", path=str(self._ledger_file), error=str(e))
            raise StorageFailure(f"Cannot read {self._ledger_file}: {e}") from e

        try:
            for table, model in _MODELS.items():
                rows = getattr(store, table)
                for raw in data.get(table, []):
                    entity = model.model_validate(raw)
                    rows[entity.uuid] = entity
        except ValueError as e:
            raise StorageFailure(f"Corrupt {self._ledger_file}: {e}") from e

        for vote in store.votes.values():
            store.vote_keys[(vote.voter_uuid, vote.contribution_uuid)] = vote.uuid
        for vote in store.trust_item_votes.values():
            store.item_vote_keys[(vote.voter_uuid, vote.item_uuid)] = vote.uuid

        logger.info(
            "ledger_loaded",
            path=str(self._ledger_file),
            clients=len(store.clients),
            contributions=len(store.contributions),
            votes=len(store.votes),
        )
        return store

    def _commit(self) -> None:
        data = {
            table: [row.model_dump(mode="json") for row in getattr(self.store, table).values()]
            for table in _MODELS
        }
        try:
            self._base_path.mkdir(parents=True, exist_ok=True)
            _write_queue.write_json(self._ledger_file, data)
        except OSError as e:
            logger.error("ledger_write_failed", path=str(self._ledger_file), error=str(e))
            raise StorageFailure(f"Cannot write {self._ledger_file}: {e}") from e
