"""
Repository layer - abstracts persistence.

Usage:
    from trustledger.repositories import get_repository

    repo = get_repository()  # Returns configured backend
    with repo.transaction():
        client = repo.clients.get(uuid)
        repo.clients.save(client)

Backends are swappable via config (TRUSTLEDGER_BACKEND).
"""

from typing import Optional

from .. import config
from .base import Repository
from .memory_backend import InMemoryRepository
from .json_backend import JsonRepository

_backend: str = config.BACKEND
_options: dict = {}
_instance: Optional[Repository] = None


def get_repository() -> Repository:
    """Get the configured repository instance."""
    global _instance

    if _instance is None:
        if _backend == "memory":
            _instance = InMemoryRepository()
        elif _backend == "json":
            _instance = JsonRepository(**_options)
        else:
            raise ValueError(f"Unknown backend: {_backend}")

    return _instance


def configure_backend(backend: str, **kwargs) -> None:
    """Configure the repository backend (e.g. base_path=... for json)."""
    global _backend, _options, _instance
    _backend = backend
    _options = kwargs
    _instance = None  # Force re-initialization


__all__ = [
    "get_repository",
    "configure_backend",
    "Repository",
    "InMemoryRepository",
    "JsonRepository",
]
