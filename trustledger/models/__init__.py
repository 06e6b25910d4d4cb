"""
Domain models - single source of truth for all entities.

Design principles:
- Every entity defined once
- Validation at the boundary (scores and levels stay in [0, 1])
- Backend-agnostic (repository handles persistence)
"""

from .base import BaseEntity, TimestampMixin, new_uuid
from .client import Client, INITIAL_TRUST
from .contribution import (
    Contribution,
    ContributionType,
    Payload,
    ReferencePayload,
    TextPayload,
    payload_class_for,
)
from .vote import Vote, VoteType
from .trust_item import TrustItem, TrustItemVote

__all__ = [
    # Base
    "BaseEntity",
    "TimestampMixin",
    "new_uuid",
    # Client
    "Client",
    "INITIAL_TRUST",
    # Contribution
    "Contribution",
    "ContributionType",
    "Payload",
    "TextPayload",
    "ReferencePayload",
    "payload_class_for",
    # Vote
    "Vote",
    "VoteType",
    # Legacy
    "TrustItem",
    "TrustItemVote",
]
