"""
trustledger - trust scores for crowd-sourced facts and trust levels for
the clients who propose and vote on them.
"""

from .errors import (
    TrustError,
    InsufficientTrust,
    SelfVote,
    DuplicateVote,
    InvariantViolation,
    StorageFailure,
    ClientNotFound,
    ContributionNotFound,
    TrustItemNotFound,
    PayloadMismatch,
    TrustItemExists,
)

__version__ = "0.1.0"

__all__ = [
    "TrustError",
    "InsufficientTrust",
    "SelfVote",
    "DuplicateVote",
    "InvariantViolation",
    "StorageFailure",
    "ClientNotFound",
    "ContributionNotFound",
    "TrustItemNotFound",
    "PayloadMismatch",
    "TrustItemExists",
]
