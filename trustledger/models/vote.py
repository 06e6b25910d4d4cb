"""
Vote - a peer judgment on a contribution.
"""

from enum import Enum

from .base import BaseEntity


class VoteType(str, Enum):
    """Direction of a trust vote."""
    TRUSTED = "Trusted"
    NOT_TRUSTED = "NotTrusted"


class Vote(BaseEntity):
    """
    A single Trusted/NotTrusted vote.

    Immutable once stored. At most one per (voter, contribution) and
    never cast by the contribution's author.
    """
    vote_type: VoteType
    voter_uuid: str
    contribution_uuid: str
