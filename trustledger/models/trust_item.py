"""
Legacy trust items - fixed-weight scoring for structural subjects.
"""

from pydantic import Field

from .base import BaseEntity
from .vote import VoteType


class TrustItem(BaseEntity):
    """
    A scored structural subject (e.g. a product record).

    initial_trust_score is the creator's trust level frozen at creation;
    it is never re-read from the creator afterwards.
    """
    subject_uuid: str
    creator_uuid: str
    initial_trust_score: float = Field(ge=0.0, le=1.0)
    trust_score: float = Field(ge=0.0, le=1.0)


class TrustItemVote(BaseEntity):
    """A vote on a TrustItem. Same invariants as Vote."""
    vote_type: VoteType
    voter_uuid: str
    item_uuid: str
