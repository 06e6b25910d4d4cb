"""
Client - a contributor whose trust level gates what they may edit.
"""

from pydantic import Field

from .base import BaseEntity

INITIAL_TRUST = 0.5


class Client(BaseEntity):
    """
    A contributor.

    trust_level is a materialized aggregate: only the trust aggregation
    engine writes it. Authored contributions and cast votes live in the
    repository and are looked up by client UUID.
    """
    trust_level: float = Field(default=INITIAL_TRUST, ge=0.0, le=1.0)
