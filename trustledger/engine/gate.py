"""
Edit authorization gate.
"""

from typing import Optional

from ..config import TrustPolicy, get_policy
from ..errors import InsufficientTrust
from ..log import get_logger
from ..models import Client, Contribution

logger = get_logger(__name__)


class EditGate:
    """
    Decides whether a client may replace the current contribution.

    A small tolerance below the current score lets peers of roughly equal
    standing correct each other.
    """

    def __init__(self, policy: Optional[TrustPolicy] = None):
        self.policy = policy or get_policy()

    def has_sufficient_trust(self, client: Client, current: Optional[Contribution]) -> bool:
        """True if nothing is protected, or client is within tolerance of the score."""
        if current is None:
            return True
        return client.trust_level >= current.trust_score - self.policy.edit_tolerance

    def assert_sufficient_trust(self, client: Client, current: Optional[Contribution]) -> None:
        """Raise InsufficientTrust unless has_sufficient_trust()."""
        if self.has_sufficient_trust(client, current):
            return

        logger.info(
            "edit_rejected",
            client_uuid=client.uuid,
            trust_level=client.trust_level,
            contribution_uuid=current.uuid,
            trust_score=current.trust_score,
        )
        raise InsufficientTrust(client.uuid, client.trust_level, current.uuid, current.trust_score)
