"""
Trust engine exceptions.

Every rejection is raised before any write is issued, and any exception
escaping a repository transaction rolls that transaction back.
"""


class TrustError(Exception):
    """Base for all trust engine errors."""


class InsufficientTrust(TrustError):
    """Editor's trust level is too low to replace the current value."""

    def __init__(self, client_uuid: str, trust_level: float, target_uuid: str, target_score: float):
        self.client_uuid = client_uuid
        self.trust_level = trust_level
        self.target_uuid = target_uuid
        self.target_score = target_score
        super().__init__(
            f"Client {client_uuid} does not have sufficient trust level to edit {target_uuid}. "
            f"Client trust: {trust_level}. Trust score: {target_score}."
        )


class SelfVote(TrustError):
    """A client tried to vote on their own contribution."""

    def __init__(self, voter_uuid: str, target_uuid: str):
        self.voter_uuid = voter_uuid
        self.target_uuid = target_uuid
        super().__init__(f"Client {voter_uuid} cannot vote on their own contribution {target_uuid}")


class DuplicateVote(TrustError):
    """The voter already voted on this target."""

    def __init__(self, voter_uuid: str, target_uuid: str):
        self.voter_uuid = voter_uuid
        self.target_uuid = target_uuid
        super().__init__(f"Client {voter_uuid} already voted on {target_uuid}")


class InvariantViolation(TrustError):
    """Stored state breaks a ledger invariant. Fatal, never auto-repaired."""


class StorageFailure(TrustError):
    """The storage backend failed; the enclosing transaction is rolled back."""


class ClientNotFound(TrustError):
    def __init__(self, client_uuid: str):
        self.client_uuid = client_uuid
        super().__init__(f"No client with UUID {client_uuid}")


class ContributionNotFound(TrustError):
    def __init__(self, contribution_uuid: str):
        self.contribution_uuid = contribution_uuid
        super().__init__(f"No contribution with UUID {contribution_uuid}")


class TrustItemNotFound(TrustError):
    def __init__(self, item_uuid: str):
        self.item_uuid = item_uuid
        super().__init__(f"No trust item with UUID {item_uuid}")


class PayloadMismatch(TrustError):
    """The payload kind does not fit the contribution type."""

    def __init__(self, contribution_type: str, expected_kind: str, actual_kind: str):
        self.contribution_type = contribution_type
        self.expected_kind = expected_kind
        self.actual_kind = actual_kind
        super().__init__(f"{contribution_type} takes a {expected_kind} payload, got {actual_kind}")


class TrustItemExists(TrustError):
    """The subject already has a legacy trust item."""

    def __init__(self, subject_uuid: str, item_uuid: str):
        self.subject_uuid = subject_uuid
        self.item_uuid = item_uuid
        super().__init__(f"Subject {subject_uuid} already has trust item {item_uuid}")
