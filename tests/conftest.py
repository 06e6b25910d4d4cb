"""
Root test configuration.

Test organization:
- unit/        Fast, isolated, in-memory repository only
- integration/ Component boundaries, real I/O to temp locations, threads

Run specific levels:
    pytest tests/unit -v           # Fast feedback loop
    pytest tests/integration -v    # Before commit
    pytest tests -v                # Everything
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest

from trustledger.config import TrustPolicy
from trustledger.engine import TrustEngine
from trustledger.models import ContributionType, TextPayload
from trustledger.repositories import InMemoryRepository


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Fast isolated tests")
    config.addinivalue_line("markers", "integration: Component boundary tests")
    config.addinivalue_line("markers", "slow: Tests that take > 1s")


@pytest.fixture
def policy():
    """Default policy, independent of any env or YAML on the machine."""
    return TrustPolicy()


@pytest.fixture
def repo():
    return InMemoryRepository()


@pytest.fixture
def engine(repo, policy):
    return TrustEngine(repository=repo, policy=policy)


@pytest.fixture
def subject_uuid():
    """A company being named."""
    return "company-1"


@pytest.fixture
def name_type():
    return ContributionType.EDIT_COMPANY_NAME


@pytest.fixture
def payload():
    return TextPayload(text="Acme Corp")


@pytest.fixture
def set_trust(repo):
    """
    Force a client's stored trust level.

    Usage:
        set_trust(client_uuid, 0.8)
    """
    def run(client_uuid: str, level: float) -> None:
        client = repo.clients.get(client_uuid)
        client.trust_level = level
        repo.clients.save(client)

    return run


@pytest.fixture
def set_score(repo):
    """Force a contribution's stored trust score."""
    def run(contribution_uuid: str, score: float) -> None:
        contribution = repo.contributions.get(contribution_uuid)
        contribution.trust_score = score
        repo.contributions.save(contribution)

    return run
