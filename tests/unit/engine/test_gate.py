"""Unit tests for the edit authorization gate."""

import pytest
from trustledger.config import TrustPolicy
from trustledger.engine import EditGate
from trustledger.errors import InsufficientTrust
from trustledger.models import Client, Contribution, ContributionType, TextPayload


def make_contribution(score: float) -> Contribution:
    return Contribution(
        type=ContributionType.EDIT_COMPANY_NAME,
        subject_uuid="company-1",
        payload=TextPayload(text="Acme"),
        author_uuid="author",
        trust_score=score,
    )


class TestEditGate:

    @pytest.fixture
    def gate(self, policy):
        return EditGate(policy)

    def test_nothing_to_protect(self, gate):
        assert gate.has_sufficient_trust(Client(trust_level=0.0), None)
        gate.assert_sufficient_trust(Client(trust_level=0.0), None)

    def test_below_tolerance_rejected(self, gate):
        # 0.5 < 0.8 - 0.05
        client = Client(trust_level=0.5)
        current = make_contribution(0.8)
        assert not gate.has_sufficient_trust(client, current)

        with pytest.raises(InsufficientTrust) as exc:
            gate.assert_sufficient_trust(client, current)
        assert exc.value.client_uuid == client.uuid
        assert exc.value.target_uuid == current.uuid
        assert exc.value.target_score == 0.8

    def test_equal_trust_allowed(self, gate):
        assert gate.has_sufficient_trust(Client(trust_level=0.8), make_contribution(0.8))

    def test_within_tolerance_allowed(self, gate):
        assert gate.has_sufficient_trust(Client(trust_level=0.76), make_contribution(0.8))

    def test_just_outside_tolerance_rejected(self, gate):
        assert not gate.has_sufficient_trust(Client(trust_level=0.74), make_contribution(0.8))

    def test_custom_tolerance(self):
        gate = EditGate(TrustPolicy(edit_tolerance=0.0))
        assert not gate.has_sufficient_trust(Client(trust_level=0.79), make_contribution(0.8))
