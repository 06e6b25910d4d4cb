"""
TrustEngine end-to-end behaviour.

Scenario tests follow one company name through creation, voting and
edits. Vote sequences use fresh voters so the only moving parts are the
contribution's score, its author's trust level and the voters' levels.
"""

import pytest
from trustledger.errors import (
    ClientNotFound,
    ContributionNotFound,
    DuplicateVote,
    InsufficientTrust,
    SelfVote,
)
from trustledger.models import ContributionType, ReferencePayload, TextPayload, Vote, VoteType


@pytest.fixture
def c1(engine):
    return engine.register_client()


@pytest.fixture
def c2(engine):
    return engine.register_client()


@pytest.fixture
def x(engine, c1, name_type, subject_uuid, payload):
    """Contribution X, the company name proposed by C1."""
    return engine.create_or_edit_contribution(name_type, c1.uuid, subject_uuid, payload)


def vote_with_fresh_clients(engine, contribution_uuid, vote_type, count, observe=None):
    """
    Cast `count` votes of one type from brand-new clients.

    observe() is called before the first vote and after each vote; the
    list of its results is returned.
    """
    seen = [observe()] if observe else []
    for _ in range(count):
        voter = engine.register_client()
        engine.cast_vote(voter.uuid, contribution_uuid, vote_type)
        if observe:
            seen.append(observe())
    return seen


def deltas(values):
    return [b - a for a, b in zip(values, values[1:])]


class TestScenarios:

    def test_a_new_contribution_scores_author_trust(self, engine, c1, x, name_type, subject_uuid):
        assert engine.client_trust_level(c1.uuid) == pytest.approx(0.5)
        assert x.trust_score == pytest.approx(0.5)
        assert engine.current_trust_score(name_type, subject_uuid) == pytest.approx(0.5)

    def test_b_and_e_five_votes_then_author_trust(self, engine, repo, c1, x):
        # Seed the votes without cascading so the author stays at 0.5
        for vote_type in [VoteType.TRUSTED] * 3 + [VoteType.NOT_TRUSTED] * 2:
            voter = engine.register_client()
            repo.votes.save(Vote(vote_type=vote_type, voter_uuid=voter.uuid, contribution_uuid=x.uuid))

        with repo.transaction():
            rescored = engine.recalculator.recalculate(x.uuid)

        # 0.6 * 0.95 + 0.5 * 0.05
        assert rescored.trust_score == pytest.approx(0.595)
        # (0.5 + 0.595) / 2
        assert engine.client_trust_level(c1.uuid) == pytest.approx(0.5475)
        assert engine.recompute_client_trust(c1.uuid) == pytest.approx(0.5475)

    def test_c_low_trust_edit_rejected(self, engine, c2, x, set_score, name_type, subject_uuid):
        set_score(x.uuid, 0.8)

        assert not engine.can_edit(c2.uuid, name_type, subject_uuid)
        with pytest.raises(InsufficientTrust):
            engine.create_or_edit_contribution(name_type, c2.uuid, subject_uuid, TextPayload(text="Other"))

        assert engine.current_contribution(name_type, subject_uuid).uuid == x.uuid

    def test_d_trusted_edit_replaces_value(self, engine, repo, c2, x, set_score, set_trust, name_type, subject_uuid):
        set_score(x.uuid, 0.8)
        set_trust(c2.uuid, 0.8)

        assert engine.can_edit(c2.uuid, name_type, subject_uuid)
        x2 = engine.create_or_edit_contribution(name_type, c2.uuid, subject_uuid, TextPayload(text="Acme Inc"))

        assert not repo.contributions.get(x.uuid).enabled
        current = engine.current_contribution(name_type, subject_uuid)
        assert current.uuid == x2.uuid
        assert current.enabled
        assert current.trust_score == pytest.approx(0.8)
        assert engine.votes_for(x2.uuid) == []


class TestTrustDynamics:

    def test_author_gains_then_loses_with_votes(self, engine, c1, x):
        def observe():
            return engine.get_contribution(x.uuid).trust_score, engine.client_trust_level(c1.uuid)

        trusted = vote_with_fresh_clients(engine, x.uuid, VoteType.TRUSTED, 5, observe)
        assert all(d > 0 for d in deltas([s for s, _ in trusted]))
        assert all(d > 0 for d in deltas([t for _, t in trusted]))

        untrusted = vote_with_fresh_clients(engine, x.uuid, VoteType.NOT_TRUSTED, 5, observe)
        assert all(d < 0 for d in deltas([s for s, _ in untrusted]))
        assert all(d < 0 for d in deltas([t for _, t in untrusted]))

    def test_voter_follows_majority_on_others_contribution(self, engine, c1, c2, name_type):
        theirs = engine.create_or_edit_contribution(name_type, c2.uuid, "company-2", TextPayload(text="Pepsi"))
        engine.cast_vote(c1.uuid, theirs.uuid, VoteType.TRUSTED)

        def observe():
            return engine.client_trust_level(c1.uuid)

        agreeing = vote_with_fresh_clients(engine, theirs.uuid, VoteType.TRUSTED, 5, observe)
        assert all(d >= 0 for d in deltas(agreeing))
        assert agreeing[-1] > 0.5

        contesting = vote_with_fresh_clients(engine, theirs.uuid, VoteType.NOT_TRUSTED, 5, observe)
        assert all(d <= 0 for d in deltas(contesting))

    def test_overwritten_author_unaffected_by_new_votes(self, engine, c1, c2, name_type, subject_uuid):
        engine.create_or_edit_contribution(name_type, c2.uuid, subject_uuid, TextPayload(text="Cola"))
        mine = engine.create_or_edit_contribution(name_type, c1.uuid, subject_uuid, TextPayload(text="Pepsi Cola"))
        vote_with_fresh_clients(engine, mine.uuid, VoteType.NOT_TRUSTED, 5)

        before = engine.client_trust_level(c1.uuid)
        replacement = engine.create_or_edit_contribution(name_type, c2.uuid, subject_uuid, TextPayload(text="Pepsi"))
        assert engine.client_trust_level(c1.uuid) == before

        vote_with_fresh_clients(engine, replacement.uuid, VoteType.TRUSTED, 5)
        assert engine.client_trust_level(c1.uuid) == before

    def test_edit_resets_score_to_editor_trust(self, engine, c2, x, set_trust, name_type, subject_uuid):
        set_trust(c2.uuid, 0.7)
        edited = engine.create_or_edit_contribution(name_type, c2.uuid, subject_uuid, TextPayload(text="Pepsi"))
        assert edited.trust_score == pytest.approx(0.7)

    def test_voteless_contribution_tracks_author_on_recalculation(self, engine, repo, c1, x, set_trust):
        set_trust(c1.uuid, 0.9)
        with repo.transaction():
            rescored = engine.recalculator.recalculate(x.uuid)
        assert rescored.trust_score == pytest.approx(0.9)

    def test_recalculation_is_stable_at_fixed_point(self, engine, repo, c1, x):
        with repo.transaction():
            first = engine.recalculator.recalculate(x.uuid).trust_score
            second = engine.recalculator.recalculate(x.uuid).trust_score
        assert first == second == pytest.approx(0.5)
        assert engine.client_trust_level(c1.uuid) == pytest.approx(0.5)


class TestTrustEngineApi:

    def test_register_client_with_uuid(self, engine):
        client = engine.register_client(uuid="device-123")
        assert engine.get_client("device-123").uuid == client.uuid

    def test_unknown_client(self, engine, name_type, subject_uuid, payload):
        with pytest.raises(ClientNotFound):
            engine.client_trust_level("nobody")
        with pytest.raises(ClientNotFound):
            engine.create_or_edit_contribution(name_type, "nobody", subject_uuid, payload)

    def test_unknown_contribution(self, engine, c1):
        with pytest.raises(ContributionNotFound):
            engine.cast_vote(c1.uuid, "missing", VoteType.TRUSTED)

    def test_current_value(self, engine, c1):
        assert engine.current_value(ContributionType.ASSIGN_COMPANY_TO_PRODUCT, "product-1") is None

        engine.create_or_edit_contribution(
            ContributionType.ASSIGN_COMPANY_TO_PRODUCT, c1.uuid, "product-1", ReferencePayload(reference_uuid="company-1")
        )

        value = engine.current_value(ContributionType.ASSIGN_COMPANY_TO_PRODUCT, "product-1")
        assert value == ReferencePayload(reference_uuid="company-1")

    def test_current_trust_score_none_without_value(self, engine, name_type):
        assert engine.current_trust_score(name_type, "nothing-here") is None

    def test_can_edit_empty_subject(self, engine, c1, name_type):
        assert engine.can_edit(c1.uuid, name_type, "fresh-company")

    def test_vote_on_current(self, engine, c2, x, name_type, subject_uuid):
        vote = engine.vote_on_current(c2.uuid, name_type, subject_uuid, VoteType.NOT_TRUSTED)
        assert vote.contribution_uuid == x.uuid

    def test_vote_on_current_without_value(self, engine, c2, name_type):
        with pytest.raises(ContributionNotFound):
            engine.vote_on_current(c2.uuid, name_type, "fresh-company", VoteType.TRUSTED)

    def test_self_and_duplicate_votes(self, engine, c1, c2, x):
        with pytest.raises(SelfVote):
            engine.cast_vote(c1.uuid, x.uuid, VoteType.TRUSTED)

        engine.cast_vote(c2.uuid, x.uuid, VoteType.TRUSTED)
        with pytest.raises(DuplicateVote):
            engine.cast_vote(c2.uuid, x.uuid, VoteType.TRUSTED)

    def test_no_vote_ever_by_author(self, engine, repo, c1, c2, x):
        engine.cast_vote(c2.uuid, x.uuid, VoteType.TRUSTED)
        with pytest.raises(SelfVote):
            engine.cast_vote(c1.uuid, x.uuid, VoteType.NOT_TRUSTED)

        for vote in repo.votes.list():
            contribution = repo.contributions.get(vote.contribution_uuid)
            assert vote.voter_uuid != contribution.author_uuid

    def test_contribution_history(self, engine, c1, c2, x, name_type, subject_uuid):
        engine.create_or_edit_contribution(name_type, c2.uuid, subject_uuid, TextPayload(text="Acme Inc"))
        history = engine.contribution_history(name_type, subject_uuid)
        assert [c.text for c in history] == ["Acme Corp", "Acme Inc"]
