"""
Scoring strategies.

Two policies share one interface and the Vote Ledger's invariants:

- WeightedBlendStrategy: live policy for contributions. The vote share
  is blended with the author's current trust level, the vote weight
  growing linearly with the number of votes up to a cap. Voting also
  feeds back into every participant's trust level.
- FixedWeightStrategy: legacy policy for trust items. Fixed 50/50 blend
  with a frozen initial score, no feedback into client trust.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from ..config import TrustPolicy, get_policy
from ..models import VoteType


def linear_growth_weight(votes: int, cap: float = 0.95, ramp: float = 5.0) -> float:
    """
    Weight of the voted score given the number of votes.

    Ramps linearly from 0 to `cap` over the first `ramp` votes, flat after.
    """
    return min(votes * (cap / ramp), cap)


def clamp_unit(value: float) -> float:
    """Keep float rounding from pushing a score outside [0, 1]."""
    return min(1.0, max(0.0, value))


@dataclass(frozen=True)
class VoteTally:
    """Vote counts on a single target."""
    trusted: int = 0
    untrusted: int = 0

    @property
    def total(self) -> int:
        return self.trusted + self.untrusted

    @property
    def voted_score(self) -> float:
        """Share of Trusted votes. 0.0 when nobody voted."""
        if self.total == 0:
            return 0.0
        return self.trusted / self.total

    @property
    def majority(self) -> VoteType:
        """Winning side. A tie counts as NotTrusted."""
        return VoteType.TRUSTED if self.trusted > self.untrusted else VoteType.NOT_TRUSTED

    @property
    def split_ratio(self) -> float:
        """min/max of the two sides: 0 when unanimous, 1 when evenly split."""
        if self.total == 0:
            return 0.0
        return min(self.trusted, self.untrusted) / max(self.trusted, self.untrusted)


class ScoringStrategy(ABC):
    """Turns a vote tally plus a baseline into a trust score."""

    # Whether scoring a target should recompute participants' trust levels
    updates_client_trust: bool = False

    def __init__(self, policy: Optional[TrustPolicy] = None):
        self.policy = policy or get_policy()

    @abstractmethod
    def score(self, tally: VoteTally, baseline: float) -> float:
        """
        Trust score for a target.

        Args:
            tally: Votes cast on the target
            baseline: Score to fall back on (author's live trust level, or
                the frozen initial score for legacy items)
        """
        pass


class WeightedBlendStrategy(ScoringStrategy):
    """Live weighted-blend policy for contributions."""

    updates_client_trust = True

    def vote_weight(self, votes: int) -> float:
        return linear_growth_weight(votes, self.policy.vote_weight_cap, self.policy.vote_weight_ramp)

    def score(self, tally: VoteTally, baseline: float) -> float:
        if tally.total == 0:
            return clamp_unit(baseline)

        weight = self.vote_weight(tally.total)
        return clamp_unit(tally.voted_score * weight + baseline * (1.0 - weight))

    def agreement(self, tally: VoteTally, actual_vote: VoteType) -> tuple[float, float]:
        """
        Score and weight a voter earns from one vote they cast.

        Contested tallies lose influence cubically. Trusted votes are
        discounted relative to NotTrusted ones to blunt reflexive
        up-voting.

        Returns:
            (agreement_score, weight); agreement_score is 1.0 if the voter
            sided with the majority, else 0.0
        """
        impact = self.policy.agreement_discount if actual_vote == VoteType.TRUSTED else 1.0
        weight = (1.0 - tally.split_ratio) ** 3 * self.vote_weight(tally.total) * impact
        agreement_score = 1.0 if actual_vote == tally.majority else 0.0
        return agreement_score, weight


class FixedWeightStrategy(ScoringStrategy):
    """Legacy fixed-weight policy for trust items."""

    updates_client_trust = False

    def score(self, tally: VoteTally, baseline: float) -> float:
        if tally.total == 0:
            return clamp_unit(baseline)

        weight = self.policy.legacy_vote_weight
        return clamp_unit(tally.voted_score * weight + baseline * (1.0 - weight))
