"""
Trust recalculation engine.

Public surface is TrustEngine; the pieces are exported for callers that
wire their own repository or policy.
"""

from .scoring import (
    ScoringStrategy,
    WeightedBlendStrategy,
    FixedWeightStrategy,
    VoteTally,
    linear_growth_weight,
)
from .gate import EditGate
from .aggregation import TrustAggregator
from .recalculation import ScoreRecalculator
from .ledger import ContributionLedger, VoteLedger
from .legacy import LegacyTrustService
from .service import TrustEngine

__all__ = [
    "TrustEngine",
    "ScoringStrategy",
    "WeightedBlendStrategy",
    "FixedWeightStrategy",
    "VoteTally",
    "linear_growth_weight",
    "EditGate",
    "TrustAggregator",
    "ScoreRecalculator",
    "ContributionLedger",
    "VoteLedger",
    "LegacyTrustService",
]
