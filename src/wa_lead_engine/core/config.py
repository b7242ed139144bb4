"""Scoring weights and priority thresholds."""

from dataclasses import dataclass, field
from typing import Dict

from .answers import Timeline, CashBand, BondBand


@dataclass
class ScoringConfig:
    """Weights for each scoring dimension and the tier thresholds."""

    # Tier thresholds (score >= hot is HOT, score >= warm is WARM)
    hot_threshold: int = 20
    warm_threshold: int = 10

    timeline_weights: Dict[Timeline, int] = field(default_factory=lambda: {
        Timeline.IMMEDIATE: 3,
        Timeline.ONE_TO_TWO_MONTHS: 2,
        Timeline.THREE_PLUS_MONTHS: 1,
    })

    portfolio_weight: int = 2

    cash_weights: Dict[CashBand, int] = field(default_factory=lambda: {
        CashBand.R5M_PLUS: 15,
        CashBand.R2_5M_TO_R4_9M: 13,
        CashBand.R1M_TO_R2_49M: 11,
        CashBand.R500K_TO_R999K: 9,
        CashBand.R100K_TO_R499K: 7,
        CashBand.UNDER_R100K: 6,
    })

    bond_weights: Dict[BondBand, int] = field(default_factory=lambda: {
        BondBand.R5M_PLUS: 8,
        BondBand.R3M_TO_R4_9M: 7,
        BondBand.R1_5M_TO_R2_99M: 6,
        BondBand.R750K_TO_R1_49M: 4,
        BondBand.R350K_TO_R749K: 2,
        BondBand.UNDER_R350K: 1,
    })

    bond_preapproval_weight: int = 5

    # Risk appetite: >= high_risk_from scores high, == 3 scores mid, rest low
    high_risk_from: int = 4
    risk_high_weight: int = 3
    risk_mid_weight: int = 2
    risk_low_weight: int = 1

    experience_weight: int = 1

    def __post_init__(self):
        if self.warm_threshold > self.hot_threshold:
            raise ValueError("warm_threshold cannot exceed hot_threshold")
        weights = [
            self.portfolio_weight, self.bond_preapproval_weight,
            self.risk_high_weight, self.risk_mid_weight, self.risk_low_weight,
            self.experience_weight,
            *self.timeline_weights.values(),
            *self.cash_weights.values(),
            *self.bond_weights.values(),
        ]
        if any(w < 0 for w in weights):
            raise ValueError("Scoring weights must be non-negative")


DEFAULT_CONFIG = ScoringConfig()
