"""Core scoring engine for investor lead qualification."""

from .answers import LeadAnswers, Timeline, CapitalType, CashBand, BondBand
from .scorer import LeadScorer, ScoringResult, Priority, priority_for, score
from .config import ScoringConfig

__all__ = [
    "LeadAnswers",
    "Timeline",
    "CapitalType",
    "CashBand",
    "BondBand",
    "LeadScorer",
    "ScoringResult",
    "Priority",
    "priority_for",
    "score",
    "ScoringConfig",
]
