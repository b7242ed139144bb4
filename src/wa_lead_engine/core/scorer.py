"""Lead scoring engine - turns investor profile answers into a score and priority."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional

from .answers import LeadAnswers, Timeline
from .config import ScoringConfig, DEFAULT_CONFIG


class Priority(Enum):
    """Outreach priority tier derived from the lead score."""

    HOT = "HOT"
    WARM = "WARM"
    COLD = "COLD"


def priority_for(score: int, config: ScoringConfig = DEFAULT_CONFIG) -> Priority:
    """Map a score onto its priority tier."""
    if score >= config.hot_threshold:
        return Priority.HOT
    if score >= config.warm_threshold:
        return Priority.WARM
    return Priority.COLD


@dataclass(frozen=True)
class ScoringResult:
    """Result of scoring a lead's answers."""

    score: int
    breakdown: Dict[str, int] = field(default_factory=dict)
    config: ScoringConfig = field(
        default_factory=lambda: DEFAULT_CONFIG, repr=False, compare=False
    )
    priority: Priority = field(init=False)

    def __post_init__(self):
        """Calculate priority from the score so the two can't disagree."""
        object.__setattr__(self, "priority", priority_for(self.score, self.config))

    def to_dict(self) -> Dict:
        return {
            "score": self.score,
            "priority": self.priority.value,
            "breakdown": dict(self.breakdown),
        }


class LeadScorer:
    """Scores investor leads from their registration answers."""

    def __init__(self, config: Optional[ScoringConfig] = None):
        self.config = config or DEFAULT_CONFIG

    def score(self, answers: LeadAnswers) -> ScoringResult:
        """Score a finished set of answers.

        Never fails: a capital band that is missing for an active track
        simply contributes nothing.
        """
        cfg = self.config
        breakdown: Dict[str, int] = {}

        breakdown["timeline"] = cfg.timeline_weights.get(
            answers.timeline, cfg.timeline_weights[Timeline.THREE_PLUS_MONTHS]
        )

        if answers.has_portfolio:
            breakdown["portfolio"] = cfg.portfolio_weight

        # Cash and bond tracks are additive when capital_type is BOTH
        capital_type = answers.capital_type
        if capital_type.uses_cash and answers.cash_amount is not None:
            breakdown["cash"] = cfg.cash_weights.get(answers.cash_amount, 0)

        if capital_type.uses_bond:
            if answers.bond_amount is not None:
                breakdown["bond"] = cfg.bond_weights.get(answers.bond_amount, 0)
            if answers.bond_preapproved:
                breakdown["bond_preapproved"] = cfg.bond_preapproval_weight

        if answers.risk_appetite >= cfg.high_risk_from:
            breakdown["risk_appetite"] = cfg.risk_high_weight
        elif answers.risk_appetite == 3:
            breakdown["risk_appetite"] = cfg.risk_mid_weight
        else:
            breakdown["risk_appetite"] = cfg.risk_low_weight

        if answers.has_experience:
            breakdown["experience"] = cfg.experience_weight

        return ScoringResult(
            score=sum(breakdown.values()),
            breakdown=breakdown,
            config=cfg,
        )

    def explain_score(self, result: ScoringResult) -> str:
        """Get a detailed explanation of a scoring result."""
        lines = [
            f"Total Score: {result.score} ({result.priority.value})",
            "",
            "Contributions:",
        ]

        if not result.breakdown:
            lines.append("  (none)")
        else:
            for dimension, points in sorted(
                result.breakdown.items(),
                key=lambda x: x[1],
                reverse=True
            ):
                lines.append(f"  +{points}: {dimension}")

        return "\n".join(lines)


_default_scorer = LeadScorer()


def score(answers: LeadAnswers) -> ScoringResult:
    """Score answers with the default weights."""
    return _default_scorer.score(answers)
