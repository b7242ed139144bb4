"""Tests for the scoring engine."""

import pytest
from wa_lead_engine.core.answers import (
    LeadAnswers, Timeline, CapitalType, CashBand, BondBand,
)
from wa_lead_engine.core.config import ScoringConfig
from wa_lead_engine.core.scorer import LeadScorer, ScoringResult, Priority, priority_for, score


class TestLeadScorer:
    """Tests for LeadScorer class."""

    def setup_method(self):
        """Set up test fixtures."""
        self.scorer = LeadScorer()

    def test_default_answers(self):
        """Fresh answers score timeline and risk contributions only."""
        result = self.scorer.score(LeadAnswers())
        assert result.score == 3
        assert result.priority == Priority.COLD

    def test_hot_cash_investor(self):
        """Immediate cash investor with portfolio and experience is hot."""
        answers = LeadAnswers(
            timeline=Timeline.IMMEDIATE,
            has_portfolio=True,
            capital_type=CapitalType.CASH,
            cash_amount=CashBand.R1M_TO_R2_49M,
            risk_appetite=5,
            has_experience=True,
        )
        result = self.scorer.score(answers)
        assert result.score == 20
        assert result.priority == Priority.HOT
        assert result.breakdown == {
            "timeline": 3,
            "portfolio": 2,
            "cash": 11,
            "risk_appetite": 3,
            "experience": 1,
        }

    def test_cold_small_bond(self):
        """Small bond, no pre-approval, conservative newcomer is cold."""
        answers = LeadAnswers(
            timeline=Timeline.THREE_PLUS_MONTHS,
            has_portfolio=False,
            capital_type=CapitalType.BOND,
            bond_amount=BondBand.UNDER_R350K,
            bond_preapproved=False,
            risk_appetite=1,
            has_experience=False,
        )
        result = self.scorer.score(answers)
        assert result.score == 3
        assert result.priority == Priority.COLD

    def test_both_tracks_are_additive(self):
        """Cash, bond and pre-approval all count when funding with both."""
        answers = LeadAnswers(
            capital_type=CapitalType.BOTH,
            cash_amount=CashBand.R5M_PLUS,
            bond_amount=BondBand.R5M_PLUS,
            bond_preapproved=True,
        )
        result = self.scorer.score(answers)
        capital = (
            result.breakdown["cash"]
            + result.breakdown["bond"]
            + result.breakdown["bond_preapproved"]
        )
        assert capital == 28

    def test_missing_cash_band_contributes_zero(self):
        """A cash investor with no band selected still gets scored."""
        result = self.scorer.score(LeadAnswers(capital_type=CapitalType.CASH))
        assert "cash" not in result.breakdown
        assert result.score == 3

    def test_inactive_track_is_ignored(self):
        """Bond answers don't count for a cash-only investor, and vice versa."""
        cash_only = LeadAnswers(
            capital_type=CapitalType.CASH,
            cash_amount=CashBand.UNDER_R100K,
            bond_amount=BondBand.R5M_PLUS,
            bond_preapproved=True,
        )
        assert self.scorer.score(cash_only).breakdown.get("cash") == 6
        assert "bond" not in self.scorer.score(cash_only).breakdown
        assert "bond_preapproved" not in self.scorer.score(cash_only).breakdown

        bond_only = LeadAnswers(
            capital_type=CapitalType.BOND,
            cash_amount=CashBand.R5M_PLUS,
        )
        assert "cash" not in self.scorer.score(bond_only).breakdown

    def test_preapproval_without_bond_band(self):
        """Pre-approval counts on the bond track even if no band was picked."""
        answers = LeadAnswers(capital_type=CapitalType.BOND, bond_preapproved=True)
        assert self.scorer.score(answers).breakdown["bond_preapproved"] == 5

    @pytest.mark.parametrize("band,points", [
        (CashBand.R5M_PLUS, 15),
        (CashBand.R2_5M_TO_R4_9M, 13),
        (CashBand.R1M_TO_R2_49M, 11),
        (CashBand.R500K_TO_R999K, 9),
        (CashBand.R100K_TO_R499K, 7),
        (CashBand.UNDER_R100K, 6),
    ])
    def test_cash_band_weights(self, band, points):
        answers = LeadAnswers(capital_type=CapitalType.CASH, cash_amount=band)
        assert self.scorer.score(answers).breakdown["cash"] == points

    @pytest.mark.parametrize("band,points", [
        (BondBand.R5M_PLUS, 8),
        (BondBand.R3M_TO_R4_9M, 7),
        (BondBand.R1_5M_TO_R2_99M, 6),
        (BondBand.R750K_TO_R1_49M, 4),
        (BondBand.R350K_TO_R749K, 2),
        (BondBand.UNDER_R350K, 1),
    ])
    def test_bond_band_weights(self, band, points):
        answers = LeadAnswers(capital_type=CapitalType.BOND, bond_amount=band)
        assert self.scorer.score(answers).breakdown["bond"] == points

    def test_risk_appetite_weights(self):
        """Risk 4-5 scores 3, risk 3 scores 2, risk 1-2 scores 1."""
        points = [
            self.scorer.score(LeadAnswers(risk_appetite=r)).breakdown["risk_appetite"]
            for r in range(1, 6)
        ]
        assert points == [1, 1, 2, 3, 3]

    def test_timeline_ordering(self):
        """Sooner timelines never score lower."""
        scores = [
            self.scorer.score(LeadAnswers(timeline=t)).score
            for t in (Timeline.IMMEDIATE, Timeline.ONE_TO_TWO_MONTHS, Timeline.THREE_PLUS_MONTHS)
        ]
        assert scores[0] >= scores[1] >= scores[2]

    def test_better_answers_never_lower_score(self):
        """Each dimension improved on its own never lowers the score."""
        base = LeadAnswers(capital_type=CapitalType.BOTH)
        base_score = self.scorer.score(base).score
        improvements = [
            {"has_portfolio": True},
            {"has_experience": True},
            {"bond_preapproved": True},
            {"risk_appetite": 5},
            {"cash_amount": CashBand.UNDER_R100K},
            {"bond_amount": BondBand.UNDER_R350K},
        ]
        for change in improvements:
            improved = LeadAnswers(**{**base.__dict__, **change})
            assert self.scorer.score(improved).score >= base_score, change

    def test_score_is_repeatable(self):
        """Scoring the same answers twice gives the same result."""
        answers = LeadAnswers(
            timeline=Timeline.ONE_TO_TWO_MONTHS,
            capital_type=CapitalType.BOTH,
            cash_amount=CashBand.R500K_TO_R999K,
            bond_amount=BondBand.R750K_TO_R1_49M,
        )
        first = self.scorer.score(answers)
        second = self.scorer.score(answers)
        assert first == second
        assert isinstance(first.score, int)
        assert first.score >= 0

    def test_module_level_score(self):
        assert score(LeadAnswers()).score == self.scorer.score(LeadAnswers()).score

    def test_explain_score(self):
        answers = LeadAnswers(has_experience=True)
        text = self.scorer.explain_score(self.scorer.score(answers))
        assert "Total Score: 4 (COLD)" in text
        assert "+1: experience" in text

    def test_custom_config(self):
        """Weights and thresholds come from the scoring config."""
        config = ScoringConfig(hot_threshold=5, warm_threshold=4, experience_weight=10)
        scorer = LeadScorer(config)
        result = scorer.score(LeadAnswers(has_experience=True))
        assert result.score == 13
        assert result.priority == Priority.HOT


class TestScoringResult:
    """Tests for ScoringResult class."""

    def test_priority_boundaries(self):
        """Priorities switch exactly at 10 and 20."""
        assert ScoringResult(score=0).priority == Priority.COLD
        assert ScoringResult(score=9).priority == Priority.COLD
        assert ScoringResult(score=10).priority == Priority.WARM
        assert ScoringResult(score=19).priority == Priority.WARM
        assert ScoringResult(score=20).priority == Priority.HOT
        assert ScoringResult(score=45).priority == Priority.HOT

    def test_priority_for(self):
        assert priority_for(9) == Priority.COLD
        assert priority_for(10) == Priority.WARM
        assert priority_for(20) == Priority.HOT

    def test_to_dict(self):
        data = ScoringResult(score=12, breakdown={"cash": 9, "timeline": 3}).to_dict()
        assert data == {
            "score": 12,
            "priority": "WARM",
            "breakdown": {"cash": 9, "timeline": 3},
        }


class TestScoringConfig:
    """Tests for ScoringConfig validation."""

    def test_rejects_inverted_thresholds(self):
        with pytest.raises(ValueError):
            ScoringConfig(hot_threshold=5, warm_threshold=10)

    def test_rejects_negative_weights(self):
        with pytest.raises(ValueError):
            ScoringConfig(portfolio_weight=-1)
