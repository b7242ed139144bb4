"""Tests for SQLite storage."""

import json
import pytest
import tempfile
from pathlib import Path

from wa_lead_engine.core.scorer import ScoringResult, Priority
from wa_lead_engine.intake.errors import AccountCreationError, ProfileUpdateError
from wa_lead_engine.storage import (
    LeadDatabase, CrmStatus, Opportunity, OpportunityStatus, MembershipTier,
)


@pytest.fixture
def temp_data_dir():
    """Create temporary data directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def db(temp_data_dir):
    """Create database with temp storage."""
    return LeadDatabase(db_path=temp_data_dir / "leads.db")


class TestAccounts:
    """Tests for account creation."""

    def test_create_account_makes_cold_profile(self, db):
        account_id = db.create_account("Investor@Example.com", "secret123", "Sipho Dlamini")

        profile = db.get_profile(account_id)
        assert profile is not None
        assert profile.email == "investor@example.com"
        assert profile.full_name == "Sipho Dlamini"
        assert profile.tier == MembershipTier.REGISTERED
        assert profile.lead_score == 0
        assert profile.lead_priority == Priority.COLD
        assert profile.onboarding_answers == {}

    def test_duplicate_email_rejected(self, db):
        db.create_account("investor@example.com", "secret123", "First")
        with pytest.raises(AccountCreationError, match="already registered"):
            db.create_account("INVESTOR@example.com", "other-pass", "Second")
        assert db.get_stats()["total_profiles"] == 1

    def test_short_password_rejected(self, db):
        with pytest.raises(AccountCreationError):
            db.create_account("investor@example.com", "abc", "Short")

    def test_custom_password_length(self, temp_data_dir):
        db = LeadDatabase(db_path=temp_data_dir / "strict.db", min_password_length=10)
        assert db.min_password_length == 10
        with pytest.raises(AccountCreationError):
            db.create_account("investor@example.com", "secret123", "Strict")

    def test_missing_credentials_rejected(self, db):
        with pytest.raises(AccountCreationError):
            db.create_account("", "secret123", "Nobody")

    def test_verify_password(self, db):
        account_id = db.create_account("investor@example.com", "secret123", "Sipho")
        assert db.verify_password("investor@example.com", "secret123") == account_id
        assert db.verify_password("investor@example.com", "wrong-pass") is None
        assert db.verify_password("nobody@example.com", "secret123") is None

    def test_password_not_stored_in_plain_text(self, db, temp_data_dir):
        db.create_account("investor@example.com", "secret123", "Sipho")
        raw = (temp_data_dir / "leads.db").read_bytes()
        assert b"secret123" not in raw


class TestProfiles:
    """Tests for profile scoring storage."""

    def test_update_profile(self, db):
        account_id = db.create_account("investor@example.com", "secret123", "Sipho")
        result = ScoringResult(score=20, breakdown={"cash": 11, "timeline": 3})
        answers = {"timeline": "IMMEDIATE", "cash_amount": "R1M-R2.49M"}

        db.update_profile(account_id, result, answers)

        profile = db.get_profile(account_id)
        assert profile.lead_score == 20
        assert profile.lead_priority == Priority.HOT
        assert profile.onboarding_answers == answers

    def test_update_unknown_profile(self, db):
        with pytest.raises(ProfileUpdateError):
            db.update_profile("missing", ScoringResult(score=5), {})

    def test_get_missing_profile(self, db):
        assert db.get_profile("missing") is None

    def test_list_profiles_by_score(self, db):
        scores = {"a@example.com": 5, "b@example.com": 25, "c@example.com": 14}
        for email, points in scores.items():
            account_id = db.create_account(email, "secret123", email)
            db.update_profile(account_id, ScoringResult(score=points), {})

        profiles = db.list_profiles()
        assert [p.lead_score for p in profiles] == [25, 14, 5]

        warm = db.list_profiles(priority=Priority.WARM)
        assert [p.email for p in warm] == ["c@example.com"]

        assert len(db.list_profiles(limit=2)) == 2
        assert [p.lead_score for p in db.list_profiles(limit=2, offset=1)] == [14, 5]

    def test_profile_to_dict(self, db):
        account_id = db.create_account("investor@example.com", "secret123", "Sipho")
        db.update_profile(account_id, ScoringResult(score=12), {"risk_appetite": 4})
        data = db.get_profile(account_id).to_dict()
        assert data["lead_priority"] == "WARM"
        assert data["onboarding_answers"] == {"risk_appetite": 4}
        json.dumps(data)


class TestLeads:
    """Tests for contact leads."""

    def test_add_lead(self, db):
        lead = db.add_lead("Lerato", "lerato@example.com", "Call me", "investor")
        assert lead.id is not None
        assert lead.crm_status == CrmStatus.SKIPPED

        stored = db.list_leads()
        assert len(stored) == 1
        assert stored[0].name == "Lerato"
        assert stored[0].interest == "investor"

    def test_name_and_email_required(self, db):
        with pytest.raises(ValueError):
            db.add_lead("", "lerato@example.com")
        with pytest.raises(ValueError):
            db.add_lead("Lerato", "")

    def test_set_crm_status(self, db):
        lead = db.add_lead("Lerato", "lerato@example.com")
        db.set_lead_crm_status(lead.id, CrmStatus.FAILED)
        assert db.list_leads()[0].crm_status == CrmStatus.FAILED

    def test_newest_first(self, db):
        db.add_lead("First", "first@example.com")
        db.add_lead("Second", "second@example.com")
        assert [lead.name for lead in db.list_leads()] == ["Second", "First"]


class TestOpportunities:
    """Tests for investment opportunities."""

    def test_add_opportunity(self, db):
        opportunity = db.add_opportunity(Opportunity(
            title="Sandton sectional title",
            investment_amount=1_450_000,
            suburb_or_area="Sandton",
            province="Gauteng",
            product_type="Apartment",
        ))
        assert opportunity.id is not None

        stored = db.list_opportunities()
        assert len(stored) == 1
        assert stored[0].title == "Sandton sectional title"
        assert stored[0].status == OpportunityStatus.AVAILABLE
        assert stored[0].investment_amount == 1_450_000

    @pytest.mark.parametrize("title,amount", [("", 100_000), ("  ", 100_000), ("Flat", 0), ("Flat", -5)])
    def test_title_and_amount_required(self, db, title, amount):
        with pytest.raises(ValueError):
            db.add_opportunity(Opportunity(title=title, investment_amount=amount))
        assert db.list_opportunities() == []


class TestStats:
    """Tests for database statistics."""

    def test_empty_stats(self, db):
        stats = db.get_stats()
        assert stats == {
            "total_profiles": 0,
            "by_priority": {"HOT": 0, "WARM": 0, "COLD": 0},
            "avg_score": 0,
            "total_leads": 0,
            "total_opportunities": 0,
        }

    def test_stats(self, db):
        for email, points in (("a@example.com", 22), ("b@example.com", 11)):
            account_id = db.create_account(email, "secret123", email)
            db.update_profile(account_id, ScoringResult(score=points), {})
        db.add_lead("Lerato", "lerato@example.com")

        stats = db.get_stats()
        assert stats["total_profiles"] == 2
        assert stats["by_priority"] == {"HOT": 1, "WARM": 1, "COLD": 0}
        assert stats["avg_score"] == 16.5
        assert stats["total_leads"] == 1
