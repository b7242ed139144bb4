"""SQLite storage for investor accounts, profiles, contact leads and opportunities."""

import hashlib
import hmac
import json
import logging
import secrets
import sqlite3
import uuid
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Optional, List, Dict, Any, Generator

from .models import (
    Profile, MembershipTier, ContactLead, CrmStatus, Opportunity, OpportunityStatus,
)
from ..core.scorer import Priority, ScoringResult
from ..intake.collaborators import (
    CredentialProvider, ProfileStore, DEFAULT_MIN_PASSWORD_LENGTH,
)
from ..intake.errors import AccountCreationError, ProfileUpdateError

logger = logging.getLogger(__name__)

PBKDF2_ITERATIONS = 200_000


def hash_password(password: str, salt: str) -> str:
    """PBKDF2-SHA256 hash of a password as hex."""
    return hashlib.pbkdf2_hmac(
        "sha256", password.encode(), salt.encode(), PBKDF2_ITERATIONS
    ).hex()


def _parse_ts(value: Optional[str]) -> datetime:
    return datetime.fromisoformat(value) if value else datetime.now()


class LeadDatabase(CredentialProvider, ProfileStore):
    """SQLite database backing registration, the contact form and the admin dashboard."""

    def __init__(
        self,
        db_path: Optional[Path] = None,
        min_password_length: int = DEFAULT_MIN_PASSWORD_LENGTH,
    ):
        """Initialize database connection."""
        if db_path is None:
            db_path = Path.home() / ".wa-lead-engine" / "leads.db"

        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.min_password_length = min_password_length

        self._init_db()

    @contextmanager
    def _get_connection(self) -> Generator[sqlite3.Connection, None, None]:
        """Get a database connection with row factory."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys=ON")
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_db(self):
        """Initialize database schema."""
        with self._get_connection() as conn:
            cursor = conn.cursor()

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS accounts (
                    id TEXT PRIMARY KEY,
                    email TEXT NOT NULL UNIQUE COLLATE NOCASE,
                    password_hash TEXT NOT NULL,
                    password_salt TEXT NOT NULL,
                    display_name TEXT,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            """)

            # One profile per account; score and priority are always written together
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS profiles (
                    id TEXT PRIMARY KEY,
                    email TEXT,
                    full_name TEXT,
                    tier TEXT DEFAULT 'REGISTERED',
                    is_admin INTEGER DEFAULT 0,

                    lead_score INTEGER DEFAULT 0,
                    lead_priority TEXT DEFAULT 'COLD',
                    onboarding_answers TEXT,

                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,

                    FOREIGN KEY (id) REFERENCES accounts(id)
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS leads (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    email TEXT NOT NULL,
                    message TEXT,
                    interest TEXT,
                    status TEXT DEFAULT 'new',
                    crm_status TEXT DEFAULT 'skipped',
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS opportunities (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    title TEXT NOT NULL,
                    investment_amount REAL NOT NULL,
                    suburb_or_area TEXT,
                    province TEXT,
                    product_type TEXT,
                    status TEXT DEFAULT 'AVAILABLE',
                    description TEXT,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            """)

            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_profiles_score ON profiles(lead_score DESC)
            """)
            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_profiles_priority ON profiles(lead_priority)
            """)
            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_leads_email ON leads(email)
            """)

    # ------------------------------------------------------------------
    # Accounts (CredentialProvider)
    # ------------------------------------------------------------------

    def create_account(self, email: str, password: str, display_name: str) -> str:
        """Create an account plus its empty profile and return the account id."""
        email = (email or "").strip().lower()
        if not email or not password:
            raise AccountCreationError("Email and password are required")
        if len(password) < self.min_password_length:
            raise AccountCreationError(
                f"Password should be at least {self.min_password_length} characters"
            )

        account_id = str(uuid.uuid4())
        salt = secrets.token_hex(16)
        now = datetime.now().isoformat()

        try:
            with self._get_connection() as conn:
                conn.execute(
                    """INSERT INTO accounts (
                        id, email, password_hash, password_salt, display_name, created_at
                    ) VALUES (?, ?, ?, ?, ?, ?)""",
                    (account_id, email, hash_password(password, salt), salt, display_name, now),
                )
                conn.execute(
                    """INSERT INTO profiles (
                        id, email, full_name, tier, lead_score, lead_priority,
                        created_at, updated_at
                    ) VALUES (?, ?, ?, ?, 0, ?, ?, ?)""",
                    (
                        account_id, email, display_name or None,
                        MembershipTier.REGISTERED.value, Priority.COLD.value, now, now,
                    ),
                )
        except sqlite3.IntegrityError as e:
            raise AccountCreationError("User already registered") from e
        except sqlite3.Error as e:
            logger.exception("Account creation failed")
            raise AccountCreationError(f"Could not create account: {e}") from e

        logger.info(f"Created account {account_id} for {email}")
        return account_id

    def verify_password(self, email: str, password: str) -> Optional[str]:
        """Return the account id if the credentials match, else None."""
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT id, password_hash, password_salt FROM accounts WHERE email = ?",
                ((email or "").strip().lower(),),
            ).fetchone()
        if not row:
            return None
        expected = hash_password(password or "", row["password_salt"])
        if hmac.compare_digest(expected, row["password_hash"]):
            return row["id"]
        return None

    # ------------------------------------------------------------------
    # Profiles (ProfileStore)
    # ------------------------------------------------------------------

    def update_profile(
        self,
        account_id: str,
        result: ScoringResult,
        raw_answers: Dict[str, Any],
    ) -> None:
        """Attach a lead score, its priority and the raw answers to a profile."""
        try:
            with self._get_connection() as conn:
                cursor = conn.execute(
                    """UPDATE profiles SET
                        lead_score = ?, lead_priority = ?, onboarding_answers = ?,
                        tier = ?, updated_at = ?
                    WHERE id = ?""",
                    (
                        result.score,
                        result.priority.value,
                        json.dumps(raw_answers),
                        MembershipTier.REGISTERED.value,
                        datetime.now().isoformat(),
                        account_id,
                    ),
                )
                updated = cursor.rowcount
        except sqlite3.Error as e:
            raise ProfileUpdateError(f"Could not update profile: {e}") from e

        if not updated:
            raise ProfileUpdateError(f"No profile for account {account_id}")

    def _row_to_profile(self, row: sqlite3.Row) -> Profile:
        """Convert a database row to a Profile object."""
        return Profile(
            id=row["id"],
            email=row["email"],
            full_name=row["full_name"],
            tier=MembershipTier(row["tier"]) if row["tier"] else MembershipTier.REGISTERED,
            is_admin=bool(row["is_admin"]),
            lead_score=row["lead_score"] or 0,
            lead_priority=Priority(row["lead_priority"]) if row["lead_priority"] else Priority.COLD,
            onboarding_answers_json=row["onboarding_answers"],
            created_at=_parse_ts(row["created_at"]),
            updated_at=_parse_ts(row["updated_at"]),
        )

    def get_profile(self, account_id: str) -> Optional[Profile]:
        """Get a profile by account id."""
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT * FROM profiles WHERE id = ?", (account_id,)
            ).fetchone()
            return self._row_to_profile(row) if row else None

    def list_profiles(
        self,
        priority: Optional[Priority] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> List[Profile]:
        """List profiles, highest score first."""
        query = "SELECT * FROM profiles"
        params: list = []
        if priority:
            query += " WHERE lead_priority = ?"
            params.append(priority.value)
        query += " ORDER BY lead_score DESC, created_at ASC LIMIT ? OFFSET ?"
        params.extend([limit, offset])

        with self._get_connection() as conn:
            rows = conn.execute(query, params).fetchall()
            return [self._row_to_profile(row) for row in rows]

    # ------------------------------------------------------------------
    # Contact leads
    # ------------------------------------------------------------------

    def add_lead(
        self,
        name: str,
        email: str,
        message: Optional[str] = None,
        interest: Optional[str] = None,
    ) -> ContactLead:
        """Store a contact-form lead."""
        if not name or not email:
            raise ValueError("Name and Email are required")

        lead = ContactLead(name=name, email=email, message=message, interest=interest)
        with self._get_connection() as conn:
            cursor = conn.execute(
                """INSERT INTO leads (
                    name, email, message, interest, status, crm_status, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?)""",
                (
                    lead.name, lead.email, lead.message, lead.interest,
                    lead.status, lead.crm_status.value, lead.created_at.isoformat(),
                ),
            )
            lead.id = cursor.lastrowid
        return lead

    def set_lead_crm_status(self, lead_id: int, crm_status: CrmStatus):
        """Record how forwarding the lead to the CRM went."""
        with self._get_connection() as conn:
            conn.execute(
                "UPDATE leads SET crm_status = ? WHERE id = ?",
                (crm_status.value, lead_id),
            )

    def list_leads(self, limit: int = 100, offset: int = 0) -> List[ContactLead]:
        """List contact leads, newest first."""
        with self._get_connection() as conn:
            rows = conn.execute(
                "SELECT * FROM leads ORDER BY created_at DESC, id DESC LIMIT ? OFFSET ?",
                (limit, offset),
            ).fetchall()
            return [
                ContactLead(
                    id=row["id"],
                    name=row["name"],
                    email=row["email"],
                    message=row["message"],
                    interest=row["interest"],
                    status=row["status"] or "new",
                    crm_status=CrmStatus(row["crm_status"] or "skipped"),
                    created_at=_parse_ts(row["created_at"]),
                )
                for row in rows
            ]

    # ------------------------------------------------------------------
    # Opportunities
    # ------------------------------------------------------------------

    def add_opportunity(self, opportunity: Opportunity) -> Opportunity:
        """Store an opportunity. Title and a positive investment amount are required."""
        if not opportunity.title or not opportunity.title.strip():
            raise ValueError("Title and Investment Amount are required")
        if not opportunity.investment_amount or opportunity.investment_amount <= 0:
            raise ValueError("Title and Investment Amount are required")

        now = datetime.now()
        opportunity.created_at = now
        opportunity.updated_at = now
        with self._get_connection() as conn:
            cursor = conn.execute(
                """INSERT INTO opportunities (
                    title, investment_amount, suburb_or_area, province,
                    product_type, status, description, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                (
                    opportunity.title.strip(),
                    opportunity.investment_amount,
                    opportunity.suburb_or_area,
                    opportunity.province,
                    opportunity.product_type,
                    opportunity.status.value,
                    opportunity.description,
                    now.isoformat(),
                    now.isoformat(),
                ),
            )
            opportunity.id = cursor.lastrowid
        return opportunity

    def list_opportunities(self) -> List[Opportunity]:
        """List opportunities, newest first."""
        with self._get_connection() as conn:
            rows = conn.execute(
                "SELECT * FROM opportunities ORDER BY created_at DESC, id DESC"
            ).fetchall()
            return [
                Opportunity(
                    id=row["id"],
                    title=row["title"],
                    investment_amount=row["investment_amount"],
                    suburb_or_area=row["suburb_or_area"],
                    province=row["province"],
                    product_type=row["product_type"],
                    status=OpportunityStatus(row["status"] or "AVAILABLE"),
                    description=row["description"],
                    created_at=_parse_ts(row["created_at"]),
                    updated_at=_parse_ts(row["updated_at"]),
                )
                for row in rows
            ]

    # ------------------------------------------------------------------
    # Stats
    # ------------------------------------------------------------------

    def get_stats(self) -> Dict[str, Any]:
        """Get database statistics."""
        with self._get_connection() as conn:
            cursor = conn.cursor()

            cursor.execute("SELECT COUNT(*) FROM profiles")
            total_profiles = cursor.fetchone()[0]

            cursor.execute("""
                SELECT lead_priority, COUNT(*) as count FROM profiles
                GROUP BY lead_priority
            """)
            by_priority = {p.value: 0 for p in Priority}
            for row in cursor.fetchall():
                by_priority[row["lead_priority"]] = row["count"]

            cursor.execute("SELECT AVG(lead_score) FROM profiles")
            avg_score = cursor.fetchone()[0] or 0

            cursor.execute("SELECT COUNT(*) FROM leads")
            total_leads = cursor.fetchone()[0]

            cursor.execute("SELECT COUNT(*) FROM opportunities")
            total_opportunities = cursor.fetchone()[0]

            return {
                "total_profiles": total_profiles,
                "by_priority": by_priority,
                "avg_score": round(avg_score, 1),
                "total_leads": total_leads,
                "total_opportunities": total_opportunities,
            }
