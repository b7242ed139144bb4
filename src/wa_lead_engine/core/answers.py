"""Investor profile answers collected by the registration wizard."""

from dataclasses import dataclass, fields
from enum import Enum
from typing import Optional, Dict, Any


class Timeline(Enum):
    """How soon the applicant plans to start investing."""

    IMMEDIATE = "IMMEDIATE"
    ONE_TO_TWO_MONTHS = "1-2_MONTHS"
    THREE_PLUS_MONTHS = "3_PLUS_MONTHS"


class CapitalType(Enum):
    """How the applicant will fund investments."""

    CASH = "CASH"
    BOND = "BOND"
    BOTH = "BOTH"

    @property
    def uses_cash(self) -> bool:
        return self in (CapitalType.CASH, CapitalType.BOTH)

    @property
    def uses_bond(self) -> bool:
        return self in (CapitalType.BOND, CapitalType.BOTH)


class CashBand(Enum):
    """Available cash capital, highest band first."""

    R5M_PLUS = "R5M+"
    R2_5M_TO_R4_9M = "R2.5M-R4.9M"
    R1M_TO_R2_49M = "R1M-R2.49M"
    R500K_TO_R999K = "R500K-R999K"
    R100K_TO_R499K = "R100K-R499K"
    UNDER_R100K = "<R100K"


class BondBand(Enum):
    """Estimated bond qualification, highest band first."""

    R5M_PLUS = "R5M+"
    R3M_TO_R4_9M = "R3M-R4.9M"
    R1_5M_TO_R2_99M = "R1.5M-R2.99M"
    R750K_TO_R1_49M = "R750K-R1.49M"
    R350K_TO_R749K = "R350K-R749K"
    UNDER_R350K = "<R350K"


RISK_APPETITE_MIN = 1
RISK_APPETITE_MAX = 5

_ENUM_FIELDS = {
    "timeline": Timeline,
    "capital_type": CapitalType,
    "cash_amount": CashBand,
    "bond_amount": BondBand,
}
_BOOL_FIELDS = ("has_portfolio", "bond_preapproved", "has_experience")


def coerce_answer(key: str, value: Any) -> Any:
    """Convert a raw (wire) value into the type stored on LeadAnswers.

    Raises ValueError for unknown keys or values that don't fit the field.
    """
    if key not in ANSWER_FIELDS:
        raise ValueError(f"Unknown answer: {key}")

    if key in _ENUM_FIELDS:
        enum_cls = _ENUM_FIELDS[key]
        if value is None or value == "":
            if key in ("cash_amount", "bond_amount"):
                return None
            raise ValueError(f"{key} is required")
        if isinstance(value, enum_cls):
            return value
        try:
            return enum_cls(value)
        except ValueError:
            # Accept member names too ("ONE_TO_TWO_MONTHS")
            if isinstance(value, str) and value in enum_cls.__members__:
                return enum_cls[value]
            valid = ", ".join(m.value for m in enum_cls)
            raise ValueError(f"Invalid {key} '{value}'. Must be one of: {valid}")

    if key in _BOOL_FIELDS:
        if value is None and key == "bond_preapproved":
            return None
        if not isinstance(value, bool):
            raise ValueError(f"{key} must be true or false")
        return value

    # risk_appetite
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError("risk_appetite must be a whole number")
    if not RISK_APPETITE_MIN <= value <= RISK_APPETITE_MAX:
        raise ValueError(
            f"risk_appetite must be between {RISK_APPETITE_MIN} and {RISK_APPETITE_MAX}"
        )
    return value


@dataclass(frozen=True)
class LeadAnswers:
    """Answers that feed the lead score.

    Defaults are the forced-choice defaults the wizard starts with, so a
    freshly created record is always scoreable.
    """

    timeline: Timeline = Timeline.THREE_PLUS_MONTHS
    has_portfolio: bool = False
    capital_type: CapitalType = CapitalType.CASH
    cash_amount: Optional[CashBand] = None
    bond_amount: Optional[BondBand] = None
    bond_preapproved: Optional[bool] = None
    risk_appetite: int = 3
    has_experience: bool = False

    def __post_init__(self):
        for f in fields(self):
            object.__setattr__(self, f.name, coerce_answer(f.name, getattr(self, f.name)))

    def to_dict(self) -> Dict[str, Any]:
        """Raw answers as stored on the profile (absent optionals omitted)."""
        data: Dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            data[f.name] = value.value if isinstance(value, Enum) else value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LeadAnswers":
        """Build answers from a raw payload, ignoring unknown keys."""
        return cls(**{k: v for k, v in data.items() if k in ANSWER_FIELDS})


ANSWER_FIELDS = tuple(f.name for f in fields(LeadAnswers))
