"""Wealth Assist lead engine: investor registration and lead scoring."""

__version__ = "1.0.0"
