"""Service helpers shared by API routes."""
