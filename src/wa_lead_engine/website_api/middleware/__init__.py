"""Website API middleware."""
