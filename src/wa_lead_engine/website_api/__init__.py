"""Website API: registration wizard, contact form, opportunities and admin dashboard."""
