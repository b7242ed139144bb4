"""CORS configuration."""

ALLOWED_ORIGINS = [
    "https://wealthassist.co.za",
    "https://www.wealthassist.co.za",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
