"""Admin authentication for opportunity and dashboard routes.

Admin tooling authenticates with the shared WA_API_SECRET, either by
signing the raw request body (X-WA-Signature, hex HMAC-SHA256) or by
sending the secret itself (X-WA-Secret). Public routes don't use this.
"""

import hashlib
import hmac
import logging
from typing import Optional
from fastapi import Request, HTTPException

from ..config import settings

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "X-WA-Signature"
SECRET_HEADER = "X-WA-Secret"


def sign_body(body: bytes, secret: Optional[str] = None) -> str:
    """Hex HMAC-SHA256 of a request body."""
    key = (secret or settings.api_secret).encode()
    return hmac.new(key, body, hashlib.sha256).hexdigest()


def is_admin_request(body: bytes, signature: Optional[str], secret: Optional[str]) -> bool:
    if signature and hmac.compare_digest(signature, sign_body(body)):
        return True
    return bool(secret) and hmac.compare_digest(secret, settings.api_secret)


async def verify_signature(request: Request):
    """FastAPI dependency rejecting requests without admin credentials."""
    if not settings.api_secret:
        logger.error(f"Admin request to {request.url.path} refused: WA_API_SECRET is not set")
        raise HTTPException(
            status_code=503,
            detail={"success": False, "error": "auth_unavailable", "detail": "Admin access is not configured"},
        )

    body = await request.body()
    if is_admin_request(
        body,
        request.headers.get(SIGNATURE_HEADER),
        request.headers.get(SECRET_HEADER),
    ):
        return True

    client = request.client.host if request.client else "unknown"
    logger.warning(f"Rejected admin request to {request.url.path} from {client}")
    raise HTTPException(
        status_code=401,
        detail={"success": False, "error": "auth_error", "detail": "Invalid or missing authentication"},
    )
