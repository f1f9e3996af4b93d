"""Session gate for dashboard endpoints.

Token verification belongs to the identity provider; the API only requires
that a session token is present and uses it to scope the ledger directory.
"""

import logging

from fastapi import Header

from servicepay.api.errors import UnauthorizedError, raise_app_error

logger = logging.getLogger(__name__)


def extract_session_token(authorization: str | None) -> str | None:
    """Extract the token from an "Authorization: Bearer <token>" header.

    Args:
        authorization: Raw Authorization header value

    Returns:
        Token string or None if missing or malformed
    """
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer":
        return None
    token = token.strip()
    return token or None


def require_session(authorization: str | None = Header(default=None)) -> str:
    """FastAPI dependency returning the caller's session token.

    Raises:
        HTTPException 401: No usable session token
    """
    token = extract_session_token(authorization)
    if token is None:
        logger.warning("Dashboard request without session token")
        raise_app_error(UnauthorizedError())
    return token
