"""
Caller authentication.

Callers present an HS256 bearer token signed with JWT_SECRET. The caller ID
is the token subject. Authentication is checked before any business logic;
a missing or invalid token is always an AuthenticationError (401), never a
permission error.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

import jwt
from fastapi import Request

from supplier_gate.config.settings import get_jwt_audience, get_jwt_secret
from supplier_gate.platform.errors import AuthenticationError

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"
BEARER_PREFIX = "Bearer "


@dataclass(frozen=True)
class AuthContext:
    """Authenticated caller."""
    user_id: str
    claims: dict[str, Any] = field(default_factory=dict)


def decode_token(token: str) -> dict[str, Any]:
    """
    Verify and decode a bearer token.

    Raises:
        AuthenticationError: If the token is expired, invalid or unverifiable
    """
    secret = get_jwt_secret()
    if not secret:
        logger.error("JWT_SECRET not configured; rejecting bearer token")
        raise AuthenticationError("Authentication is not configured")

    audience = get_jwt_audience()
    options = {"require": ["sub"], "verify_aud": audience is not None}
    try:
        return jwt.decode(
            token,
            secret,
            algorithms=[JWT_ALGORITHM],
            audience=audience,
            options=options,
        )
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Token has expired")
    except jwt.InvalidTokenError as e:
        logger.info("Rejected bearer token", extra={"error": str(e)})
        raise AuthenticationError("Invalid token")


def _extract_bearer_token(request: Request) -> Optional[str]:
    header = request.headers.get("Authorization")
    if not header or not header.startswith(BEARER_PREFIX):
        return None
    token = header[len(BEARER_PREFIX):].strip()
    return token or None


def require_auth(request: Request) -> AuthContext:
    """
    FastAPI dependency returning the authenticated caller.

    Raises:
        AuthenticationError: If no valid bearer token is present
    """
    token = _extract_bearer_token(request)
    if token is None:
        raise AuthenticationError("Missing or invalid Authorization header")

    claims = decode_token(token)
    user_id = claims.get("sub")
    if not isinstance(user_id, str) or not user_id:
        raise AuthenticationError("Token subject is missing")

    request.state.user_id = user_id
    return AuthContext(user_id=user_id, claims=claims)
