"""
Bearer token handling.

Tokens are issued by an external identity provider that shares the signing
key; this service only verifies them and reads their claims.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from jose import JWTError, jwt
from billbook.app.core.config import settings

# Tokens without an expiry are rejected
DECODE_OPTIONS = {"require_exp": True}


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    Sign claims into a bearer token.

    Used by tests and operator tooling. Claims should carry user_id (the
    owner id) and sub (display name).
    """
    lifetime = expires_delta if expires_delta is not None else timedelta(
        minutes=settings.access_token_expire_minutes
    )
    claims = dict(data, exp=datetime.now(timezone.utc) + lifetime)
    return jwt.encode(claims, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Verify signature and expiry; None for any token that cannot be trusted."""
    try:
        return jwt.decode(
            token, settings.secret_key, algorithms=[settings.algorithm], options=DECODE_OPTIONS
        )
    except JWTError:
        return None
