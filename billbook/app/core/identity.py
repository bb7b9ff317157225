"""
Identity gate.

Every record operation starts here: the request context either carries a
verified identity or the call is rejected as unauthorized.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from billbook.app.core.exceptions import UnauthorizedError


@dataclass(frozen=True)
class Identity:
    """A verified user. user_id is the owner id stamped on every owned record."""
    user_id: str
    username: Optional[str] = None


@dataclass(frozen=True)
class RequestContext:
    """Per-request context handed to the records service."""
    identity: Optional[Identity] = None
    correlation_id: Optional[str] = None

    @classmethod
    def anonymous(cls) -> "RequestContext":
        return cls(identity=None)

    @classmethod
    def for_user(cls, user_id: str, username: Optional[str] = None) -> "RequestContext":
        return cls(identity=Identity(user_id=user_id, username=username))


def identity_from_claims(claims: Optional[Dict[str, Any]]) -> Optional[Identity]:
    """Build an identity from decoded token claims, or None if the claims are unusable."""
    if not claims:
        return None

    user_id = claims.get("user_id")
    if user_id is None or str(user_id).strip() == "":
        return None

    return Identity(user_id=str(user_id), username=claims.get("sub"))


def require_identity(context: Optional[RequestContext]) -> Identity:
    """
    Return the verified identity from the context.

    Raises:
        UnauthorizedError: if the context is missing or anonymous
    """
    if context is None or context.identity is None:
        raise UnauthorizedError()
    return context.identity
