"""
Request dependencies for FastAPI.

This module resolves the caller's identity from the bearer token and builds
the records service bound to the request's database session.
"""

from typing import Optional
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from billbook.app.core.jwt import decode_access_token
from billbook.app.core.identity import RequestContext, identity_from_claims, require_identity
from billbook.app.db.session import get_db
from billbook.app.db.store import SqlAlchemyStore
from billbook.app.domain.records.registry import default_registry
from billbook.app.domain.records.service import RecordsService

# HTTP Bearer security scheme; a missing header is left to the identity gate
security = HTTPBearer(auto_error=False)

_registry = default_registry()


async def get_request_context(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> RequestContext:
    """
    FastAPI dependency building the request context.

    A missing, invalid or expired token yields an anonymous context; the
    records service rejects it with 401 when an operation needs an identity.

    Args:
        request: Incoming request (carries the correlation id)
        credentials: HTTP Bearer token from request header

    Returns:
        RequestContext with the verified identity, if any
    """
    correlation_id = getattr(request.state, "correlation_id", None)

    if credentials is None:
        return RequestContext(identity=None, correlation_id=correlation_id)

    claims = decode_access_token(credentials.credentials)
    return RequestContext(identity=identity_from_claims(claims), correlation_id=correlation_id)


async def get_records_service(db: AsyncSession = Depends(get_db)) -> RecordsService:
    """FastAPI dependency for a records service scoped to the request session."""
    return RecordsService(SqlAlchemyStore(db), _registry)


async def require_signed_in(
    context: RequestContext = Depends(get_request_context)
) -> RequestContext:
    """
    Router-level guard so unauthenticated calls get 401 before body validation.

    Raises:
        UnauthorizedError: if the request carries no verified identity
    """
    require_identity(context)
    return context
