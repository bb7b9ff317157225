"""
Audit trail API Endpoint.

Users can read back the mutations they performed, newest first.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from billbook.app.db.session import get_db
from billbook.app.schemas.audit import AuditEventResponse, AuditTrailResponse
from billbook.app.core.dependencies import get_request_context
from billbook.app.core.identity import RequestContext, require_identity
from billbook.app.services.audit import get_audit_trail

router = APIRouter(prefix="/audit", tags=["Audit"])


@router.get("", response_model=AuditTrailResponse)
async def list_own_audit_events(
    entity_id: Optional[str] = Query(None, description="Only events for this record"),
    action: Optional[str] = Query(None, description="Only events of this action"),
    limit: int = Query(100, ge=1, le=500),
    context: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db)
):
    identity = require_identity(context)
    events = await get_audit_trail(
        db, actor_id=identity.user_id, entity_id=entity_id, action=action, limit=limit
    )
    return AuditTrailResponse(events=[AuditEventResponse.model_validate(e) for e in events])
