"""
Audit logging service for tracking record mutations.

Provides centralized logging for compliance and support.
"""

from typing import Optional, Dict, Any
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, desc
from billbook.app.core.time_utils import utcnow
from billbook.app.db.store import EntityStore
from billbook.app.models.audit_log import AuditLog
from billbook.app.models.enums import EntityType


# Audit event constants
class AuditAction:
    """Standardized audit action constants."""
    CLIENT_CREATED = "CLIENT_CREATED"
    CLIENT_UPDATED = "CLIENT_UPDATED"
    CLIENT_DELETED = "CLIENT_DELETED"

    INVOICE_CREATED = "INVOICE_CREATED"
    INVOICE_UPDATED = "INVOICE_UPDATED"
    INVOICE_DELETED = "INVOICE_DELETED"

    INVOICE_ITEM_SAVED = "INVOICE_ITEM_SAVED"
    INVOICE_ITEM_DELETED = "INVOICE_ITEM_DELETED"

    RECEIPT_CREATED = "RECEIPT_CREATED"
    RECEIPT_UPDATED = "RECEIPT_UPDATED"
    RECEIPT_DELETED = "RECEIPT_DELETED"


def mutation_action(entity_type: EntityType, verb: str) -> str:
    """AuditAction for entity_type and verb, e.g. (CLIENT, "CREATED") -> CLIENT_CREATED."""
    return getattr(AuditAction, f"{entity_type.name}_{verb}")


async def log_event(
    store: EntityStore,
    action: str,
    actor_id: str,
    entity_type: str,
    entity_id: str,
    actor_username: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None
) -> AuditLog:
    """
    Log a record mutation to the audit log.

    Written through the same store as the mutation, so it must be called
    inside that mutation's transaction: both commit or neither does.

    Args:
        store: Entity store of the running mutation
        action: Action being performed (use AuditAction constants)
        actor_id: Owner id of the user performing the action
        entity_type: Record family touched (EntityType value)
        entity_id: ID of the record touched
        actor_username: Username of actor, if known
        metadata: Additional context as JSON

    Returns:
        Created AuditLog instance
    """
    return await store.insert(AuditLog, {
        "actor_id": actor_id,
        "actor_username": actor_username,
        "action": action,
        "entity_type": entity_type,
        "entity_id": entity_id,
        "meta_data": metadata,
        "timestamp": utcnow(),
    })


async def get_audit_trail(
    db: AsyncSession,
    actor_id: str,
    entity_id: Optional[str] = None,
    action: Optional[str] = None,
    limit: int = 100
) -> list[AuditLog]:
    """
    Retrieve an actor's audit trail with optional filtering.

    Args:
        db: Database session
        actor_id: Only events performed by this owner
        entity_id: Filter by record ID
        action: Filter by action type
        limit: Maximum number of records to return

    Returns:
        List of AuditLog instances, most recent first
    """
    query = select(AuditLog).where(AuditLog.actor_id == actor_id).order_by(
        desc(AuditLog.timestamp), desc(AuditLog.id)
    )

    if entity_id:
        query = query.where(AuditLog.entity_id == entity_id)

    if action:
        query = query.where(AuditLog.action == action)

    query = query.limit(limit)

    result = await db.execute(query)
    return result.scalars().all()
