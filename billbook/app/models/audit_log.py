"""
Audit Log Database Model.

Tracks every successful record mutation for compliance and support.
"""

from sqlalchemy import Column, Integer, String, DateTime, JSON
from billbook.app.db.session import Base
from billbook.app.core.time_utils import utcnow


class AuditLog(Base):
    """
    Audit log model for tracking record mutations.

    Events logged:
    - CLIENT_CREATED / CLIENT_UPDATED / CLIENT_DELETED
    - INVOICE_CREATED / INVOICE_UPDATED / INVOICE_DELETED
    - INVOICE_ITEM_SAVED / INVOICE_ITEM_DELETED
    - RECEIPT_CREATED / RECEIPT_UPDATED / RECEIPT_DELETED
    """
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Who performed the action
    actor_id = Column(String(64), index=True, nullable=False)
    actor_username = Column(String(100), nullable=True)

    # What action was performed
    action = Column(String(100), nullable=False, index=True)

    # Which record was touched
    entity_type = Column(String(50), nullable=False)
    entity_id = Column(String(64), index=True, nullable=False)

    # Additional context (JSON for flexibility)
    meta_data = Column(JSON, nullable=True)

    # Timestamp
    timestamp = Column(DateTime, default=utcnow, nullable=False, index=True)

    def __repr__(self):
        return f"<AuditLog(id={self.id}, action='{self.action}', actor={self.actor_id}, entity={self.entity_id})>"
