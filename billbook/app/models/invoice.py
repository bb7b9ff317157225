"""
Invoice database model.
"""

from sqlalchemy import Column, String, Text, Date, DateTime, Float
from billbook.app.db.session import Base
from billbook.app.core.time_utils import utcnow


class Invoice(Base):
    """
    Invoice model.

    client_id optionally points at a Client of the same owner. Amounts are
    stored as given; nothing here recomputes totals.
    """
    __tablename__ = "invoices"

    id = Column(String(64), primary_key=True)

    # Ownership
    owner_id = Column(String(64), nullable=False, index=True)

    # Reference (checked by the records service, not by the database)
    client_id = Column(String(64), nullable=True, index=True)

    invoice_number = Column(String(100), nullable=False)
    issue_date = Column(Date, nullable=True)
    due_date = Column(Date, nullable=True)
    currency = Column(String(10), nullable=True)

    # Amounts
    sub_total = Column(Float, nullable=True)
    tax_amount = Column(Float, nullable=True)
    discount_amount = Column(Float, nullable=True)
    total_amount = Column(Float, nullable=True)

    # "draft", "sent", "paid", "cancelled"
    status = Column(String(50), nullable=True)
    notes = Column(Text, nullable=True)
    terms = Column(Text, nullable=True)

    # Timestamps
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, nullable=False)

    def __repr__(self):
        return f"<Invoice(id={self.id}, number='{self.invoice_number}', owner_id={self.owner_id})>"
