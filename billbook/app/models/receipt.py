"""
Receipt database model.

A receipt records a payment, optionally against one of the owner's invoices.
Standalone receipts (no invoice) are allowed.
"""

from sqlalchemy import Column, String, Text, Date, DateTime, Float
from billbook.app.db.session import Base
from billbook.app.core.time_utils import utcnow


class Receipt(Base):
    __tablename__ = "receipts"

    id = Column(String(64), primary_key=True)

    # Ownership
    owner_id = Column(String(64), nullable=False, index=True)

    # Reference (checked by the records service, not by the database)
    invoice_id = Column(String(64), nullable=True, index=True)

    receipt_number = Column(String(100), nullable=False)
    payment_date = Column(Date, nullable=True)
    amount_paid = Column(Float, nullable=False)
    currency = Column(String(10), nullable=True)
    # "cash", "card", "bank-transfer"
    payment_method = Column(String(50), nullable=True)
    notes = Column(Text, nullable=True)

    # Timestamps
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, nullable=False)

    def __repr__(self):
        return f"<Receipt(id={self.id}, number='{self.receipt_number}', owner_id={self.owner_id})>"
