"""
Invoice item database model.

Items carry no owner column; they are owned through their invoice.
"""

from sqlalchemy import Column, String, Text, DateTime, Float
from billbook.app.db.session import Base
from billbook.app.core.time_utils import utcnow


class InvoiceItem(Base):
    __tablename__ = "invoice_items"

    id = Column(String(64), primary_key=True)

    # Parent invoice, fixed at creation
    invoice_id = Column(String(64), nullable=False, index=True)

    description = Column(Text, nullable=False)
    quantity = Column(Float, nullable=True)
    unit_price = Column(Float, nullable=True)
    # Cached line amount, stored as supplied
    line_total = Column(Float, nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)

    def __repr__(self):
        return f"<InvoiceItem(id={self.id}, invoice_id={self.invoice_id})>"
