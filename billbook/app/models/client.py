"""
Client database model.

A client is a customer of the business user who owns it.
"""

from sqlalchemy import Column, String, Text, DateTime
from billbook.app.db.session import Base
from billbook.app.core.time_utils import utcnow


class Client(Base):
    """
    Client model.

    Owned directly by owner_id; never referenced through a database foreign key,
    references to it are checked by the records service.
    """
    __tablename__ = "clients"

    id = Column(String(64), primary_key=True)

    # Ownership - Client belongs to one user
    owner_id = Column(String(64), nullable=False, index=True)

    # Client details
    display_name = Column(String(255), nullable=False)
    contact_person = Column(String(255), nullable=True)
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    billing_address = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)

    # Timestamps
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, nullable=False)

    def __repr__(self):
        return f"<Client(id={self.id}, name='{self.display_name}', owner_id={self.owner_id})>"
