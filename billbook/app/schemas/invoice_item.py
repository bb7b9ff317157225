"""
Invoice item Pydantic schemas.

Saving an item is an upsert: without id a new item is inserted, with id the
item's description and amounts are replaced wholesale.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional, List


class InvoiceItemBody(BaseModel):
    """Request body for saving an item; the invoice comes from the URL."""
    id: Optional[str] = Field(None, max_length=64, description="Existing item to replace")
    description: str = Field(..., min_length=1, description="Line description")
    quantity: Optional[float] = None
    unit_price: Optional[float] = None
    line_total: Optional[float] = Field(None, description="Stored as supplied")


class InvoiceItemSave(InvoiceItemBody):
    """Full save payload."""
    invoice_id: str = Field(..., min_length=1, max_length=64)


class InvoiceItemDelete(BaseModel):
    id: str = Field(..., min_length=1, max_length=64)
    invoice_id: str = Field(..., min_length=1, max_length=64)


class InvoiceItemResponse(BaseModel):
    id: str
    invoice_id: str
    description: str
    quantity: Optional[float]
    unit_price: Optional[float]
    line_total: Optional[float]
    created_at: datetime

    class Config:
        from_attributes = True


class InvoiceItemEnvelope(BaseModel):
    item: InvoiceItemResponse


class InvoiceItemListResponse(BaseModel):
    items: List[InvoiceItemResponse]
