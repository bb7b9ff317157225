"""
Invoice Pydantic schemas.

Amounts are accepted as given; nothing here recomputes totals.
"""

from pydantic import BaseModel, Field, field_validator
from datetime import date, datetime
from typing import Optional, List


class InvoiceCreate(BaseModel):
    """Schema for creating a new invoice."""
    id: Optional[str] = Field(None, min_length=1, max_length=64, description="Caller-supplied id (generated when omitted)")
    client_id: Optional[str] = Field(None, max_length=64, description="Client of the same owner")
    invoice_number: str = Field(..., min_length=1, max_length=100, description="User-facing invoice number")
    issue_date: Optional[date] = None
    due_date: Optional[date] = None
    currency: Optional[str] = Field(None, max_length=10, description="e.g. AED, INR, USD")
    sub_total: Optional[float] = None
    tax_amount: Optional[float] = None
    discount_amount: Optional[float] = None
    total_amount: Optional[float] = None
    status: Optional[str] = Field(None, max_length=50, description="draft, sent, paid, cancelled")
    notes: Optional[str] = None
    terms: Optional[str] = None


class InvoiceUpdate(BaseModel):
    """
    Schema for updating an existing invoice.

    client_id set to "" or null detaches the client.
    """
    client_id: Optional[str] = Field(None, max_length=64)
    invoice_number: Optional[str] = Field(None, min_length=1, max_length=100)
    issue_date: Optional[date] = None
    due_date: Optional[date] = None
    currency: Optional[str] = Field(None, max_length=10)
    sub_total: Optional[float] = None
    tax_amount: Optional[float] = None
    discount_amount: Optional[float] = None
    total_amount: Optional[float] = None
    status: Optional[str] = Field(None, max_length=50)
    notes: Optional[str] = None
    terms: Optional[str] = None

    @field_validator("invoice_number")
    @classmethod
    def invoice_number_not_null(cls, value):
        if value is None:
            raise ValueError("invoice_number cannot be null")
        return value


class InvoiceResponse(BaseModel):
    """Schema for invoice response."""
    id: str
    owner_id: str
    client_id: Optional[str]
    invoice_number: str
    issue_date: Optional[date]
    due_date: Optional[date]
    currency: Optional[str]
    sub_total: Optional[float]
    tax_amount: Optional[float]
    discount_amount: Optional[float]
    total_amount: Optional[float]
    status: Optional[str]
    notes: Optional[str]
    terms: Optional[str]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class InvoiceEnvelope(BaseModel):
    invoice: InvoiceResponse


class InvoiceListResponse(BaseModel):
    invoices: List[InvoiceResponse]
