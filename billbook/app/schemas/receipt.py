"""
Receipt Pydantic schemas.

Defines request and response models for payment receipts.
"""

from pydantic import BaseModel, Field, field_validator
from datetime import date, datetime
from typing import Optional, List


class ReceiptCreate(BaseModel):
    """Schema for creating a new receipt."""
    id: Optional[str] = Field(None, min_length=1, max_length=64, description="Caller-supplied id (generated when omitted)")
    invoice_id: Optional[str] = Field(None, max_length=64, description="Invoice of the same owner; omit for standalone receipts")
    receipt_number: str = Field(..., min_length=1, max_length=100, description="User-facing receipt number")
    payment_date: Optional[date] = None
    amount_paid: float = Field(..., description="Amount received")
    currency: Optional[str] = Field(None, max_length=10)
    payment_method: Optional[str] = Field(None, max_length=50, description="cash, card, bank-transfer")
    notes: Optional[str] = None


class ReceiptUpdate(BaseModel):
    """Schema for updating an existing receipt."""
    invoice_id: Optional[str] = Field(None, max_length=64)
    receipt_number: Optional[str] = Field(None, min_length=1, max_length=100)
    payment_date: Optional[date] = None
    amount_paid: Optional[float] = None
    currency: Optional[str] = Field(None, max_length=10)
    payment_method: Optional[str] = Field(None, max_length=50)
    notes: Optional[str] = None

    @field_validator("receipt_number", "amount_paid")
    @classmethod
    def required_not_null(cls, value, info):
        if value is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return value


class ReceiptResponse(BaseModel):
    """Schema for receipt response."""
    id: str
    owner_id: str
    invoice_id: Optional[str]
    receipt_number: str
    payment_date: Optional[date]
    amount_paid: float
    currency: Optional[str]
    payment_method: Optional[str]
    notes: Optional[str]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ReceiptEnvelope(BaseModel):
    receipt: ReceiptResponse


class ReceiptListResponse(BaseModel):
    receipts: List[ReceiptResponse]
