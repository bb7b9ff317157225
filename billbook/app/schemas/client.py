"""
Client Pydantic schemas.

Defines request and response models for client management.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator
from datetime import datetime
from typing import Optional, List


class ClientCreate(BaseModel):
    """Schema for creating a new client."""
    id: Optional[str] = Field(None, min_length=1, max_length=64, description="Caller-supplied id (generated when omitted)")
    display_name: str = Field(..., min_length=1, max_length=255, description="Client or company name")
    contact_person: Optional[str] = Field(None, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)
    billing_address: Optional[str] = None
    notes: Optional[str] = None


class ClientUpdate(BaseModel):
    """
    Schema for updating an existing client.

    Only fields present in the request body are applied.
    """
    display_name: Optional[str] = Field(None, min_length=1, max_length=255)
    contact_person: Optional[str] = Field(None, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)
    billing_address: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("display_name")
    @classmethod
    def display_name_not_null(cls, value):
        if value is None:
            raise ValueError("display_name cannot be null")
        return value


class ClientResponse(BaseModel):
    """Schema for client response."""
    id: str
    owner_id: str
    display_name: str
    contact_person: Optional[str]
    email: Optional[str]
    phone: Optional[str]
    billing_address: Optional[str]
    notes: Optional[str]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ClientEnvelope(BaseModel):
    client: ClientResponse


class ClientListResponse(BaseModel):
    clients: List[ClientResponse]
