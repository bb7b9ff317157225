"""
Invoice API Endpoints.

Invoices are owner-scoped and may reference one of the owner's clients.
"""

from fastapi import APIRouter, Depends, status, Path
from billbook.app.schemas.invoice import (
    InvoiceCreate, InvoiceUpdate, InvoiceResponse, InvoiceEnvelope, InvoiceListResponse
)
from billbook.app.core.dependencies import get_request_context, get_records_service
from billbook.app.core.identity import RequestContext
from billbook.app.domain.records.service import RecordsService

router = APIRouter(prefix="/invoices", tags=["Invoices"])


@router.post("", response_model=InvoiceEnvelope, status_code=status.HTTP_201_CREATED)
async def create_invoice(
    invoice_data: InvoiceCreate,
    context: RequestContext = Depends(get_request_context),
    service: RecordsService = Depends(get_records_service)
):
    """
    Create a new invoice.

    Validates:
    - client_id, when given, names a client of the current user
    """
    invoice = await service.create_invoice(context, invoice_data)
    return InvoiceEnvelope(invoice=InvoiceResponse.model_validate(invoice))


@router.get("", response_model=InvoiceListResponse)
async def list_invoices(
    context: RequestContext = Depends(get_request_context),
    service: RecordsService = Depends(get_records_service)
):
    """List all invoices owned by the authenticated user."""
    invoices = await service.list_invoices(context)
    return InvoiceListResponse(invoices=[InvoiceResponse.model_validate(i) for i in invoices])


@router.get("/{invoice_id}", response_model=InvoiceEnvelope)
async def get_invoice(
    invoice_id: str = Path(..., description="Invoice ID"),
    context: RequestContext = Depends(get_request_context),
    service: RecordsService = Depends(get_records_service)
):
    invoice = await service.get_invoice(context, invoice_id)
    return InvoiceEnvelope(invoice=InvoiceResponse.model_validate(invoice))


@router.patch("/{invoice_id}", response_model=InvoiceEnvelope)
async def update_invoice(
    invoice_id: str = Path(..., description="Invoice ID"),
    invoice_data: InvoiceUpdate = ...,
    context: RequestContext = Depends(get_request_context),
    service: RecordsService = Depends(get_records_service)
):
    """
    Update invoice details.

    Sending client_id as "" or null detaches the client.
    """
    invoice = await service.update_invoice(context, invoice_id, invoice_data)
    return InvoiceEnvelope(invoice=InvoiceResponse.model_validate(invoice))


@router.delete("/{invoice_id}", response_model=InvoiceEnvelope)
async def delete_invoice(
    invoice_id: str = Path(..., description="Invoice ID"),
    context: RequestContext = Depends(get_request_context),
    service: RecordsService = Depends(get_records_service)
):
    """
    Permanently delete an invoice.

    Items and receipts are handled according to INVOICE_DELETE_POLICY.
    """
    invoice = await service.delete_invoice(context, invoice_id)
    return InvoiceEnvelope(invoice=InvoiceResponse.model_validate(invoice))
