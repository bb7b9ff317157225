"""
Invoice Item API Endpoints.

Items have no owner of their own; every route first resolves the parent
invoice for the current user.
"""

from fastapi import APIRouter, Depends, Path
from billbook.app.schemas.invoice_item import (
    InvoiceItemBody, InvoiceItemResponse, InvoiceItemEnvelope, InvoiceItemListResponse
)
from billbook.app.core.dependencies import get_request_context, get_records_service
from billbook.app.core.identity import RequestContext
from billbook.app.domain.records.service import RecordsService

router = APIRouter(prefix="/invoices/{invoice_id}/items", tags=["Invoice Items"])


@router.put("", response_model=InvoiceItemEnvelope)
async def save_invoice_item(
    invoice_id: str = Path(..., description="Invoice ID"),
    item_data: InvoiceItemBody = ...,
    context: RequestContext = Depends(get_request_context),
    service: RecordsService = Depends(get_records_service)
):
    """
    Insert or replace an invoice item.

    Without id a new item is added. With id the existing item of this invoice
    has its description and amounts replaced.
    """
    payload = item_data.model_dump(exclude_unset=True)
    payload["invoice_id"] = invoice_id
    item = await service.save_invoice_item(context, payload)
    return InvoiceItemEnvelope(item=InvoiceItemResponse.model_validate(item))


@router.get("", response_model=InvoiceItemListResponse)
async def list_invoice_items(
    invoice_id: str = Path(..., description="Invoice ID"),
    context: RequestContext = Depends(get_request_context),
    service: RecordsService = Depends(get_records_service)
):
    items = await service.list_invoice_items(context, invoice_id)
    return InvoiceItemListResponse(items=[InvoiceItemResponse.model_validate(i) for i in items])


@router.delete("/{item_id}", response_model=InvoiceItemEnvelope)
async def delete_invoice_item(
    invoice_id: str = Path(..., description="Invoice ID"),
    item_id: str = Path(..., description="Invoice item ID"),
    context: RequestContext = Depends(get_request_context),
    service: RecordsService = Depends(get_records_service)
):
    """Delete an item of one of the current user's invoices."""
    item = await service.delete_invoice_item(context, {"id": item_id, "invoice_id": invoice_id})
    return InvoiceItemEnvelope(item=InvoiceItemResponse.model_validate(item))
