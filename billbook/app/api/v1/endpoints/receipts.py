"""
Receipt API Endpoints.

Receipts are owner-scoped and may reference one of the owner's invoices.
"""

from fastapi import APIRouter, Depends, status, Path
from billbook.app.schemas.receipt import (
    ReceiptCreate, ReceiptUpdate, ReceiptResponse, ReceiptEnvelope, ReceiptListResponse
)
from billbook.app.core.dependencies import get_request_context, get_records_service
from billbook.app.core.identity import RequestContext
from billbook.app.domain.records.service import RecordsService

router = APIRouter(prefix="/receipts", tags=["Receipts"])


@router.post("", response_model=ReceiptEnvelope, status_code=status.HTTP_201_CREATED)
async def create_receipt(
    receipt_data: ReceiptCreate,
    context: RequestContext = Depends(get_request_context),
    service: RecordsService = Depends(get_records_service)
):
    """
    Record a payment.

    Validates:
    - invoice_id, when given, names an invoice of the current user
    """
    receipt = await service.create_receipt(context, receipt_data)
    return ReceiptEnvelope(receipt=ReceiptResponse.model_validate(receipt))


@router.get("", response_model=ReceiptListResponse)
async def list_receipts(
    context: RequestContext = Depends(get_request_context),
    service: RecordsService = Depends(get_records_service)
):
    """List all receipts owned by the authenticated user."""
    receipts = await service.list_receipts(context)
    return ReceiptListResponse(receipts=[ReceiptResponse.model_validate(r) for r in receipts])


@router.get("/{receipt_id}", response_model=ReceiptEnvelope)
async def get_receipt(
    receipt_id: str = Path(..., description="Receipt ID"),
    context: RequestContext = Depends(get_request_context),
    service: RecordsService = Depends(get_records_service)
):
    receipt = await service.get_receipt(context, receipt_id)
    return ReceiptEnvelope(receipt=ReceiptResponse.model_validate(receipt))


@router.patch("/{receipt_id}", response_model=ReceiptEnvelope)
async def update_receipt(
    receipt_id: str = Path(..., description="Receipt ID"),
    receipt_data: ReceiptUpdate = ...,
    context: RequestContext = Depends(get_request_context),
    service: RecordsService = Depends(get_records_service)
):
    receipt = await service.update_receipt(context, receipt_id, receipt_data)
    return ReceiptEnvelope(receipt=ReceiptResponse.model_validate(receipt))


@router.delete("/{receipt_id}", response_model=ReceiptEnvelope)
async def delete_receipt(
    receipt_id: str = Path(..., description="Receipt ID"),
    context: RequestContext = Depends(get_request_context),
    service: RecordsService = Depends(get_records_service)
):
    """Permanently delete a receipt and return the deleted record."""
    receipt = await service.delete_receipt(context, receipt_id)
    return ReceiptEnvelope(receipt=ReceiptResponse.model_validate(receipt))
