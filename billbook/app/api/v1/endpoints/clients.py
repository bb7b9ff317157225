"""
Client API Endpoints.

Lets a signed-in user manage their own clients. Every route is owner-scoped:
clients of other users are reported as not found.
"""

from fastapi import APIRouter, Depends, status, Path
from billbook.app.schemas.client import (
    ClientCreate, ClientUpdate, ClientResponse, ClientEnvelope, ClientListResponse
)
from billbook.app.core.dependencies import get_request_context, get_records_service
from billbook.app.core.identity import RequestContext
from billbook.app.domain.records.service import RecordsService

router = APIRouter(prefix="/clients", tags=["Clients"])


@router.post("", response_model=ClientEnvelope, status_code=status.HTTP_201_CREATED)
async def create_client(
    client_data: ClientCreate,
    context: RequestContext = Depends(get_request_context),
    service: RecordsService = Depends(get_records_service)
):
    """
    Create a new client.

    The client is owned by the authenticated user. An id may be supplied;
    reusing an existing id fails with 409.
    """
    client = await service.create_client(context, client_data)
    return ClientEnvelope(client=ClientResponse.model_validate(client))


@router.get("", response_model=ClientListResponse)
async def list_clients(
    context: RequestContext = Depends(get_request_context),
    service: RecordsService = Depends(get_records_service)
):
    """List all clients owned by the authenticated user."""
    clients = await service.list_clients(context)
    return ClientListResponse(clients=[ClientResponse.model_validate(c) for c in clients])


@router.get("/{client_id}", response_model=ClientEnvelope)
async def get_client(
    client_id: str = Path(..., description="Client ID"),
    context: RequestContext = Depends(get_request_context),
    service: RecordsService = Depends(get_records_service)
):
    client = await service.get_client(context, client_id)
    return ClientEnvelope(client=ClientResponse.model_validate(client))


@router.patch("/{client_id}", response_model=ClientEnvelope)
async def update_client(
    client_id: str = Path(..., description="Client ID"),
    client_data: ClientUpdate = ...,
    context: RequestContext = Depends(get_request_context),
    service: RecordsService = Depends(get_records_service)
):
    """
    Update client details.

    Only fields present in the body are changed; a field sent as "" is stored as "".
    """
    client = await service.update_client(context, client_id, client_data)
    return ClientEnvelope(client=ClientResponse.model_validate(client))


@router.delete("/{client_id}", response_model=ClientEnvelope)
async def delete_client(
    client_id: str = Path(..., description="Client ID"),
    context: RequestContext = Depends(get_request_context),
    service: RecordsService = Depends(get_records_service)
):
    """Permanently delete a client and return the deleted record."""
    client = await service.delete_client(context, client_id)
    return ClientEnvelope(client=ClientResponse.model_validate(client))
