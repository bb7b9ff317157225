"""
API v1 Router.

Aggregates all v1 API endpoints. Every route here needs a signed-in user.
"""

from fastapi import APIRouter, Depends
from billbook.app.api.v1.endpoints import (
    clients, invoices, invoice_items, receipts, audit
)
from billbook.app.core.dependencies import require_signed_in

router = APIRouter(dependencies=[Depends(require_signed_in)])

# Record endpoints
router.include_router(clients.router)
router.include_router(invoices.router)
router.include_router(invoice_items.router)
router.include_router(receipts.router)

# Audit trail
router.include_router(audit.router)
