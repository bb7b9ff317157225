"""
Records Service (Domain Logic).

Composes identity, ownership, reference checks and patch merging into the
create/get/update/list/delete operations for clients, invoices and receipts,
and the save/list/delete operations for invoice items.

Every mutation follows the same flow:
1. Authorize (identity gate)
2. Resolve target for update/delete (ownership validator)
3. Validate references present in the payload
4. Merge (update) or initialise (create)
5. Persist, together with the audit event, inside one store transaction
"""

import logging
import uuid
from typing import Any, Dict, List, Mapping, Optional, Type, Union

from pydantic import BaseModel, ValidationError

from billbook.app.core.config import settings
from billbook.app.core.exceptions import ConflictError, ResourceNotFoundError, ValidationFailedError
from billbook.app.core.identity import Identity, RequestContext, require_identity
from billbook.app.core.time_utils import utcnow
from billbook.app.db.store import EntityStore
from billbook.app.domain.records.ownership import OwnershipValidator
from billbook.app.domain.records.patch import build_patch, provided_fields
from billbook.app.domain.records.references import ReferenceChecker
from billbook.app.domain.records.registry import TableRegistry, default_registry
from billbook.app.models.enums import EntityType, InvoiceDeletePolicy
from billbook.app.schemas.client import ClientCreate, ClientUpdate
from billbook.app.schemas.invoice import InvoiceCreate, InvoiceUpdate
from billbook.app.schemas.invoice_item import InvoiceItemDelete, InvoiceItemSave
from billbook.app.schemas.receipt import ReceiptCreate, ReceiptUpdate
from billbook.app.services.audit import log_event, mutation_action

logger = logging.getLogger("billbook.records")

Payload = Union[BaseModel, Mapping[str, Any]]


def new_record_id() -> str:
    return str(uuid.uuid4())


def parse_payload(schema: Type[BaseModel], payload: Payload) -> BaseModel:
    """
    Validate payload against schema, keeping track of which fields were sent.

    Raises:
        ValidationFailedError: with pydantic's error list
    """
    if isinstance(payload, schema):
        return payload
    if isinstance(payload, BaseModel):
        payload = payload.model_dump(exclude_unset=True)
    try:
        return schema.model_validate(payload or {})
    except ValidationError as exc:
        raise ValidationFailedError(errors=exc.errors(include_url=False)) from exc


class RecordsService:
    """
    Owner-scoped record operations.

    Args:
        store: Entity store the operations run against
        registry: Entity type to table mapping
        invoice_delete_policy: orphan, cascade or restrict (defaults to settings)
    """

    def __init__(
        self,
        store: EntityStore,
        registry: Optional[TableRegistry] = None,
        invoice_delete_policy: Optional[str] = None
    ):
        self.store = store
        self.registry = registry or default_registry()
        self.invoice_delete_policy = InvoiceDeletePolicy(
            invoice_delete_policy or settings.invoice_delete_policy
        )
        self.ownership = OwnershipValidator(store, self.registry)
        self.references = ReferenceChecker(self.ownership, self.registry)

    async def _audit(
        self,
        identity: Identity,
        entity_type: EntityType,
        verb: str,
        entity_id: str,
        metadata: Optional[Dict[str, Any]] = None
    ) -> None:
        """Record the mutation in the audit log; call inside the mutation's transaction."""
        await log_event(
            self.store,
            action=mutation_action(entity_type, verb),
            actor_id=identity.user_id,
            actor_username=identity.username,
            entity_type=entity_type.value,
            entity_id=entity_id,
            metadata=metadata,
        )

    # Generic operations

    async def _create(
        self,
        context: RequestContext,
        entity_type: EntityType,
        schema: Type[BaseModel],
        payload: Payload
    ) -> Any:
        identity = require_identity(context)
        data = parse_payload(schema, payload)
        spec = self.registry.spec(entity_type)

        values = self.references.normalize(entity_type, data.model_dump())
        entity_id = values.pop("id", None) or new_record_id()

        async with self.store.transaction():
            await self.references.check_payload(entity_type, values, identity.user_id)

            now = utcnow()
            values.update(
                id=entity_id,
                owner_id=identity.user_id,
                created_at=now,
                updated_at=now,
            )
            record = await self.store.insert(spec.table, values)
            references = {rule.field: values.get(rule.field) for rule in spec.references}
            await self._audit(identity, entity_type, "CREATED", entity_id, references or None)

        logger.info(
            "%s created",
            spec.label,
            extra={"entity_id": record.id, "owner_id": identity.user_id},
        )
        return record

    async def _get(self, context: RequestContext, entity_type: EntityType, entity_id: str) -> Any:
        identity = require_identity(context)
        return await self.ownership.load_owned(entity_type, entity_id, identity.user_id)

    async def _update(
        self,
        context: RequestContext,
        entity_type: EntityType,
        schema: Type[BaseModel],
        entity_id: str,
        payload: Payload
    ) -> Any:
        identity = require_identity(context)
        data = parse_payload(schema, payload)
        spec = self.registry.spec(entity_type)
        scope = {"id": entity_id, spec.owner_field: identity.user_id}

        async with self.store.transaction():
            existing = await self.ownership.load_owned(entity_type, entity_id, identity.user_id)

            provided = self.references.normalize(entity_type, provided_fields(data))
            await self.references.check_payload(entity_type, provided, identity.user_id)

            patch = build_patch(provided, spec.immutable_fields)
            if patch.is_empty:
                logger.debug("%s %s unchanged", spec.label, entity_id)
                return existing

            record = await self.store.update(spec.table, patch.with_timestamp(utcnow()), scope)
            if record is None:
                raise ResourceNotFoundError(spec.label, entity_id)
            await self._audit(identity, entity_type, "UPDATED", entity_id, {"fields": patch.fields()})

        logger.info(
            "%s updated",
            spec.label,
            extra={"entity_id": entity_id, "owner_id": identity.user_id, "fields": patch.fields()},
        )
        return record

    async def _list(self, context: RequestContext, entity_type: EntityType) -> List[Any]:
        identity = require_identity(context)
        spec = self.registry.spec(entity_type)
        return await self.store.select_all(
            spec.table, {spec.owner_field: identity.user_id}, order_by="created_at"
        )

    async def _delete(self, context: RequestContext, entity_type: EntityType, entity_id: str) -> Any:
        identity = require_identity(context)
        spec = self.registry.spec(entity_type)

        async with self.store.transaction():
            existing = await self.ownership.load_owned(entity_type, entity_id, identity.user_id)

            if entity_type is EntityType.INVOICE:
                await self._apply_invoice_delete_policy(existing, identity.user_id)

            record = await self.store.delete(
                spec.table, {"id": entity_id, spec.owner_field: identity.user_id}
            )
            if record is None:
                raise ResourceNotFoundError(spec.label, entity_id)
            metadata = None
            if entity_type is EntityType.INVOICE:
                metadata = {"policy": self.invoice_delete_policy.value}
            await self._audit(identity, entity_type, "DELETED", entity_id, metadata)

        logger.info(
            "%s deleted",
            spec.label,
            extra={"entity_id": entity_id, "owner_id": identity.user_id},
        )
        return record

    async def _apply_invoice_delete_policy(self, invoice: Any, owner_id: str) -> None:
        if self.invoice_delete_policy is InvoiceDeletePolicy.ORPHAN:
            return

        item_table = self.registry.table(EntityType.INVOICE_ITEM)
        receipt_table = self.registry.table(EntityType.RECEIPT)
        items = await self.store.select_all(item_table, {"invoice_id": invoice.id})
        receipts = await self.store.select_all(
            receipt_table, {"invoice_id": invoice.id, "owner_id": owner_id}
        )

        if self.invoice_delete_policy is InvoiceDeletePolicy.RESTRICT:
            if items or receipts:
                raise ConflictError(
                    "Invoice has dependent items or receipts",
                    details={"items": len(items), "receipts": len(receipts)},
                )
            return

        # cascade: items go with the invoice, receipts stay but are detached
        for item in items:
            await self.store.delete(item_table, {"id": item.id, "invoice_id": invoice.id})
        now = utcnow()
        for receipt in receipts:
            await self.store.update(
                receipt_table,
                {"invoice_id": None, "updated_at": now},
                {"id": receipt.id, "owner_id": owner_id},
            )

    # Clients

    async def create_client(self, context: RequestContext, payload: Payload):
        return await self._create(context, EntityType.CLIENT, ClientCreate, payload)

    async def get_client(self, context: RequestContext, client_id: str):
        return await self._get(context, EntityType.CLIENT, client_id)

    async def update_client(self, context: RequestContext, client_id: str, payload: Payload):
        return await self._update(context, EntityType.CLIENT, ClientUpdate, client_id, payload)

    async def list_clients(self, context: RequestContext):
        return await self._list(context, EntityType.CLIENT)

    async def delete_client(self, context: RequestContext, client_id: str):
        return await self._delete(context, EntityType.CLIENT, client_id)

    # Invoices

    async def create_invoice(self, context: RequestContext, payload: Payload):
        """Create an invoice; a non-empty client_id must name one of the caller's clients."""
        return await self._create(context, EntityType.INVOICE, InvoiceCreate, payload)

    async def get_invoice(self, context: RequestContext, invoice_id: str):
        return await self._get(context, EntityType.INVOICE, invoice_id)

    async def update_invoice(self, context: RequestContext, invoice_id: str, payload: Payload):
        """Patch an invoice. client_id sent as "" or None detaches the client without a lookup."""
        return await self._update(context, EntityType.INVOICE, InvoiceUpdate, invoice_id, payload)

    async def list_invoices(self, context: RequestContext):
        return await self._list(context, EntityType.INVOICE)

    async def delete_invoice(self, context: RequestContext, invoice_id: str):
        """Delete an invoice; dependents are handled by the configured delete policy."""
        return await self._delete(context, EntityType.INVOICE, invoice_id)

    # Invoice items

    async def save_invoice_item(self, context: RequestContext, payload: Payload):
        """
        Insert or replace an invoice item.

        Without an id a new item is inserted. With an id the item must already
        belong to the given invoice; its description, quantity, unit_price and
        line_total are replaced wholesale (omitted amounts become None), while
        invoice_id and created_at are kept.
        """
        identity = require_identity(context)
        data = parse_payload(InvoiceItemSave, payload)
        spec = self.registry.spec(EntityType.INVOICE_ITEM)

        values = {
            "description": data.description,
            "quantity": data.quantity,
            "unit_price": data.unit_price,
            "line_total": data.line_total,
        }

        async with self.store.transaction():
            if data.id:
                await self.ownership.load_owned_child(
                    EntityType.INVOICE_ITEM, data.id, data.invoice_id, identity.user_id
                )
                item = await self.store.update(
                    spec.table, values, {"id": data.id, "invoice_id": data.invoice_id}
                )
                if item is None:
                    raise ResourceNotFoundError(spec.label, data.id)
            else:
                await self.ownership.load_owned(EntityType.INVOICE, data.invoice_id, identity.user_id)
                values.update(id=new_record_id(), invoice_id=data.invoice_id, created_at=utcnow())
                item = await self.store.insert(spec.table, values)

            await self._audit(
                identity, EntityType.INVOICE_ITEM, "SAVED", item.id,
                {"invoice_id": data.invoice_id, "replaced": bool(data.id)},
            )

        logger.info(
            "Invoice item saved",
            extra={"entity_id": item.id, "invoice_id": data.invoice_id, "owner_id": identity.user_id},
        )
        return item

    async def list_invoice_items(self, context: RequestContext, invoice_id: str):
        identity = require_identity(context)
        await self.ownership.load_owned(EntityType.INVOICE, invoice_id, identity.user_id)
        return await self.store.select_all(
            self.registry.table(EntityType.INVOICE_ITEM),
            {"invoice_id": invoice_id},
            order_by="created_at",
        )

    async def delete_invoice_item(self, context: RequestContext, payload: Payload):
        identity = require_identity(context)
        data = parse_payload(InvoiceItemDelete, payload)
        spec = self.registry.spec(EntityType.INVOICE_ITEM)

        async with self.store.transaction():
            await self.ownership.load_owned_child(
                EntityType.INVOICE_ITEM, data.id, data.invoice_id, identity.user_id
            )
            item = await self.store.delete(spec.table, {"id": data.id, "invoice_id": data.invoice_id})
            if item is None:
                raise ResourceNotFoundError(spec.label, data.id)
            await self._audit(
                identity, EntityType.INVOICE_ITEM, "DELETED", data.id, {"invoice_id": data.invoice_id}
            )

        logger.info(
            "Invoice item deleted",
            extra={"entity_id": data.id, "invoice_id": data.invoice_id, "owner_id": identity.user_id},
        )
        return item

    # Receipts

    async def create_receipt(self, context: RequestContext, payload: Payload):
        return await self._create(context, EntityType.RECEIPT, ReceiptCreate, payload)

    async def get_receipt(self, context: RequestContext, receipt_id: str):
        return await self._get(context, EntityType.RECEIPT, receipt_id)

    async def update_receipt(self, context: RequestContext, receipt_id: str, payload: Payload):
        return await self._update(context, EntityType.RECEIPT, ReceiptUpdate, receipt_id, payload)

    async def list_receipts(self, context: RequestContext):
        return await self._list(context, EntityType.RECEIPT)

    async def delete_receipt(self, context: RequestContext, receipt_id: str):
        return await self._delete(context, EntityType.RECEIPT, receipt_id)
