"""
Table registry.

Explicit mapping from entity type to its storage table, owner column, parent
link and outgoing references. The records service receives a registry at
construction; nothing looks tables up globally.
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple

from billbook.app.models.client import Client
from billbook.app.models.enums import EntityType
from billbook.app.models.invoice import Invoice
from billbook.app.models.invoice_item import InvoiceItem
from billbook.app.models.receipt import Receipt

# Never accepted from a caller's patch
IMMUTABLE_FIELDS = frozenset({"id", "owner_id", "created_at", "updated_at"})


@dataclass(frozen=True)
class ReferenceRule:
    """field on this entity points at an owned record of type target."""
    field: str
    target: EntityType


@dataclass(frozen=True)
class ParentLink:
    """Ownership is inherited from the parent reached through field."""
    field: str
    parent: EntityType


@dataclass(frozen=True)
class EntitySpec:
    entity_type: EntityType
    table: Any
    label: str
    owner_field: Optional[str] = "owner_id"
    parent: Optional[ParentLink] = None
    references: Tuple[ReferenceRule, ...] = ()
    immutable_fields: frozenset = IMMUTABLE_FIELDS


class TableRegistry:
    """Lookup of EntitySpec by entity type."""

    def __init__(self, specs: Mapping[EntityType, EntitySpec]):
        self._specs: Dict[EntityType, EntitySpec] = dict(specs)

    def spec(self, entity_type: EntityType) -> EntitySpec:
        try:
            return self._specs[entity_type]
        except KeyError:
            raise LookupError(f"No table registered for {entity_type.value}") from None

    def table(self, entity_type: EntityType) -> Any:
        return self.spec(entity_type).table

    def __contains__(self, entity_type: EntityType) -> bool:
        return entity_type in self._specs


def default_registry() -> TableRegistry:
    """Registry wiring the four record families to their ORM models."""
    return TableRegistry({
        EntityType.CLIENT: EntitySpec(
            entity_type=EntityType.CLIENT,
            table=Client,
            label="Client",
        ),
        EntityType.INVOICE: EntitySpec(
            entity_type=EntityType.INVOICE,
            table=Invoice,
            label="Invoice",
            references=(ReferenceRule("client_id", EntityType.CLIENT),),
        ),
        EntityType.INVOICE_ITEM: EntitySpec(
            entity_type=EntityType.INVOICE_ITEM,
            table=InvoiceItem,
            label="Invoice item",
            owner_field=None,
            parent=ParentLink("invoice_id", EntityType.INVOICE),
            immutable_fields=IMMUTABLE_FIELDS | {"invoice_id"},
        ),
        EntityType.RECEIPT: EntitySpec(
            entity_type=EntityType.RECEIPT,
            table=Receipt,
            label="Receipt",
            references=(ReferenceRule("invoice_id", EntityType.INVOICE),),
        ),
    })
