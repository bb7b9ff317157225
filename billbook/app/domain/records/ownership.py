"""
Ownership validation.

A record is visible to an identity only when a single lookup filtered by
both its id and the identity's owner id finds it. Missing and foreign-owned
records produce the same outcome. Entities without an owner column resolve
through their parent.
"""

import logging
from dataclasses import dataclass
from typing import Any, Union

from billbook.app.core.exceptions import ResourceNotFoundError
from billbook.app.db.store import EntityStore
from billbook.app.domain.records.registry import TableRegistry
from billbook.app.models.enums import EntityType

logger = logging.getLogger("billbook.records.ownership")


@dataclass(frozen=True)
class Owned:
    record: Any


@dataclass(frozen=True)
class NotOwned:
    entity_type: EntityType
    entity_id: Any


OwnershipOutcome = Union[Owned, NotOwned]


class OwnershipValidator:
    """Resolves records on behalf of an owner. Nothing is cached between calls."""

    def __init__(self, store: EntityStore, registry: TableRegistry):
        self.store = store
        self.registry = registry

    async def resolve(self, entity_type: EntityType, entity_id: Any, owner_id: str) -> OwnershipOutcome:
        """
        Look the record up for owner_id.

        Owned entities are matched on (id, owner) in one query. Child entities
        are loaded by id and then their parent must resolve for the same owner.
        """
        spec = self.registry.spec(entity_type)

        if not entity_id:
            return NotOwned(entity_type, entity_id)

        if spec.owner_field is not None:
            record = await self.store.select_one(
                spec.table, {"id": entity_id, spec.owner_field: owner_id}
            )
            return Owned(record) if record is not None else NotOwned(entity_type, entity_id)

        if spec.parent is None:
            raise LookupError(f"{spec.label} has neither an owner column nor a parent")

        record = await self.store.select_one(spec.table, {"id": entity_id})
        if record is None:
            return NotOwned(entity_type, entity_id)

        parent = await self.resolve(spec.parent.parent, getattr(record, spec.parent.field), owner_id)
        if isinstance(parent, NotOwned):
            return NotOwned(entity_type, entity_id)
        return Owned(record)

    async def load_owned(self, entity_type: EntityType, entity_id: Any, owner_id: str) -> Any:
        """Return the owned record or raise ResourceNotFoundError."""
        outcome = await self.resolve(entity_type, entity_id, owner_id)
        if isinstance(outcome, NotOwned):
            label = self.registry.spec(entity_type).label
            logger.warning(
                "Ownership check rejected",
                extra={"entity_type": entity_type.value, "entity_id": entity_id, "owner_id": owner_id},
            )
            raise ResourceNotFoundError(label, entity_id)
        return outcome.record

    async def load_owned_child(
        self,
        entity_type: EntityType,
        entity_id: Any,
        parent_id: Any,
        owner_id: str
    ) -> Any:
        """
        Load a child record addressed through its parent.

        The parent must be owned by owner_id, and the child must belong to that
        exact parent; a child attached to another parent is reported as not found.
        """
        spec = self.registry.spec(entity_type)
        if spec.parent is None:
            raise LookupError(f"{spec.label} is not a child entity")

        await self.load_owned(spec.parent.parent, parent_id, owner_id)

        record = None
        if entity_id:
            record = await self.store.select_one(
                spec.table, {"id": entity_id, spec.parent.field: parent_id}
            )
        if record is None:
            logger.warning(
                "Child lookup rejected",
                extra={"entity_type": entity_type.value, "entity_id": entity_id, "parent_id": parent_id},
            )
            raise ResourceNotFoundError(spec.label, entity_id)
        return record
