"""
Referential integrity checks.

A reference field set to a non-empty value must point at a record the same
owner can see. An empty value detaches the reference and is never checked.
"""

import logging
from typing import Any, Dict, Mapping

from billbook.app.domain.records.ownership import OwnershipValidator
from billbook.app.domain.records.registry import TableRegistry
from billbook.app.models.enums import EntityType

logger = logging.getLogger("billbook.records.references")


def is_empty_reference(value: Any) -> bool:
    return value is None or value == ""


class ReferenceChecker:

    def __init__(self, ownership: OwnershipValidator, registry: TableRegistry):
        self.ownership = ownership
        self.registry = registry

    async def check_reference(self, target_type: EntityType, entity_id: Any, owner_id: str) -> None:
        """Raise ResourceNotFoundError unless target_type/entity_id is owned by owner_id."""
        await self.ownership.load_owned(target_type, entity_id, owner_id)

    async def check_payload(self, entity_type: EntityType, values: Mapping[str, Any], owner_id: str) -> None:
        """
        Check every reference field present in values.

        values must contain only the fields the caller provided; fields that
        are absent are left alone.
        """
        for rule in self.registry.spec(entity_type).references:
            if rule.field not in values:
                continue
            value = values[rule.field]
            if is_empty_reference(value):
                logger.debug("Reference %s detached", rule.field)
                continue
            await self.check_reference(rule.target, value, owner_id)

    def normalize(self, entity_type: EntityType, values: Mapping[str, Any]) -> Dict[str, Any]:
        """Store empty reference values as NULL."""
        normalized = dict(values)
        for rule in self.registry.spec(entity_type).references:
            if rule.field in normalized and is_empty_reference(normalized[rule.field]):
                normalized[rule.field] = None
        return normalized
