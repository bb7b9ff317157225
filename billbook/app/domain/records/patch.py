"""
Partial-update merging.

A payload field is either absent (the caller never mentioned it) or present
with a value, and a present value may itself be empty. Only present fields can
change storage; present-but-empty overwrites. MISSING marks absence so that
None and "" stay ordinary values.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Mapping, Union

from pydantic import BaseModel

from billbook.app.domain.records.registry import IMMUTABLE_FIELDS


class _Missing:
    """Sentinel for a field the caller did not provide."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self):
        return False

    def __repr__(self):
        return "MISSING"


MISSING = _Missing()

Payload = Union[BaseModel, Mapping[str, Any]]


def provided_value(payload: Payload, name: str) -> Any:
    """Value of name if the caller provided it, else MISSING."""
    if isinstance(payload, BaseModel):
        if name not in payload.model_fields_set:
            return MISSING
        return getattr(payload, name)
    return payload.get(name, MISSING)


def provided_fields(payload: Payload) -> Dict[str, Any]:
    """All explicitly provided fields, values untouched (None and "" included)."""
    if isinstance(payload, BaseModel):
        names: Iterable[str] = payload.model_fields_set
    else:
        names = payload.keys()

    fields = {}
    for name in names:
        value = provided_value(payload, name)
        if value is not MISSING:
            fields[name] = value
    return fields


@dataclass
class PatchSet:
    """Fields to write, excluding the automatic updated_at bump."""
    changes: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.changes

    def fields(self):
        return sorted(self.changes)

    def with_timestamp(self, now, timestamp_field: str = "updated_at") -> Dict[str, Any]:
        values = dict(self.changes)
        values[timestamp_field] = now
        return values


def build_patch(payload: Payload, immutable: Iterable[str] = IMMUTABLE_FIELDS) -> PatchSet:
    """
    Collect every provided field the caller may change.

    Immutable fields are dropped. A provided value is written even when it
    equals what is stored, so the write still advances updated_at.
    """
    blocked = frozenset(immutable)
    changes = {
        name: value
        for name, value in provided_fields(payload).items()
        if name not in blocked
    }
    return PatchSet(changes)
