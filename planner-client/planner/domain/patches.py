"""Partial updates of an event document.

A patch is a mapping of Event attribute names to new values. Top-level
values replace the current ones. The compound sub-documents listed in
COMPOUND_FIELDS are merged one level deep instead: keys present in the
patch's sub-mapping overwrite, keys absent keep their current value.
Anything deeper (costs, equipment, staff, box office lists) is replaced
wholesale.
"""

from collections.abc import Iterable, Mapping
from dataclasses import fields, replace
from typing import Any, TypeVar

from planner.domain.models import (
    AccessControl,
    AccessEquipment,
    AccessStaff,
    Costs,
    EventDraft,
    SalesProjection,
    Ticketing,
)

COMPOUND_FIELDS = {
    "sales_projection": SalesProjection,
    "ticketing": Ticketing,
    "access_control": AccessControl,
}

# Sub-fields of compound documents that hold a nested object; a mapping
# given for one of them builds a fresh object rather than merging.
NESTED_OBJECTS = {
    ("sales_projection", "costs"): Costs,
    ("access_control", "equipment"): AccessEquipment,
    ("access_control", "staff"): AccessStaff,
}

T = TypeVar("T", bound=EventDraft)


def apply_patch(event: T, patch: Mapping[str, Any]) -> T:
    """Return a new event with the patch merged in.

    Raises:
        ValueError: If the patch names an unknown field or changes the id.
    """
    known = {item.name for item in fields(event)}
    changes: dict[str, Any] = {}
    for name, value in patch.items():
        if name not in known:
            raise ValueError(f"Unknown event field: {name}")
        if name == "id" and str(value) != str(event.id):
            raise ValueError("Event id cannot be changed")
        if name in COMPOUND_FIELDS and isinstance(value, Mapping):
            value = _merge_compound(name, getattr(event, name), value)
        changes[name] = value

    projection = changes.get("sales_projection")
    if projection is not None:
        changes["sales_projection"] = projection.with_totals()
    changes.pop("id", None)
    return replace(event, **changes)


def _merge_compound(name: str, current: Any, values: Mapping[str, Any]) -> Any:
    if current is None:
        current = COMPOUND_FIELDS[name]()
    known = {item.name for item in fields(current)}
    merged: dict[str, Any] = {}
    for key, value in values.items():
        if key not in known:
            raise ValueError(f"Unknown field '{key}' in {name}")
        nested = NESTED_OBJECTS.get((name, key))
        if nested is not None and isinstance(value, Mapping):
            value = nested(**value)
        elif isinstance(value, list):
            value = tuple(value)
        merged[key] = value
    return replace(current, **merged)


def resolve_patch(event: EventDraft, patch: Mapping[str, Any]) -> dict[str, Any]:
    """Return the patched fields as they stand on an already patched event.

    Compound fields come back as the fully merged sub-document, which is
    what a server applying top-level $set merges needs to receive.
    """
    return {name: getattr(event, name) for name in patch if name != "id"}


def without_item(items: Iterable[Any], item_id: str) -> tuple[Any, ...]:
    """Drop the entry with the given id, keeping the order of the rest."""
    return tuple(item for item in items if item.id != item_id)


def replace_item(items: Iterable[Any], updated: Any) -> tuple[Any, ...]:
    """Swap in the entry sharing updated.id, or append it if there is none."""
    result = []
    found = False
    for item in items:
        if item.id == updated.id:
            result.append(updated)
            found = True
        else:
            result.append(item)
    if not found:
        result.append(updated)
    return tuple(result)
