"""
Dynamic patch builder for partial transaction updates.

Turns a sparse set of supplied fields into an ordered list of
``(field, value)`` pairs. Absent fields are skipped; fields present with a
``None`` value are kept so callers can clear optional columns.
"""

from typing import Any, Iterable, List, Mapping, Tuple, Union

from pydantic import BaseModel

# Whitelist order drives the order of the generated assignments
MUTABLE_FIELDS: Tuple[str, ...] = (
    "amount",
    "description",
    "date",
    "account_id",
    "budget_category_id",
)

# Optional references where an empty string means "no association"
OPTIONAL_REFERENCES = frozenset({"account_id", "budget_category_id"})

Patch = List[Tuple[str, Any]]


def build_patch(
    updates: Union[Mapping[str, Any], BaseModel],
    allowed: Iterable[str] = MUTABLE_FIELDS,
) -> Patch:
    """
    Build the assignments to apply for a partial update.

    Args:
        updates: Mapping of supplied fields, or a pydantic model where only
            explicitly set fields count as supplied
        allowed: Whitelist of mutable field names, in output order

    Returns:
        Ordered list of (field, value) pairs
    """
    if isinstance(updates, BaseModel):
        updates = updates.model_dump(exclude_unset=True)

    patch: Patch = []
    for field in allowed:
        if field not in updates:
            continue
        value = updates[field]
        if field in OPTIONAL_REFERENCES and value == "":
            value = None
        patch.append((field, value))
    return patch


def apply_patch(target: Any, patch: Patch) -> Any:
    """Assign each (field, value) pair onto ``target`` and return it."""
    for field, value in patch:
        setattr(target, field, value)
    return target
