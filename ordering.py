"""
Ordering engine for ledger sequences.

Keeps a sequence sorted by ``date`` descending. Among equal dates the most
recently inserted item sorts first. Every function is pure: it returns a new
list and never mutates the sequence it was given.

Items only need ``id`` and ``date`` attributes. Merging changes into an item
defaults to pydantic's ``model_copy``; callers holding other item types pass
their own ``merge`` callable.
"""

from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, TypeVar

T = TypeVar("T")


def merge_fields(item: Any, changes: Dict[str, Any]) -> Any:
    """Return a copy of a pydantic item with ``changes`` applied."""
    return item.model_copy(update=changes)


def insert_ordered(items: Sequence[T], item: T) -> List[T]:
    """
    Insert ``item`` before the first element whose date is on or before its own.

    Appends at the tail when every existing element is newer.

    Examples:
        >>> from types import SimpleNamespace as Row
        >>> [r.id for r in insert_ordered([Row(id="a", date=5)], Row(id="b", date=5))]
        ['b', 'a']
    """
    result = list(items)
    for index, existing in enumerate(result):
        if existing.date <= item.date:
            result.insert(index, item)
            return result
    result.append(item)
    return result


def _check_index(items: Sequence[Any], index: int) -> None:
    if not 0 <= index < len(items):
        raise IndexError(f"Index {index} out of range for {len(items)} items")


def update_ordered(
    items: Sequence[T],
    index: int,
    changes: Dict[str, Any],
    merge: Callable[[T, Dict[str, Any]], T] = merge_fields,
) -> List[T]:
    """
    Merge ``changes`` into the element at ``index``.

    A changed date moves the element to the position a fresh insert would
    give it. Otherwise it is replaced in place.
    """
    _check_index(items, index)
    current = items[index]
    updated = merge(current, changes)

    if updated.date != current.date:
        return insert_ordered(remove_at(items, index), updated)

    result = list(items)
    result[index] = updated
    return result


def remove_at(items: Sequence[T], index: int) -> List[T]:
    """Remove the element at ``index``."""
    _check_index(items, index)
    return [item for position, item in enumerate(items) if position != index]


def remove_ids(items: Sequence[T], ids: Iterable[Any]) -> List[T]:
    """Remove every element whose id is in ``ids`` in a single pass."""
    targets = {str(item_id) for item_id in ids}
    return [item for item in items if str(item.id) not in targets]


def index_of(items: Sequence[Any], item_id: Any) -> Optional[int]:
    """Position of the element with ``item_id``, or None."""
    target = str(item_id)
    for index, item in enumerate(items):
        if str(item.id) == target:
            return index
    return None


def is_ordered(items: Sequence[Any]) -> bool:
    """Check that dates never increase along the sequence."""
    return all(earlier.date >= later.date for earlier, later in zip(items, items[1:]))
