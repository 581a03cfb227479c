# ============================================================
# pipeline.py — Filter & Sort for incident tables
# ============================================================

from enum import Enum
from functools import cmp_to_key
from typing import Any, Iterable, List, Sequence, TypeVar

from incident_console.models import SortDirective, SortOrder

T = TypeVar("T")


def _field(item: Any, name: str) -> Any:
    if isinstance(item, dict):
        return item.get(name)
    return getattr(item, name, None)


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def _is_text(value: Any) -> bool:
    return isinstance(value, str) and not isinstance(value, Enum)


def _natural(value: Any) -> Any:
    # Enum members order by declaration, e.g. LOW < MEDIUM < HIGH < CRITICAL
    if isinstance(value, Enum):
        return list(type(value)).index(value)
    return value


def matches(item: Any, search_term: str, fields: Sequence[str]) -> bool:
    if not search_term:
        return True
    needle = search_term.lower()
    return any(needle in _as_text(_field(item, name)).lower() for name in fields)


def compare_values(a: Any, b: Any) -> int:
    if a is None and b is None:
        return 0
    if a is None:
        return -1
    if b is None:
        return 1

    if _is_text(a) and _is_text(b):
        left, right = a.lower(), b.lower()
    else:
        left, right = _natural(a), _natural(b)

    try:
        if left < right:
            return -1
        if left > right:
            return 1
        return 0
    except TypeError:
        left, right = _as_text(a).lower(), _as_text(b).lower()
        return (left > right) - (left < right)


def sort_rows(rows: Iterable[T], sort: SortDirective) -> List[T]:
    rows = list(rows)
    if not sort.field:
        return rows

    sign = -1 if sort.order == SortOrder.DESC else 1

    def _cmp(a: T, b: T) -> int:
        return sign * compare_values(_field(a, sort.field), _field(b, sort.field))

    # sorted() is stable, so ties keep their filtered order in both directions
    return sorted(rows, key=cmp_to_key(_cmp))


def display(
    collection: Iterable[T],
    search_term: str,
    sort: SortDirective,
    fields: Sequence[str],
) -> List[T]:
    """Derive the rows a table shows from a raw collection.

    Keeps the items where any of ``fields`` contains ``search_term``
    (case-insensitive substring), then orders them by ``sort``. The input is
    never mutated.
    """
    filtered = [item for item in collection if matches(item, search_term, fields)]
    return sort_rows(filtered, sort)
