"""Derive the visible, ordered roster from the full roster and filter criteria.

Every function here is pure: the input roster is never mutated and the
same inputs always give the same output.
"""

from dataclasses import fields, replace
from functools import cmp_to_key
from typing import Any, Iterable, Optional, Sequence

from .models import (
    ALL_GROUPS,
    ALL_TAS,
    ASCENDING,
    DESCENDING,
    UNASSIGNED_TA,
    FilterCriteria,
    SortConfig,
    StudentWeekRecord,
)

SORTABLE_KEYS = frozenset(f.name for f in fields(StudentWeekRecord))
PAGE_SIZE = 10


def filter_by_group(records: Iterable[StudentWeekRecord], group: str) -> list[StudentWeekRecord]:
    if group == ALL_GROUPS:
        return list(records)
    return [r for r in records if r.group == group]


def filter_by_ta(records: Iterable[StudentWeekRecord], ta: str) -> list[StudentWeekRecord]:
    if ta == ALL_TAS:
        return list(records)
    return [r for r in records if r.ta == ta]


def filter_by_name(records: Iterable[StudentWeekRecord], search: str) -> list[StudentWeekRecord]:
    """Case-insensitive substring match on the student's name."""
    if not search:
        return list(records)
    needle = search.lower()
    return [r for r in records if needle in r.name.lower()]


def _compare(a: Any, b: Any) -> int:
    # Only strings are ordered; anything else compares equal and keeps its place.
    if isinstance(a, str) and isinstance(b, str):
        a, b = a.lower(), b.lower()
        if a < b:
            return -1
        if a > b:
            return 1
    return 0


def sort_records(records: Iterable[StudentWeekRecord], sort: SortConfig) -> list[StudentWeekRecord]:
    """Stable sort on the single active key, if any."""
    result = list(records)
    if sort.key is None:
        return result
    sign = 1 if sort.direction == ASCENDING else -1
    key = sort.key

    def compare(a: StudentWeekRecord, b: StudentWeekRecord) -> int:
        return sign * _compare(getattr(a, key), getattr(b, key))

    result.sort(key=cmp_to_key(compare))
    return result


def derive_view(
    roster: Sequence[StudentWeekRecord], criteria: FilterCriteria
) -> list[StudentWeekRecord]:
    """Apply group, TA and name filters, then the active sort."""
    view = filter_by_group(roster, criteria.group)
    view = filter_by_ta(view, criteria.ta)
    view = filter_by_name(view, criteria.search)
    return sort_records(view, criteria.sort)


def request_sort(sort: SortConfig, key: str) -> SortConfig:
    """Header click: same key flips direction, a new key starts ascending."""
    if key not in SORTABLE_KEYS:
        raise ValueError(f"Unknown sort key: {key}")
    if sort.key == key and sort.direction == ASCENDING:
        return SortConfig(key=key, direction=DESCENDING)
    return SortConfig(key=key, direction=ASCENDING)


def ta_options(roster: Iterable[StudentWeekRecord]) -> list[str]:
    """TA filter choices taken from the full roster."""
    tas = {r.ta for r in roster if r.ta and r.ta != UNASSIGNED_TA}
    return [ALL_TAS] + sorted(tas)


def clear_filters(criteria: FilterCriteria) -> FilterCriteria:
    """Reset search, group and TA. The sort is kept."""
    return replace(criteria, search="", group=ALL_GROUPS, ta=ALL_TAS)


def sort_indicator(sort: SortConfig, key: str) -> str:
    if sort.key != key:
        return ""
    return " ▲" if sort.direction == ASCENDING else " ▼"


def empty_message(criteria: FilterCriteria) -> str:
    if criteria.is_filtering:
        return "No data available for your current filters."
    return "No data available."


def results_summary(view: Sequence[StudentWeekRecord], page_size: int = PAGE_SIZE) -> Optional[str]:
    if not view:
        return None
    return f"Showing 1 to {min(page_size, len(view))} of {len(view)} results"
