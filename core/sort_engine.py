# core/sort_engine.py

"""
Orders the record array in place by id or mark.

Comparators return -1, 0 or 1. Marks are compared with explicit `<` and `>` checks rather than
subtraction. Ties on mark fall back to id ascending, whichever direction the marks are sorted in,
so the resulting order is fully determined.
"""

from __future__ import annotations

import functools
from enum import Enum

from models.record import Record
from models.record_array import RecordArray


class SortField(str, Enum):
    ID = "ID"
    MARK = "MARK"


class SortOrder(str, Enum):
    ASC = "ASC"
    DESC = "DESC"


def compare_ids(a: Record, b: Record) -> int:
    return (a.id > b.id) - (a.id < b.id)


def compare_marks(a: Record, b: Record) -> int:
    if a.mark < b.mark:
        return -1
    if a.mark > b.mark:
        return 1
    return 0


def build_comparator(field: SortField, order: SortOrder):
    primary = compare_ids if field is SortField.ID else compare_marks
    sign = 1 if order is SortOrder.ASC else -1

    def compare(a: Record, b: Record) -> int:
        result = sign * primary(a, b)
        if result == 0 and field is SortField.MARK:
            return compare_ids(a, b)
        return result

    return compare


def sort_records(
    records: RecordArray,
    field: SortField,
    order: SortOrder = SortOrder.ASC,
) -> None:
    records.sort(key=functools.cmp_to_key(build_comparator(field, order)))


# === command word parsing ===


def parse_sort_field(word: str) -> SortField:
    """
    Raises:
        ValueError: If `word` is not ID or MARK (case-insensitive).
    """
    try:
        return SortField(word.strip().upper())
    except ValueError:
        raise ValueError(f"Unknown sort field: {word!r}. Use ID or MARK.")


def parse_sort_order(word: str | None) -> SortOrder:
    """
    Returns ASC for a missing word.

    Raises:
        ValueError: If `word` is given but is not ASC or DESC (case-insensitive).
    """
    if not word:
        return SortOrder.ASC
    try:
        return SortOrder(word.strip().upper())
    except ValueError:
        raise ValueError(f"Unknown sort order: {word!r}. Use ASC or DESC.")
