# models/record.py

"""
Represents a single student record in the store.

A record is a read-only value object: two records are equal when their id, name, programme and mark all match.
Changes are made by building a patched copy, which the store puts in the slot of the original.

Includes functionality for:
- Validating id, text and mark input on construction
- Collapsing runs of whitespace in text fields to single spaces
- Producing patched copies for in-place updates
"""

from __future__ import annotations

import math
from dataclasses import dataclass

MAX_TEXT_LENGTH = 127
MIN_MARK = 0.0
MAX_MARK = 100.0


@dataclass(frozen=True)
class RecordPatch:
    """Optional replacement values for an update; None keeps the current value."""

    name: str | None = None
    programme: str | None = None
    mark: float | None = None


class Record:

    def __init__(
        self,
        id: int,
        name: str,
        programme: str,
        mark: float,
    ):
        self._id: int = Record.validate_id(id)
        self._name: str = Record.validate_text(name, "name")
        self._programme: str = Record.validate_text(programme, "programme")
        self._mark: float = Record.validate_mark(mark)

    # === properties ===

    @property
    def id(self) -> int:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @property
    def programme(self) -> str:
        return self._programme

    @property
    def mark(self) -> float:
        return self._mark

    # === copies ===

    def copy(self) -> Record:
        return Record(self._id, self._name, self._programme, self._mark)

    def patched(self, patch: RecordPatch) -> Record:
        """
        Returns a new record with the patch applied; the id never changes.

        Raises:
            ValueError: If any patched value fails validation.
        """
        return Record(
            id=self._id,
            name=self._name if patch.name is None else patch.name,
            programme=self._programme if patch.programme is None else patch.programme,
            mark=self._mark if patch.mark is None else patch.mark,
        )

    # === dunder methods ===

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Record):
            return NotImplemented
        return (
            self._id == other._id
            and self._name == other._name
            and self._programme == other._programme
            and self._mark == other._mark
        )

    def __hash__(self) -> int:
        return hash((self._id, self._name, self._programme, self._mark))

    def __repr__(self) -> str:
        return f"Record({self._id}, {self._name}, {self._programme}, {self._mark})"

    def __str__(self) -> str:
        return f"RECORD: name: {self._name}, programme: {self._programme}, mark: {self._mark:.1f}, id: {self._id}"

    # === data validators ===

    @staticmethod
    def validate_id(id: int) -> int:
        """
        Validates a record id.

        Args:
            id: The candidate id.

        Returns:
            The id, unchanged.

        Raises:
            ValueError: If the id is not a non-negative integer.
        """
        if isinstance(id, bool) or not isinstance(id, int):
            raise ValueError(f"Invalid input. ID must be an integer: {id!r}.")
        if id < 0:
            raise ValueError(f"Invalid input. ID must not be negative: {id}.")
        return id

    @staticmethod
    def validate_text(value: str, field_name: str) -> str:
        if not isinstance(value, str):
            raise ValueError(f"Invalid input. The {field_name} must be text.")
        # snapshot rows are split on whitespace, so tabs and runs of spaces cannot survive a save
        value = " ".join(value.split())
        if len(value) > MAX_TEXT_LENGTH:
            raise ValueError(
                f"Invalid input. The {field_name} must be at most {MAX_TEXT_LENGTH} characters."
            )
        return value

    @staticmethod
    def validate_mark(mark: float) -> float:
        """
        Validates and normalizes a mark to a float in [0, 100].

        Raises:
            ValueError: If the mark is not a finite number inside the range.
        """
        if isinstance(mark, bool) or not isinstance(mark, (int, float)):
            raise ValueError(f"Invalid input. Mark must be a number: {mark!r}.")
        mark = float(mark)
        if math.isnan(mark) or not MIN_MARK <= mark <= MAX_MARK:
            raise ValueError(
                f"Invalid input. Mark must be between {MIN_MARK:.0f} and {MAX_MARK:.0f}: {mark}."
            )
        return mark
