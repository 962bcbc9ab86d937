# models/record_array.py

"""
Growable backing sequence for the record store.

Slots are allocated up front and the capacity doubles whenever an append would overflow it.
Removal uses swap-delete: the last record moves into the freed slot, so removal is O(1) but
does not preserve relative order.
"""

from __future__ import annotations

from typing import Callable, Iterator

from models.record import Record

INITIAL_CAPACITY = 16


class RecordArray:

    def __init__(self, initial_capacity: int = INITIAL_CAPACITY):
        if initial_capacity < 1:
            raise ValueError(f"initial_capacity must be positive: {initial_capacity}")
        self._initial_capacity: int = initial_capacity
        self._slots: list[Record | None] = [None] * initial_capacity
        self._size: int = 0

    # === properties ===

    @property
    def capacity(self) -> int:
        return len(self._slots)

    def __len__(self) -> int:
        return self._size

    def __iter__(self) -> Iterator[Record]:
        for i in range(self._size):
            yield self[i]

    def __getitem__(self, index: int) -> Record:
        self._check_index(index)
        return self._slots[index]  # type: ignore[return-value]

    def __setitem__(self, index: int, record: Record) -> None:
        self._check_index(index)
        self._slots[index] = record

    # === data accessors ===

    def index_of(self, id: int) -> int:
        """Linear scan for `id`; returns -1 when absent."""
        for i in range(self._size):
            if self._slots[i].id == id:  # type: ignore[union-attr]
                return i
        return -1

    # === data manipulators ===

    def append(self, record: Record) -> None:
        self._ensure_capacity()
        self._slots[self._size] = record
        self._size += 1

    def swap_remove(self, index: int) -> Record:
        """
        Removes the record at `index` by overwriting it with the last record.

        Returns:
            The removed record.
        """
        self._check_index(index)
        removed = self._slots[index]
        last = self._size - 1
        self._slots[index] = self._slots[last]
        self._slots[last] = None
        self._size = last
        return removed  # type: ignore[return-value]

    def clear(self) -> None:
        self._slots = [None] * self._initial_capacity
        self._size = 0

    def sort(self, key: Callable[[Record], object]) -> None:
        live = sorted(self._slots[: self._size], key=key)  # type: ignore[arg-type]
        self._slots[: self._size] = live

    # === helper methods ===

    def _ensure_capacity(self) -> None:
        if self._size >= len(self._slots):
            self._slots.extend([None] * len(self._slots))

    def _check_index(self, index: int) -> None:
        if not 0 <= index < self._size:
            raise IndexError(f"Record index out of range: {index}")
