# models/undo.py

"""
Single-level undo for the record store.

The manager holds at most one pending `UndoEntry`, describing the inverse of the most recent mutation.
Every successful mutation overwrites it; applying it (successfully or not) resets the manager to NONE,
so undo can never be chained or undone itself.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from core.response import ErrorCode, Response
from models.record import Record
from models.record_array import RecordArray


class UndoKind(str, Enum):
    NONE = "NONE"
    INSERTED = "INSERTED"
    DELETED = "DELETED"
    UPDATED = "UPDATED"


@dataclass(frozen=True)
class UndoEntry:
    kind: UndoKind = UndoKind.NONE
    before: Record | None = None
    after: Record | None = None

    @property
    def target_id(self) -> int | None:
        record = self.after if self.after is not None else self.before
        return record.id if record is not None else None


NO_ENTRY = UndoEntry()


class UndoManager:

    def __init__(self):
        self._entry: UndoEntry = NO_ENTRY

    # === properties ===

    @property
    def entry(self) -> UndoEntry:
        return self._entry

    @property
    def is_pending(self) -> bool:
        return self._entry.kind is not UndoKind.NONE

    # === data manipulators ===

    def capture_insert(self, after: Record) -> None:
        self._entry = UndoEntry(UndoKind.INSERTED, after=after.copy())

    def capture_delete(self, before: Record) -> None:
        self._entry = UndoEntry(UndoKind.DELETED, before=before.copy())

    def capture_update(self, before: Record, after: Record) -> None:
        self._entry = UndoEntry(UndoKind.UPDATED, before=before.copy(), after=after.copy())

    def reset(self) -> None:
        self._entry = NO_ENTRY

    def apply(self, records: RecordArray) -> Response:
        """
        Applies the pending inverse operation to `records` exactly once.

        Args:
            records (RecordArray): The backing sequence of the store that captured the entry.

        Returns:
            Response: A structured response with the following contract:
                - success (bool):
                    - True if the inverse operation was applied.
                    - False if nothing is pending or the target record no longer exists.
                - detail (str | None):
                    - A human-readable description of the outcome.
                - error (ErrorCode | str | None):
                    - `ErrorCode.NOTHING_TO_UNDO` if no entry is pending.
                    - `ErrorCode.UNDO_TARGET_MISSING` if the inserted or updated record has since been removed.
                - status_code (int | None):
                    - 200 on success
                    - 404 if the target is missing
                    - 400 if nothing is pending
                - data (dict | None): Payload with the following keys:
                    - On success:
                        - "kind" (UndoKind): The kind of mutation that was reversed.
                        - "id" (int): The id of the affected record.
                    - On failure:
                        - None

        Notes:
            - The manager always returns to NONE, whatever the outcome.
        """
        entry = self._entry
        self._entry = NO_ENTRY

        if entry.kind is UndoKind.NONE:
            return Response.fail(
                detail="Nothing to undo.",
                error=ErrorCode.NOTHING_TO_UNDO,
            )

        if entry.kind is UndoKind.DELETED:
            records.append(entry.before.copy())  # type: ignore[union-attr]

        else:
            index = records.index_of(entry.target_id)  # type: ignore[arg-type]

            if index < 0:
                return Response.fail(
                    detail=f"Cannot undo {entry.kind.value}: the record with ID {entry.target_id} no longer exists.",
                    error=ErrorCode.UNDO_TARGET_MISSING,
                    status_code=404,
                )

            if entry.kind is UndoKind.INSERTED:
                records.swap_remove(index)
            else:
                records[index] = entry.before.copy()  # type: ignore[union-attr]

        return Response.succeed(
            detail=f"Undo {entry.kind.value} done.",
            data={
                "kind": entry.kind,
                "id": entry.target_id,
            },
        )
