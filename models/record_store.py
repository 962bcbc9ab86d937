# models/record_store.py

"""
The RecordStore is the central data object of the program and the "source of truth" for all student records.

Records live in a single owned `RecordArray`. The store enforces the unique-id invariant, captures a single-level
undo entry for every mutation, and appends one audit line per mutation to the configured audit log.

Provides functions for bulk loading a snapshot file, saving the store back to a snapshot, and inserting, finding,
updating, deleting, sorting and summarizing records.
Includes session-scoped attributes like path (the snapshot currently open) and unsaved_changes.
"""

from __future__ import annotations

import logging

from core.audit_log import AuditLog
from core.config import StoreConfig
from core.line_parser import ParseError, parse_line
from core.response import ErrorCode, Response
from core.serializer import (
    export_records,
    iter_data_lines,
    read_snapshot_lines,
    write_snapshot,
)
from core.sort_engine import SortField, SortOrder, sort_records
from models.record import Record, RecordPatch
from models.record_array import RecordArray
from models.undo import UndoEntry, UndoManager

logger = logging.getLogger(__name__)


class RecordStore:

    def __init__(
        self,
        config: StoreConfig | None = None,
        audit_log: AuditLog | None = None,
    ):
        self._config: StoreConfig = config or StoreConfig()
        self._records: RecordArray = RecordArray(self._config.initial_capacity)
        self._undo: UndoManager = UndoManager()
        self._audit_log: AuditLog = audit_log or AuditLog(
            self._config.audit_log_path, self._config.audit_user
        )
        self._path: str | None = None
        self._loaded: bool = False
        self._unsaved_changes: bool = False

    # === properties ===

    @property
    def config(self) -> StoreConfig:
        return self._config

    @property
    def audit_log(self) -> AuditLog:
        return self._audit_log

    @property
    def path(self) -> str | None:
        return self._path

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    @property
    def pending_undo(self) -> UndoEntry:
        return self._undo.entry

    @property
    def has_unsaved_changes(self) -> bool:
        return self._unsaved_changes

    def __len__(self) -> int:
        return len(self._records)

    # === persistence and import ===

    def load(self, path: str) -> Response:
        """
        Replaces the store contents with the records parsed from a snapshot file.

        Args:
            path (str): The snapshot file to read.

        Returns:
            Response: A structured response with the following contract:
                - success (bool):
                    - True if the file was read, even if some lines were skipped.
                    - False if the file has the wrong extension or cannot be read.
                - detail (str | None):
                    - On success, a summary with the number of records loaded.
                    - On failure, a human-readable description of the error.
                - error (ErrorCode | str | None):
                    - `ErrorCode.INVALID_FIELD_VALUE` if the extension is wrong.
                    - `ErrorCode.IO_FAILURE` if the file cannot be opened or read.
                - status_code (int | None):
                    - 200 on success
                    - 400 on failure
                - data (dict | None): Payload with the following keys:
                    - On success:
                        - "count" (int): The number of records loaded.
                        - "skipped" (list[tuple[int, str]]): Line number and reason for each skipped line.
                    - On failure:
                        - None

        Notes:
            - The first five lines are treated as metadata and discarded.
            - Lines that fail to parse, repeat an id already loaded, or carry a name with the wrong word count
              are skipped with a logged warning.
            - On failure the previous contents are left untouched.
            - A successful load resets the pending undo entry and clears the unsaved changes flag.
        """
        try:
            lines = read_snapshot_lines(path, self._config.snapshot_extension)

        except (OSError, UnicodeDecodeError) as e:
            return Response.fail(
                detail=f"Failed to open \"{path}\": {e}",
                error=ErrorCode.IO_FAILURE,
            )

        except ValueError as e:
            return Response.fail(
                detail=f"Cannot open {path}: {e}",
                error=ErrorCode.INVALID_FIELD_VALUE,
            )

        self._records.clear()
        skipped: list[tuple[int, str]] = []

        for line_number, line in iter_data_lines(lines):
            try:
                record = parse_line(line, self._config.name_token_count)

            except ParseError as e:
                logger.warning("Skipping line %d of %s: %s", line_number, path, e)
                skipped.append((line_number, f"{e.error.name}: {e}"))
                continue

            try:
                self._check_name_layout(record)

            except ValueError as e:
                logger.warning("Skipping line %d of %s: %s", line_number, path, e)
                skipped.append((line_number, f"INVALID_FIELD_VALUE: {e}"))
                continue

            if self._records.index_of(record.id) >= 0:
                logger.warning(
                    "Skipping line %d of %s: duplicate ID %d", line_number, path, record.id
                )
                skipped.append((line_number, f"DUPLICATE_ID: {record.id}"))
                continue

            self._records.append(record)

        self._path = path
        self._loaded = True
        self._unsaved_changes = False
        self._undo.reset()

        count = len(self._records)
        logger.info("Opened %s with %d records (%d skipped)", path, count, len(skipped))

        return self._succeed_and_audit(
            event=f"OPEN {path} ({count} records)",
            detail=f"\"{path}\" opened ({count} records).",
            data={
                "count": count,
                "skipped": skipped,
            },
        )

    def export(self) -> str:
        return export_records(self._records, self._config)

    def save(self, path: str | None = None) -> Response:
        """
        Writes the store to a snapshot file.

        Args:
            path (str | None):
                - The target file path.
                - If no argument is provided, the currently open path is used.

        Returns:
            Response: A structured response with the following contract:
                - success (bool):
                    - True if the snapshot was written.
                    - False if there is nothing to save, no target path, or the write failed.
                - detail (str | None):
                    - A human-readable description of the outcome.
                - error (ErrorCode | str | None):
                    - `ErrorCode.EMPTY_STORE` if no snapshot was ever opened and no path is given.
                    - `ErrorCode.INVALID_FIELD_VALUE` if the extension is wrong.
                    - `ErrorCode.IO_FAILURE` if an OSError was raised.
                - status_code (int | None):
                    - 200 on success
                    - 400 on failure
                - data (dict | None): Payload with the following keys:
                    - On success:
                        - "path" (str): The file that was written.

        Notes:
            - This intentionally overwrites existing data.
            - A successful save becomes the current path and clears the unsaved changes flag.
        """
        target = path or self._path

        if target is None:
            return Response.fail(
                detail="There is no open snapshot to save. Use OPEN first or give a file name.",
                error=ErrorCode.EMPTY_STORE,
            )

        try:
            write_snapshot(target, self.export(), self._config.snapshot_extension)

        except ValueError as e:
            return Response.fail(
                detail=f"Cannot save to {target}: {e}",
                error=ErrorCode.INVALID_FIELD_VALUE,
            )

        except OSError as e:
            return Response.fail(
                detail=f"Failed to write data to disk: {e}",
                error=ErrorCode.IO_FAILURE,
            )

        self._path = target
        self._unsaved_changes = False

        return self._succeed_and_audit(
            event=f"SAVE {target}",
            detail=f"Saved to \"{target}\".",
            data={
                "path": target,
            },
        )

    # === data accessors ===

    def records(self) -> list[Record]:
        """Returns copies of all records in current storage order."""
        return [record.copy() for record in self._records]

    def find_by_id(self, id: int) -> Response:
        """
        Finds a record by id with a linear scan.

        Args:
            id (int): The id of the record.

        Returns:
            Response: A structured response with the following contract:
                - success (bool):
                    - True if the record was found.
                    - False if no match is found.
                - detail (str | None):
                    - On failure, a human-readable explanation of the problem.
                - error (ErrorCode | str | None):
                    - `ErrorCode.NOT_FOUND` if no match is found.
                - status_code (int | None):
                    - 200 on success
                    - 404 if not found
                - data (dict): Payload with the following keys:
                    - On success:
                        - "index" (int): The storage position of the record.
                        - "record" (Record): A copy of the matched record.

        Notes:
            - This method is read-only and does not raise.
        """
        index = self._records.index_of(id)

        if index < 0:
            return self._not_found(id)

        return Response.succeed(
            data={
                "index": index,
                "record": self._records[index].copy(),
            },
        )

    def summary(self) -> Response:
        """
        Computes the record count, average mark, and highest and lowest marks in one pass.

        Returns:
            Response: A structured response with the following contract:
                - success (bool):
                    - True if at least one record exists.
                    - False if the store holds no records.
                - error (ErrorCode | str | None):
                    - `ErrorCode.EMPTY_STORE` if there are no records.
                - data (dict | None): Payload with the following keys:
                    - On success:
                        - "count" (int): The number of records.
                        - "average" (float): The mean mark.
                        - "highest" (tuple[float, str]): The highest mark and the name of its holder.
                        - "lowest" (tuple[float, str]): The lowest mark and the name of its holder.

        Notes:
            - This method is read-only and does not raise.
            - Ties keep the first record in storage order.
        """
        if len(self._records) == 0:
            return Response.fail(
                detail="No students available.",
                error=ErrorCode.EMPTY_STORE,
            )

        first = self._records[0]
        highest = lowest = first
        total = 0.0

        for record in self._records:
            total += record.mark
            if record.mark > highest.mark:
                highest = record
            if record.mark < lowest.mark:
                lowest = record

        count = len(self._records)

        return Response.succeed(
            data={
                "count": count,
                "average": total / count,
                "highest": (highest.mark, highest.name),
                "lowest": (lowest.mark, lowest.name),
            },
        )

    # === data manipulators ===

    def _mark_dirty(self) -> None:
        """
        Marks the store as having unsaved changes.
        """
        self._unsaved_changes = True

    def insert(self, record: Record) -> Response:
        """
        Appends a new record to the store.

        Args:
            record (Record): The record to add. The store keeps its own copy.

        Returns:
            Response: A structured response with the following contract:
                - success (bool):
                    - True if the record was added.
                    - False if no snapshot has been opened, the id already exists, or the name has the wrong word count.
                - detail (str | None):
                    - A human-readable description of the outcome.
                - error (ErrorCode | str | None):
                    - `ErrorCode.EMPTY_STORE` if the store was never loaded.
                    - `ErrorCode.DUPLICATE_ID` if another record already uses the id.
                    - `ErrorCode.INVALID_FIELD_VALUE` if the name does not have `name_token_count` words.
                - status_code (int | None):
                    - 200 on success
                    - 400 on failure
                - data (dict | None): Payload with the following keys:
                    - On success:
                        - "record" (Record): A copy of the added record.
                        - "audit_warning" (str): Present only if the audit line could not be written.

        Notes:
            - This method mutates store state, captures an INSERTED undo entry and calls `_mark_dirty()` if successful.
        """
        if not self._loaded:
            return Response.fail(
                detail="No records are loaded. Use OPEN before inserting.",
                error=ErrorCode.EMPTY_STORE,
            )

        if self._records.index_of(record.id) >= 0:
            return Response.fail(
                detail=f"The record with ID {record.id} already exists.",
                error=ErrorCode.DUPLICATE_ID,
            )

        try:
            self._check_name_layout(record)

        except ValueError as e:
            return Response.fail(
                detail=f"Input validation failed: {e}",
                error=ErrorCode.INVALID_FIELD_VALUE,
            )

        stored = record.copy()
        self._records.append(stored)
        self._undo.capture_insert(stored)
        self._mark_dirty()

        return self._succeed_and_audit(
            event=f"INSERT {stored.id} {stored.name} {stored.programme} {stored.mark:.1f}",
            detail="Record inserted successfully.",
            data={
                "record": stored.copy(),
            },
        )

    def update(self, id: int, patch: RecordPatch) -> Response:
        """
        Replaces the name, programme and/or mark of an existing record in place.

        Args:
            id (int): The id of the record to update.
            patch (RecordPatch): New values; fields left as None keep their current values.

        Returns:
            Response: A structured response with the following contract:
                - success (bool):
                    - True if the record was updated or the patch changed nothing.
                    - False if the record is not found or a patched value is invalid.
                - detail (str | None):
                    - A human-readable description of the outcome.
                - error (ErrorCode | str | None):
                    - `ErrorCode.NOT_FOUND` if no record has the id.
                    - `ErrorCode.INVALID_FIELD_VALUE` if a patched value fails validation,
                      or if the new name does not have `name_token_count` words.
                - status_code (int | None):
                    - 200 on success
                    - 404 if not found
                    - 400 for other failures
                - data (dict | None): Payload with the following keys:
                    - On success:
                        - "record" (Record): A copy of the record after the update.
                        - "changed" (bool): False if the patch matched the current values.
                        - "audit_warning" (str): Present only if the audit line could not be written.

        Notes:
            - A no-op update returns early: no undo entry is captured and nothing is audited.
        """
        index = self._records.index_of(id)

        if index < 0:
            return self._not_found(id)

        before = self._records[index]

        try:
            after = before.patched(patch)
            self._check_name_layout(after)

        except ValueError as e:
            return Response.fail(
                detail=f"Input validation failed: {e}",
                error=ErrorCode.INVALID_FIELD_VALUE,
            )

        if after == before:
            return Response.succeed(
                detail="The values provided match the current ones. No changes made.",
                data={
                    "record": before.copy(),
                    "changed": False,
                },
            )

        self._records[index] = after
        self._undo.capture_update(before, after)
        self._mark_dirty()

        return self._succeed_and_audit(
            event=f"UPDATE {id}",
            detail="Record updated.",
            data={
                "record": after.copy(),
                "changed": True,
            },
        )

    def delete(self, id: int) -> Response:
        """
        Removes a record by swap-delete.

        Args:
            id (int): The id of the record to remove.

        Returns:
            Response: A structured response with the following contract:
                - success (bool):
                    - True if the record was removed.
                    - False if no record has the id.
                - error (ErrorCode | str | None):
                    - `ErrorCode.NOT_FOUND` if no record has the id.
                - status_code (int | None):
                    - 200 on success
                    - 404 if not found
                - data (dict | None): Payload with the following keys:
                    - On success:
                        - "record" (Record): The removed record.
                        - "audit_warning" (str): Present only if the audit line could not be written.

        Notes:
            - The last record moves into the freed slot, so storage order changes.
        """
        index = self._records.index_of(id)

        if index < 0:
            return self._not_found(id)

        self._undo.capture_delete(self._records[index])
        removed = self._records.swap_remove(index)
        self._mark_dirty()

        return self._succeed_and_audit(
            event=f"DELETE {id}",
            detail="Record deleted.",
            data={
                "record": removed.copy(),
            },
        )

    def sort(self, field: SortField, order: SortOrder = SortOrder.ASC) -> Response:
        """
        Sorts the store in place, so `records()` afterwards returns the sorted order.

        Returns:
            Response: Always successful; "records" (list[Record]) holds copies in the new order.
        """
        sort_records(self._records, field, order)

        return Response.succeed(
            data={
                "records": self.records(),
            },
        )

    def undo(self) -> Response:
        """
        Reverses the most recent insert, update or delete.

        Returns:
            Response: The outcome of `UndoManager.apply()`, plus "audit_warning" when the audit line could not be written.

        Notes:
            - The pending entry is consumed whatever the outcome; a second call returns `ErrorCode.NOTHING_TO_UNDO`.
        """
        undo_response = self._undo.apply(self._records)

        if not undo_response.success:
            return undo_response

        self._mark_dirty()

        return self._succeed_and_audit(
            event=f"UNDO {undo_response.data['kind'].value} {undo_response.data['id']}",
            detail=undo_response.detail,
            data=undo_response.data,
        )

    # === helper methods ===

    def _succeed_and_audit(self, event: str, detail: str, data: dict) -> Response:
        audit_response = self._audit_log.append(event, len(self._records))

        if not audit_response.success:
            data = {**data, "audit_warning": audit_response.detail}

        return Response.succeed(detail=detail, data=data)

    def _check_name_layout(self, record: Record) -> None:
        """
        Raises ValueError unless the name reads back from a saved snapshot unchanged.

        Saved rows are split on whitespace with the first `name_token_count` words after the id taken as the name,
        so any other word count would move words between the name and the programme on the next OPEN.
        """
        expected = self._config.name_token_count
        words = record.name.split()

        if len(words) != expected:
            raise ValueError(
                f"The name must be exactly {expected} word(s) separated by spaces, got {len(words)}: {record.name!r}."
            )

    def _not_found(self, id: int) -> Response:
        return Response.fail(
            detail=f"The record with ID {id} does not exist.",
            error=ErrorCode.NOT_FOUND,
            status_code=404,
        )

    # === dunder methods ===

    def __repr__(self) -> str:
        return f"RecordStore(path={self._path!r}, records={len(self._records)})"
