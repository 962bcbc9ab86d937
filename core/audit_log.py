# core/audit_log.py

"""
Append-only audit trail of store mutations.

Each event becomes one line:
    [YYYY-MM-DD HH:MM:SS] [user] (Records: N) <EVENT> <details>

The file is opened, written and closed for every event. A write failure is reported through the
returned `Response` and a log warning; it never undoes the mutation that triggered it.
"""

from __future__ import annotations

import datetime
import logging
from typing import Callable

from core.response import ErrorCode, Response

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


class AuditLog:

    def __init__(
        self,
        path: str,
        user: str,
        clock: Callable[[], datetime.datetime] = datetime.datetime.now,
    ):
        self._path: str = path
        self._user: str = user
        self._clock = clock

    # === properties ===

    @property
    def path(self) -> str:
        return self._path

    @property
    def user(self) -> str:
        return self._user

    # === persistence ===

    def format_line(self, event: str, record_count: int) -> str:
        timestamp = self._clock().strftime(TIMESTAMP_FORMAT)
        return f"[{timestamp}] [{self._user}] (Records: {record_count}) {event}"

    def append(self, event: str, record_count: int) -> Response:
        """
        Appends one event line to the audit log, creating the file if needed.

        Args:
            event (str): The event name and details, e.g. "DELETE 1001".
            record_count (int): The number of records in the store after the event.

        Returns:
            Response: A structured response with the following contract:
                - success (bool):
                    - True if the line was written.
                    - False if the log could not be opened or written.
                - detail (str | None):
                    - On failure, a human-readable description of the error.
                - error (ErrorCode | str | None):
                    - `ErrorCode.IO_FAILURE` if an OSError was raised.
                - data (dict | None): Payload with the following keys:
                    - On success:
                        - "line" (str): The line that was written, without its newline.

        Notes:
            - Failure is non-fatal; callers report it but keep the mutation.
        """
        line = self.format_line(event, record_count)

        try:
            with open(self._path, "a", encoding="utf-8") as f:
                f.write(line + "\n")

        except OSError as e:
            logger.warning("Could not write audit log %s: %s", self._path, e)

            return Response.fail(
                detail=f"Failed to write audit log {self._path}: {e}",
                error=ErrorCode.IO_FAILURE,
            )

        else:
            return Response.succeed(
                data={
                    "line": line,
                },
            )
