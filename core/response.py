# core/response.py

from __future__ import annotations

from enum import Enum


class ErrorCode(Enum):
    # === Parse Failures ===
    # fewer than four tokens, or no programme left after the name split
    MALFORMED_LINE = "MALFORMED_LINE"

    # id token is negative, non-numeric, or has trailing characters
    INVALID_ID = "INVALID_ID"

    # mark token is outside [0, 100], non-numeric, or has trailing characters
    INVALID_MARK = "INVALID_MARK"

    # === Not Found ===
    NOT_FOUND = "NOT_FOUND"

    # === Constraint Violations ===
    DUPLICATE_ID = "DUPLICATE_ID"

    # field value is out of bounds or incorrectly formatted
    INVALID_FIELD_VALUE = "INVALID_FIELD_VALUE"

    # === State Restrictions ===
    EMPTY_STORE = "EMPTY_STORE"
    NOTHING_TO_UNDO = "NOTHING_TO_UNDO"

    # the record an undo would touch was removed in the meantime
    UNDO_TARGET_MISSING = "UNDO_TARGET_MISSING"

    # === Internal Faults ===
    IO_FAILURE = "IO_FAILURE"


class Response:
    """
    Standard Response object for RecordStore manipulator and lookup methods.

    Attributes:
        success (bool): Indicates whether the operation succeeded.
        detail (str | None): Optional human-readable explanation.
        error (ErrorCode | str | None): Optional machine-readable error identifier.
        status_code (int | None): Optional HTTP-style response code.
        data (dict): Optional payload, varies by operation.
    """

    def __init__(
        self,
        success: bool,
        detail: str | None = None,
        error: ErrorCode | str | None = None,
        status_code: int | None = None,
        data: dict | None = None,
    ):
        self._success = success
        self._detail = detail
        self._error = error
        self._status_code = status_code
        self._data = data or {}

    # === properties ===

    @property
    def success(self) -> bool:
        return self._success

    @property
    def detail(self) -> str | None:
        return self._detail

    @property
    def error(self) -> ErrorCode | str | None:
        return self._error

    @property
    def status_code(self) -> int | None:
        return self._status_code

    @property
    def data(self) -> dict:
        return self._data or {}

    # === public classmethods ===

    @classmethod
    def succeed(
        cls,
        detail: str | None = None,
        status_code: int | None = 200,
        data: dict | None = None,
    ) -> Response:
        return cls(
            success=True,
            detail=detail,
            error=None,
            status_code=status_code,
            data=data,
        )

    @classmethod
    def fail(
        cls,
        detail: str | None = None,
        error: ErrorCode | str | None = None,
        status_code: int | None = 400,
        data: dict | None = None,
    ) -> Response:
        return cls(
            success=False,
            detail=detail,
            error=error,
            status_code=status_code,
            data=data,
        )

    # === dunder methods ===

    def __str__(self) -> str:
        if self.success:
            return f"Success: {self.detail or ''}"
        else:
            error_str = (
                self.error.value if isinstance(self.error, Enum) else self.error or ""
            )
            return f"Error: {error_str}"
