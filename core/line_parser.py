# core/line_parser.py

"""
Tolerant parser for one line of a snapshot file.

Two line shapes are accepted:
    - Tab-delimited with exactly four fields: `id<TAB>name<TAB>programme<TAB>mark`.
      Fields are taken verbatim, so names and programmes may contain spaces.
    - Whitespace-delimited: the first token is the id, the last token is the mark, the next
      `name_token_count` tokens form the name and everything in between is the programme.

The whitespace form assumes a fixed number of name tokens (two by default). A single-token name
or a three-token name shifts the split point; callers that know their data can change
`name_token_count`, otherwise such lines parse with the wrong name/programme boundary.
"""

from __future__ import annotations

import math
import re

from core.response import ErrorCode
from models.record import MAX_MARK, MAX_TEXT_LENGTH, MIN_MARK, Record

_ID_PATTERN = re.compile(r"\d+")
_WHITESPACE = re.compile(r"[ \t]+")


class ParseError(ValueError):
    """Raised when a line cannot be turned into a `Record`; `error` names the failed rule."""

    def __init__(self, error: ErrorCode, message: str):
        super().__init__(message)
        self.error = error


def parse_line(raw_line: str, name_token_count: int = 2) -> Record:
    """
    Parses one raw snapshot line into a `Record`.

    Args:
        raw_line (str): The line as read from disk, with or without its line ending.
        name_token_count (int): Number of whitespace tokens that form the name. Defaults to 2.

    Returns:
        The parsed `Record`.

    Raises:
        ParseError:
            - `ErrorCode.MALFORMED_LINE` if there are too few tokens.
            - `ErrorCode.INVALID_ID` if the id is negative, non-numeric, or has trailing characters.
            - `ErrorCode.INVALID_MARK` if the mark is non-numeric or outside [0, 100].
            - `ErrorCode.INVALID_FIELD_VALUE` if the name or programme is too long.
    """
    line = raw_line.rstrip("\r\n")

    fields = _split_tab_fields(line)

    if fields is None:
        tokens = [t for t in _WHITESPACE.split(line.strip()) if t]

        if len(tokens) < 4:
            raise ParseError(
                ErrorCode.MALFORMED_LINE,
                f"Expected at least 4 fields, got {len(tokens)}: {line!r}",
            )

        # exactly id + name + mark leaves an empty programme
        name_end = 1 + name_token_count
        if name_end > len(tokens) - 1:
            raise ParseError(
                ErrorCode.MALFORMED_LINE,
                f"Too few fields for a {name_token_count}-token name: {line!r}",
            )

        fields = [
            tokens[0],
            " ".join(tokens[1:name_end]),
            " ".join(tokens[name_end:-1]),
            tokens[-1],
        ]

    id_token, name, programme, mark_token = fields

    record_id = parse_id(id_token)
    mark = parse_mark(mark_token)

    for value, label in ((name, "name"), (programme, "programme")):
        if len(value) > MAX_TEXT_LENGTH:
            raise ParseError(
                ErrorCode.INVALID_FIELD_VALUE,
                f"The {label} exceeds {MAX_TEXT_LENGTH} characters: {value[:20]!r}...",
            )

    return Record(record_id, name, programme, mark)


def parse_id(token: str) -> int:
    """
    Parses a non-negative integer id with no trailing characters.

    Raises:
        ParseError: `ErrorCode.INVALID_ID` on any other input.
    """
    token = token.strip()
    if not _ID_PATTERN.fullmatch(token):
        raise ParseError(ErrorCode.INVALID_ID, f"Invalid ID: {token!r}")
    return int(token)


def parse_mark(token: str) -> float:
    """
    Parses a finite mark in [0, 100] with no trailing characters.

    Raises:
        ParseError: `ErrorCode.INVALID_MARK` on any other input.
    """
    token = token.strip()
    try:
        mark = float(token)
    except ValueError:
        raise ParseError(ErrorCode.INVALID_MARK, f"Invalid mark: {token!r}")

    if not math.isfinite(mark) or not MIN_MARK <= mark <= MAX_MARK:
        raise ParseError(
            ErrorCode.INVALID_MARK,
            f"Mark must be between {MIN_MARK:.0f} and {MAX_MARK:.0f}: {token!r}",
        )
    return mark


def _split_tab_fields(line: str) -> list[str] | None:
    if "\t" not in line:
        return None
    fields = [f.strip() for f in line.split("\t")]
    if len(fields) != 4 or not all(fields):
        return None
    return fields
