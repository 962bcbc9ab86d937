# core/serializer.py

"""
Reads and writes the fixed-column snapshot format.

Layout:
    line 1    Database Name: <name>
    line 2    Authors: <authors>
    line 3    Table Name: <table>
    line 4    (blank)
    line 5    column header
    line 6+   one record per line: ID(10) Name Programme Mark(6, one decimal)

On import the first five lines are always discarded, whatever they contain.
"""

from __future__ import annotations

import logging
import os
from typing import Iterable, Iterator

import core.formatters as formatters
from core.config import StoreConfig
from models.record import Record

logger = logging.getLogger(__name__)

HEADER_LINE_COUNT = 5


def export_records(records: Iterable[Record], config: StoreConfig) -> str:
    """
    Renders records as snapshot text, including the five-line preamble.

    Args:
        records (Iterable[Record]): The records to write, in output order.
        config (StoreConfig): Supplies the metadata lines and column widths.

    Returns:
        The full snapshot text, ending with a newline.
    """
    lines = [
        f"Database Name: {config.database_name}",
        f"Authors: {config.authors}",
        f"Table Name: {config.table_name}",
        "",
        formatters.format_header_row(config.name_width, config.programme_width),
    ]

    for record in records:
        lines.append(
            formatters.format_record_row(
                record.id,
                record.name,
                record.programme,
                record.mark,
                config.name_width,
                config.programme_width,
            )
        )

    return "\n".join(line.rstrip() for line in lines) + "\n"


def require_snapshot_extension(path: str, extension: str) -> None:
    """
    Raises:
        ValueError: If `path` does not end in `extension` (case-insensitive).
    """
    if os.path.splitext(path)[1].lower() != extension.lower():
        raise ValueError(f"Snapshot files must use the {extension} extension: {path}")


def read_snapshot_lines(path: str, extension: str) -> list[str]:
    """
    Reads every line of a snapshot file.

    Raises:
        ValueError: If the extension is wrong.
        OSError: If the file cannot be opened or read.
    """
    require_snapshot_extension(path, extension)

    with open(path, "r", encoding="utf-8") as f:
        return f.readlines()


def iter_data_lines(lines: Iterable[str]) -> Iterator[tuple[int, str]]:
    """
    Yields `(line_number, line)` for every line after the preamble, skipping blank lines.

    Line numbers are 1-based positions in the file.
    """
    for line_number, line in enumerate(lines, 1):
        if line_number <= HEADER_LINE_COUNT:
            continue
        if not line.strip():
            continue
        yield line_number, line


def write_snapshot(path: str, text: str, extension: str) -> None:
    """
    Writes snapshot text to `path`, replacing any existing file.

    Raises:
        ValueError: If the extension is wrong.
        OSError: If the file cannot be written.
    """
    require_snapshot_extension(path, extension)

    with open(path, "w", encoding="utf-8") as f:
        f.write(text)

    logger.info("Wrote snapshot to %s", path)
