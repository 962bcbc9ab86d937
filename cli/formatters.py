# cli/formatters.py

from textwrap import dedent

import core.formatters as formatters
from core.config import StoreConfig
from models.record import Record


def format_record_table(records: list[Record], config: StoreConfig) -> str:
    lines = [formatters.format_header_row(config.name_width, config.programme_width)]

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

    return "\n".join(line.rstrip() for line in lines)


def format_record_oneline(record: Record) -> str:
    return f"{record.id}\t{record.name}\t{record.programme}\t{formatters.format_mark(record.mark)}"


def format_record_multiline(record: Record) -> str:
    return dedent(
        f"""\
        Record {record.id}:
        ... Name: {record.name}
        ... Programme: {record.programme}
        ... Mark: {formatters.format_mark(record.mark)}"""
    )


def format_summary(summary: dict) -> str:
    highest_mark, highest_name = summary["highest"]
    lowest_mark, lowest_name = summary["lowest"]

    return "\n".join(
        [
            formatters.format_banner_text("Student Summary", 27),
            f"Total students : {summary['count']}",
            f"Average mark   : {summary['average']:.2f}",
            f"Highest mark   : {formatters.format_mark(highest_mark)} ({highest_name})",
            f"Lowest mark    : {formatters.format_mark(lowest_mark)} ({lowest_name})",
            "=" * 27,
        ]
    )
