# cli/main.py

"""
Command loop for the student records CLI.

Reads one command per line, splits it into a command word and its arguments, and dispatches to a handler.
Handlers call into `RecordStore` and print the resulting `Response`; no record logic lives here.
"""

import argparse
import logging
from typing import Callable, cast

import cli.formatters as cli_formatters
import cli.menu_helpers as helpers
import core.formatters as formatters
from cli.menu_helpers import MenuSignal
from core.config import StoreConfig
from core.line_parser import parse_id, parse_mark
from core.response import ErrorCode, Response
from core.sort_engine import parse_sort_field, parse_sort_order
from models.record import Record, RecordPatch
from models.record_store import RecordStore

PROMPT = "CMS> "

HELP_TEXT = """\
Commands:
OPEN <file>
SHOW ALL
SHOW ALL SORT BY ID|MARK ASC|DESC
SHOW SUMMARY
INSERT
QUERY <ID>
UPDATE <ID>
DELETE <ID>
SAVE [file]
UNDO
HELP
EXIT"""


class ExitSignal(Exception):
    pass


def run_cli(store: RecordStore) -> None:
    """
    Top-level loop with dispatch for commands.

    Notes:
        - EXIT offers to save unsaved changes before returning.
        - End of input returns immediately, since no confirmation can be read.
          This includes input that ends halfway through a command prompt.
    """
    print(formatters.format_banner_text("STUDENT RECORDS MANAGER"))
    print("Ready. Type HELP for a list of commands.")

    while True:
        try:
            line = input(PROMPT)
        except EOFError:
            print()
            break

        try:
            dispatch(store, line)
        except EOFError:
            print()
            break
        except ExitSignal:
            try:
                helpers.prompt_if_dirty(store)
            except EOFError:
                print()
            break

    print(f"\n{formatters.format_banner_text('Exiting Program')}\n")


def dispatch(store: RecordStore, line: str) -> None:
    tokens = line.split()

    if not tokens:
        return

    command, args = tokens[0].upper(), tokens[1:]
    handler = COMMANDS.get(command)

    if handler is None:
        print("Unknown command. Type HELP for a list of commands.")
        return

    handler(store, args)


# === command handlers ===


def open_snapshot(store: RecordStore, args: list[str]) -> None:
    if not args:
        print("Usage: OPEN <file>")
        return

    response = store.load(args[0])
    helpers.display_response(response)

    skipped = response.data.get("skipped", [])

    if skipped:
        print(f"CMS: {len(skipped)} line(s) skipped; see warnings above.")


def show(store: RecordStore, args: list[str]) -> None:
    words = [a.upper() for a in args]

    if words[:1] == ["SUMMARY"]:
        response = store.summary()

        if not response.success:
            helpers.display_response_failure(response)
            return

        print(cli_formatters.format_summary(response.data))
        return

    if words[:1] != ["ALL"]:
        print("Usage: SHOW ALL | SHOW SUMMARY | SHOW ALL SORT BY ID|MARK ASC|DESC")
        return

    if words[1:3] == ["SORT", "BY"] and len(words) >= 4:
        try:
            field = parse_sort_field(words[3])
            order = parse_sort_order(words[4] if len(words) > 4 else None)
        except ValueError as e:
            print(e)
            return

        store.sort(field, order)

    elif len(words) > 1:
        print("Usage: SHOW ALL SORT BY ID|MARK ASC|DESC")
        return

    print(cli_formatters.format_record_table(store.records(), store.config))


def insert(store: RecordStore, args: list[str]) -> None:
    if not store.is_loaded:
        helpers.display_response_failure(
            Response.fail(
                detail="No records are loaded. Use OPEN before inserting.",
                error=ErrorCode.EMPTY_STORE,
            )
        )
        return

    attempts = store.config.max_input_attempts

    record_id = helpers.prompt_parsed_or_cancel("ID:", parse_id, attempts)
    if record_id is MenuSignal.CANCEL:
        print("Cancelled.")
        return
    record_id = cast(int, record_id)

    if store.find_by_id(record_id).success:
        print(f"Error: Student with ID {record_id} already exists.")
        return

    name = helpers.prompt_user_input_or_cancel("Name:")
    if name is MenuSignal.CANCEL:
        print("Cancelled.")
        return

    programme = helpers.prompt_user_input_or_cancel("Programme:")
    if programme is MenuSignal.CANCEL:
        print("Cancelled.")
        return

    mark = helpers.prompt_parsed_or_cancel("Mark:", parse_mark, attempts)
    if mark is MenuSignal.CANCEL:
        print("Cancelled.")
        return

    try:
        record = Record(record_id, cast(str, name), cast(str, programme), cast(float, mark))
    except ValueError as e:
        print(f"Invalid input: {e}")
        return

    helpers.display_response(store.insert(record))


def query(store: RecordStore, args: list[str]) -> None:
    record_id = _parse_id_argument(args, "QUERY")
    if record_id is None:
        return

    response = store.find_by_id(record_id)

    if not response.success:
        helpers.display_response_failure(response)
        return

    print(cli_formatters.format_record_oneline(response.data["record"]))


def update(store: RecordStore, args: list[str]) -> None:
    record_id = _parse_id_argument(args, "UPDATE")
    if record_id is None:
        return

    response = store.find_by_id(record_id)

    if not response.success:
        helpers.display_response_failure(response)
        return

    current: Record = response.data["record"]
    print(cli_formatters.format_record_multiline(current))

    name = helpers.prompt_user_input_or_default(f"New Name (enter to keep \"{current.name}\"):")
    programme = helpers.prompt_user_input_or_default(
        f"New Programme (enter to keep \"{current.programme}\"):"
    )
    mark = helpers.prompt_parsed_or_cancel(
        f"New Mark (enter to keep {formatters.format_mark(current.mark)}):",
        parse_mark,
        store.config.max_input_attempts,
        allow_default=True,
    )

    if mark is MenuSignal.CANCEL:
        print("Cancelled.")
        return

    patch = RecordPatch(
        name=None if name is MenuSignal.DEFAULT else cast(str, name),
        programme=None if programme is MenuSignal.DEFAULT else cast(str, programme),
        mark=None if mark is MenuSignal.DEFAULT else cast(float, mark),
    )

    update_response = store.update(record_id, patch)

    if update_response.success and not update_response.data["changed"]:
        print("No changes made.")
        return

    helpers.display_response(update_response)


def delete(store: RecordStore, args: list[str]) -> None:
    record_id = _parse_id_argument(args, "DELETE")
    if record_id is None:
        return

    response = store.find_by_id(record_id)

    if not response.success:
        helpers.display_response_failure(response)
        return

    print(cli_formatters.format_record_oneline(response.data["record"]))

    if not helpers.confirm_action("Confirm delete?"):
        print("Cancelled.")
        return

    helpers.display_response(store.delete(record_id))


def save(store: RecordStore, args: list[str]) -> None:
    helpers.display_response(store.save(args[0] if args else None))


def undo(store: RecordStore, args: list[str]) -> None:
    helpers.display_response(store.undo())


def show_help(store: RecordStore, args: list[str]) -> None:
    print(HELP_TEXT)


def exit_program(store: RecordStore, args: list[str]) -> None:
    raise ExitSignal


COMMANDS: dict[str, Callable[[RecordStore, list[str]], None]] = {
    "OPEN": open_snapshot,
    "SHOW": show,
    "INSERT": insert,
    "QUERY": query,
    "UPDATE": update,
    "DELETE": delete,
    "SAVE": save,
    "UNDO": undo,
    "HELP": show_help,
    "EXIT": exit_program,
}


# === helper methods ===


def _parse_id_argument(args: list[str], command: str) -> int | None:
    if not args:
        print(f"Usage: {command} <ID>")
        return None

    try:
        return parse_id(args[0])
    except ValueError as e:
        print(e)
        return None


# === entry point ===


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="cms", description="Manage student records.")
    p.add_argument("snapshot", nargs="?", help="Snapshot file to open at startup")
    p.add_argument("--log-file", help="Audit log path (default: $CMS_AUDIT_LOG or CMS.log)")
    p.add_argument("--user", help="User attributed in the audit log (default: $CMS_USER or login name)")
    p.add_argument("-v", "--verbose", action="store_true", help="Show informational log messages")
    return p


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config = StoreConfig.from_env(audit_log_path=args.log_file, audit_user=args.user)
    store = RecordStore(config)

    if args.snapshot:
        open_snapshot(store, [args.snapshot])

    run_cli(store)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
