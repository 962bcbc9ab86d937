# cli/menu_helpers.py

"""
Helper functions for prompts and user feedback in the records CLI.

This module provides utilities for:
- Prompting for and validating user input
- Handling confirmation flows
- Displaying standard system messages and error feedback

These functions are shared by every command handler to keep behavior consistent.
"""

from enum import Enum
from typing import Callable, TypeVar

from core.response import Response
from models.record_store import RecordStore

T = TypeVar("T")


class MenuSignal(Enum):
    CANCEL = "CANCEL"
    DEFAULT = "DEFAULT"


# === display methods ===


def display_response_failure(response: Response) -> None:
    """
    Displays a formatted error message based on a failed `Response`.

    Notes:
        - Does nothing if the response was successful.
        - Enum error codes are printed by name; string errors are printed as-is.
    """
    if response.success:
        return

    error_label = (
        response.error.name if isinstance(response.error, Enum) else str(response.error)
    )

    print(f"\n[ERROR: {error_label}] {response.detail}")


def display_response_success(response: Response) -> None:
    """
    Prints the success detail and any audit warning attached to the response.
    """
    if response.detail:
        print(f"CMS: {response.detail}")

    audit_warning = response.data.get("audit_warning")

    if audit_warning:
        print(f"[WARNING] {audit_warning}")


def display_response(response: Response) -> None:
    if response.success:
        display_response_success(response)
    else:
        display_response_failure(response)


# === prompt user input methods ===


# Prompt Helpers
#
# Conventions:
# - `prompt_user_input()` is the base function, used by all others to standardize the UI format.
# - Empty string responses are overloaded for control signals:
#     - `prompt_user_input_or_cancel()` returns `MenuSignal.CANCEL` on blank input.
#     - `prompt_user_input_or_default()` returns `MenuSignal.DEFAULT`.
# - `confirm_action()` loops until the user enters a valid yes/no response.
# - `prompt_parsed_or_cancel()` retries a bounded number of times, then cancels.


def confirm_action(prompt: str) -> bool:
    while True:
        choice = prompt_user_input(f"{prompt} (y/n): ").lower()

        if choice == "y" or choice == "yes":
            return True

        elif choice == "n" or choice == "no":
            return False

        else:
            print("Invalid selection. Please try again.")


def confirm_unsaved_changes() -> bool:
    return confirm_action("There are unsaved changes. Do you want to save now?")


def prompt_if_dirty(store: RecordStore) -> None:
    if store.has_unsaved_changes and confirm_unsaved_changes():
        display_response(store.save())


def prompt_user_input(prompt: str) -> str:
    return input(f"{prompt} ").strip()


def prompt_user_input_or_cancel(prompt: str) -> str | MenuSignal:
    response = prompt_user_input(prompt)
    return MenuSignal.CANCEL if response == "" else response


def prompt_user_input_or_default(prompt: str) -> str | MenuSignal:
    response = prompt_user_input(prompt)
    return MenuSignal.DEFAULT if response == "" else response


def prompt_parsed_or_cancel(
    prompt: str,
    parse_fn: Callable[[str], T],
    max_attempts: int,
    allow_default: bool = False,
) -> T | MenuSignal:
    """
    Prompts until `parse_fn` accepts the input or the attempts run out.

    Args:
        prompt (str): The prompt text.
        parse_fn (Callable[[str], T]): Converts raw input, raising ValueError on bad input.
        max_attempts (int): The number of invalid entries tolerated before cancelling.
        allow_default (bool, optional): If True, blank input returns `MenuSignal.DEFAULT`; otherwise it cancels.

    Returns:
        The parsed value, `MenuSignal.DEFAULT` for blank input when allowed, or `MenuSignal.CANCEL`.
    """
    for attempt in range(1, max_attempts + 1):
        raw = prompt_user_input(prompt)

        if raw == "":
            return MenuSignal.DEFAULT if allow_default else MenuSignal.CANCEL

        try:
            return parse_fn(raw)

        except ValueError as e:
            remaining = max_attempts - attempt
            print(f"Invalid input: {e} ({remaining} attempt(s) left)")

    print("Too many invalid entries. Cancelled.")
    return MenuSignal.CANCEL
