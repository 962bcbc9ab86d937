# core/config.py

"""
Immutable configuration for the record store, audit log, and snapshot format.

Defaults reproduce the on-disk layout of existing snapshot files. `StoreConfig.from_env()` lets the
audit log location and attributed user be set without code changes.
"""

from __future__ import annotations

import getpass
import os
from dataclasses import dataclass

DEFAULT_AUDIT_LOG = "CMS.log"
DEFAULT_EXTENSION = ".txt"


def _default_user() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return "unknown"


@dataclass(frozen=True)
class StoreConfig:
    """
    Configuration for a `RecordStore` session (immutable).

    Attributes:
        audit_log_path: File that receives one line per mutation
        audit_user: Name attributed to every audit line
        snapshot_extension: Required file extension for OPEN and SAVE
        database_name: First metadata line of an exported snapshot
        authors: Second metadata line of an exported snapshot
        table_name: Third metadata line of an exported snapshot
        name_width: Column width of the Name field
        programme_width: Column width of the Programme field
        name_token_count: Number of whitespace tokens that make up a name when parsing
        initial_capacity: Starting number of slots in the record array
        max_input_attempts: Retries allowed for interactive numeric input before cancelling
    """

    audit_log_path: str = DEFAULT_AUDIT_LOG
    audit_user: str = "unknown"
    snapshot_extension: str = DEFAULT_EXTENSION

    # Snapshot metadata
    database_name: str = "CMS"
    authors: str = "CMS Team"
    table_name: str = "StudentRecords"

    # Layout
    name_width: int = 15
    programme_width: int = 25

    # Parsing
    name_token_count: int = 2

    initial_capacity: int = 16
    max_input_attempts: int = 3

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if not self.snapshot_extension.startswith("."):
            raise ValueError(
                f"snapshot_extension must start with '.': {self.snapshot_extension!r}"
            )
        if self.name_width <= 0 or self.programme_width <= 0:
            raise ValueError("column widths must be positive")
        if self.name_token_count < 1:
            raise ValueError(
                f"name_token_count must be at least 1: {self.name_token_count}"
            )
        if self.initial_capacity < 1:
            raise ValueError(
                f"initial_capacity must be positive: {self.initial_capacity}"
            )
        if self.max_input_attempts < 1:
            raise ValueError(
                f"max_input_attempts must be positive: {self.max_input_attempts}"
            )

    @classmethod
    def from_env(cls, **overrides) -> StoreConfig:
        """
        Builds a config from `CMS_AUDIT_LOG` and `CMS_USER`, falling back to the login name.

        Keyword overrides that are not None take precedence over the environment.
        """
        values = {
            "audit_log_path": os.environ.get("CMS_AUDIT_LOG", DEFAULT_AUDIT_LOG),
            "audit_user": os.environ.get("CMS_USER") or _default_user(),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
