"""Run configuration."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


class ListingMode(Enum):
    # Only regular files and symlinks to regular files.
    STRICT = "strict"
    # Every non-dot entry; checks happen at execution time.
    PERMISSIVE = "permissive"


@dataclass(frozen=True)
class PrefixedStderr:
    """Relay child stderr to our own stderr, prefixed with the entry path."""


@dataclass(frozen=True)
class Syslog:
    """Relay child stderr to the system log."""

    facility: int
    level: int


LogSinkConfig = Union[PrefixedStderr, Syslog, None]


@dataclass(frozen=True)
class RunOptions:
    terminator_is_zero: bool = False
    print_only: bool = False
    ignore_inaccessible: bool = False
    log_sink: LogSinkConfig = None
    base_directory: str | None = None
    listing_mode: ListingMode = ListingMode.STRICT

    @property
    def terminator(self) -> str:
        return "\0" if self.terminator_is_zero else "\n"
