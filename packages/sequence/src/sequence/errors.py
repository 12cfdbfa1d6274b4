"""Error hierarchy for fatal sequencer conditions."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from sequence.lister import Entry

EXIT_FAILURE = 1


class SequenceError(Exception):
    """Base error for all fatal sequencer conditions."""

    def __init__(self, message: str, *, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause

    @property
    def exit_code(self) -> int:
        return EXIT_FAILURE


class ConfigurationError(SequenceError):
    pass


class ListingError(SequenceError):
    pass


class EntryError(SequenceError):
    """Error tied to a single entry of the run."""

    def __init__(self, message: str, *, entry: Entry, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.entry = entry


class SpawnError(EntryError):
    pass


class WaitError(EntryError):
    pass


class RelayError(EntryError):
    pass


def describe_os_error(err: Exception) -> str:
    """Return the system error text for an OSError, like strerror(3)."""
    if isinstance(err, OSError) and err.errno is not None:
        return os.strerror(err.errno)
    return str(err)
