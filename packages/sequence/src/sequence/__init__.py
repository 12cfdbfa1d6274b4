"""Run all executables in a directory in sequence."""

__version__ = "1.1.0"

from sequence.errors import (
    ConfigurationError,
    ListingError,
    RelayError,
    SequenceError,
    SpawnError,
    WaitError,
)
from sequence.executor import Executor, ExecutorState, RunResult
from sequence.lister import Entry, EntryLister, resolve_directory
from sequence.options import ListingMode, PrefixedStderr, RunOptions, Syslog
from sequence.outcome import Outcome, OutcomeStatus, decode_status
from sequence.relay import LineSplitter, StderrRelay
from sequence.syslog_names import parse_log_target

__all__ = [
    "ConfigurationError",
    "Entry",
    "EntryLister",
    "Executor",
    "ExecutorState",
    "LineSplitter",
    "ListingError",
    "ListingMode",
    "RelayError",
    "Outcome",
    "OutcomeStatus",
    "PrefixedStderr",
    "RunOptions",
    "RunResult",
    "SequenceError",
    "SpawnError",
    "StderrRelay",
    "Syslog",
    "WaitError",
    "decode_status",
    "parse_log_target",
    "resolve_directory",
]
