"""Outcome and OutcomeStatus for executed entries."""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum

# sysexits.h
EX_OSERR = getattr(os, "EX_OSERR", 71)


class OutcomeStatus(Enum):
    SUCCESS = "success"
    EXITED = "exited"
    SIGNALED = "signaled"
    ABNORMAL = "abnormal"


@dataclass(frozen=True)
class Outcome:
    status: OutcomeStatus = OutcomeStatus.SUCCESS
    # Exit code, signal number or raw wait status, depending on status.
    code: int = 0

    @property
    def is_success(self) -> bool:
        return self.status == OutcomeStatus.SUCCESS

    @property
    def exit_status(self) -> int:
        """The exit code the sequencer itself terminates with."""
        if self.status == OutcomeStatus.SUCCESS:
            return 0
        if self.status == OutcomeStatus.EXITED:
            return self.code
        if self.status == OutcomeStatus.SIGNALED:
            return self.code + 128
        return EX_OSERR

    def describe(self, name: str) -> str:
        if self.status == OutcomeStatus.SUCCESS:
            return f"{name} succeeded"
        if self.status == OutcomeStatus.EXITED:
            return f"{name} returned {self.code}"
        if self.status == OutcomeStatus.SIGNALED:
            return f"{name} signaled {self.code}"
        return f"{name} failed with {self.code}"


def decode_status(status: int) -> Outcome:
    """Map a raw wait status, as returned by os.waitpid(), to an Outcome."""
    if os.WIFEXITED(status):
        code = os.WEXITSTATUS(status)
        if code == 0:
            return Outcome()
        return Outcome(status=OutcomeStatus.EXITED, code=code)
    if os.WIFSIGNALED(status):
        return Outcome(status=OutcomeStatus.SIGNALED, code=os.WTERMSIG(status))
    return Outcome(status=OutcomeStatus.ABNORMAL, code=status)
