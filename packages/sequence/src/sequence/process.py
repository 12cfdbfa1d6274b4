"""Process spawn and wait primitives."""

from __future__ import annotations

import os
import subprocess
from typing import Sequence


def spawn(
    executable: str,
    argv: Sequence[str],
    working_dir: str,
    capture_stderr: bool = True,
) -> subprocess.Popen:
    """Start ``executable`` with ``argv`` (argv[0] included) in ``working_dir``.

    When ``capture_stderr`` is set, the child's stderr is a pipe readable
    through ``proc.stderr``; otherwise it inherits ours. Raises OSError if the
    image could not be executed.
    """
    return subprocess.Popen(
        list(argv),
        executable=executable,
        cwd=working_dir,
        stderr=subprocess.PIPE if capture_stderr else None,
        close_fds=True,
    )


def wait_status(proc: subprocess.Popen) -> int:
    """Block until ``proc`` terminates and return its raw wait status.

    Interrupted waits are reissued; any other failure propagates as OSError.
    """
    while True:
        try:
            pid, status = os.waitpid(proc.pid, 0)
        except InterruptedError:
            continue
        if pid == proc.pid:
            break
    # Keep Popen from trying to reap the child again.
    proc.returncode = _returncode(status)
    return status


def _returncode(status: int) -> int:
    if os.WIFSIGNALED(status):
        return -os.WTERMSIG(status)
    if os.WIFEXITED(status):
        return os.WEXITSTATUS(status)
    return status
