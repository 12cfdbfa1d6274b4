"""Sequential execution of directory entries."""

from __future__ import annotations

import asyncio
import os
import stat
from dataclasses import dataclass
from enum import Enum
from typing import Sequence

import click
import structlog

from sequence.errors import RelayError, SpawnError, WaitError, describe_os_error
from sequence.lister import Entry, EntryLister
from sequence.options import RunOptions
from sequence.outcome import Outcome, decode_status
from sequence.process import spawn, wait_status
from sequence.relay import LogSink, StderrRelay, make_sink

logger = structlog.get_logger()


class ExecutorState(Enum):
    IDLE = "idle"
    LISTING = "listing"
    SPAWNING = "spawning"
    RUNNING = "running"
    DECODING = "decoding"
    COMPLETED = "completed"
    HALTED = "halted"


@dataclass(frozen=True)
class RunResult:
    outcome: Outcome
    # The entry that halted the run, if any.
    entry: Entry | None = None

    @property
    def exit_status(self) -> int:
        return self.outcome.exit_status


def is_executable_file(path: str) -> bool:
    """Best-effort check that ``path`` is a regular file we may execute.

    Advisory only: the file can change between this check and any later use.
    """
    try:
        st = os.stat(path)
    except OSError:
        return False
    return stat.S_ISREG(st.st_mode) and os.access(path, os.X_OK)


class Executor:
    """Runs every entry of a directory in order, stopping at the first failure."""

    def __init__(self, options: RunOptions | None = None, sink: LogSink | None = None) -> None:
        self.options = options or RunOptions()
        # An explicit sink replaces the one described by options.log_sink.
        self._sink: LogSink | None = sink or make_sink(self.options.log_sink)
        self._state = ExecutorState.IDLE

    @property
    def state(self) -> ExecutorState:
        return self._state

    def _transition(self, state: ExecutorState, **data: object) -> None:
        self._state = state
        logger.debug("executor_state", state=state.value, **data)

    async def run(self, directory: str, args: Sequence[str] = ()) -> RunResult:
        """List ``directory`` and run its entries, passing ``args`` to each.

        Raises SequenceError subclasses for listing, spawn, wait and relay
        failures.
        """
        self._transition(ExecutorState.LISTING, directory=directory)
        try:
            entries = EntryLister(
                directory,
                mode=self.options.listing_mode,
                base_directory=self.options.base_directory,
            ).list_entries()
        except Exception:
            self._transition(ExecutorState.HALTED)
            raise

        for entry in entries:
            if self.options.print_only:
                self._print_entry(entry)
                continue

            try:
                outcome = await self.run_entry(entry, args)
            except Exception:
                self._transition(ExecutorState.HALTED, entry=entry.full_path)
                raise

            if not outcome.is_success:
                self._transition(
                    ExecutorState.HALTED,
                    entry=entry.full_path,
                    outcome=outcome.status.value,
                )
                return RunResult(outcome=outcome, entry=entry)

        self._transition(ExecutorState.COMPLETED, count=len(entries))
        return RunResult(outcome=Outcome())

    def _print_entry(self, entry: Entry) -> None:
        if self.options.ignore_inaccessible and not is_executable_file(entry.executable):
            logger.debug("entry_skipped", entry=entry.full_path)
            return
        click.echo(entry.full_path + self.options.terminator, nl=False)

    async def run_entry(self, entry: Entry, args: Sequence[str] = ()) -> Outcome:
        """Run a single entry to completion and decode how it terminated."""
        self._transition(ExecutorState.SPAWNING, entry=entry.full_path)
        try:
            proc = spawn(
                entry.executable,
                [entry.full_path, *args],
                working_dir=entry.directory,
                capture_stderr=self._sink is not None,
            )
        except PermissionError as e:
            if self.options.ignore_inaccessible:
                logger.info("entry_skipped", entry=entry.full_path, reason=str(e))
                return Outcome()
            raise self._spawn_error(entry, e) from e
        except OSError as e:
            raise self._spawn_error(entry, e) from e

        self._transition(ExecutorState.RUNNING, entry=entry.full_path, pid=proc.pid)
        try:
            if self._sink is not None and proc.stderr is not None:
                with StderrRelay(self._sink, entry.full_path, proc.pid) as relay:
                    drain = asyncio.create_task(asyncio.to_thread(relay.drain, proc.stderr))
                    try:
                        status = await self._wait(entry, proc)
                    finally:
                        # Output of this entry is relayed before the next starts.
                        await asyncio.wait([drain])
                        relay_error = drain.exception()
                if relay_error is not None:
                    raise RelayError(
                        f"Could not relay stderr of '{entry.full_path}': "
                        f"{describe_os_error(relay_error)}",
                        entry=entry,
                        cause=relay_error,
                    ) from relay_error
            else:
                status = await self._wait(entry, proc)
        finally:
            if proc.stderr is not None:
                proc.stderr.close()

        self._transition(ExecutorState.DECODING, entry=entry.full_path, status=status)
        outcome = decode_status(status)
        logger.debug(
            "entry_finished",
            entry=entry.full_path,
            outcome=outcome.status.value,
            code=outcome.code,
        )
        return outcome

    @staticmethod
    def _spawn_error(entry: Entry, err: OSError) -> SpawnError:
        return SpawnError(
            f"Could not execute '{entry.full_path}': {describe_os_error(err)}",
            entry=entry,
            cause=err,
        )

    @staticmethod
    async def _wait(entry: Entry, proc) -> int:
        try:
            return await asyncio.to_thread(wait_status, proc)
        except OSError as e:
            raise WaitError(
                f"waitpid for '{entry.full_path}' failed: {describe_os_error(e)}",
                entry=entry,
                cause=e,
            ) from e
