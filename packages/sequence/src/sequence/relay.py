"""Line-by-line relay of a child's stderr to a log sink."""

from __future__ import annotations

import sys
import syslog
from typing import BinaryIO, Callable, Protocol

import structlog

from sequence.options import LogSinkConfig, PrefixedStderr, Syslog

logger = structlog.get_logger()

CHUNK_SIZE = 4096


class LogSink(Protocol):
    """Destination for relayed lines of one entry at a time."""

    def open(self, ident: str, pid: int) -> None: ...

    def emit(self, line: bytes) -> None: ...

    def close(self) -> None: ...


class PrefixedStderrSink:
    """Writes ``<ident>: <line>`` to a binary stream, our own stderr by default."""

    def __init__(self, stream: BinaryIO | None = None) -> None:
        self._stream = stream
        self._prefix = b""

    def open(self, ident: str, pid: int) -> None:
        self._prefix = ident.encode("utf-8", errors="surrogateescape") + b": "

    def emit(self, line: bytes) -> None:
        stream = self._stream or sys.stderr.buffer
        stream.write(self._prefix + line + b"\n")
        stream.flush()

    def close(self) -> None:
        self._prefix = b""


class SyslogSink:
    """Writes each line to the system log at a fixed facility and level."""

    def __init__(self, facility: int, level: int) -> None:
        self.facility = facility
        self.level = level

    def open(self, ident: str, pid: int) -> None:
        syslog.openlog(ident=f"{ident}[{pid}]", logoption=0, facility=self.facility)

    def emit(self, line: bytes) -> None:
        # syslog(3) takes C strings; keep NULs visible instead of cutting the line.
        line = line.replace(b"\0", b"\\0")
        syslog.syslog(self.level, line.decode("utf-8", errors="replace"))

    def close(self) -> None:
        syslog.closelog()


def make_sink(config: LogSinkConfig) -> LogSink | None:
    if config is None:
        return None
    if isinstance(config, PrefixedStderr):
        return PrefixedStderrSink()
    if isinstance(config, Syslog):
        return SyslogSink(config.facility, config.level)
    raise TypeError(f"Unsupported log sink: {config!r}")


class LineSplitter:
    """Splits a byte stream into lines, holding at most one partial line."""

    def __init__(self, emit: Callable[[bytes], None]) -> None:
        self._emit = emit
        self._pending = bytearray()

    def feed(self, chunk: bytes) -> None:
        self._pending += chunk
        start = 0
        while True:
            end = self._pending.find(b"\n", start)
            if end < 0:
                break
            self._emit(bytes(self._pending[start:end]))
            start = end + 1
        del self._pending[:start]

    def flush(self) -> None:
        # Trailing output without a final newline is still a line.
        if self._pending:
            line = bytes(self._pending)
            self._pending.clear()
            self._emit(line)


class StderrRelay:
    """Forwards one child's stderr to ``sink`` until the stream closes."""

    def __init__(self, sink: LogSink, ident: str, pid: int) -> None:
        self.sink = sink
        self.ident = ident
        self.pid = pid
        self.lines = 0
        self.error: Exception | None = None

    def __enter__(self) -> StderrRelay:
        self.sink.open(self.ident, self.pid)
        return self

    def __exit__(self, *exc: object) -> None:
        self.sink.close()

    def _forward(self, line: bytes) -> None:
        # After the sink fails, lines are discarded so the pipe keeps draining.
        if self.error is not None:
            return
        try:
            self.sink.emit(line)
        except Exception as e:
            self.error = e
            return
        self.lines += 1

    def drain(self, stream: BinaryIO) -> int:
        """Read ``stream`` to end of file, forwarding lines. Returns the line count.

        The stream is always read to its end. If the sink failed on the way,
        its first error is raised once end of file is reached.
        """
        splitter = LineSplitter(self._forward)
        while True:
            try:
                chunk = stream.read1(CHUNK_SIZE)
            except InterruptedError:
                continue
            if not chunk:
                break
            splitter.feed(chunk)
        splitter.flush()
        logger.debug("stderr_drained", entry=self.ident, pid=self.pid, lines=self.lines)
        if self.error is not None:
            raise self.error
        return self.lines
