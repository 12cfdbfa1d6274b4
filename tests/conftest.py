"""Shared fixtures for sequence tests."""

import os

import pytest

from sequence.log import configure_logging


@pytest.fixture(autouse=True)
def quiet_logging():
    configure_logging(verbose=False)


@pytest.fixture
def make_script():
    """Write an executable shell script and return its path."""

    def _make(directory, name, body, mode=0o755):
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / name
        path.write_text("#!/bin/sh\n" + body + "\n")
        os.chmod(path, mode)
        return path

    return _make


@pytest.fixture
def run_log(tmp_path):
    """File the test scripts append to, passed to them as their first argument."""
    return tmp_path / "run.log"


class RecordingSink:
    """LogSink that keeps everything it is given."""

    def __init__(self):
        self.opened = []
        self.lines = []
        self.closed = 0

    def open(self, ident, pid):
        self.opened.append((ident, pid))

    def emit(self, line):
        self.lines.append(line)

    def close(self):
        self.closed += 1


@pytest.fixture
def recording_sink():
    return RecordingSink()
