"""CLI entry point for the sequence runner."""

from __future__ import annotations

import asyncio
import sys

import click

from sequence import __version__
from sequence.errors import EXIT_FAILURE, ConfigurationError, SequenceError
from sequence.executor import Executor
from sequence.log import configure_logging
from sequence.options import ListingMode, LogSinkConfig, PrefixedStderr, RunOptions, Syslog
from sequence.syslog_names import parse_log_target

PROG_NAME = "sequence"

EPILOG = """\b
Exit status is 0 when every executable succeeded, or the exit code of the
first executable to fail. If that executable was killed by a signal, the
status is the signal number plus 128. If it could not be executed, or if the
options are invalid, the status is 1.

\b
The stderr of each executable is read until it is closed, so a background
process that keeps it open delays the next executable. Redirect the stderr
of long-running daemons started from these scripts.

\b
Example, passing 'start' to every command in /etc/rc3.d:
    sequence /etc/rc3.d -- start
"""


class LogTarget(click.ParamType):
    """``[facility.]level`` parsed into a Syslog sink config."""

    name = "[facility.]level"

    def convert(self, value, param, ctx) -> Syslog:
        if isinstance(value, Syslog):
            return value
        try:
            return parse_log_target(value)
        except ConfigurationError as e:
            self.fail(str(e), param, ctx)


class SequenceCommand(click.Command):
    """Reports invalid usage with exit status 1 rather than click's 2."""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as e:
            e.exit_code = EXIT_FAILURE
            raise


@click.command(
    name=PROG_NAME,
    cls=SequenceCommand,
    epilog=EPILOG,
    context_settings={
        "help_option_names": ["-h", "--help"],
        "auto_envvar_prefix": "SEQUENCE",
    },
)
@click.argument("directory", type=click.Path(file_okay=False))
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.option("-0", "--zero", is_flag=True, help="Terminate names with a zero instead of newline.")
@click.option("-b", "--base-directory", default=None, type=click.Path(file_okay=False),
              help="Resolve the directory relative to this base directory.")
@click.option("-i", "--ignore-inaccessible", is_flag=True,
              help="Skip executables that cannot be executed instead of failing.")
@click.option("-p", "--print", "print_only", is_flag=True,
              help="Print the name of executables rather than execute.")
@click.option("-l", "--log-target", default=None, type=LogTarget(),
              help="Send stderr of each executable to syslog, e.g. 'daemon.info'.")
@click.option("--permissive", is_flag=True,
              help="Run every non-hidden entry, not only regular files.")
@click.option("--verbose", is_flag=True, help="Log what the runner is doing to stderr.")
@click.version_option(__version__, "-v", "--version", prog_name=PROG_NAME,
                      message="%(prog)s %(version)s")
def main(
    directory: str,
    args: tuple[str, ...],
    zero: bool,
    base_directory: str | None,
    ignore_inaccessible: bool,
    print_only: bool,
    log_target: Syslog | None,
    permissive: bool,
    verbose: bool,
):
    """Run all executables in DIRECTORY in sequence, ordered alphabetically.

    Each executable is named sensibly so it is clear which executable is
    responsible for output in logfiles. Arguments after '--' are passed to
    every executable.
    """
    configure_logging(verbose)

    log_sink: LogSinkConfig = log_target if log_target is not None else PrefixedStderr()
    options = RunOptions(
        terminator_is_zero=zero,
        print_only=print_only,
        ignore_inaccessible=ignore_inaccessible,
        log_sink=log_sink,
        base_directory=base_directory,
        listing_mode=ListingMode.PERMISSIVE if permissive else ListingMode.STRICT,
    )

    try:
        result = asyncio.run(Executor(options).run(directory, args))
    except SequenceError as e:
        click.echo(f"{PROG_NAME}: {e}", err=True)
        sys.exit(e.exit_code)

    if result.entry is not None:
        click.echo(f"{PROG_NAME}: {result.outcome.describe(result.entry.full_path)}", err=True)
    sys.exit(result.exit_status)


if __name__ == "__main__":
    main()
