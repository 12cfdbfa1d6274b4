"""Directory enumeration, filtering and ordering of entries to run."""

from __future__ import annotations

import os
import stat
from dataclasses import dataclass

import structlog

from sequence.errors import ListingError, describe_os_error
from sequence.options import ListingMode

logger = structlog.get_logger()


@dataclass(frozen=True)
class Entry:
    name: str
    # Display path: the directory as given on the command line, plus the name.
    full_path: str
    # Resolved absolute directory containing the entry.
    directory: str

    @property
    def executable(self) -> str:
        return os.path.join(self.directory, self.name)


def resolve_directory(directory: str, base_directory: str | None = None) -> str:
    """Return the absolute path of ``directory``, relative to ``base_directory`` if given."""
    if base_directory:
        directory = os.path.join(base_directory, directory)
    return os.path.abspath(directory)


def sort_key(name: str) -> bytes:
    """Byte-wise ordering, independent of locale."""
    return os.fsencode(name)


class EntryLister:
    """Lists the candidate entries of a directory in run order."""

    def __init__(
        self,
        directory: str,
        mode: ListingMode = ListingMode.STRICT,
        base_directory: str | None = None,
    ) -> None:
        self.directory = directory
        self.mode = mode
        self.resolved = resolve_directory(directory, base_directory)

    def list_entries(self) -> list[Entry]:
        try:
            dfd = os.open(self.resolved, os.O_RDONLY | getattr(os, "O_DIRECTORY", 0))
        except OSError as e:
            raise ListingError(
                f"Could not open '{self.directory}': {describe_os_error(e)}", cause=e
            ) from e

        try:
            names = self._scan(dfd)
        finally:
            os.close(dfd)

        entries = [
            Entry(
                name=name,
                full_path=os.path.join(self.directory, name),
                directory=self.resolved,
            )
            for name in sorted(set(names), key=sort_key)
        ]
        logger.debug(
            "directory_listed",
            directory=self.directory,
            mode=self.mode.value,
            count=len(entries),
        )
        return entries

    def _scan(self, dfd: int) -> list[str]:
        names: list[str] = []
        try:
            with os.scandir(dfd) as it:
                for de in it:
                    if de.name.startswith("."):
                        continue
                    if self.mode == ListingMode.PERMISSIVE or self._admit(dfd, de):
                        names.append(de.name)
        except OSError as e:
            raise ListingError(
                f"Could not open directory '{self.directory}': {describe_os_error(e)}",
                cause=e,
            ) from e
        return names

    def _admit(self, dfd: int, de: os.DirEntry) -> bool:
        if de.is_symlink():
            try:
                st = os.stat(de.name, dir_fd=dfd)
            except FileNotFoundError:
                logger.debug("broken_symlink_skipped", name=de.name)
                return False
            except OSError as e:
                raise ListingError(
                    f"Could not stat '{os.path.join(self.directory, de.name)}': "
                    f"{describe_os_error(e)}",
                    cause=e,
                ) from e
            return stat.S_ISREG(st.st_mode)
        return de.is_file(follow_symlinks=False)
