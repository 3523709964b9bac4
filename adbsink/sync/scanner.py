"""Directory scanning utilities for sync operations."""

import logging
import os
import stat
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Iterable, Optional

from ..exceptions import (
    EntryUnreadableError,
    RootNotFoundError,
    TransportError,
    TransportNotFoundError,
)
from .paths import ROOT, RelativePath, join

if TYPE_CHECKING:
    from .transport import Transport

logger = logging.getLogger(__name__)


class EntryKind(str, Enum):
    """Kind of a listed entry."""

    FILE = "file"
    DIRECTORY = "directory"


@dataclass(frozen=True)
class Entry:
    """Represents one file or directory seen while listing a tree."""

    relative_path: RelativePath
    """Path relative to the sync root"""

    kind: EntryKind
    """File or directory"""

    size: int = 0
    """File size in bytes (0 for directories)"""

    mtime: int = 0
    """Last modification time in whole seconds (0 for directories)"""

    @property
    def is_dir(self) -> bool:
        return self.kind == EntryKind.DIRECTORY

    @property
    def is_file(self) -> bool:
        return self.kind == EntryKind.FILE

    @property
    def name(self) -> str:
        return self.relative_path.name

    @classmethod
    def from_stat(
        cls, relative_path: RelativePath, st: os.stat_result
    ) -> Optional["Entry"]:
        """Create an Entry from a stat result.

        Args:
            relative_path: Path relative to the sync root
            st: Result of os.stat() for the entry

        Returns:
            Entry instance, or None for anything that is neither a regular
            file nor a directory (sockets, fifos, devices)
        """
        if stat.S_ISDIR(st.st_mode):
            return cls(relative_path=relative_path, kind=EntryKind.DIRECTORY)
        if stat.S_ISREG(st.st_mode):
            # Truncate to whole seconds; device timestamps have no fraction
            return cls(
                relative_path=relative_path,
                kind=EntryKind.FILE,
                size=st.st_size,
                mtime=int(st.st_mtime),
            )
        return None


class DirectoryScanner:
    """Lists a tree through a transport and returns a sorted, flat listing.

    Directories whose name starts with one of the ignore prefixes are pruned
    during the walk: they are never listed, so their contents cost nothing.

    Examples:
        >>> scanner = DirectoryScanner(LocalTransport(), ignore_prefixes=[".git"])
        >>> entries = scanner.scan("/home/user/photos")
        >>> [str(e.relative_path) for e in entries]
        ['2024', '2024/img_001.jpg', 'notes.txt']
    """

    def __init__(self, transport: "Transport", ignore_prefixes: Iterable[str] = ()):
        """Initialize directory scanner.

        Args:
            transport: Transport used to list directories
            ignore_prefixes: Directory-name prefixes to exclude
        """
        self.transport = transport
        self.ignore_prefixes = tuple(ignore_prefixes)

    def should_ignore(self, entry: Entry) -> bool:
        """Check if an entry is an ignored directory.

        Only directories are matched; a file named like an ignore prefix is
        synced normally.
        """
        return entry.is_dir and any(
            entry.name.startswith(prefix) for prefix in self.ignore_prefixes
        )

    def scan(self, root: str) -> list[Entry]:
        """Recursively list a tree.

        Args:
            root: Root directory in the transport's namespace

        Returns:
            Entries sorted so that every directory precedes its contents

        Raises:
            RootNotFoundError: If the root does not exist
            EntryUnreadableError: If any directory below the root cannot be
                listed; the whole listing is abandoned
        """
        if not self.transport.exists(root):
            raise RootNotFoundError(root)

        entries: list[Entry] = []
        pending: list[RelativePath] = [ROOT]

        while pending:
            directory = pending.pop()
            try:
                children = self.transport.list_directory(root, directory)
            except TransportNotFoundError as e:
                if directory.is_root():
                    raise RootNotFoundError(root) from e
                # Vanished between listing its parent and listing itself
                raise EntryUnreadableError(join(root, directory), str(e)) from e
            except TransportError as e:
                raise EntryUnreadableError(join(root, directory), str(e)) from e

            for entry in children:
                if self.should_ignore(entry):
                    logger.debug("Ignoring directory: %s", entry.relative_path)
                    continue
                entries.append(entry)
                if entry.is_dir:
                    pending.append(entry.relative_path)

        entries.sort(key=lambda e: e.relative_path)
        logger.debug("Listed %d entries under %s", len(entries), root)
        return entries
