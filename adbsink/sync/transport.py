"""Transport capability used by the sync engine, and the host implementation.

A transport owns one filesystem (the host, or the device). The engine lists
both sides through their transports and applies every change through the
destination transport, whose ``copy_file`` receives a file from the source
side. Which transports are paired is the only thing that distinguishes a pull
from a push.
"""

import logging
import os
import shutil
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Protocol

from ..exceptions import TransportError, TransportNotFoundError
from .paths import RelativePath, join
from .policy import SyncDirection
from .scanner import Entry, EntryKind

if TYPE_CHECKING:
    from ..adb import AdbClient

logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Filesystem primitives the sync engine needs from one side."""

    def exists(self, root: str) -> bool:
        """Check that ``root`` is an existing directory."""
        ...

    def list_directory(self, root: str, relative: RelativePath) -> list[Entry]:
        """List the direct children of ``root/relative``.

        Raises:
            TransportNotFoundError: If the directory does not exist
            TransportError: If it cannot be read
        """
        ...

    def copy_file(
        self, source_root: str, dest_root: str, relative: RelativePath
    ) -> None:
        """Copy ``source_root/relative`` from the source side into this side."""
        ...

    def create_directory(self, root: str, relative: RelativePath) -> None:
        """Create ``root/relative`` and its parents; no error if it exists."""
        ...

    def delete(self, root: str, relative: RelativePath, kind: EntryKind) -> None:
        """Delete a file, or a directory with all its contents."""
        ...

    def set_modified_time(
        self, root: str, relative: RelativePath, timestamp: int
    ) -> None:
        """Set the modification time of ``root/relative``."""
        ...


class LocalTransport:
    """Transport for the host filesystem.

    Files are copied from another host directory by default. When an
    :class:`AdbClient` is given, files are received from the device with
    ``adb pull`` instead, which is how a pull writes to the host.
    """

    def __init__(self, adb: Optional["AdbClient"] = None):
        """Initialize local transport.

        Args:
            adb: adb client used to pull files from the device, or None to
                copy from the local filesystem
        """
        self.adb = adb

    @staticmethod
    def _path(root: str, relative: RelativePath) -> Path:
        return Path(root).joinpath(*relative.parts)

    def exists(self, root: str) -> bool:
        return Path(root).is_dir()

    def list_directory(self, root: str, relative: RelativePath) -> list[Entry]:
        directory = self._path(root, relative)
        entries: list[Entry] = []
        try:
            with os.scandir(directory) as it:
                for item in it:
                    child = relative.child(item.name)
                    # Follows symlinks: a link is listed as what it points to
                    st = item.stat()
                    entry = Entry.from_stat(child, st)
                    if entry is None:
                        logger.warning("Skipping special file: %s", item.path)
                        continue
                    entries.append(entry)
        except FileNotFoundError as e:
            if not directory.exists():
                raise TransportNotFoundError(f"No such directory: {directory}") from e
            raise TransportError(f"Cannot stat entry in {directory}: {e}") from e
        except NotADirectoryError as e:
            raise TransportNotFoundError(f"Not a directory: {directory}") from e
        except OSError as e:
            raise TransportError(f"Cannot list {directory}: {e}") from e
        return entries

    def copy_file(
        self, source_root: str, dest_root: str, relative: RelativePath
    ) -> None:
        target = self._path(dest_root, relative)
        if self.adb is not None:
            self.adb.pull(join(source_root, relative), str(target))
            return

        source = self._path(source_root, relative)
        logger.debug("Copying %s -> %s", source, target)
        try:
            shutil.copyfile(source, target)
        except OSError as e:
            raise TransportError(f"Cannot copy {source} to {target}: {e}") from e

    def create_directory(self, root: str, relative: RelativePath) -> None:
        target = self._path(root, relative)
        logger.debug("Creating directory %s", target)
        try:
            target.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise TransportError(f"Cannot create directory {target}: {e}") from e

    def delete(self, root: str, relative: RelativePath, kind: EntryKind) -> None:
        target = self._path(root, relative)
        logger.debug("Deleting %s %s", kind.value, target)
        try:
            if kind == EntryKind.DIRECTORY:
                shutil.rmtree(target)
            else:
                target.unlink()
        except FileNotFoundError as e:
            raise TransportNotFoundError(f"No such {kind.value}: {target}") from e
        except OSError as e:
            raise TransportError(f"Cannot delete {target}: {e}") from e

    def set_modified_time(
        self, root: str, relative: RelativePath, timestamp: int
    ) -> None:
        target = self._path(root, relative)
        try:
            atime = target.stat().st_atime
            os.utime(target, (atime, timestamp))
        except OSError as e:
            raise TransportError(f"Cannot set modification time of {target}: {e}") from e


def build_transports(
    direction: SyncDirection, adb: "AdbClient"
) -> tuple[Transport, Transport]:
    """Pair the transports for a sync direction.

    Args:
        direction: Pull (device to host) or push (host to device)
        adb: Connected adb client

    Returns:
        Tuple of (source_transport, destination_transport)
    """
    from ..android import AndroidTransport

    device = AndroidTransport(adb)
    if direction == SyncDirection.PULL:
        return device, LocalTransport(adb=adb)
    return LocalTransport(), device
