"""Transport for the filesystem of an Android device reached through adb."""

import logging
from pathlib import Path

from .adb import AdbClient
from .exceptions import TransportNotFoundError
from .sync.paths import RelativePath, join
from .sync.scanner import Entry, EntryKind
from .utils import S_IFDIR, S_IFLNK, S_IFMT, S_IFREG

logger = logging.getLogger(__name__)


class AndroidTransport:
    """Device-side transport.

    Listing uses ``adb ls``, which reports mode, size and mtime for a whole
    directory in one round trip. ``adb ls`` reports symbolic links with their
    own size and time while ``adb pull`` follows them, so links are skipped.
    Files are received from the host with ``adb push``.
    """

    def __init__(self, adb: AdbClient):
        self.adb = adb

    def exists(self, root: str) -> bool:
        try:
            self.adb.list_dir(root)
        except TransportNotFoundError:
            return False
        return True

    def list_directory(self, root: str, relative: RelativePath) -> list[Entry]:
        directory = join(root, relative)
        entries: list[Entry] = []
        for item in self.adb.list_dir(directory):
            file_type = item.mode & S_IFMT
            child = relative.child(item.name)
            if file_type == S_IFDIR:
                entries.append(Entry(relative_path=child, kind=EntryKind.DIRECTORY))
            elif file_type == S_IFREG:
                entries.append(
                    Entry(
                        relative_path=child,
                        kind=EntryKind.FILE,
                        size=item.size,
                        mtime=item.mtime,
                    )
                )
            elif file_type == S_IFLNK:
                logger.warning("Ignoring symlink: %s", join(directory, item.name))
            else:
                logger.warning(
                    "Skipping special file: %s (mode %o)",
                    join(directory, item.name),
                    item.mode,
                )
        return entries

    def copy_file(
        self, source_root: str, dest_root: str, relative: RelativePath
    ) -> None:
        source = Path(source_root).joinpath(*relative.parts)
        self.adb.push(str(source), join(dest_root, relative))

    def create_directory(self, root: str, relative: RelativePath) -> None:
        self.adb.shell("mkdir", "-p", join(root, relative))

    def delete(self, root: str, relative: RelativePath, kind: EntryKind) -> None:
        flags = "-rf" if kind == EntryKind.DIRECTORY else "-f"
        self.adb.shell("rm", flags, join(root, relative))

    def set_modified_time(
        self, root: str, relative: RelativePath, timestamp: int
    ) -> None:
        self.adb.shell("touch", "-m", "-d", f"@{timestamp}", join(root, relative))
