"""Tests for AndroidTransport."""

from unittest.mock import Mock

import pytest

from adbsink.adb import AdbClient, DirEntry
from adbsink.android import AndroidTransport
from adbsink.exceptions import AdbCommandError, TransportNotFoundError
from adbsink.sync.paths import ROOT, RelativePath
from adbsink.sync.scanner import DirectoryScanner, EntryKind


@pytest.fixture
def adb():
    return Mock(spec=AdbClient)


@pytest.fixture
def transport(adb):
    return AndroidTransport(adb)


class TestListing:
    """Tests for listing device directories."""

    def test_maps_file_types(self, adb, transport, caplog):
        adb.list_dir.return_value = [
            DirEntry(mode=0o40771, size=4096, mtime=200, name="Camera"),
            DirEntry(mode=0o100660, size=10, mtime=100, name="a.jpg"),
            DirEntry(mode=0o120777, size=21, mtime=300, name="link"),
            DirEntry(mode=0o20666, size=0, mtime=0, name="null"),
        ]

        entries = transport.list_directory("/sdcard/DCIM", ROOT)

        adb.list_dir.assert_called_once_with("/sdcard/DCIM")
        assert [(e.name, e.kind, e.size, e.mtime) for e in entries] == [
            ("Camera", EntryKind.DIRECTORY, 0, 0),
            ("a.jpg", EntryKind.FILE, 10, 100),
        ]
        assert "Ignoring symlink: /sdcard/DCIM/link" in caplog.text
        assert "Skipping special file: /sdcard/DCIM/null" in caplog.text

    def test_nested_directory_path(self, adb, transport):
        adb.list_dir.return_value = [
            DirEntry(mode=0o100660, size=1, mtime=1, name="x.txt")
        ]

        entries = transport.list_directory("/sdcard", RelativePath.parse("a/b"))

        adb.list_dir.assert_called_once_with("/sdcard/a/b")
        assert entries[0].relative_path == RelativePath.parse("a/b/x.txt")

    def test_exists(self, adb, transport):
        adb.list_dir.return_value = []
        assert transport.exists("/sdcard")

        adb.list_dir.side_effect = TransportNotFoundError("missing")
        assert not transport.exists("/sdcard/missing")

    def test_exists_propagates_other_errors(self, adb, transport):
        adb.list_dir.side_effect = AdbCommandError(["ls", "/sdcard"], "offline")

        with pytest.raises(AdbCommandError):
            transport.exists("/sdcard")

    def test_scanner_walks_device_tree(self, adb, transport):
        listings = {
            "/sdcard/DCIM": [
                DirEntry(mode=0o40771, size=4096, mtime=1, name="Camera"),
                DirEntry(mode=0o40771, size=4096, mtime=1, name=".thumbnails"),
            ],
            "/sdcard/DCIM/Camera": [
                DirEntry(mode=0o100660, size=5, mtime=9, name="IMG 1.jpg"),
            ],
        }
        adb.list_dir.side_effect = lambda path: listings[path]

        entries = DirectoryScanner(transport, ignore_prefixes=[".thumb"]).scan(
            "/sdcard/DCIM"
        )

        assert [e.relative_path.as_posix() for e in entries] == [
            "Camera",
            "Camera/IMG 1.jpg",
        ]


class TestMutations:
    """Tests for commands that change the device filesystem."""

    def test_copy_file_pushes(self, adb, transport, tmp_path):
        transport.copy_file(
            str(tmp_path), "/sdcard/Music", RelativePath.parse("Album/01.mp3")
        )

        adb.push.assert_called_once_with(
            str(tmp_path / "Album" / "01.mp3"), "/sdcard/Music/Album/01.mp3"
        )

    def test_create_directory(self, adb, transport):
        transport.create_directory("/sdcard/Music", RelativePath.parse("Album"))

        adb.shell.assert_called_once_with("mkdir", "-p", "/sdcard/Music/Album")

    def test_delete_directory_and_file(self, adb, transport):
        transport.delete("/sdcard", RelativePath.parse("old"), EntryKind.DIRECTORY)
        transport.delete("/sdcard", RelativePath.parse("x.txt"), EntryKind.FILE)

        assert adb.shell.call_args_list[0].args == ("rm", "-rf", "/sdcard/old")
        assert adb.shell.call_args_list[1].args == ("rm", "-f", "/sdcard/x.txt")

    def test_set_modified_time(self, adb, transport):
        transport.set_modified_time("/sdcard", RelativePath.parse("x.txt"), 1700000000)

        adb.shell.assert_called_once_with(
            "touch", "-m", "-d", "@1700000000", "/sdcard/x.txt"
        )

    def test_command_failure_propagates(self, adb, transport):
        adb.push.side_effect = AdbCommandError(["push"], "Read-only file system")

        with pytest.raises(AdbCommandError):
            transport.copy_file("/tmp", "/system", RelativePath.parse("x"))
