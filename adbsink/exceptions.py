"""Custom exceptions for adbsink."""

from typing import Optional


class AdbSinkError(Exception):
    """Base exception for all adbsink errors."""

    pass


class AdbSinkConfigError(AdbSinkError):
    """Configuration error (invalid config file or environment value)."""

    pass


class RootNotFoundError(AdbSinkError):
    """Raised when the root of a tree to list does not exist."""

    def __init__(self, root: str):
        self.root = root
        super().__init__(f"Root directory does not exist: {root}")


class EntryUnreadableError(AdbSinkError):
    """Raised when an entry below a root cannot be listed or stat-ed.

    Listing aborts instead of skipping the entry: a partial listing could
    schedule deletions of files that still exist on the source.
    """

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read '{path}': {reason}")


class TransportError(AdbSinkError):
    """A single transport operation (list, copy, mkdir, delete, touch) failed."""

    pass


class TransportNotFoundError(TransportError):
    """The path a transport operation referred to does not exist."""

    pass


class AdbError(AdbSinkError):
    """Base exception for problems running adb."""

    pass


class AdbNotFoundError(AdbError):
    """The adb binary could not be found."""

    def __init__(self, adb_path: str):
        self.adb_path = adb_path
        super().__init__(
            f"adb binary not found: {adb_path}. "
            "Install Android platform-tools or set ADBSINK_ADB."
        )


class AdbCommandError(AdbError, TransportError):
    """An adb invocation reported an error."""

    def __init__(self, command: list[str], output: Optional[str] = None):
        self.command = command
        self.output = (output or "").strip()
        message = f"adb {' '.join(command)} failed"
        if self.output:
            message = f"{message}: {self.output}"
        super().__init__(message)


class DeviceNotFoundError(AdbError):
    """No device in 'device' state is connected."""

    def __init__(self) -> None:
        super().__init__("No device connected")


class MultipleDevicesError(AdbError):
    """More than one device is connected and none was selected."""

    def __init__(self, serials: list[str]):
        self.serials = serials
        super().__init__(
            f"More than one device connected ({', '.join(serials)}); "
            "set ANDROID_SERIAL to pick one"
        )
