"""adbsink - Sync directories between the host and an Android device over adb."""

from .adb import AdbClient
from .android import AndroidTransport
from .exceptions import (
    AdbCommandError,
    AdbError,
    AdbNotFoundError,
    AdbSinkConfigError,
    AdbSinkError,
    DeviceNotFoundError,
    EntryUnreadableError,
    MultipleDevicesError,
    RootNotFoundError,
    TransportError,
    TransportNotFoundError,
)
from .sync import LocalTransport, SyncEngine, SyncPolicy, SyncReport

__all__ = [
    "AdbClient",
    "AndroidTransport",
    "LocalTransport",
    "SyncEngine",
    "SyncPolicy",
    "SyncReport",
    "AdbSinkError",
    "AdbSinkConfigError",
    "AdbError",
    "AdbCommandError",
    "AdbNotFoundError",
    "DeviceNotFoundError",
    "MultipleDevicesError",
    "RootNotFoundError",
    "EntryUnreadableError",
    "TransportError",
    "TransportNotFoundError",
]
