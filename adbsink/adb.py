"""Client for the adb command line tool."""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
from dataclasses import dataclass

from .config import config
from .exceptions import (
    AdbCommandError,
    AdbNotFoundError,
    DeviceNotFoundError,
    MultipleDevicesError,
    TransportNotFoundError,
)
from .utils import parse_hex

logger = logging.getLogger(__name__)

# Printed by `adb start-server` when it has to spawn the daemon
DAEMON_NOT_RUNNING = "* daemon not running"


@dataclass(frozen=True)
class DirEntry:
    """One record of `adb ls` output."""

    mode: int
    size: int
    mtime: int
    name: str


class AdbClient:
    """Runs adb commands against a single connected device."""

    def __init__(
        self,
        adb_path: str | None = None,
        serial: str | None = None,
        timeout: float | None = None,
        compression: str | None = None,
    ):
        """Initialize adb client.

        Args:
            adb_path: adb binary (uses config if not provided)
            serial: Device serial passed as ``-s`` (defaults to ANDROID_SERIAL)
            timeout: Timeout in seconds for one invocation (uses config if
                not provided; None means no timeout)
            compression: Algorithm for ``push/pull -z`` (uses config if not
                provided; "none" leaves the flag out)
        """
        self.adb_path = adb_path or config.adb_path
        self.serial = serial or os.environ.get("ANDROID_SERIAL")
        self.timeout = timeout if timeout is not None else config.timeout
        self.compression = compression or config.compression

    def _command(self, args: list[str]) -> list[str]:
        command = [self.adb_path]
        if self.serial:
            command += ["-s", self.serial]
        return command + args

    def run(self, args: list[str], verbose: bool = True) -> str:
        """Run ``adb <args>`` and return its stdout.

        Args:
            args: Arguments after the adb binary
            verbose: Log the command at INFO level instead of DEBUG

        Returns:
            Decoded stdout

        Raises:
            AdbNotFoundError: If the adb binary does not exist
            AdbCommandError: If adb exits non-zero, writes to stderr, or
                reports an error on stdout
        """
        command = self._command(args)
        logger.log(
            logging.INFO if verbose else logging.DEBUG, "[ADB] %s", shlex.join(command)
        )

        try:
            result = subprocess.run(
                command,
                capture_output=True,
                encoding="utf-8",
                errors="replace",
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise AdbNotFoundError(self.adb_path) from e
        except subprocess.TimeoutExpired as e:
            raise AdbCommandError(args, f"timed out after {self.timeout}s") from e

        if result.stderr:
            raise AdbCommandError(args, result.stderr)
        if result.stdout.startswith("adb: error:") or result.returncode != 0:
            raise AdbCommandError(args, result.stdout)
        return result.stdout

    def shell(self, *args: str, verbose: bool = True) -> str:
        """Run a command in ``adb shell``; arguments are quoted for the device shell."""
        return self.run(["shell", shlex.join(args)], verbose=verbose)

    def start_server(self) -> None:
        """Start the adb server, tolerating the daemon start-up banner."""
        try:
            self.run(["start-server"], verbose=False)
        except AdbCommandError as e:
            if e.output.startswith(DAEMON_NOT_RUNNING):
                logger.debug("adb daemon started")
                return
            raise

    def devices(self) -> list[str]:
        """Return serials of connected devices in 'device' state."""
        output = self.run(["devices"], verbose=False)
        serials = []
        for line in output.splitlines():
            if "\tdevice" in line:
                serials.append(line.split("\t", 1)[0])
        return serials

    def ensure_device(self) -> str:
        """Check that exactly one device is usable and return its serial.

        Raises:
            DeviceNotFoundError: If no device is connected (or the selected
                serial is not among them)
            MultipleDevicesError: If several devices are connected and none
                is selected
        """
        serials = self.devices()
        if self.serial:
            if self.serial not in serials:
                raise DeviceNotFoundError()
            return self.serial
        if not serials:
            raise DeviceNotFoundError()
        if len(serials) > 1:
            raise MultipleDevicesError(serials)
        logger.debug("Using device %s", serials[0])
        return serials[0]

    def list_dir(self, path: str) -> list[DirEntry]:
        """List a device directory with ``adb ls``.

        Each output line is ``<mode> <size> <mtime> <name>`` with the numbers
        in hex. A missing directory produces no output at all, while an
        existing one always lists "." and "..".

        Raises:
            TransportNotFoundError: If the directory does not exist
            AdbCommandError: If adb fails or prints an unparsable line
        """
        output = self.run(["ls", path], verbose=False)
        entries: list[DirEntry] = []
        found_self = False
        for line in output.splitlines():
            if not line:
                continue
            fields = line.split(" ", 3)
            if len(fields) != 4:
                raise AdbCommandError(["ls", path], f"unexpected line: {line!r}")
            mode_hex, size_hex, mtime_hex, name = fields
            if name == ".":
                found_self = True
                continue
            if name == "..":
                continue
            try:
                entries.append(
                    DirEntry(
                        mode=parse_hex(mode_hex),
                        size=parse_hex(size_hex),
                        mtime=parse_hex(mtime_hex),
                        name=name,
                    )
                )
            except ValueError as e:
                raise AdbCommandError(
                    ["ls", path], f"unexpected line: {line!r}"
                ) from e

        if not found_self:
            raise TransportNotFoundError(f"No such directory on device: {path}")
        return entries

    def _compression_args(self) -> list[str]:
        if self.compression == "none":
            return []
        return ["-z", self.compression]

    def pull(self, source: str, destination: str) -> str:
        """Copy a file from the device to the host."""
        return self.run(["pull", *self._compression_args(), source, destination])

    def push(self, source: str, destination: str) -> str:
        """Copy a file from the host to the device (parents are created)."""
        return self.run(["push", *self._compression_args(), source, destination])
