"""Configuration management for adbsink."""

import logging
import os
from pathlib import Path
from typing import Optional

from .exceptions import AdbSinkConfigError
from .utils import CONFIG_DIR_NAME, CONFIG_FILE_NAME, DEFAULT_ADB_PATH

logger = logging.getLogger(__name__)

ENV_ADB_PATH = "ADBSINK_ADB"
ENV_TIMEOUT = "ADBSINK_TIMEOUT"
ENV_COMPRESSION = "ADBSINK_COMPRESSION"

# Algorithms accepted by `adb push/pull -z`
COMPRESSION_ALGORITHMS = ("any", "none", "brotli", "lz4", "zstd")


class Config:
    """Reads adbsink settings from the environment and the config file.

    Environment variables take precedence over the config file. The config
    file holds ``KEY=value`` lines; blank lines and ``#`` comments are ignored.

    Recognized keys:
        ADB_PATH: adb binary to run
        TIMEOUT: timeout in seconds for a single adb invocation
        COMPRESSION: transfer compression for push/pull (default "any";
            "none" omits the flag for adb versions without -z)
        IGNORE_DIRS: comma separated directory-name prefixes always ignored
    """

    def __init__(self, config_path: Optional[Path] = None):
        self.config_path = config_path or self.get_config_path()
        self._values: Optional[dict[str, str]] = None

    @staticmethod
    def get_config_path() -> Path:
        """Get the default path of the config file."""
        return Path.home() / CONFIG_DIR_NAME / CONFIG_FILE_NAME

    def _load(self) -> dict[str, str]:
        if self._values is not None:
            return self._values

        values: dict[str, str] = {}
        if self.config_path.is_file():
            try:
                text = self.config_path.read_text(encoding="utf-8")
            except OSError as e:
                raise AdbSinkConfigError(
                    f"Cannot read config file {self.config_path}: {e}"
                ) from e

            for lineno, raw_line in enumerate(text.splitlines(), start=1):
                line = raw_line.strip()
                if not line or line.startswith("#"):
                    continue
                if "=" not in line:
                    raise AdbSinkConfigError(
                        f"{self.config_path}:{lineno}: expected KEY=value"
                    )
                key, value = line.split("=", 1)
                values[key.strip().upper()] = value.strip().strip('"')
            logger.debug("Loaded %d setting(s) from %s", len(values), self.config_path)

        self._values = values
        return values

    def reload(self) -> None:
        """Forget cached config file values."""
        self._values = None

    def get(self, key: str) -> Optional[str]:
        """Get a raw value from the config file."""
        return self._load().get(key.upper())

    @property
    def adb_path(self) -> str:
        """adb binary to run."""
        return os.environ.get(ENV_ADB_PATH) or self.get("ADB_PATH") or DEFAULT_ADB_PATH

    @property
    def timeout(self) -> Optional[float]:
        """Timeout in seconds for one adb invocation, None for no timeout."""
        raw = os.environ.get(ENV_TIMEOUT) or self.get("TIMEOUT")
        if not raw:
            return None
        try:
            timeout = float(raw)
        except ValueError as e:
            raise AdbSinkConfigError(f"Invalid timeout value: {raw!r}") from e
        if timeout <= 0:
            raise AdbSinkConfigError(f"Timeout must be positive, got {raw!r}")
        return timeout

    @property
    def compression(self) -> str:
        """Compression algorithm passed to `adb push/pull -z`."""
        raw = os.environ.get(ENV_COMPRESSION) or self.get("COMPRESSION") or "any"
        value = raw.strip().lower()
        if value not in COMPRESSION_ALGORITHMS:
            raise AdbSinkConfigError(
                f"Invalid compression {raw!r}; expected one of "
                f"{', '.join(COMPRESSION_ALGORITHMS)}"
            )
        return value

    @property
    def default_ignore_prefixes(self) -> list[str]:
        """Directory-name prefixes ignored on every sync."""
        raw = self.get("IGNORE_DIRS")
        if not raw:
            return []
        return [prefix.strip() for prefix in raw.split(",") if prefix.strip()]


# Global config instance
config = Config()
