"""Utility functions for adbsink."""

from datetime import datetime
from typing import Optional

# =============================================================================
# Constants
# =============================================================================

# Name of the adb binary when nothing else is configured
DEFAULT_ADB_PATH: str = "adb"

# Location of the user config file, relative to the home directory
CONFIG_DIR_NAME: str = ".config/adbsink"
CONFIG_FILE_NAME: str = "config"

# File type bits of st_mode (see stat(2))
S_IFMT: int = 0o170000
S_IFDIR: int = 0o040000
S_IFREG: int = 0o100000
S_IFLNK: int = 0o120000


# =============================================================================
# adb output parsing
# =============================================================================


def parse_hex(value: str) -> int:
    """Parse a hexadecimal field of `adb ls` output.

    Args:
        value: Hex string without prefix (e.g., "000041f9")

    Returns:
        Parsed integer

    Raises:
        ValueError: If the string is not valid hexadecimal
    """
    if not value:
        raise ValueError("empty hex field")
    return int(value, 16)


# =============================================================================
# Size formatting utilities
# =============================================================================


def format_size(size_bytes: int) -> str:
    """Format file size in human-readable format.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted size string (e.g., "1.5 MB")
    """
    size = float(size_bytes)
    for unit in ["B", "KB", "MB", "GB", "TB"]:
        if size < 1024.0:
            if unit == "B":
                return f"{int(size)} {unit}"
            return f"{size:.1f} {unit}"
        size /= 1024.0
    return f"{size:.1f} PB"


# =============================================================================
# Timestamp utilities
# =============================================================================


def format_timestamp(timestamp: Optional[int]) -> str:
    """Format a Unix timestamp for display.

    Args:
        timestamp: Seconds since the epoch, or None

    Returns:
        Local time as "YYYY-MM-DD HH:MM:SS", or "-" when unknown
    """
    if not timestamp:
        return "-"
    try:
        return datetime.fromtimestamp(timestamp).strftime("%Y-%m-%d %H:%M:%S")
    except (OverflowError, OSError, ValueError):
        return str(timestamp)
