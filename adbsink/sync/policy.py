"""Sync policy and direction."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable


class SyncDirection(str, Enum):
    """Which side of the sync lives on the device."""

    PULL = "pull"
    """Device is the source, host is the destination"""

    PUSH = "push"
    """Host is the source, device is the destination"""


@dataclass(frozen=True)
class SyncPolicy:
    """Toggles applied to a single sync run.

    The policy is passed explicitly to every component; nothing reads it from
    module state, so one process can run several syncs with different
    policies.
    """

    preserve_times: bool = False
    """Write the source modification time onto copied files"""

    delete_orphans: bool = False
    """Delete destination entries that do not exist in the source"""

    ignore_prefixes: frozenset[str] = field(default_factory=frozenset)
    """Directories whose name starts with one of these are excluded"""

    def __post_init__(self) -> None:
        if any(not prefix for prefix in self.ignore_prefixes):
            raise ValueError("Ignore prefixes must not be empty")

    @classmethod
    def create(
        cls,
        preserve_times: bool = False,
        delete_orphans: bool = False,
        ignore_prefixes: Iterable[str] = (),
    ) -> "SyncPolicy":
        """Create a policy from any iterable of ignore prefixes."""
        return cls(
            preserve_times=preserve_times,
            delete_orphans=delete_orphans,
            ignore_prefixes=frozenset(ignore_prefixes),
        )
