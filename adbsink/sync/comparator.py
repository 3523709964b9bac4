"""Tree comparison logic for sync operations."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

from .paths import RelativePath
from .policy import SyncPolicy
from .scanner import Entry, EntryKind

logger = logging.getLogger(__name__)


class SyncAction(str, Enum):
    """Actions that can be taken during sync."""

    COPY = "copy"
    """Transfer file or create directory on the destination"""

    RECURSE = "recurse"
    """Directory exists on both sides (informational)"""

    SKIP = "skip"
    """File is identical on both sides (no action needed)"""

    DELETE = "delete"
    """Remove entry from the destination"""


@dataclass(frozen=True)
class SyncDecision:
    """Represents a decision about how to sync one path."""

    action: SyncAction
    """Action to take"""

    relative_path: RelativePath
    """Path relative to both roots"""

    kind: EntryKind
    """Kind of the entry the action applies to"""

    reason: str
    """Human-readable reason for this decision"""

    source: Optional[Entry] = None
    """Source entry (if exists)"""

    destination: Optional[Entry] = None
    """Destination entry (if exists)"""


class FileComparator:
    """Merges a source and a destination listing into ordered sync decisions.

    Both listings must be sorted by path (as returned by
    :meth:`DirectoryScanner.scan`). The merge walks them once with a cursor
    each, so its cost is linear in the total number of entries. Because a
    sorted listing is in pre-order, the decisions are too: a directory is
    created or deleted before anything beneath it is touched.
    """

    def __init__(self, policy: SyncPolicy):
        """Initialize file comparator.

        Args:
            policy: Sync policy; only ``delete_orphans`` affects the decisions
        """
        self.policy = policy

    def compare(
        self, source: Sequence[Entry], destination: Sequence[Entry]
    ) -> list[SyncDecision]:
        """Compare two sorted listings and determine sync actions.

        Args:
            source: Sorted source listing
            destination: Sorted destination listing

        Returns:
            List of SyncDecision objects in execution order
        """
        decisions: list[SyncDecision] = []
        i = j = 0
        # Destination directory scheduled for recursive deletion; entries
        # below it need no decisions of their own
        deleted_dir: Optional[RelativePath] = None

        while i < len(source) or j < len(destination):
            src = source[i] if i < len(source) else None
            dst = destination[j] if j < len(destination) else None

            if (
                dst is not None
                and deleted_dir is not None
                and dst.relative_path.is_descendant_of(deleted_dir)
            ):
                j += 1
                continue

            if src is not None and (
                dst is None or src.relative_path < dst.relative_path
            ):
                decisions.append(self._handle_source_only(src))
                i += 1
            elif dst is not None and (
                src is None or dst.relative_path < src.relative_path
            ):
                decision = self._handle_destination_only(dst)
                if decision is not None:
                    decisions.append(decision)
                    if dst.is_dir:
                        deleted_dir = dst.relative_path
                j += 1
            elif src is not None and dst is not None:
                decisions.extend(self._compare_existing(src, dst))
                if src.kind != dst.kind and dst.is_dir:
                    deleted_dir = dst.relative_path
                i += 1
                j += 1

        logger.debug("Compared listings: %d decision(s)", len(decisions))
        return decisions

    def _handle_source_only(self, src: Entry) -> SyncDecision:
        """Handle entry that only exists in the source."""
        return SyncDecision(
            action=SyncAction.COPY,
            relative_path=src.relative_path,
            kind=src.kind,
            reason="Missing from destination",
            source=src,
        )

    def _handle_destination_only(self, dst: Entry) -> Optional[SyncDecision]:
        """Handle entry that only exists in the destination (an orphan)."""
        if not self.policy.delete_orphans:
            return None
        return SyncDecision(
            action=SyncAction.DELETE,
            relative_path=dst.relative_path,
            kind=dst.kind,
            reason="Missing from source",
            destination=dst,
        )

    def _compare_existing(self, src: Entry, dst: Entry) -> list[SyncDecision]:
        """Compare entries that exist at the same path on both sides."""
        path = src.relative_path

        if src.kind != dst.kind:
            # Source wins: replace the destination entry with the source kind
            reason = f"Kind mismatch ({src.kind.value} replaces {dst.kind.value})"
            return [
                SyncDecision(
                    action=SyncAction.DELETE,
                    relative_path=path,
                    kind=dst.kind,
                    reason=reason,
                    source=src,
                    destination=dst,
                ),
                SyncDecision(
                    action=SyncAction.COPY,
                    relative_path=path,
                    kind=src.kind,
                    reason=reason,
                    source=src,
                    destination=dst,
                ),
            ]

        if src.is_dir:
            return [
                SyncDecision(
                    action=SyncAction.RECURSE,
                    relative_path=path,
                    kind=EntryKind.DIRECTORY,
                    reason="Directory exists on both sides",
                    source=src,
                    destination=dst,
                )
            ]

        if src.size != dst.size:
            action = SyncAction.COPY
            reason = f"Size differs ({src.size} vs {dst.size})"
        elif src.mtime > dst.mtime:
            action = SyncAction.COPY
            reason = "Source is newer"
        else:
            action = SyncAction.SKIP
            reason = "Files are identical (same size, destination not older)"

        return [
            SyncDecision(
                action=action,
                relative_path=path,
                kind=EntryKind.FILE,
                reason=reason,
                source=src,
                destination=dst,
            )
        ]
