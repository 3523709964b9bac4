"""Sync engine for adbsink - tree listing, diffing and reconciliation."""

from .comparator import FileComparator, SyncAction, SyncDecision
from .engine import SyncEngine
from .operations import OutcomeStatus, SyncOperations, SyncOutcome, SyncReport
from .paths import ROOT, RelativePath, compare, join
from .policy import SyncDirection, SyncPolicy
from .scanner import DirectoryScanner, Entry, EntryKind
from .transport import LocalTransport, Transport, build_transports

__all__ = [
    "SyncEngine",
    "SyncPolicy",
    "SyncDirection",
    "SyncOperations",
    "SyncOutcome",
    "SyncReport",
    "OutcomeStatus",
    "DirectoryScanner",
    "Entry",
    "EntryKind",
    "FileComparator",
    "SyncAction",
    "SyncDecision",
    "RelativePath",
    "ROOT",
    "compare",
    "join",
    "Transport",
    "LocalTransport",
    "build_transports",
]
