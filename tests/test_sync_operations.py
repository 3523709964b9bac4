"""Tests for SyncOperations and SyncReport."""

from unittest.mock import Mock, call

import pytest

from adbsink.exceptions import TransportError
from adbsink.sync.comparator import SyncAction, SyncDecision
from adbsink.sync.operations import (
    OutcomeStatus,
    SyncOperations,
    SyncOutcome,
    SyncReport,
)
from adbsink.sync.paths import RelativePath
from adbsink.sync.policy import SyncPolicy
from adbsink.sync.scanner import Entry, EntryKind
from adbsink.sync.transport import LocalTransport

SRC = "/src"
DST = "/dst"


def decision(action: SyncAction, path: str, kind=EntryKind.FILE, mtime=200):
    rel = RelativePath.parse(path)
    source = Entry(rel, kind, 10 if kind == EntryKind.FILE else 0, mtime)
    return SyncDecision(
        action=action, relative_path=rel, kind=kind, reason="test", source=source
    )


@pytest.fixture
def destination():
    """Mock destination transport."""
    return Mock(spec=LocalTransport)


class TestApply:
    """Tests for applying single decisions."""

    def test_copy_file(self, destination):
        ops = SyncOperations(destination, SyncPolicy())

        outcome = ops.apply(decision(SyncAction.COPY, "a/x.txt"), SRC, DST)

        assert outcome.status == OutcomeStatus.COPIED
        destination.copy_file.assert_called_once_with(
            SRC, DST, RelativePath.parse("a/x.txt")
        )
        destination.set_modified_time.assert_not_called()

    def test_copy_file_preserves_times(self, destination):
        ops = SyncOperations(destination, SyncPolicy(preserve_times=True))

        ops.apply(decision(SyncAction.COPY, "a/x.txt", mtime=200), SRC, DST)

        assert destination.method_calls == [
            call.copy_file(SRC, DST, RelativePath.parse("a/x.txt")),
            call.set_modified_time(DST, RelativePath.parse("a/x.txt"), 200),
        ]

    def test_copy_directory_creates_without_timestamp(self, destination):
        ops = SyncOperations(destination, SyncPolicy(preserve_times=True))

        outcome = ops.apply(
            decision(SyncAction.COPY, "a", kind=EntryKind.DIRECTORY), SRC, DST
        )

        assert outcome.status == OutcomeStatus.COPIED
        destination.create_directory.assert_called_once_with(
            DST, RelativePath.parse("a")
        )
        destination.copy_file.assert_not_called()
        destination.set_modified_time.assert_not_called()

    def test_delete(self, destination):
        ops = SyncOperations(destination, SyncPolicy(delete_orphans=True))

        outcome = ops.apply(
            decision(SyncAction.DELETE, "old", kind=EntryKind.DIRECTORY), SRC, DST
        )

        assert outcome.status == OutcomeStatus.DELETED
        destination.delete.assert_called_once_with(
            DST, RelativePath.parse("old"), EntryKind.DIRECTORY
        )

    def test_skip_and_recurse_make_no_calls(self, destination):
        ops = SyncOperations(destination, SyncPolicy())

        skipped = ops.apply(decision(SyncAction.SKIP, "x"), SRC, DST)
        recursed = ops.apply(
            decision(SyncAction.RECURSE, "a", kind=EntryKind.DIRECTORY), SRC, DST
        )

        assert skipped.status == OutcomeStatus.SKIPPED
        assert recursed.status == OutcomeStatus.RECURSED
        assert destination.method_calls == []

    def test_transport_error_becomes_failed_outcome(self, destination):
        destination.copy_file.side_effect = TransportError("device offline")
        ops = SyncOperations(destination, SyncPolicy())

        outcome = ops.apply(decision(SyncAction.COPY, "x"), SRC, DST)

        assert outcome.status == OutcomeStatus.FAILED
        assert outcome.error == "device offline"

    def test_set_time_failure_fails_the_copy(self, destination):
        destination.set_modified_time.side_effect = TransportError("read-only")
        ops = SyncOperations(destination, SyncPolicy(preserve_times=True))

        outcome = ops.apply(decision(SyncAction.COPY, "x"), SRC, DST)

        assert outcome.status == OutcomeStatus.FAILED
        assert "read-only" in outcome.error


class TestExecute:
    """Tests for executing a list of decisions."""

    def test_failure_does_not_stop_remaining_decisions(self, destination):
        def copy_file(source_root, dest_root, relative):
            if relative.name == "bad.txt":
                raise TransportError("permission denied")

        destination.copy_file.side_effect = copy_file
        ops = SyncOperations(destination, SyncPolicy())
        decisions = [
            decision(SyncAction.COPY, "a.txt"),
            decision(SyncAction.COPY, "bad.txt"),
            decision(SyncAction.COPY, "c.txt"),
        ]

        report = ops.execute(decisions, SRC, DST)

        assert [o.status for o in report.outcomes] == [
            OutcomeStatus.COPIED,
            OutcomeStatus.FAILED,
            OutcomeStatus.COPIED,
        ]
        assert destination.copy_file.call_count == 3
        assert report.has_failures
        assert [o.relative_path for o in report.failures] == ["bad.txt"]

    def test_decisions_applied_in_order(self, destination):
        ops = SyncOperations(destination, SyncPolicy())
        decisions = [
            decision(SyncAction.COPY, "d", kind=EntryKind.DIRECTORY),
            decision(SyncAction.COPY, "d/f"),
            decision(SyncAction.DELETE, "z"),
        ]

        ops.execute(decisions, SRC, DST)

        assert [c[0] for c in destination.method_calls] == [
            "create_directory",
            "copy_file",
            "delete",
        ]

    def test_on_outcome_callback(self, destination):
        seen = []
        ops = SyncOperations(destination, SyncPolicy())

        ops.execute(
            [decision(SyncAction.SKIP, "a"), decision(SyncAction.COPY, "b")],
            SRC,
            DST,
            on_outcome=seen.append,
        )

        assert [o.status for o in seen] == [
            OutcomeStatus.SKIPPED,
            OutcomeStatus.COPIED,
        ]

    def test_interrupt_stops_after_current_decision(self, destination):
        destination.copy_file.side_effect = KeyboardInterrupt
        ops = SyncOperations(destination, SyncPolicy())

        with pytest.raises(KeyboardInterrupt):
            ops.execute(
                [decision(SyncAction.COPY, "a"), decision(SyncAction.DELETE, "b")],
                SRC,
                DST,
            )

        destination.delete.assert_not_called()


class TestSyncReport:
    """Tests for SyncReport aggregation."""

    def test_counts_and_to_dict(self):
        report = SyncReport(
            outcomes=[
                SyncOutcome(decision(SyncAction.COPY, "a"), OutcomeStatus.COPIED),
                SyncOutcome(decision(SyncAction.SKIP, "b"), OutcomeStatus.SKIPPED),
                SyncOutcome(
                    decision(SyncAction.DELETE, "c"),
                    OutcomeStatus.FAILED,
                    error="boom",
                ),
            ]
        )

        assert report.counts["copied"] == 1
        assert report.counts["skipped"] == 1
        assert report.counts["failed"] == 1
        assert report.counts["deleted"] == 0
        assert report.actions == [SyncAction.COPY, SyncAction.SKIP, SyncAction.DELETE]

        data = report.to_dict()
        assert data["dry_run"] is False
        assert data["failures"] == [{"path": "c", "error": "boom"}]
        assert data["outcomes"][0] == {
            "path": "a",
            "action": "copy",
            "kind": "file",
            "status": "copied",
            "reason": "test",
            "error": None,
        }

    def test_empty_report(self):
        report = SyncReport()
        assert not report.has_failures
        assert report.failures == []
        assert set(report.counts.values()) == {0}
