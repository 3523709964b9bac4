"""Execution of sync decisions against the destination transport."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable, Optional

from ..exceptions import TransportError
from .comparator import SyncAction, SyncDecision
from .policy import SyncPolicy
from .scanner import EntryKind
from .transport import Transport

logger = logging.getLogger(__name__)


class OutcomeStatus(str, Enum):
    """Result of applying one decision."""

    COPIED = "copied"
    DELETED = "deleted"
    SKIPPED = "skipped"
    RECURSED = "recursed"
    FAILED = "failed"
    PLANNED = "planned"
    """Decision was not applied (dry run)"""


@dataclass(frozen=True)
class SyncOutcome:
    """Outcome of one sync decision."""

    decision: SyncDecision
    status: OutcomeStatus
    error: Optional[str] = None
    """Failure reason for FAILED outcomes"""

    @property
    def relative_path(self) -> str:
        return str(self.decision.relative_path)

    def to_dict(self) -> dict:
        return {
            "path": self.relative_path,
            "action": self.decision.action.value,
            "kind": self.decision.kind.value,
            "status": self.status.value,
            "reason": self.decision.reason,
            "error": self.error,
        }


@dataclass
class SyncReport:
    """All outcomes of a sync run, in execution order."""

    outcomes: list[SyncOutcome] = field(default_factory=list)
    dry_run: bool = False

    @property
    def counts(self) -> dict[str, int]:
        """Number of outcomes per status."""
        counts = {status.value: 0 for status in OutcomeStatus}
        for outcome in self.outcomes:
            counts[outcome.status.value] += 1
        return counts

    @property
    def failures(self) -> list[SyncOutcome]:
        return [o for o in self.outcomes if o.status == OutcomeStatus.FAILED]

    @property
    def has_failures(self) -> bool:
        return any(o.status == OutcomeStatus.FAILED for o in self.outcomes)

    @property
    def actions(self) -> list[SyncAction]:
        """Actions of all outcomes, in order."""
        return [o.decision.action for o in self.outcomes]

    def to_dict(self) -> dict:
        return {
            "dry_run": self.dry_run,
            "counts": self.counts,
            "failures": [
                {"path": o.relative_path, "error": o.error} for o in self.failures
            ],
            "outcomes": [o.to_dict() for o in self.outcomes],
        }


class SyncOperations:
    """Applies sync decisions one at a time, strictly in order.

    A failing transport call is recorded as a FAILED outcome and the
    remaining decisions are still applied. Decisions must not be reordered:
    a directory has to be created before files are copied into it.
    """

    def __init__(self, destination: Transport, policy: SyncPolicy):
        """Initialize sync operations.

        Args:
            destination: Transport of the destination side
            policy: Sync policy (``preserve_times`` is applied here)
        """
        self.destination = destination
        self.policy = policy

    def apply(
        self, decision: SyncDecision, source_root: str, dest_root: str
    ) -> SyncOutcome:
        """Apply a single decision.

        Args:
            decision: Decision to apply
            source_root: Root of the source tree
            dest_root: Root of the destination tree

        Returns:
            Outcome of the decision; transport errors become FAILED outcomes
        """
        path = decision.relative_path
        try:
            if decision.action == SyncAction.COPY:
                if decision.kind == EntryKind.DIRECTORY:
                    self.destination.create_directory(dest_root, path)
                else:
                    self.destination.copy_file(source_root, dest_root, path)
                    if self.policy.preserve_times and decision.source is not None:
                        self.destination.set_modified_time(
                            dest_root, path, decision.source.mtime
                        )
                logger.info("copy (%s) %s", decision.reason, path)
                return SyncOutcome(decision, OutcomeStatus.COPIED)

            if decision.action == SyncAction.DELETE:
                self.destination.delete(dest_root, path, decision.kind)
                logger.info("delete (%s) %s", decision.reason, path)
                return SyncOutcome(decision, OutcomeStatus.DELETED)

            if decision.action == SyncAction.RECURSE:
                return SyncOutcome(decision, OutcomeStatus.RECURSED)

            logger.debug("skip: %s", path)
            return SyncOutcome(decision, OutcomeStatus.SKIPPED)

        except TransportError as e:
            logger.error("Failed to %s %s: %s", decision.action.value, path, e)
            return SyncOutcome(decision, OutcomeStatus.FAILED, error=str(e))

    def execute(
        self,
        decisions: Iterable[SyncDecision],
        source_root: str,
        dest_root: str,
        on_outcome: Optional[Callable[[SyncOutcome], None]] = None,
    ) -> SyncReport:
        """Apply all decisions in order.

        Args:
            decisions: Decisions from :class:`FileComparator`
            source_root: Root of the source tree
            dest_root: Root of the destination tree
            on_outcome: Optional callback invoked after every decision

        Returns:
            SyncReport with one outcome per decision
        """
        report = SyncReport()
        for decision in decisions:
            try:
                outcome = self.apply(decision, source_root, dest_root)
            except KeyboardInterrupt:
                logger.warning(
                    "Interrupted after %d decision(s); stopping", len(report.outcomes)
                )
                raise
            report.outcomes.append(outcome)
            if on_outcome is not None:
                on_outcome(outcome)
        return report
