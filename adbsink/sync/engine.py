"""Core sync engine for executing sync operations."""

import logging
import time
from typing import Optional

from rich.progress import Progress, SpinnerColumn, TextColumn

from ..output import OutputFormatter
from .comparator import FileComparator, SyncAction, SyncDecision
from .operations import OutcomeStatus, SyncOperations, SyncOutcome, SyncReport
from .paths import ROOT
from .policy import SyncPolicy
from .scanner import DirectoryScanner, Entry
from .transport import Transport

logger = logging.getLogger(__name__)


class SyncEngine:
    """Core sync engine that makes a destination tree match a source tree.

    The three phases run strictly one after the other: both trees are listed,
    the listings are merged into decisions, and the decisions are applied
    through the destination transport. A listing error aborts the sync before
    the destination is modified.
    """

    def __init__(
        self,
        source: Transport,
        destination: Transport,
        output: Optional[OutputFormatter] = None,
    ):
        """Initialize sync engine.

        Args:
            source: Transport of the source side
            destination: Transport of the destination side
            output: Output formatter for displaying progress/status
        """
        self.source = source
        self.destination = destination
        self.output = output or OutputFormatter()

    def sync(
        self,
        source_root: str,
        dest_root: str,
        policy: SyncPolicy,
        dry_run: bool = False,
    ) -> SyncReport:
        """Synchronize ``dest_root`` with ``source_root``.

        Args:
            source_root: Root directory on the source side
            dest_root: Root directory on the destination side
            policy: Sync policy
            dry_run: If True, only show what would be done

        Returns:
            SyncReport with one outcome per decision

        Raises:
            RootNotFoundError: If the source root does not exist
            EntryUnreadableError: If either tree cannot be listed completely

        Examples:
            >>> engine = SyncEngine(LocalTransport(), LocalTransport())
            >>> report = engine.sync("/data/src", "/data/dst", SyncPolicy())
            >>> report.counts["copied"]
            3
        """
        if not self.output.quiet:
            self.output.info(f"{source_root} -> {dest_root}")
            if dry_run:
                self.output.info("Dry run: No changes will be made")

        # Step 1: List both trees
        source_entries, dest_entries = self._scan(source_root, dest_root, policy, dry_run)

        # Step 2: Compare listings and determine actions
        decisions = FileComparator(policy).compare(source_entries, dest_entries)

        # Step 3: Display plan
        stats = self._categorize_decisions(decisions)
        self._display_sync_plan(stats)

        # Step 4: Execute actions
        if dry_run:
            report = SyncReport(
                outcomes=[
                    SyncOutcome(d, self._planned_status(d)) for d in decisions
                ],
                dry_run=True,
            )
        else:
            report = self._execute_decisions(decisions, source_root, dest_root, policy)

        # Step 5: Display summary
        if not self.output.quiet:
            self._display_summary(report)

        return report

    def _scan(
        self, source_root: str, dest_root: str, policy: SyncPolicy, dry_run: bool
    ) -> tuple[list[Entry], list[Entry]]:
        """List the source and destination trees.

        A missing destination root is created first (unless dry-running, in
        which case it is treated as empty).
        """
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            transient=True,
            disable=self.output.quiet or self.output.json_output,
        ) as progress:
            scan_start = time.time()
            task = progress.add_task("Scanning source directory...", total=None)
            source_entries = DirectoryScanner(
                self.source, policy.ignore_prefixes
            ).scan(source_root)
            progress.update(
                task, description=f"Found {len(source_entries)} source entries"
            )
            logger.debug(
                "Source scan took %.2fs for %d entries",
                time.time() - scan_start,
                len(source_entries),
            )

            if not self.destination.exists(dest_root):
                if dry_run:
                    logger.debug("Destination %s does not exist yet", dest_root)
                    return source_entries, []
                logger.info("Creating destination root %s", dest_root)
                self.destination.create_directory(dest_root, ROOT)

            scan_start = time.time()
            task = progress.add_task("Scanning destination directory...", total=None)
            dest_entries = DirectoryScanner(
                self.destination, policy.ignore_prefixes
            ).scan(dest_root)
            progress.update(
                task, description=f"Found {len(dest_entries)} destination entries"
            )
            logger.debug(
                "Destination scan took %.2fs for %d entries",
                time.time() - scan_start,
                len(dest_entries),
            )

        return source_entries, dest_entries

    @staticmethod
    def _planned_status(decision: SyncDecision) -> OutcomeStatus:
        if decision.action == SyncAction.SKIP:
            return OutcomeStatus.SKIPPED
        if decision.action == SyncAction.RECURSE:
            return OutcomeStatus.RECURSED
        return OutcomeStatus.PLANNED

    def _categorize_decisions(self, decisions: list[SyncDecision]) -> dict:
        """Categorize decisions into statistics.

        Args:
            decisions: List of sync decisions

        Returns:
            Dictionary with statistics
        """
        stats = {
            "copies": 0,
            "deletes": 0,
            "skips": 0,
            "directories": 0,
        }

        for decision in decisions:
            if decision.action == SyncAction.COPY:
                stats["copies"] += 1
            elif decision.action == SyncAction.DELETE:
                stats["deletes"] += 1
            elif decision.action == SyncAction.SKIP:
                stats["skips"] += 1
            elif decision.action == SyncAction.RECURSE:
                stats["directories"] += 1

        return stats

    def _display_sync_plan(self, stats: dict) -> None:
        """Display sync plan to user.

        Args:
            stats: Statistics dictionary
        """
        if self.output.quiet:
            return

        self.output.info("Sync plan:")
        if stats["copies"] > 0:
            self.output.info(f"  → Copy: {stats['copies']} entry(s)")
        if stats["deletes"] > 0:
            self.output.info(f"  ✗ Delete: {stats['deletes']} entry(s)")
        if stats["skips"] > 0:
            self.output.info(f"  = Skip: {stats['skips']} file(s)")
        if stats["directories"] > 0:
            self.output.info(f"  ↳ Existing directories: {stats['directories']}")
        self.output.print("")

    def _execute_decisions(
        self,
        decisions: list[SyncDecision],
        source_root: str,
        dest_root: str,
        policy: SyncPolicy,
    ) -> SyncReport:
        """Execute sync decisions in order.

        Args:
            decisions: List of sync decisions
            source_root: Root of the source tree
            dest_root: Root of the destination tree
            policy: Sync policy

        Returns:
            SyncReport with one outcome per decision
        """
        operations = SyncOperations(self.destination, policy)

        def report_outcome(outcome: SyncOutcome) -> None:
            if outcome.status == OutcomeStatus.FAILED and not self.output.quiet:
                self.output.error(
                    f"Error syncing {outcome.relative_path}: {outcome.error}"
                )

        actionable = sum(
            1 for d in decisions if d.action in (SyncAction.COPY, SyncAction.DELETE)
        )
        if self.output.quiet or actionable == 0:
            return operations.execute(
                decisions, source_root, dest_root, on_outcome=report_outcome
            )

        with Progress(disable=self.output.json_output) as progress:
            task = progress.add_task("Syncing files...", total=actionable)

            def advance(outcome: SyncOutcome) -> None:
                report_outcome(outcome)
                if outcome.decision.action in (SyncAction.COPY, SyncAction.DELETE):
                    progress.update(task, advance=1)

            return operations.execute(
                decisions, source_root, dest_root, on_outcome=advance
            )

    def _display_summary(self, report: SyncReport) -> None:
        """Display sync summary.

        Args:
            report: Report of the finished (or planned) sync
        """
        counts = report.counts
        self.output.print("")
        if report.dry_run:
            self.output.success("Dry run complete!")
        elif report.has_failures:
            self.output.warning("Sync finished with errors")
        else:
            self.output.success("Sync complete!")

        total_actions = counts["copied"] + counts["deleted"] + counts["planned"]
        if total_actions > 0 or counts["failed"] > 0:
            if counts["planned"] > 0:
                self.output.info(f"Planned actions: {counts['planned']}")
            if counts["copied"] > 0:
                self.output.info(f"  Copied: {counts['copied']}")
            if counts["deleted"] > 0:
                self.output.info(f"  Deleted: {counts['deleted']}")
            if counts["failed"] > 0:
                self.output.warning(f"  Failed: {counts['failed']}")
                for outcome in report.failures:
                    self.output.warning(f"    {outcome.relative_path}: {outcome.error}")
        else:
            self.output.info("No changes needed - everything is in sync!")
