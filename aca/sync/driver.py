# ACA Sync Driver
# End-to-end sync run: scan, preview, confirm, apply, optional delete

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from aca.models import ArtifactRecord, ArtifactType
from aca.scan.scanner import ScanRoot, scan_root
from aca.sync.wire import DeleteResponse, SyncResponse

if TYPE_CHECKING:
    from aca.output.console import Console
    from aca.remote.base import SyncBackend


@dataclass
class DriverOutcome:
    """What a sync run did."""

    records: list[ArtifactRecord] = field(default_factory=list)
    preview: Optional[SyncResponse] = None
    response: Optional[SyncResponse] = None
    delete_response: Optional[DeleteResponse] = None
    applied: bool = False
    cancelled: bool = False

    @property
    def last_response(self) -> Optional[SyncResponse]:
        """Applied response if there was one, else the preview."""
        return self.response or self.preview


class SyncDriver:
    """
    Orchestrates one sync run against a backend.

    The preview and the apply are two separate reconciliations, so the
    applied changes always reflect the remote state at apply time.
    Deletion needs both allow_delete and a second confirmation.
    """

    def __init__(
        self,
        backend: "SyncBackend",
        console: "Console",
        confirm: Callable[[str], bool] | None = None,
    ):
        """
        Initialize sync driver.

        Args:
            backend: Where batches are sent.
            console: Output console.
            confirm: Yes/no prompt (defaults to console.confirm).
        """
        self.backend = backend
        self.console = console
        self.confirm = confirm or console.confirm

    def scan(self, roots: Sequence[ScanRoot]) -> list[ArtifactRecord]:
        """
        Scan each root independently and report what was found.

        Args:
            roots: Roots to scan, in order.

        Returns:
            Concatenated records of all roots.
        """
        records: list[ArtifactRecord] = []
        for root in roots:
            self.console.print_info(f"Scanning {root.label}: {root.path}")
            result = scan_root(root.path)
            records.extend(result.records)

            if self.console.verbose:
                self.console.print_scanned(result.records, root.label)
            self.console.print_scan_warnings(result.warnings, root.scope)
        return records

    def run(
        self,
        roots: Sequence[ScanRoot],
        types: Iterable[ArtifactType] | None = None,
        *,
        dry_run: bool = False,
        allow_delete: bool = False,
    ) -> DriverOutcome:
        """
        Run one sync.

        Args:
            roots: Roots to scan.
            types: Optional artifact type filter.
            dry_run: Stop after the preview.
            allow_delete: Offer to delete deletion candidates.

        Returns:
            DriverOutcome describing the run.
        """
        types = list(types) if types else None
        outcome = DriverOutcome(records=self.scan(roots))

        if not outcome.records:
            self.console.print_info("No artifacts found to sync.")
            return outcome

        self.console.print_info(f"Found {len(outcome.records)} artifact(s) to sync")

        # Preview
        self.console.print_info("Running preview...")
        outcome.preview = self.backend.sync(outcome.records, types, dry_run=True)
        self.console.print_sync_summary(outcome.preview, dry_run=True)

        if dry_run:
            self.console.print_info("Dry run complete. No changes made.")
            return outcome

        if not outcome.preview.has_changes:
            self.console.print_success("Everything is up to date!")
        else:
            if not self.confirm("Apply these changes?"):
                self.console.print_info("Sync cancelled.")
                outcome.cancelled = True
                return outcome

            self.console.print_info("Syncing...")
            outcome.response = self.backend.sync(outcome.records, types, dry_run=False)
            outcome.applied = True
            self.console.print_sync_summary(outcome.response, dry_run=False)
            if outcome.response.details.failed:
                self.console.print_warning("Sync finished with failures.")
            else:
                self.console.print_success("Sync complete!")

        self._handle_deletions(outcome, allow_delete)
        return outcome

    def _handle_deletions(self, outcome: DriverOutcome, allow_delete: bool) -> None:
        response = outcome.last_response
        candidates = response.details.deletion_candidates if response else []
        if not candidates:
            return

        self.console.print_deletion_candidates(candidates, allow_delete=allow_delete)
        if not allow_delete:
            return

        if not self.confirm(f"Delete {len(candidates)} remote artifact(s) that have no local match?"):
            self.console.print_info("Deletion skipped.")
            return

        outcome.delete_response = self.backend.delete_batch([c.id for c in candidates])
        self.console.print_delete_result(outcome.delete_response)
