# ACA Console Output
# Rich-based console output for user-friendly display

from collections.abc import Sequence

from rich.console import Console as RichConsole
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from aca.config.schema import AcaConfig
from aca.models import ArtifactRecord, ArtifactType, ScanWarning
from aca.sync.wire import DeleteResponse, SyncItem, SyncResponse

TYPE_LABELS = {
    ArtifactType.COMMAND: "[cyan]command[/cyan]",
    ArtifactType.AGENT: "[magenta]agent[/magenta]",
    ArtifactType.SKILL: "[blue]skill[/blue]",
    ArtifactType.MCP_CONFIG: "[yellow]mcp[/yellow]",
}


class Console:
    """
    Console output manager using Rich.

    Provides formatted output for scan and sync operations.
    """

    def __init__(self, *, verbose: bool = False, colored: bool = True):
        """
        Initialize console.

        Args:
            verbose: Enable verbose output.
            colored: Enable colored output.
        """
        self.verbose = verbose
        self._console = RichConsole(force_terminal=colored, no_color=not colored)

    def print(self, *args, **kwargs) -> None:
        """Print to console."""
        self._console.print(*args, **kwargs)

    def print_error(self, message: str) -> None:
        """Print error message."""
        self._console.print(f"[red]Error:[/red] {escape(message)}")

    def print_warning(self, message: str) -> None:
        """Print warning message."""
        self._console.print(f"[yellow]Warning:[/yellow] {escape(message)}")

    def print_success(self, message: str) -> None:
        """Print success message."""
        self._console.print(f"[green]{escape(message)}[/green]")

    def print_info(self, message: str) -> None:
        """Print info message."""
        self._console.print(f"[blue]{escape(message)}[/blue]")

    def _format_item(self, name: str, artifact_type: ArtifactType) -> str:
        label = TYPE_LABELS.get(artifact_type, artifact_type.value)
        return f"{label} [bold]{escape(name)}[/bold]"

    def print_scanned(self, records: Sequence[ArtifactRecord], source: str) -> None:
        """
        Print the artifacts scanned from one root.

        Args:
            records: Scanned artifacts.
            source: Human-readable root label.
        """
        self._console.print(f"\n[bold]Scanned from {escape(source)}[/bold]")
        if not records:
            self._console.print("  [dim]No artifacts found[/dim]")
            return

        for record in records:
            extra = ""
            if record.companion_files:
                extra = f" [dim](+{len(record.companion_files)} files)[/dim]"
            self._console.print(f"  {self._format_item(record.name, record.type)}{extra}")

    def print_scan_warnings(self, warnings: Sequence[ScanWarning], label: str) -> None:
        """
        Print scan warnings, individually when verbose or as a count otherwise.

        Args:
            warnings: Warnings collected by one scan.
            label: Scope shown in the summary line (e.g. "global").
        """
        if not warnings:
            return

        if self.verbose:
            for warning in warnings:
                self.print_warning(str(warning))
        else:
            self.print_warning(f"{len(warnings)} warning(s) during {label} scan (use --verbose to see)")

    def print_sync_summary(self, response: SyncResponse, *, dry_run: bool = False) -> None:
        """
        Print a sync preview or result.

        Args:
            response: Server response.
            dry_run: Whether this was a preview (changes wording).
        """
        summary = response.summary
        details = response.details
        label = "[yellow]\\[DRY RUN][/yellow] " if dry_run else ""

        self._console.print(f"\n[bold]{label}Sync Summary[/bold]\n")

        if summary.created > 0:
            self._console.print(f"  [green]+ Created:[/green]  {summary.created}")
            for item in details.created:
                self._console.print(f"    {self._format_item(item.name, item.type)}")

        if summary.updated > 0:
            self._console.print(f"  [yellow]~ Updated:[/yellow]  {summary.updated}")
            for item in details.updated:
                self._console.print(f"    {self._format_item(item.name, item.type)}")

        if summary.unchanged > 0:
            self._console.print(f"  [dim]= Unchanged:[/dim] {summary.unchanged}")
            if self.verbose:
                for unchanged in details.unchanged:
                    self._console.print(f"    [dim]{self._format_item(unchanged.name, unchanged.type)}[/dim]")

        if summary.deletion_candidates > 0:
            self._console.print(f"  [red]? Deletion candidates:[/red] {summary.deletion_candidates}")
            for item in details.deletion_candidates:
                self._console.print(f"    {self._format_item(item.name, item.type)} [dim]({item.id})[/dim]")

        if details.failed:
            self._console.print(f"  [red]✗ Failed:[/red] {len(details.failed)}")
            for failure in details.failed:
                self._console.print(
                    f"    {self._format_item(failure.name, failure.type)}: [red]{escape(failure.error)}[/red]"
                )

        total = summary.created + summary.updated + summary.unchanged
        if total == 0 and summary.deletion_candidates == 0 and not details.failed:
            self._console.print("  [dim]Nothing to sync[/dim]")

        self._console.print()

    def print_deletion_candidates(self, items: Sequence[SyncItem], *, allow_delete: bool = False) -> None:
        """
        Print remote artifacts without a local match.

        Args:
            items: Deletion candidates.
            allow_delete: Whether --delete was given (suppresses the hint).
        """
        if not items:
            return

        self.print_warning(f"{len(items)} remote artifact(s) have no local match and could be deleted:")
        for item in items:
            self._console.print(f"  [red]-[/red] {self._format_item(item.name, item.type)} [dim]({item.id})[/dim]")
        if not allow_delete:
            self._console.print("\n  [dim]Use --delete flag to remove these after confirmation[/dim]")
        self._console.print()

    def print_delete_result(self, response: DeleteResponse) -> None:
        """Print the outcome of a batch delete."""
        self.print_success(f"Deleted {len(response.deleted)} artifact(s)")
        if response.failed:
            self.print_warning(f"Failed to delete {len(response.failed)} artifact(s)")
            if self.verbose:
                for artifact_id in response.failed:
                    self._console.print(f"  [red]✗[/red] {escape(artifact_id)}")

    def print_status(self, config: AcaConfig, config_path: str) -> None:
        """Print authentication and sync status."""
        table = Table(show_header=False, box=None)
        table.add_column("Key", style="bold")
        table.add_column("Value")

        table.add_row("Config", config_path)
        table.add_row("Server", config.server_url)
        table.add_row("API key", config.masked_api_key or "[dim]not set[/dim]")
        if config.store_path:
            table.add_row("Store", f"{config.store_path} (owner: {config.owner_id})")
        table.add_row("Last sync", config.last_sync or "[dim]never[/dim]")

        self._console.print(Panel(table, title="ACA Status", border_style="blue"))

    def confirm(self, message: str, default: bool = False) -> bool:
        """
        Ask for confirmation.

        Args:
            message: Confirmation message.
            default: Default value if user just presses enter.

        Returns:
            True if confirmed.
        """
        suffix = " [Y/n]" if default else " [y/N]"
        response = self._console.input(f"{escape(message)}{escape(suffix)}: ").strip().lower()

        if not response:
            return default

        return response in ("y", "yes")


def create_console(*, verbose: bool = False, colored: bool = True) -> Console:
    """
    Create a console instance.

    Args:
        verbose: Enable verbose output.
        colored: Enable colored output.

    Returns:
        Console instance.
    """
    return Console(verbose=verbose, colored=colored)
