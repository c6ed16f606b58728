"""Terminal output handling using Rich library.

This module provides the OutputHandler class for all CLI terminal output:
colored status lines, tables of microtext and drafts, and summaries of
sync, publish and instruction results. With ``json_output`` every result is
printed as a single JSON document instead, for scripts and agents.
"""

import json
from typing import Any, Dict, List

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from src.drafts.models import DraftEntry, SyncReport
from src.publish.models import PublishResult, PublishStatus
from src.tool_surface.models import STATUS_APPLIED, STATUS_WOULD_APPLY, InstructionReport


class OutputHandler:
    """Handles all terminal output using Rich library.

    Attributes:
        verbosity: Verbosity level (0=summary, 1=info, 2=debug)
        json_output: Print results as JSON instead of formatted text
        console: Rich Console instance for output

    Example:
        >>> handler = OutputHandler(verbosity=1, no_color=False)
        >>> handler.success("Operation completed")
    """

    def __init__(self, verbosity: int = 0, no_color: bool = False, json_output: bool = False):
        self.verbosity = verbosity
        self.json_output = json_output
        self.console = Console(
            no_color=no_color,
            highlight=False,
            soft_wrap=True,
        )
        self.err_console = Console(stderr=True, no_color=no_color, highlight=False)

    def success(self, message: str) -> None:
        if not self.json_output:
            self.console.print(f"[green]✓[/green] {escape(message)}")

    def error(self, message: str) -> None:
        self.err_console.print(f"[red]✗[/red] {escape(message)}", style="red")

    def warning(self, message: str) -> None:
        if not self.json_output:
            self.console.print(f"[yellow]⚠[/yellow] {escape(message)}", style="yellow")

    def info(self, message: str) -> None:
        """Display info message (only if verbosity >= 1)."""
        if self.verbosity >= 1 and not self.json_output:
            self.console.print(message)

    def debug(self, message: str) -> None:
        """Display debug message (only if verbosity >= 2)."""
        if self.verbosity >= 2 and not self.json_output:
            self.console.print(f"[dim]{message}[/dim]")

    def print(self, message: str) -> None:
        self.console.print(message, markup=False)

    def print_json(self, data: Any) -> None:
        self.console.print(
            json.dumps(data, indent=2, ensure_ascii=False, default=str),
            markup=False,
        )

    def print_pages(self, pages: List[str]) -> None:
        if self.json_output:
            self.print_json({"pages": pages})
            return
        if not pages:
            self.console.print("[yellow]No pages found[/yellow]")
        for page in pages:
            self.print(page)

    def print_content(self, page_id: str, content: Dict[str, str]) -> None:
        """Display a flattened content map as a table."""
        if self.json_output:
            self.print_json({"pageId": page_id, "content": content})
            return

        table = Table(title=f"Microtext: {page_id}", show_lines=False)
        table.add_column("Path", style="cyan", no_wrap=True)
        table.add_column("Value")
        for path, value in content.items():
            table.add_row(escape(path), escape(value))
        if not content:
            self.console.print(f"[yellow]No microtext on page {page_id}[/yellow]")
            return
        self.console.print(table)

    def print_drafts(self, page_id: str, drafts: List[DraftEntry]) -> None:
        if self.json_output:
            self.print_json({"pageId": page_id, "drafts": [d.to_dict() for d in drafts]})
            return
        if not drafts:
            self.console.print(f"[dim]No pending drafts for page {page_id}[/dim]")
            return

        table = Table(title=f"Pending drafts: {page_id}")
        table.add_column("Path", style="cyan", no_wrap=True)
        table.add_column("Value")
        table.add_column("Saved", style="dim")
        for draft in drafts:
            table.add_row(escape(draft.path), escape(draft.value), draft.timestamp)
        self.console.print(table)

    def print_sync_report(self, report: SyncReport) -> None:
        """Display sync summary with color coding."""
        if self.json_output:
            self.print_json(report.to_dict())
            return

        self.console.print(f"\n[bold]Sync Summary: {report.page_id}[/bold]")
        if report.synced:
            self.console.print(f"  [green]↑[/green] Synced: {len(report.synced)} draft(s)")
        for failure in report.failures:
            self.console.print(
                f"  [red]✗[/red] {escape(failure.path)}: {failure.error_type}: {escape(failure.message)}"
            )

        if not report.synced and not report.failures:
            self.console.print("\n[yellow]No drafts to sync[/yellow]")
        elif report.failures:
            self.console.print("\n[red]Sync completed with failures; failed drafts were kept[/red]")
        else:
            self.console.print("\n[green]Sync completed successfully[/green]")

    def print_publish_result(self, result: PublishResult) -> None:
        if self.json_output:
            self.print_json(result.to_dict())
            return
        if not result.published:
            self.console.print("[yellow]No changes to publish[/yellow]")
            return
        self.console.print(
            f"[green]✓[/green] Published {result.files_changed} file(s) "
            f"({(result.commit_id or '')[:8]}): {result.message}"
        )
        for path in result.files:
            self.info(f"  • {path}")

    def print_publish_status(self, status: PublishStatus) -> None:
        if self.json_output:
            self.print_json(status.to_dict())
            return
        if status.unpublished_changes == 0:
            self.console.print("[green]Everything is published[/green]")
            return
        self.console.print(f"[yellow]{status.unpublished_changes} unpublished file(s):[/yellow]")
        for path in status.files:
            self.console.print(f"  • {path}")

    def print_instruction_report(self, report: InstructionReport) -> None:
        if self.json_output:
            self.print_json(report.to_dict())
            return

        title = "Applied changes" if report.applied_requested else "Proposed changes (preview)"
        self.console.print(f"\n[bold]{title}: {report.page_id}[/bold]")
        if not report.outcomes:
            self.console.print("[yellow]No changes needed[/yellow]")
            return

        for outcome in report.outcomes:
            change = outcome.change
            if outcome.status in (STATUS_APPLIED, STATUS_WOULD_APPLY):
                marker = "[green]✓[/green]" if outcome.status == STATUS_APPLIED else "[blue]→[/blue]"
                self.console.print(
                    f"  {marker} {escape(str(change.path))}: {escape(repr(change.expected_old_value))} → {escape(repr(change.new_value))}"
                )
                if change.rationale:
                    self.console.print(f"      [dim]{escape(change.rationale)}[/dim]")
            else:
                self.console.print(
                    f"  [yellow]⊘[/yellow] {escape(str(change.path))}: skipped ({outcome.error_type}) {escape(outcome.reason or '')}"
                )
