"""Rich-based terminal output for xmledit commands.

OutputHandler prints status messages, conversion and change reports, the
table of contents and revision tables. Messages below the configured
verbosity are dropped; --no-color disables styling.
"""

from contextlib import contextmanager
from typing import Iterator, List, Optional

from rich.console import Console
from rich.live import Live
from rich.markup import escape
from rich.spinner import Spinner
from rich.table import Table

from xmledit.markup_transcoder.side_channel import PreservedElement
from xmledit.models.conversion_result import ConversionResult, Fidelity
from xmledit.models.document_summary import DocumentSummary
from xmledit.models.revision_record import RevisionRecord
from xmledit.revisions.models import ChangeSet


class OutputHandler:
    """Prints command results and status messages.

    Attributes:
        verbosity: Verbosity level (0=summary, 1=info, 2=debug)
        console: Rich Console instance for output

    Example:
        >>> handler = OutputHandler(verbosity=1, no_color=False)
        >>> handler.success("Document is well-formed")
        >>> with handler.spinner("Asking AI..."):
        ...     pass
    """

    def __init__(self, verbosity: int = 0, no_color: bool = False):
        self.verbosity = verbosity
        self.console = Console(
            no_color=no_color,
            highlight=False,
            soft_wrap=True,
        )

    def success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {escape(message)}")

    def error(self, message: str) -> None:
        self.console.print(f"[red]✗[/red] {escape(message)}", style="red")

    def warning(self, message: str) -> None:
        self.console.print(f"[yellow]⚠[/yellow] {escape(message)}", style="yellow")

    def info(self, message: str) -> None:
        """Display info message (only if verbosity >= 1)."""
        if self.verbosity >= 1:
            self.console.print(escape(message))

    def debug(self, message: str) -> None:
        """Display debug message (only if verbosity >= 2)."""
        if self.verbosity >= 2:
            self.console.print(f"[dim]{escape(message)}[/dim]")

    def print(self, message: str) -> None:
        """Display text verbatim; markup in it is not interpreted."""
        self.console.print(message, markup=False)

    @contextmanager
    def spinner(self, message: str) -> Iterator[None]:
        """Display spinner while a single operation runs.

        Example:
            >>> with handler.spinner("Calling AI gateway..."):
            ...     result = client.call("xml_expert", xml)
        """
        spinner = Spinner("dots", text=message)
        with Live(spinner, console=self.console, refresh_per_second=10, transient=True):
            yield

    def print_conversion(
        self,
        result: ConversionResult,
        preserved: Optional[List[PreservedElement]] = None,
    ) -> None:
        """Report fidelity and warnings of a transcoding run.

        Args:
            result: Conversion result
            preserved: Side-channel elements found in the produced markup
        """
        if result.fidelity == Fidelity.EXACT:
            self.debug("Conversion fidelity: exact")
        elif result.fidelity == Fidelity.HEURISTIC:
            self.warning("Conversion was reconstructed heuristically")
        else:
            self.warning("Conversion failed, input returned unchanged")
        for warning in result.warnings:
            self.info(f"  {warning}")
        if preserved is not None:
            tags = sorted({p.xml_tag for p in preserved})
            self.info(f"Preserved {len(preserved)} element(s) exactly: {', '.join(tags)}")

    def print_changes(self, changes: ChangeSet) -> None:
        """Display a change report with color coding."""
        if changes.is_empty:
            self.console.print("[green]No significant changes detected.[/green]")
            return

        self.console.print("[bold]Change Summary:[/bold]")
        for addition in changes.additions:
            self.console.print(f"  [green]+[/green] {escape(addition)}")
        for modification in changes.modifications:
            self.console.print(f"  [yellow]~[/yellow] {escape(modification)}")
        for deletion in changes.deletions:
            self.console.print(f"  [red]-[/red] {escape(deletion)}")

    def print_toc(self, entries: List[DocumentSummary]) -> None:
        """Display the table of contents."""
        if not entries:
            self.console.print("[yellow]No XML documents loaded[/yellow]")
            return

        table = Table(title="Table of Contents")
        table.add_column("Type")
        table.add_column("Title")
        table.add_column("File", style="dim")
        table.add_column("Details")

        for entry in entries:
            details = []
            if entry.extra.get("manualCode"):
                details.append(f"Manual: {entry.extra['manualCode']}")
            if entry.references:
                details.append(f"References: {len(entry.references)} file(s)")
            if entry.error:
                details.append(f"[red]Error: {escape(entry.error)}[/red]")
            table.add_row(
                entry.type.value,
                escape(entry.title),
                escape(entry.filename),
                "\n".join(details),
            )

        self.console.print(table)

    def print_history(self, records: List[RevisionRecord]) -> None:
        """Display the revision entries of a document."""
        if not records:
            self.console.print("[yellow]No revisions found[/yellow]")
            return

        table = Table(title="Revisions")
        table.add_column("Rev")
        table.add_column("Date")
        table.add_column("Comment")
        for record in records:
            table.add_row(
                escape(record.number), escape(record.date), escape(record.comment)
            )
        self.console.print(table)
