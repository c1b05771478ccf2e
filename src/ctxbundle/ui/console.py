"""Rich-powered console output for ctxbundle."""

from __future__ import annotations

from rich.console import Console as RichConsole
from rich.panel import Panel
from rich.table import Table

from ctxbundle import __version__
from ctxbundle.context.models import ContextRetrievalTrace, ManifestEntry
from ctxbundle.graph.builder import DependencyGraph


class Console:
    """Terminal output for ctxbundle using Rich."""

    def __init__(self, console: RichConsole | None = None) -> None:
        self.console = console or RichConsole()

    def banner(self) -> None:
        self.console.print(
            Panel(
                f"[bold cyan]ctxbundle[/bold cyan] [dim]v{__version__}[/dim]\n"
                "[dim]Budgeted context retrieval for code workspaces[/dim]",
                border_style="cyan",
                padding=(1, 2),
            )
        )

    def success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {message}")

    def error(self, message: str) -> None:
        self.console.print(f"[red]✗[/red] {message}")

    def warning(self, message: str) -> None:
        self.console.print(f"[yellow]![/yellow] {message}")

    def info(self, message: str) -> None:
        self.console.print(f"[blue]i[/blue] {message}")

    def show_trace(self, trace: ContextRetrievalTrace, show_dropped: bool = True) -> None:
        """Selected (and optionally dropped) files with scores and reasons."""
        title = (
            f"Retrieval trace ({trace.strategy.value}): "
            f"{trace.budget_used}/{trace.budget_max} files"
        )
        if trace.chars_max:
            title += f", {trace.chars_used:,}/{trace.chars_max:,} chars"
        table = Table(title=title, border_style="cyan")
        table.add_column("", width=1)
        table.add_column("Path", style="bold")
        table.add_column("Score", justify="right", style="cyan")
        table.add_column("Reasons", style="dim")

        for item in trace.selected:
            table.add_row("[green]+[/green]", item.path, f"{item.score:g}", ", ".join(item.reasons))
        if show_dropped and trace.dropped:
            table.add_section()
            for item in trace.dropped:
                table.add_row("[red]-[/red]", item.path, f"{item.score:g}", ", ".join(item.reasons))

        self.console.print(table)

    def show_manifest(self, manifest: list[ManifestEntry]) -> None:
        table = Table(title=f"Manifest ({len(manifest)} files)", border_style="cyan")
        table.add_column("Path", style="bold")
        table.add_column("Type")
        table.add_column("Size", justify="right", style="cyan")
        table.add_column("Hash", style="dim")
        for entry in manifest:
            table.add_row(entry.path, entry.type.value, f"{entry.size:,}", entry.hash)
        self.console.print(table)

    def show_graph(self, graph: DependencyGraph) -> None:
        """Graph statistics followed by the edge list."""
        stats = graph.get_stats()
        table = Table(title="Dependency Graph", border_style="cyan")
        table.add_column("Metric", style="bold")
        table.add_column("Count", justify="right", style="cyan")
        table.add_row("Files", str(stats["files"]))
        table.add_row("Edges", str(stats["total_edges"]))
        table.add_row("Connected files", str(stats["connected_files"]))
        edge_types = stats.get("edge_types", {})
        if edge_types:
            table.add_section()
            for kind, count in sorted(edge_types.items(), key=lambda x: -x[1]):
                table.add_row(f"  {kind} edges", str(count))
        self.console.print(table)

        if graph.edges:
            self.console.print("\n[bold]Edges:[/bold]")
            for edge in graph.edges:
                self.console.print(
                    f"  [cyan]{edge.source}[/cyan] → [cyan]{edge.target}[/cyan] "
                    f"[dim]({edge.type.value})[/dim]"
                )
