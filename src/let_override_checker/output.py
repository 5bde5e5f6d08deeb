"""Rich formatting and display for analysis results."""

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from .models import AnalysisResult, Offense


def format_location(file_path: str, offense: Offense) -> str:
    """Format ``path:line:column``, or just ``path`` when the node has no position."""
    location = offense.location
    if location is None:
        return file_path
    return f"{file_path}:{location.line}:{location.column + 1}"


def format_offense_line(file_path: str, offense: Offense) -> str:
    """Format one offense as a single plain-text line."""
    return f"{format_location(file_path, offense)}: {offense.message} ({offense.let_name})"


def format_results_table(results: tuple[AnalysisResult, ...]) -> Table:
    """Create Rich table listing every offense across all files."""
    table = Table(title="Overridden let Declarations")

    table.add_column("Location", style="cyan", no_wrap=True)
    table.add_column("Let", style="magenta")
    table.add_column("Message", style="red")

    for result in results:
        for offense in result.offenses:
            table.add_row(
                format_location(result.file_path, offense),
                Text(str(offense.let_name)),
                offense.message,
            )

    return table


def print_errors(console: Console, results: tuple[AnalysisResult, ...]) -> None:
    """Print one line per file that could not be analyzed."""
    for result in results:
        if result.error is not None:
            console.print(f"[red]Error analyzing {escape(result.file_path)}: {escape(result.error)}[/red]")


def print_summary_stats(console: Console, results: tuple[AnalysisResult, ...]) -> None:
    """Print summary statistics about the analysis."""
    analyzed = [r for r in results if r.error is None]
    offense_count = sum(len(r.offenses) for r in analyzed)
    offending_files = sum(1 for r in analyzed if r.offenses)

    console.print("\n[bold]Summary:[/bold]")
    console.print(f"Files analyzed: {len(analyzed)}")
    console.print(f"Overridden let declarations: {offense_count}")

    if len(analyzed) < len(results):
        console.print(f"[red]Files with errors: {len(results) - len(analyzed)}[/red]")

    if offense_count == 0:
        console.print("[green]No overridden let declarations found.[/green]")
    else:
        console.print(f"[yellow]{offending_files} file(s) need attention.[/yellow]")


def display_plain(console: Console, results: tuple[AnalysisResult, ...]) -> None:
    """Print offenses one per line, compiler-style."""
    print_errors(console, results)
    for result in results:
        for offense in result.offenses:
            line = format_offense_line(result.file_path, offense)
            console.print(line, markup=False, highlight=False, soft_wrap=True)


def display_results(console: Console, results: tuple[AnalysisResult, ...]) -> None:
    """Display complete analysis results with table and summary."""
    print_errors(console, results)

    if any(r.offenses for r in results):
        console.print(format_results_table(results))

    print_summary_stats(console, results)
