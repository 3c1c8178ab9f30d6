from typing import Any

from rich.console import Console
from rich.table import Table

from split_macros.domain.split_tree import DIMENSION_NAMES, MacroTree
from split_macros.domain.subject import SubjectDescriptor
from split_macros.services.macro_query import MacroPathResult

console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)

_SUMMARY_BATTING = ("avg", "obp", "slg", "ops")
_SUMMARY_PITCHING = ("innings_pitched", "era", "whip")


def print_error(message: str) -> None:
    err_console.print(f"[red bold]Error:[/red bold] {message}")


def _format_stat(value: object) -> str:
    if isinstance(value, float):
        return f"{value:.3f}"
    return str(value)


def _print_stat_block(title: str, stats: dict[str, Any]) -> None:
    if not stats:
        return
    console.print(f"  [bold]{title}[/bold]")
    table = Table(show_header=False, show_edge=False, pad_edge=False, box=None)
    table.add_column("Stat")
    table.add_column("Value", justify="right")
    for name, value in stats.items():
        table.add_row(f"    {name}", _format_stat(value))
    console.print(table)


def _print_node(data: dict[str, Any]) -> None:
    games = data.get("game_count", len(data.get("games", [])))
    console.print(f"  Games: {games}")
    stats = data.get("stats", {})
    _print_stat_block("Batting", stats.get("batting", {}))
    _print_stat_block("Pitching", stats.get("pitching", {}))
    for name in sorted(data.keys() & DIMENSION_NAMES):
        branch = data[name]
        if branch.get("truncated") is True:
            console.print(f"  [dim]{name}: {branch['entries']} entries (truncated)[/dim]")
        else:
            console.print(f"  [dim]{name}: {', '.join(branch)}[/dim]")


def _summary(stats: dict[str, Any], names: tuple[str, ...]) -> str:
    return " ".join(f"{name} {_format_stat(stats[name])}" for name in names if name in stats)


def print_path_result(result: MacroPathResult) -> None:
    """Print a projected node, or a one-line summary per entry of a dimension mapping."""
    target = f"{result.key} @ {result.path}" if result.path else result.key
    if result.no_data:
        console.print(f"No games recorded for [bold]{result.key}[/bold].")
        return
    console.print(f"[bold]{target}[/bold]")
    if result.last_updated:
        console.print(f"  [dim]Updated {result.last_updated}[/dim]")
    if "stats" in result.data:
        _print_node(result.data)
        return
    table = Table(show_edge=False, pad_edge=False, box=None)
    table.add_column("Value")
    table.add_column("G", justify="right")
    table.add_column("Batting")
    table.add_column("Pitching")
    for value, node in result.data.items():
        stats = node.get("stats", {})
        games = node.get("game_count", len(node.get("games", [])))
        table.add_row(
            value,
            str(games),
            _summary(stats.get("batting", {}), _SUMMARY_BATTING),
            _summary(stats.get("pitching", {}), _SUMMARY_PITCHING),
        )
    console.print(table)


def print_path_json(result: MacroPathResult) -> None:
    console.print_json(
        data={
            "key": result.key,
            "path": result.path,
            "last_updated": result.last_updated,
            "no_data": result.no_data,
            "data": result.data,
        }
    )


def print_subjects(subjects: list[SubjectDescriptor]) -> None:
    if not subjects:
        console.print("No subjects with macro data found.")
        return
    table = Table(show_edge=False, pad_edge=False, box=None)
    table.add_column("ID")
    table.add_column("Name")
    table.add_column("Team")
    table.add_column("Kind")
    for subject in subjects:
        table.add_row(subject.id, subject.display_name, subject.team, subject.kind.value)
    console.print(table)


def print_rebuild_result(tree: MacroTree) -> None:
    if tree.is_empty:
        console.print(f"[yellow]No raw records[/yellow] for [bold]{tree.key}[/bold]; nothing stored")
        return
    console.print(f"[bold green]Rebuilt[/bold green] [bold]{tree.key}[/bold] from {tree.root.game_count} games")


def print_build_all_result(trees: list[MacroTree]) -> None:
    built = [tree for tree in trees if not tree.is_empty]
    console.print(f"[bold green]Built[/bold green] {len(built)} macro trees")
    for tree in built:
        console.print(f"  {tree.key}: {tree.root.game_count} games")


def print_load_result(loaded: int, skipped: int) -> None:
    console.print(f"[bold green]Loaded[/bold green] {loaded} raw records")
    if skipped:
        console.print(f"  [yellow]Skipped {skipped} malformed lines[/yellow]")
