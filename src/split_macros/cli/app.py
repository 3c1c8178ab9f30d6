import json
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Annotated

import typer

from split_macros.cli._logging import configure_logging
from split_macros.cli._output import (
    console,
    print_build_all_result,
    print_error,
    print_load_result,
    print_path_json,
    print_path_result,
    print_rebuild_result,
    print_subjects,
)
from split_macros.cli.factory import build_macro_context
from split_macros.config import Settings, create_config, load_settings
from split_macros.domain.game_record import game_record_from_dict
from split_macros.domain.result import Err, Ok
from split_macros.domain.subject import Subject, SubjectKind
from split_macros.exceptions import RebuildTimeoutError, RecordFormatError, StoreUnavailableError
from split_macros.macro.paths import CompactionOptions
from split_macros.services.macro_query import SubjectFilter, validate_season
from split_macros.store.keys import parse_subject_id, raw_record_key

logger = logging.getLogger(__name__)

app = typer.Typer(name="split-macros", help="Build and query precomputed situational split trees")


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable DEBUG logging")] = False,
) -> None:
    """Build and query precomputed situational split trees."""
    configure_logging(verbose=verbose)
    if ctx.invoked_subcommand is None:
        raise typer.Exit()


_TeamArg = Annotated[str, typer.Argument(help="Team code, e.g. NYY")]
_PlayerOpt = Annotated[str | None, typer.Option("--player", "-p", help="Player name; omit for the team itself")]
_SeasonOpt = Annotated[int | None, typer.Option("--season", "-s", help="Season year (default from config)")]
_ConfigOpt = Annotated[str, typer.Option("--config", help="Path to YAML config file")]


def _load_settings(config_path: str) -> Settings:
    match load_settings(create_config(yaml_path=config_path)):
        case Ok(settings):
            return settings
        case Err(e):
            print_error(e.message)
            raise typer.Exit(code=1)


def _subject(team: str, player: str | None) -> Subject:
    if player is not None:
        return Subject.player(team, player)
    return Subject.for_team(team)


@contextmanager
def _retryable_errors() -> Iterator[None]:
    try:
        yield
    except (StoreUnavailableError, RebuildTimeoutError) as e:
        print_error(str(e))
        raise typer.Exit(code=2) from e


@app.command()
def show(
    team: _TeamArg,
    player: _PlayerOpt = None,
    season: _SeasonOpt = None,
    path: Annotated[str | None, typer.Option("--path", help="Dotted split path, e.g. vs_teams.BOS.by_location.away")] = None,
    strip_games: Annotated[bool, typer.Option("--strip-games", help="Replace game id lists with counts")] = False,
    max_depth: Annotated[
        int | None,
        typer.Option("--max-depth", help="Levels below the queried node to expand; deeper nodes show stats only"),
    ] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print the projection as JSON")] = False,
    config: _ConfigOpt = "splits.yaml",
) -> None:
    """Show a macro tree or one of its splits, rebuilding it on a miss."""
    settings = _load_settings(config)
    options = CompactionOptions(strip_games=strip_games, max_depth=max_depth)
    with _retryable_errors(), build_macro_context(settings) as ctx:
        result = ctx.service.get_macro_path(
            _subject(team, player), season if season is not None else settings.default_season, path, options
        )
    match result:
        case Ok(r) if as_json:
            print_path_json(r)
        case Ok(r):
            print_path_result(r)
        case Err(e):
            print_error(e.message)
            raise typer.Exit(code=1)


@app.command("list")
def list_subjects(
    season: _SeasonOpt = None,
    kind: Annotated[SubjectKind | None, typer.Option("--kind", help="player or team")] = None,
    team: Annotated[str | None, typer.Option("--team", help="Only subjects of this team")] = None,
    query: Annotated[str | None, typer.Option("--query", "-q", help="Name search")] = None,
    limit: Annotated[int, typer.Option("--limit", help="Maximum results (capped at 100)")] = 50,
    config: _ConfigOpt = "splits.yaml",
) -> None:
    """List subjects that have stored macro trees."""
    settings = _load_settings(config)
    subject_filter = SubjectFilter(kind=kind, team=team, query=query, limit=limit)
    with _retryable_errors(), build_macro_context(settings) as ctx:
        result = ctx.service.list_subjects_with_macro_data(
            season if season is not None else settings.default_season, subject_filter
        )
    match result:
        case Ok(subjects):
            print_subjects(subjects)
        case Err(e):
            print_error(e.message)
            raise typer.Exit(code=1)


@app.command()
def rebuild(
    team: _TeamArg,
    player: _PlayerOpt = None,
    season: _SeasonOpt = None,
    config: _ConfigOpt = "splits.yaml",
) -> None:
    """Rebuild one macro tree from raw records, replacing the stored one."""
    settings = _load_settings(config)
    with _retryable_errors(), build_macro_context(settings) as ctx:
        result = ctx.service.rebuild(_subject(team, player), season if season is not None else settings.default_season)
    match result:
        case Ok(tree):
            print_rebuild_result(tree)
        case Err(e):
            print_error(e.message)
            raise typer.Exit(code=1)


@app.command("build-all")
def build_all(
    season: _SeasonOpt = None,
    kind: Annotated[SubjectKind, typer.Option("--kind", help="player or team")] = SubjectKind.PLAYER,
    config: _ConfigOpt = "splits.yaml",
) -> None:
    """Rebuild the macro tree of every subject with raw records in a season."""
    settings = _load_settings(config)
    target_season = season if season is not None else settings.default_season
    error = validate_season(target_season)
    if error is not None:
        print_error(error.message)
        raise typer.Exit(code=1)
    with _retryable_errors(), build_macro_context(settings) as ctx:
        trees = ctx.rebuilder.build_all(target_season, kind)
    print_build_all_result(trees)


@app.command()
def invalidate(
    team: _TeamArg,
    player: _PlayerOpt = None,
    season: _SeasonOpt = None,
    config: _ConfigOpt = "splits.yaml",
) -> None:
    """Delete a stored macro tree so the next read rebuilds it."""
    settings = _load_settings(config)
    with _retryable_errors(), build_macro_context(settings) as ctx:
        result = ctx.service.invalidate(
            _subject(team, player), season if season is not None else settings.default_season
        )
    match result:
        case Ok(key):
            console.print(f"[bold green]Invalidated[/bold green] {key}")
        case Err(e):
            print_error(e.message)
            raise typer.Exit(code=1)


@app.command("load-raw")
def load_raw(
    source: Annotated[Path, typer.Argument(help="JSON-lines file of game records")],
    config: _ConfigOpt = "splits.yaml",
) -> None:
    """Seed the raw store from a JSON-lines file of game records."""
    if not source.is_file():
        print_error(f"file not found: {source}")
        raise typer.Exit(code=1)
    settings = _load_settings(config)

    items: list[tuple[str, str]] = []
    skipped = 0
    with source.open(encoding="utf-8") as handle:
        for line_number, line in enumerate(handle, start=1):
            if not line.strip():
                continue
            try:
                data = json.loads(line)
                record = game_record_from_dict(data)
            except (ValueError, RecordFormatError) as e:
                skipped += 1
                logger.warning("Skipping line %d of %s: %s", line_number, source, e)
                continue
            key = raw_record_key(parse_subject_id(record.subject_id), record.season, record.date, record.game_id)
            items.append((key, json.dumps(data, separators=(",", ":"))))

    with _retryable_errors(), build_macro_context(settings) as ctx:
        ctx.store.set_many(items)
    print_load_result(len(items), skipped)
