"""Transport-agnostic query surface over stored macro trees.

Request validation happens before any store access and is reported as
``Err(MalformedRequest)``. Store outages and rebuild timeouts propagate as
exceptions.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from split_macros.domain.errors import MalformedRequest, PathNotFound
from split_macros.domain.result import Err, Ok, Result
from split_macros.domain.subject import Subject, SubjectDescriptor, SubjectKind
from split_macros.exceptions import PathSyntaxError
from split_macros.macro.normalizer import display_name, matches_query
from split_macros.macro.paths import CompactionOptions, compact, parse_path, resolve
from split_macros.store.keys import macro_key, macro_key_pattern, parse_macro_key

if TYPE_CHECKING:
    from split_macros.domain.split_tree import MacroTree
    from split_macros.macro.rebuilder import MacroRebuilder
    from split_macros.store.macro_adapter import MacroStoreAdapter

logger = logging.getLogger(__name__)

MIN_SEASON = 1871
MAX_SEASON = 2100
MAX_LIST_LIMIT = 100

_TEAM_PATTERN = re.compile(r"^[A-Za-z]{2,4}$")
_NAME_PATTERN = re.compile(r"^[\w .'\-]+$")


@dataclass(frozen=True)
class SubjectFilter:
    kind: SubjectKind | None = None
    team: str | None = None
    query: str | None = None
    limit: int = 50


@dataclass(frozen=True)
class MacroPathResult:
    """A projected sub-tree.

    ``no_data`` is set when the subject has no games for the season; ``data``
    is then empty. This is a normal outcome, unlike ``PathNotFound``.
    """

    key: str
    path: str | None
    data: dict[str, Any]
    last_updated: str | None = None
    no_data: bool = False


def validate_season(season: object) -> MalformedRequest | None:
    if isinstance(season, bool) or not isinstance(season, int):
        return MalformedRequest(message=f"Season must be an integer, got {season!r}", field="season")
    if not MIN_SEASON <= season <= MAX_SEASON:
        return MalformedRequest(
            message=f"Season {season} outside {MIN_SEASON}-{MAX_SEASON}",
            field="season",
        )
    return None


def validate_team(team: str) -> MalformedRequest | None:
    if not _TEAM_PATTERN.match(team or ""):
        return MalformedRequest(message=f"Invalid team code {team!r}", field="team")
    return None


def validate_subject(subject: Subject) -> MalformedRequest | None:
    error = validate_team(subject.team)
    if error is not None:
        return error
    if subject.kind == SubjectKind.PLAYER:
        name = (subject.name or "").strip()
        if not name or not _NAME_PATTERN.match(name) or not any(c.isalnum() for c in name):
            return MalformedRequest(message=f"Invalid player name {subject.name!r}", field="name")
    return None


def _validate(subject: Subject, season: object) -> MalformedRequest | None:
    return validate_subject(subject) or validate_season(season)


class MacroQueryService:
    def __init__(
        self,
        adapter: MacroStoreAdapter,
        rebuilder: MacroRebuilder,
        *,
        timeout: float | None = None,
    ) -> None:
        self._adapter = adapter
        self._rebuilder = rebuilder
        self._timeout = timeout

    def get_macro(self, subject: Subject, season: int) -> Result[MacroTree, MalformedRequest]:
        """Return the full tree, rebuilding it from raw records on a miss.

        A subject without games yields ``Ok`` of an empty tree.
        """
        error = _validate(subject, season)
        if error is not None:
            return Err(error)
        return Ok(self._rebuilder.get_or_build(subject, season, timeout=self._timeout))

    def get_macro_path(
        self,
        subject: Subject,
        season: int,
        path: str | None,
        options: CompactionOptions | None = None,
    ) -> Result[MacroPathResult, PathNotFound | MalformedRequest]:
        error = _validate(subject, season)
        if error is not None:
            return Err(error)
        if options is not None and options.max_depth is not None and options.max_depth < 0:
            return Err(MalformedRequest(message="max_depth must be non-negative", field="max_depth"))
        if path:
            try:
                parse_path(path)
            except PathSyntaxError as e:
                return Err(MalformedRequest(message=str(e), field="path"))

        tree = self._rebuilder.get_or_build(subject, season, timeout=self._timeout)
        if tree.is_empty:
            return Ok(MacroPathResult(key=tree.key, path=path, data={}, no_data=True))

        resolved = resolve(tree.root, path)
        if resolved is None:
            logger.debug("Path %s not found in %s", path, tree.key)
            return Err(PathNotFound(message=f"Path not found: {path}", key=tree.key, path=path or ""))
        return Ok(
            MacroPathResult(
                key=tree.key,
                path=path,
                data=compact(resolved, options),
                last_updated=tree.last_updated,
            )
        )

    def list_subjects_with_macro_data(
        self, season: int, subject_filter: SubjectFilter | None = None
    ) -> Result[list[SubjectDescriptor], MalformedRequest]:
        """List subjects that have a stored macro tree, from key enumeration alone."""
        subject_filter = subject_filter or SubjectFilter()
        error = validate_season(season)
        if error is None and subject_filter.team is not None:
            error = validate_team(subject_filter.team)
        if error is None and subject_filter.limit < 1:
            error = MalformedRequest(message="limit must be at least 1", field="limit")
        if error is not None:
            return Err(error)

        team = subject_filter.team.upper() if subject_filter.team else None
        limit = min(subject_filter.limit, MAX_LIST_LIMIT)
        pattern = macro_key_pattern(season, subject_filter.kind, subject_filter.team)
        descriptors: list[SubjectDescriptor] = []
        for key in self._adapter.list_keys(pattern):
            parsed = parse_macro_key(key)
            if parsed is None or parsed.season != season:
                continue
            if subject_filter.kind is not None and parsed.kind != subject_filter.kind:
                continue
            if team is not None and parsed.team != team:
                continue
            name = display_name(parsed.name) if parsed.name else parsed.team
            if subject_filter.query and not matches_query(name, subject_filter.query):
                continue
            descriptors.append(
                SubjectDescriptor(
                    id=parsed.subject_id,
                    kind=parsed.kind,
                    team=parsed.team,
                    display_name=name,
                    season=parsed.season,
                )
            )
            if len(descriptors) >= limit:
                break
        return Ok(descriptors)

    def rebuild(self, subject: Subject, season: int) -> Result[MacroTree, MalformedRequest]:
        error = _validate(subject, season)
        if error is not None:
            return Err(error)
        return Ok(self._rebuilder.get_or_build(subject, season, timeout=self._timeout, force=True))

    def invalidate(self, subject: Subject, season: int) -> Result[str, MalformedRequest]:
        error = _validate(subject, season)
        if error is not None:
            return Err(error)
        key = macro_key(subject, season).encode()
        self._adapter.invalidate(key)
        return Ok(key)
