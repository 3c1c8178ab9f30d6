"""Key construction and parsing for macro trees and raw game records.

Macro keys::

    splits:player:{TEAM}-{Canonical_Name}:{season}
    splits:team:{TEAM}:{season}

Raw game keys::

    game:player:{TEAM}-{Name_Variant}-{season}:{YYYY-MM-DD}:{game_id}
    game:team:{TEAM}:{season}:{YYYY-MM-DD}:{game_id}
"""

from __future__ import annotations

from dataclasses import dataclass

from split_macros.domain.subject import Subject, SubjectKind
from split_macros.macro.normalizer import canonical, candidates, glob_escape

MACRO_PREFIX = "splits"
RAW_PREFIX = "game"
_DATE_GLOB = "????-??-??"


@dataclass(frozen=True)
class MacroKey:
    kind: SubjectKind
    team: str
    season: int
    name: str | None = None

    @property
    def subject_id(self) -> str:
        if self.kind == SubjectKind.PLAYER:
            return f"{self.team}-{self.name}"
        return self.team

    def encode(self) -> str:
        return f"{MACRO_PREFIX}:{self.kind.value}:{self.subject_id}:{self.season}"

    def subject(self) -> Subject:
        if self.kind == SubjectKind.PLAYER and self.name is not None:
            return Subject.player(self.team, self.name)
        return Subject.for_team(self.team)


@dataclass(frozen=True)
class RawRecordKey:
    kind: SubjectKind
    team: str
    season: int
    date: str
    game_id: str
    name: str | None = None

    def encode(self) -> str:
        if self.kind == SubjectKind.PLAYER:
            return f"{RAW_PREFIX}:player:{self.team}-{self.name}-{self.season}:{self.date}:{self.game_id}"
        return f"{RAW_PREFIX}:team:{self.team}:{self.season}:{self.date}:{self.game_id}"

    def subject(self) -> Subject:
        if self.kind == SubjectKind.PLAYER and self.name is not None:
            return Subject.player(self.team, self.name)
        return Subject.for_team(self.team)


def subject_id(subject: Subject) -> str:
    if subject.kind == SubjectKind.PLAYER:
        return f"{subject.team}-{canonical(subject.name or '')}"
    return subject.team


def parse_subject_id(value: str) -> Subject:
    """Split ``NYY-Aaron_Judge`` into a player subject, ``NYY`` into a team."""
    team, sep, name = value.partition("-")
    if sep and name:
        return Subject.player(team, name)
    return Subject.for_team(team)


def macro_key(subject: Subject, season: int) -> MacroKey:
    if subject.kind == SubjectKind.PLAYER:
        return MacroKey(SubjectKind.PLAYER, subject.team, season, canonical(subject.name or ""))
    return MacroKey(SubjectKind.TEAM, subject.team, season)


def parse_macro_key(key: str) -> MacroKey | None:
    """Parse a macro key, or return ``None`` if ``key`` is not one."""
    parts = key.split(":")
    if len(parts) != 4 or parts[0] != MACRO_PREFIX:
        return None
    _, kind, subject_part, season_part = parts
    try:
        season = int(season_part)
    except ValueError:
        return None
    if kind == SubjectKind.TEAM.value:
        return MacroKey(SubjectKind.TEAM, subject_part, season) if subject_part else None
    if kind == SubjectKind.PLAYER.value:
        team, _, name = subject_part.partition("-")
        if not team or not name:
            return None
        return MacroKey(SubjectKind.PLAYER, team, season, name)
    return None


def macro_key_pattern(season: int, kind: SubjectKind | None = None, team: str | None = None) -> str:
    """Glob pattern enumerating macro keys for a season.

    Without ``kind`` the team part is a prefix match, so callers must still
    compare the parsed team.
    """
    team_glob = glob_escape(team.upper()) if team else "*"
    match kind:
        case SubjectKind.PLAYER:
            return f"{MACRO_PREFIX}:player:{team_glob}-*:{season}"
        case SubjectKind.TEAM:
            return f"{MACRO_PREFIX}:team:{team_glob}:{season}"
        case _ if team:
            return f"{MACRO_PREFIX}:*:{team_glob}*:{season}"
        case _:
            return f"{MACRO_PREFIX}:*:{season}"


def raw_record_key(subject: Subject, season: int, date: str, game_id: str, name_variant: str | None = None) -> str:
    if subject.kind == SubjectKind.PLAYER:
        name = name_variant or canonical(subject.name or "")
        return RawRecordKey(SubjectKind.PLAYER, subject.team, season, date, game_id, name).encode()
    return RawRecordKey(SubjectKind.TEAM, subject.team, season, date, game_id).encode()


def parse_raw_record_key(key: str) -> RawRecordKey | None:
    parts = key.split(":")
    if len(parts) < 2 or parts[0] != RAW_PREFIX:
        return None
    if parts[1] == SubjectKind.TEAM.value:
        fields = key.split(":", 5)
        if len(fields) != 6:
            return None
        _, _, team, season_part, date, game_id = fields
        if not season_part.isdigit() or not team or not game_id:
            return None
        return RawRecordKey(SubjectKind.TEAM, team, int(season_part), date, game_id)
    if parts[1] == SubjectKind.PLAYER.value:
        fields = key.split(":", 4)
        if len(fields) != 5:
            return None
        _, _, subject_part, date, game_id = fields
        team, _, rest = subject_part.partition("-")
        name, _, season_part = rest.rpartition("-")
        if not team or not name or not season_part.isdigit() or not game_id:
            return None
        return RawRecordKey(SubjectKind.PLAYER, team, int(season_part), date, game_id, name)
    return None


def raw_record_patterns(subject: Subject, season: int) -> list[str]:
    """Scan patterns for a subject's raw records, one per naming variant, canonical first."""
    team = glob_escape(subject.team)
    if subject.kind == SubjectKind.TEAM:
        return [f"{RAW_PREFIX}:team:{team}:{season}:{_DATE_GLOB}:*"]
    return [
        f"{RAW_PREFIX}:player:{team}-{glob_escape(variant)}-{season}:{_DATE_GLOB}:*"
        for variant in candidates(subject.name or "")
    ]


def raw_season_pattern(season: int, kind: SubjectKind) -> str:
    if kind == SubjectKind.TEAM:
        return f"{RAW_PREFIX}:team:*:{season}:{_DATE_GLOB}:*"
    return f"{RAW_PREFIX}:player:*-{season}:{_DATE_GLOB}:*"
