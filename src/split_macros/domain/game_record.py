"""Per-game performance records consumed from raw storage.

A ``GameRecord`` is one subject's line for one game. Records are produced by
the ingestion pipeline and stored as JSON; this module decodes them.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from split_macros.exceptions import RecordFormatError
from split_macros.stats.rates import BATTING_RATE_FIELDS, INNINGS_FIELD, PITCHING_RATE_FIELDS

type CountingBundle = dict[str, int | str]

_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_DERIVED_FIELDS = frozenset(BATTING_RATE_FIELDS) | frozenset(PITCHING_RATE_FIELDS)


class Location(StrEnum):
    HOME = "home"
    AWAY = "away"
    UNKNOWN = "unknown"


class Handedness(StrEnum):
    LEFT = "L"
    RIGHT = "R"
    UNKNOWN = "unknown"


_LOCATION_ALIASES: dict[str, Location] = {
    "home": Location.HOME,
    "h": Location.HOME,
    "away": Location.AWAY,
    "a": Location.AWAY,
    "road": Location.AWAY,
}

_HAND_ALIASES: dict[str, Handedness] = {
    "l": Handedness.LEFT,
    "left": Handedness.LEFT,
    "r": Handedness.RIGHT,
    "right": Handedness.RIGHT,
}


def parse_location(raw: object) -> Location:
    if not isinstance(raw, str):
        return Location.UNKNOWN
    return _LOCATION_ALIASES.get(raw.strip().lower(), Location.UNKNOWN)


def parse_handedness(raw: object) -> Handedness:
    if not isinstance(raw, str):
        return Handedness.UNKNOWN
    return _HAND_ALIASES.get(raw.strip().lower(), Handedness.UNKNOWN)


@dataclass(frozen=True)
class GameRecord:
    subject_id: str
    season: int
    game_id: str
    date: str
    location: Location
    opponent: str
    opposing_hand: Handedness = Handedness.UNKNOWN
    opposing_pitcher: str | None = None
    batting: CountingBundle = field(default_factory=dict)
    pitching: CountingBundle = field(default_factory=dict)
    counts: dict[str, CountingBundle] = field(default_factory=dict)


def _bundle(raw: object, field_name: str) -> CountingBundle:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise RecordFormatError(f"'{field_name}' must be an object, got {type(raw).__name__}")
    bundle: CountingBundle = {}
    for name, value in raw.items():
        if isinstance(value, bool):
            continue
        if isinstance(value, int):
            bundle[str(name)] = value
        elif isinstance(value, str):
            if name == INNINGS_FIELD:
                bundle[str(name)] = value
            elif value.strip().isdigit():
                bundle[str(name)] = int(value)
            elif name not in _DERIVED_FIELDS:
                raise RecordFormatError(f"'{field_name}.{name}' must be a whole number, got {value!r}")
        elif isinstance(value, float):
            # innings arrive as 5.2 from some feeds
            bundle[str(name)] = str(value) if name == INNINGS_FIELD else int(value)
    return bundle


def _required_str(data: dict[str, Any], name: str) -> str:
    value = data.get(name)
    if value is None or str(value).strip() == "":
        raise RecordFormatError(f"missing required field '{name}'")
    return str(value).strip()


def game_record_from_dict(data: dict[str, Any]) -> GameRecord:
    """Decode a raw record object into a ``GameRecord``.

    Raises:
        RecordFormatError: If a required field is missing or malformed.
    """
    if not isinstance(data, dict):
        raise RecordFormatError(f"record must be an object, got {type(data).__name__}")
    try:
        season = int(data.get("season"))  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise RecordFormatError(f"invalid season: {data.get('season')!r}") from None

    date = _required_str(data, "date")
    if not _DATE_PATTERN.match(date):
        raise RecordFormatError(f"date must be YYYY-MM-DD, got {date!r}")

    pitcher = data.get("opposing_pitcher")
    opposing_pitcher = str(pitcher).strip() if pitcher is not None else ""
    raw_counts = data.get("counts") or {}
    if not isinstance(raw_counts, dict):
        raise RecordFormatError("'counts' must be an object")

    return GameRecord(
        subject_id=_required_str(data, "subject_id"),
        season=season,
        game_id=_required_str(data, "game_id"),
        date=date,
        location=parse_location(data.get("location")),
        opponent=_required_str(data, "opponent").upper(),
        opposing_hand=parse_handedness(data.get("opposing_hand")),
        opposing_pitcher=opposing_pitcher or None,
        batting=_bundle(data.get("batting"), "batting"),
        pitching=_bundle(data.get("pitching"), "pitching"),
        counts={str(count): _bundle(bundle, f"counts.{count}") for count, bundle in raw_counts.items()},
    )


def game_record_to_dict(record: GameRecord) -> dict[str, Any]:
    return {
        "subject_id": record.subject_id,
        "season": record.season,
        "game_id": record.game_id,
        "date": record.date,
        "location": record.location.value,
        "opponent": record.opponent,
        "opposing_hand": record.opposing_hand.value,
        "opposing_pitcher": record.opposing_pitcher,
        "batting": dict(record.batting),
        "pitching": dict(record.pitching),
        "counts": {count: dict(bundle) for count, bundle in record.counts.items()},
    }
