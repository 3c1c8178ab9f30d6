import json

from split_macros.domain.game_record import CountingBundle, GameRecord, Handedness, Location, game_record_to_dict
from split_macros.domain.subject import Subject
from split_macros.store.keys import raw_record_key

JUDGE = Subject.player("NYY", "Aaron Judge")
YANKEES = Subject.for_team("NYY")


def make_record(
    game_id: str = "g1",
    *,
    subject_id: str = "NYY-Aaron_Judge",
    season: int = 2025,
    date: str = "2025-04-01",
    location: Location = Location.HOME,
    opponent: str = "BOS",
    opposing_hand: Handedness = Handedness.RIGHT,
    opposing_pitcher: str | None = None,
    batting: CountingBundle | None = None,
    pitching: CountingBundle | None = None,
    counts: dict[str, CountingBundle] | None = None,
) -> GameRecord:
    return GameRecord(
        subject_id=subject_id,
        season=season,
        game_id=game_id,
        date=date,
        location=location,
        opponent=opponent,
        opposing_hand=opposing_hand,
        opposing_pitcher=opposing_pitcher,
        batting=batting if batting is not None else {"at_bats": 4, "hits": 1},
        pitching=pitching or {},
        counts=counts or {},
    )


def record_json(record: GameRecord) -> str:
    return json.dumps(game_record_to_dict(record))


def seed_raw(
    store: object,
    subject: Subject,
    record: GameRecord,
    *,
    name_variant: str | None = None,
) -> str:
    """Write ``record`` under its raw game key and return the key."""
    key = raw_record_key(subject, record.season, record.date, record.game_id, name_variant)
    store.set(key, record_json(record))  # type: ignore[attr-defined]
    return key
