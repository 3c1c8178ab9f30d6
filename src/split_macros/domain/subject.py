from dataclasses import dataclass
from enum import StrEnum


class SubjectKind(StrEnum):
    PLAYER = "player"
    TEAM = "team"


@dataclass(frozen=True)
class Subject:
    """A player or team that a macro tree is computed for.

    ``name`` is the player's display name as received (spaces, underscores or
    hyphens, possibly with diacritics); it is ``None`` for team subjects.
    """

    kind: SubjectKind
    team: str
    name: str | None = None

    @classmethod
    def player(cls, team: str, name: str) -> "Subject":
        return cls(kind=SubjectKind.PLAYER, team=team.upper(), name=name)

    @classmethod
    def for_team(cls, team: str) -> "Subject":
        return cls(kind=SubjectKind.TEAM, team=team.upper())


@dataclass(frozen=True)
class SubjectDescriptor:
    id: str
    kind: SubjectKind
    team: str
    display_name: str
    season: int
