from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from split_macros.domain.subject import Subject


class Dimension(StrEnum):
    BY_LOCATION = "by_location"
    VS_HANDEDNESS = "vs_handedness"
    VS_TEAMS = "vs_teams"
    VS_PITCHERS = "vs_pitchers"
    BY_COUNT = "by_count"


DIMENSION_NAMES: frozenset[str] = frozenset(d.value for d in Dimension)


def _empty_stats() -> dict[str, dict[str, int | float | str]]:
    return {"batting": {}, "pitching": {}}


@dataclass
class SplitNode:
    """One node of the split tree.

    ``batting`` and ``pitching`` hold raw counting totals (pitching innings as
    total outs). ``stats`` is the finalized view derived from them and is kept
    current by the accumulator after every fold.
    """

    batting: dict[str, int] = field(default_factory=dict)
    pitching: dict[str, int] = field(default_factory=dict)
    games: set[str] = field(default_factory=set)
    stats: dict[str, dict[str, int | float | str]] = field(default_factory=_empty_stats)
    children: dict[Dimension, dict[str, SplitNode]] = field(default_factory=dict)

    @property
    def game_count(self) -> int:
        return len(self.games)

    def dimension(self, dimension: Dimension) -> dict[str, SplitNode]:
        return self.children.get(dimension, {})

    def child(self, dimension: Dimension, value: str) -> SplitNode | None:
        return self.children.get(dimension, {}).get(value)

    def ensure_child(self, dimension: Dimension, value: str) -> SplitNode:
        branch = self.children.setdefault(dimension, {})
        node = branch.get(value)
        if node is None:
            node = SplitNode()
            branch[value] = node
        return node


@dataclass
class MacroTree:
    key: str
    subject: Subject
    season: int
    root: SplitNode = field(default_factory=SplitNode)
    last_updated: str | None = None

    @property
    def is_empty(self) -> bool:
        return not self.root.games
