"""JSON serialization of macro trees.

A node is written as its finalized ``stats``, its sorted ``games`` list, and
one object per non-empty dimension::

    {"stats": {"batting": {...}, "pitching": {...}},
     "games": ["717465", ...],
     "by_location": {"home": {...}, "away": {...}},
     "vs_teams": {"BOS": {...}}}

Counting totals are not stored separately; they are recovered from the
finalized views on decode.
"""

from __future__ import annotations

import json
from typing import Any

from split_macros.domain.split_tree import Dimension, MacroTree, SplitNode
from split_macros.domain.subject import Subject, SubjectKind
from split_macros.exceptions import MacroFormatError
from split_macros.stats.innings import innings_to_outs
from split_macros.stats.rates import BATTING_RATE_FIELDS, INNINGS_FIELD, OUTS_FIELD, PITCHING_RATE_FIELDS


def node_to_dict(node: SplitNode) -> dict[str, Any]:
    data: dict[str, Any] = {
        "stats": {
            "batting": dict(node.stats.get("batting", {})),
            "pitching": dict(node.stats.get("pitching", {})),
        },
        "games": sorted(node.games),
    }
    for dimension in Dimension:
        branch = node.dimension(dimension)
        if branch:
            data[dimension.value] = {value: node_to_dict(branch[value]) for value in sorted(branch)}
    return data


def _counting(view: dict[str, Any], derived: frozenset[str]) -> dict[str, int]:
    return {
        name: value
        for name, value in view.items()
        if name not in derived and isinstance(value, int) and not isinstance(value, bool)
    }


def node_from_dict(data: dict[str, Any]) -> SplitNode:
    stats = data.get("stats") or {}
    batting_view = dict(stats.get("batting") or {})
    pitching_view = dict(stats.get("pitching") or {})

    pitching = _counting(pitching_view, frozenset(PITCHING_RATE_FIELDS) | {INNINGS_FIELD, OUTS_FIELD})
    if pitching_view:
        pitching[OUTS_FIELD] = innings_to_outs(pitching_view.get(INNINGS_FIELD))

    node = SplitNode(
        batting=_counting(batting_view, frozenset(BATTING_RATE_FIELDS)),
        pitching=pitching,
        games={str(game) for game in data.get("games") or []},
        stats={"batting": batting_view, "pitching": pitching_view},
    )
    for dimension in Dimension:
        branch = data.get(dimension.value)
        if branch:
            node.children[dimension] = {str(value): node_from_dict(child) for value, child in branch.items()}
    return node


class MacroTreeSerializer:
    """Converts ``MacroTree`` values to and from the stored JSON string."""

    def serialize(self, tree: MacroTree) -> str:
        payload = {
            "key": tree.key,
            "subject": {
                "kind": tree.subject.kind.value,
                "team": tree.subject.team,
                "name": tree.subject.name,
            },
            "season": tree.season,
            "last_updated": tree.last_updated,
            "root": node_to_dict(tree.root),
        }
        return json.dumps(payload, separators=(",", ":"))

    def deserialize(self, data: str) -> MacroTree:
        """Decode a stored value.

        Raises:
            MacroFormatError: If ``data`` is not a well-formed macro tree.
        """
        try:
            payload = json.loads(data)
            subject_data = payload["subject"]
            subject = Subject(
                kind=SubjectKind(subject_data["kind"]),
                team=str(subject_data["team"]),
                name=subject_data.get("name"),
            )
            return MacroTree(
                key=str(payload["key"]),
                subject=subject,
                season=int(payload["season"]),
                root=node_from_dict(payload["root"]),
                last_updated=payload.get("last_updated"),
            )
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            raise MacroFormatError(f"Undecodable macro tree: {e}") from e
