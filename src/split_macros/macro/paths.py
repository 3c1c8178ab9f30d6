"""Sub-tree lookup by dotted path, and size-reducing projections.

A path alternates dimension names and values::

    vs_teams.BOS.by_location.away

Values may contain dots (``vs_pitchers.J.D._Martinez``); a value runs until
the next segment that is a dimension name. A path ending on a dimension name
selects that dimension's whole mapping.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from split_macros.domain.split_tree import DIMENSION_NAMES, Dimension, SplitNode
from split_macros.exceptions import PathSyntaxError

type Resolved = SplitNode | dict[str, SplitNode]


@dataclass(frozen=True)
class CompactionOptions:
    strip_games: bool = False
    max_depth: int | None = None


def parse_path(path: str) -> list[tuple[Dimension, str | None]] | None:
    """Split ``path`` into ``(dimension, value)`` steps.

    The last step's value is ``None`` when the path ends on a dimension name.
    Returns ``None`` when the first segment is not a dimension name.

    Raises:
        PathSyntaxError: On empty segments or a dimension name with no value
            before the next dimension name.
    """
    segments = path.split(".")
    if any(segment == "" for segment in segments):
        raise PathSyntaxError(f"Empty segment in path {path!r}")
    if segments[0] not in DIMENSION_NAMES:
        return None

    steps: list[tuple[Dimension, str | None]] = []
    i = 0
    while i < len(segments):
        dimension = Dimension(segments[i])
        i += 1
        value_parts: list[str] = []
        while i < len(segments) and segments[i] not in DIMENSION_NAMES:
            value_parts.append(segments[i])
            i += 1
        if not value_parts:
            if i < len(segments):
                raise PathSyntaxError(f"Missing value for {dimension.value} in path {path!r}")
            steps.append((dimension, None))
        else:
            steps.append((dimension, ".".join(value_parts)))
    return steps


def resolve(node: SplitNode, path: str | None) -> Resolved | None:
    """Return the node or dimension mapping at ``path``, or ``None`` if absent.

    An empty path returns ``node`` itself.

    Raises:
        PathSyntaxError: If ``path`` is malformed.
    """
    if not path:
        return node
    steps = parse_path(path)
    if steps is None:
        return None
    current = node
    for dimension, value in steps:
        if value is None:
            branch = current.dimension(dimension)
            return branch or None
        child = current.child(dimension, value)
        if child is None:
            return None
        current = child
    return current


def _compact_node(node: SplitNode, options: CompactionOptions, depth: int) -> dict[str, Any]:
    data: dict[str, Any] = {
        "stats": {
            "batting": dict(node.stats.get("batting", {})),
            "pitching": dict(node.stats.get("pitching", {})),
        },
    }
    if options.strip_games:
        data["game_count"] = node.game_count
    else:
        data["games"] = sorted(node.games)

    truncate = options.max_depth is not None and depth > options.max_depth
    for dimension in Dimension:
        branch = node.dimension(dimension)
        if not branch:
            continue
        if truncate:
            data[dimension.value] = {"truncated": True, "entries": len(branch)}
        else:
            data[dimension.value] = {
                value: _compact_node(branch[value], options, depth + 1) for value in sorted(branch)
            }
    return data


def compact(resolved: Resolved, options: CompactionOptions | None = None) -> dict[str, Any]:
    """Project a node or dimension mapping to plain dicts.

    The stored tree is not modified. With ``max_depth`` set, nodes deeper than
    ``max_depth`` levels below the query root keep their stats but have each
    dimension map replaced by ``{"truncated": true, "entries": n}``, so
    ``max_depth=0`` shows the query root and its direct children. Entries of a
    dimension mapping count as query roots.
    """
    options = options or CompactionOptions()
    if isinstance(resolved, SplitNode):
        return _compact_node(resolved, options, 0)
    return {value: _compact_node(resolved[value], options, 0) for value in sorted(resolved)}
