"""Fold per-game records into a macro split tree.

Each record touches the root plus one branch per dimension. Compound
splits nest below them, and every node except a location leaf carries a
``by_location`` child::

    root
    ├── by_location.{home|away|unknown}
    ├── vs_handedness.{L|R|unknown}
    │   └── by_count.{B-S}
    ├── vs_teams.{OPP}
    │   ├── vs_handedness.{L|R|unknown}
    │   └── by_count.{B-S}
    ├── vs_pitchers.{PITCHER}              (only when the record names one)
    │   └── by_count.{B-S}
    └── by_count.{B-S}                     (count bundle only)

Counting totals are integer sums, so folding is order-independent. Every
touched node is finalized immediately.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from split_macros.domain.game_record import CountingBundle, GameRecord
from split_macros.domain.split_tree import Dimension, MacroTree, SplitNode
from split_macros.stats.innings import innings_to_outs
from split_macros.stats.rates import (
    BATTING_RATE_FIELDS,
    INNINGS_FIELD,
    OUTS_FIELD,
    PITCHING_RATE_FIELDS,
    finalize_batting,
    finalize_pitching,
)

logger = logging.getLogger(__name__)

_BATTING_DERIVED = frozenset(BATTING_RATE_FIELDS)
_PITCHING_DERIVED = frozenset(PITCHING_RATE_FIELDS) | {INNINGS_FIELD, OUTS_FIELD}


def _add_batting(totals: dict[str, int], bundle: Mapping[str, int | str]) -> None:
    for name, value in bundle.items():
        if name in _BATTING_DERIVED or not isinstance(value, int):
            continue
        totals[name] = totals.get(name, 0) + value


def _add_pitching(totals: dict[str, int], bundle: Mapping[str, int | str]) -> None:
    if not bundle:
        return
    totals[OUTS_FIELD] = totals.get(OUTS_FIELD, 0) + innings_to_outs(bundle.get(INNINGS_FIELD))
    for name, value in bundle.items():
        if name in _PITCHING_DERIVED or not isinstance(value, int):
            continue
        totals[name] = totals.get(name, 0) + value


def finalize(node: SplitNode) -> None:
    node.stats = {
        "batting": finalize_batting(node.batting),
        "pitching": finalize_pitching(node.pitching),
    }


def _apply(node: SplitNode, game_id: str, batting: CountingBundle, pitching: CountingBundle) -> None:
    if game_id in node.games:
        return
    node.games.add(game_id)
    _add_batting(node.batting, batting)
    _add_pitching(node.pitching, pitching)
    finalize(node)


def _apply_with_location(
    node: SplitNode, record: GameRecord, batting: CountingBundle, pitching: CountingBundle
) -> None:
    _apply(node, record.game_id, batting, pitching)
    _apply(node.ensure_child(Dimension.BY_LOCATION, record.location.value), record.game_id, batting, pitching)


def _apply_counts(node: SplitNode, record: GameRecord) -> None:
    for count, count_bundle in record.counts.items():
        if not count_bundle:
            continue
        _apply_with_location(node.ensure_child(Dimension.BY_COUNT, count), record, count_bundle, {})


def fold(tree: MacroTree, record: GameRecord) -> MacroTree:
    """Fold one record into ``tree`` in place and return it.

    Folding a record whose game id a node already holds leaves that node
    unchanged.
    """
    root = tree.root
    batting, pitching = record.batting, record.pitching
    hand = record.opposing_hand.value

    _apply_with_location(root, record, batting, pitching)
    _apply_counts(root, record)

    vs_hand = root.ensure_child(Dimension.VS_HANDEDNESS, hand)
    _apply_with_location(vs_hand, record, batting, pitching)
    _apply_counts(vs_hand, record)

    vs_team = root.ensure_child(Dimension.VS_TEAMS, record.opponent)
    _apply_with_location(vs_team, record, batting, pitching)
    _apply_with_location(vs_team.ensure_child(Dimension.VS_HANDEDNESS, hand), record, batting, pitching)
    _apply_counts(vs_team, record)

    if record.opposing_pitcher:
        vs_pitcher = root.ensure_child(Dimension.VS_PITCHERS, record.opposing_pitcher)
        _apply_with_location(vs_pitcher, record, batting, pitching)
        _apply_counts(vs_pitcher, record)

    return tree


def fold_all(tree: MacroTree, records: Iterable[GameRecord]) -> MacroTree:
    folded = 0
    for record in records:
        fold(tree, record)
        folded += 1
    logger.debug("Folded %d records into %s (%d games)", folded, tree.key, tree.root.game_count)
    return tree
