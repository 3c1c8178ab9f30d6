"""Innings-pitched arithmetic.

Innings are written ``"W.O"``: ``W`` whole innings and ``O`` outs (0, 1 or 2)
recorded in the partial inning. ``"5.2"`` is five and two-thirds innings, not
5.2. All sums go through total outs.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


def innings_to_outs(value: str | int | float | None) -> int:
    """Convert an innings-pitched value to total outs.

    ``"5.2"`` -> 17, ``"6"`` -> 18. An outs digit of 3 or more is invalid; only
    the whole innings are counted for such values.
    """
    if value is None:
        return 0
    text = str(value).strip()
    if not text:
        return 0
    whole_part, _, outs_part = text.partition(".")
    try:
        whole = int(whole_part or "0")
        outs = int(outs_part or "0")
    except ValueError:
        logger.warning("Unparseable innings pitched value %r, counting 0 outs", value)
        return 0
    if whole < 0 or outs < 0:
        logger.warning("Negative innings pitched value %r, counting 0 outs", value)
        return 0
    if outs > 2:
        logger.warning("Invalid outs in innings pitched %r, counting whole innings only", value)
        outs = 0
    return whole * 3 + outs


def outs_to_innings(outs: int) -> str:
    """Format total outs as ``"W.O"``. 27 -> ``"9.0"``, 17 -> ``"5.2"``."""
    return f"{outs // 3}.{outs % 3}"


def add_innings(*values: str | int | float | None) -> str:
    return outs_to_innings(sum(innings_to_outs(v) for v in values))


def true_innings(outs: int) -> float:
    """Innings as a real number, for rate denominators."""
    return outs / 3
