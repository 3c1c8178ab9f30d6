"""Derive rate stats from counting totals.

Every rate is recomputed from a single set of counting totals; nothing here
averages rates across games. Zero denominators yield 0.0.
"""

from collections.abc import Mapping

from split_macros.stats.innings import outs_to_innings, true_innings

INNINGS_FIELD = "innings_pitched"
OUTS_FIELD = "outs_recorded"

BATTING_RATE_FIELDS = ("avg", "obp", "slg", "ops", "iso", "babip", "k_rate", "bb_rate")
PITCHING_RATE_FIELDS = ("era", "whip", "k9", "bb9", "k_rate", "bb_rate")


def _ratio(numerator: float, denominator: float) -> float:
    if denominator <= 0:
        return 0.0
    return numerator / denominator


def batting_rates(counts: Mapping[str, int]) -> dict[str, float]:
    """Derive batting rates (avg/obp/slg/ops plus iso, babip, k/bb rates)."""
    h = counts.get("hits", 0)
    ab = counts.get("at_bats", 0)
    bb = counts.get("walks", 0)
    hbp = counts.get("hit_by_pitch", 0)
    sf = counts.get("sac_flies", 0)
    sh = counts.get("sac_bunts", 0)
    so = counts.get("strikeouts", 0)
    doubles = counts.get("doubles", 0)
    triples = counts.get("triples", 0)
    hr = counts.get("home_runs", 0)

    pa = counts.get("plate_appearances", 0) or ab + bb + hbp + sf + sh
    singles = h - doubles - triples - hr
    total_bases = singles + 2 * doubles + 3 * triples + 4 * hr

    avg = _ratio(h, ab)
    obp = _ratio(h + bb + hbp, ab + bb + hbp + sf)
    slg = _ratio(total_bases, ab)
    return {
        "avg": round(avg, 3),
        "obp": round(obp, 3),
        "slg": round(slg, 3),
        "ops": round(obp + slg, 3),
        "iso": round(slg - avg, 3),
        "babip": round(_ratio(h - hr, ab - so - hr + sf), 3),
        "k_rate": round(_ratio(so, pa), 3),
        "bb_rate": round(_ratio(bb, pa), 3),
    }


def pitching_rates(counts: Mapping[str, int], outs: int) -> dict[str, float]:
    """Derive pitching rates from counting totals and total outs recorded."""
    ip = true_innings(outs)
    er = counts.get("earned_runs", 0)
    h = counts.get("hits", 0)
    bb = counts.get("walks", 0)
    so = counts.get("strikeouts", 0)
    bf = counts.get("batters_faced", 0)
    return {
        "era": round(_ratio(er * 9, ip), 2),
        "whip": round(_ratio(bb + h, ip), 2),
        "k9": round(_ratio(so * 9, ip), 2),
        "bb9": round(_ratio(bb * 9, ip), 2),
        "k_rate": round(_ratio(so, bf), 3),
        "bb_rate": round(_ratio(bb, bf), 3),
    }


def finalize_batting(totals: Mapping[str, int]) -> dict[str, int | float]:
    """Build the batting view: counting totals followed by derived rates."""
    if not totals:
        return {}
    view: dict[str, int | float] = dict(sorted(totals.items()))
    view.update(batting_rates(totals))
    return view


def finalize_pitching(totals: Mapping[str, int]) -> dict[str, int | float | str]:
    """Build the pitching view; total outs are rendered as ``innings_pitched``."""
    if not totals:
        return {}
    outs = totals.get(OUTS_FIELD, 0)
    view: dict[str, int | float | str] = {k: v for k, v in sorted(totals.items()) if k != OUTS_FIELD}
    view[INNINGS_FIELD] = outs_to_innings(outs)
    view.update(pitching_rates(totals, outs))
    return view
