"""Map a platform's raw stats to a bounded score in [0, 100].

Every platform combines capped linear terms, so no single signal can
saturate the score on its own.  The formulas are hand-tuned per platform:

    leetcode    (easy*1 + medium*3 + hard*5) * 0.1
                + acceptance_rate / 100 * 10 (max 10)
                + contests * 2, clamped to 100
    codeforces  rating / 40 (max 50) + contests * 1.5 (max 30)
                + problems * 0.05 (max 20)
    codechef    rating / 45 (max 45) + contests * 2 (max 25)
                + problems * 0.1 (max 30)
    gfg         problems * 0.15 (max 60) + contests * 3 (max 40)
    hackerrank  problems * 0.2 (max 50) + contests * 2.5 (max 30)
                + rating / 100 (max 20)
"""
from __future__ import annotations

import math
from collections.abc import Mapping

from codetrack.platforms import Platform, UnsupportedPlatformError, parse_platform

MAX_SCORE = 100.0


def _field(stats, name) -> float:
    """Read a numeric stat from a mapping or object; missing/bad -> 0."""
    if stats is None:
        return 0.0
    if isinstance(stats, Mapping):
        value = stats.get(name)
    else:
        value = getattr(stats, name, None)
    try:
        value = float(value or 0)
    except OverflowError:
        # Integers beyond float range saturate every cap
        return math.inf if value > 0 else 0.0
    except (TypeError, ValueError):
        return 0.0
    # NaN fails every comparison; treat it as missing
    if value != value:
        return 0.0
    return max(0.0, value)


def _capped(value: float, cap: float) -> float:
    return min(cap, value)


def _leetcode(stats) -> float:
    difficulty_score = (
        _field(stats, 'easy_solved') * 1
        + _field(stats, 'medium_solved') * 3
        + _field(stats, 'hard_solved') * 5
    )
    acceptance_bonus = _capped(_field(stats, 'acceptance_rate') / 100 * 10, 10)
    contests = _field(stats, 'contests_participated') * 2
    return min(MAX_SCORE, difficulty_score * 0.1 + acceptance_bonus + contests)


def _codeforces(stats) -> float:
    return (
        _capped(_field(stats, 'rating') / 40, 50)
        + _capped(_field(stats, 'contests_participated') * 1.5, 30)
        + _capped(_field(stats, 'problems_solved') * 0.05, 20)
    )


def _codechef(stats) -> float:
    return (
        _capped(_field(stats, 'rating') / 45, 45)
        + _capped(_field(stats, 'contests_participated') * 2, 25)
        + _capped(_field(stats, 'problems_solved') * 0.1, 30)
    )


def _gfg(stats) -> float:
    return (
        _capped(_field(stats, 'problems_solved') * 0.15, 60)
        + _capped(_field(stats, 'contests_participated') * 3, 40)
    )


def _hackerrank(stats) -> float:
    return (
        _capped(_field(stats, 'problems_solved') * 0.2, 50)
        + _capped(_field(stats, 'contests_participated') * 2.5, 30)
        + _capped(_field(stats, 'rating') / 100, 20)
    )


_SCORERS = {
    Platform.LEETCODE: _leetcode,
    Platform.CODEFORCES: _codeforces,
    Platform.CODECHEF: _codechef,
    Platform.GFG: _gfg,
    Platform.HACKERRANK: _hackerrank,
}


def score(platform, stats) -> float:
    """Score *stats* for *platform*; unknown platforms score 0."""
    try:
        plat = parse_platform(platform)
    except UnsupportedPlatformError:
        return 0.0
    return float(_SCORERS[plat](stats))


def score_all(stats_by_platform: Mapping) -> dict:
    """Score every tracked platform; platforms without stats score 0."""
    return {
        plat.value: score(plat, stats_by_platform.get(plat.value))
        for plat in Platform
    }
