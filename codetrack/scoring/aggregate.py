from __future__ import annotations

from collections.abc import Mapping

from codetrack.platforms import Platform

# Fixed weights; they sum to 1.0 so the total stays within [0, 100].
PLATFORM_WEIGHTS = {
    Platform.LEETCODE.value: 0.30,
    Platform.CODEFORCES.value: 0.25,
    Platform.CODECHEF.value: 0.20,
    Platform.GFG.value: 0.15,
    Platform.HACKERRANK.value: 0.10,
}


def weighted_total(platform_scores: Mapping) -> float:
    """Weighted sum of per-platform scores; absent platforms contribute 0.

    Keys may be platform names or Platform members.  Keys outside the five
    tracked platforms are ignored.
    """
    normalized = {
        getattr(key, 'value', key): value for key, value in platform_scores.items()
    }
    return sum(
        weight * float(normalized.get(name) or 0.0)
        for name, weight in PLATFORM_WEIGHTS.items()
    )
