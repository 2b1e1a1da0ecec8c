from __future__ import annotations


def assign_ranks(rows) -> dict:
    """Return {student_key: position} for (student_key, total_score) pairs.

    Positions are 1-based, strictly descending by total score.  Equal totals
    are ordered by ascending student key so the result does not depend on the
    order rows came back from the database.
    """
    ordered = sorted(rows, key=lambda row: (-(row[1] or 0.0), row[0]))
    return {student_key: index + 1 for index, (student_key, _) in enumerate(ordered)}
