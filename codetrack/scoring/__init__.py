"""Unified scoring engine: per-platform scores, weighted total and ranking."""
from .platform_scores import score, score_all
from .aggregate import PLATFORM_WEIGHTS, weighted_total
from .ranking import assign_ranks

__all__ = [
    'score',
    'score_all',
    'PLATFORM_WEIGHTS',
    'weighted_total',
    'assign_ranks',
]
