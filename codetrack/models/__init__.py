from .student import Student
from .coding_profile import CodingProfile
from .coding_stats import CodingStats
from .unified_score import UnifiedScore
from .refresh_schedule import RefreshSchedule

__all__ = [
    'Student',
    'CodingProfile',
    'CodingStats',
    'UnifiedScore',
    'RefreshSchedule',
]
