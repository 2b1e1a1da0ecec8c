from __future__ import annotations

import logging

from codetrack.platforms import Platform
from .base import BaseProvider
from .common import PlatformStats, to_int
from . import register_provider

logger = logging.getLogger(__name__)

_PROFILE_QUERY = """
query userStats($username: String!) {
    matchedUser(username: $username) {
        username
        profile {
            ranking
        }
        submitStatsGlobal {
            acSubmissionNum {
                difficulty
                count
                submissions
            }
            totalSubmissionNum {
                difficulty
                count
                submissions
            }
        }
    }
    userContestRanking(username: $username) {
        attendedContestsCount
        rating
        badge {
            name
        }
    }
    userContestRankingHistory(username: $username) {
        attended
        rating
    }
}
"""


@register_provider
class LeetCodeProvider(BaseProvider):
    PLATFORM = Platform.LEETCODE
    BASE_URL = "https://leetcode.com"

    def __init__(self, rate_limit: float = 2.0, timeout: float = 20.0):
        super().__init__(rate_limit=rate_limit, timeout=timeout)
        self.session.headers.update({
            'Content-Type': 'application/json',
            'Referer': 'https://leetcode.com/',
            'Origin': 'https://leetcode.com',
        })

    def fetch_stats(self, username: str) -> PlatformStats:
        payload = self._get_graphql(username)
        data = payload.get('data') or {}
        user = data.get('matchedUser')
        if not user:
            raise self._fail(f"LeetCode user {username!r} not found")
        return self.parse_stats(data)

    def _get_graphql(self, username: str) -> dict:
        resp = self._request_with_retry(
            f"{self.BASE_URL}/graphql",
            method='POST',
            json={'query': _PROFILE_QUERY, 'variables': {'username': username}},
        )
        try:
            return resp.json()
        except ValueError as e:
            raise self._fail("LeetCode returned invalid JSON") from e

    @staticmethod
    def parse_stats(data: dict) -> PlatformStats:
        """Build PlatformStats from the GraphQL ``data`` object."""
        user = data.get('matchedUser') or {}
        submit_stats = user.get('submitStatsGlobal') or {}

        solved = {}
        accepted_submissions = 0
        for row in submit_stats.get('acSubmissionNum') or []:
            difficulty = (row.get('difficulty') or '').lower()
            solved[difficulty] = to_int(row.get('count'))
            if difficulty == 'all':
                accepted_submissions = to_int(row.get('submissions'))

        total_submissions = 0
        for row in submit_stats.get('totalSubmissionNum') or []:
            if (row.get('difficulty') or '').lower() == 'all':
                total_submissions = to_int(row.get('submissions'))

        acceptance_rate = 0.0
        if total_submissions > 0:
            acceptance_rate = round(accepted_submissions / total_submissions * 100, 2)

        easy = solved.get('easy', 0)
        medium = solved.get('medium', 0)
        hard = solved.get('hard', 0)

        contest = data.get('userContestRanking') or {}
        rating = to_int(round(contest.get('rating') or 0))
        history = [
            entry.get('rating') or 0
            for entry in data.get('userContestRankingHistory') or []
            if entry.get('attended')
        ]
        max_rating = to_int(round(max(history))) if history else rating
        badge = contest.get('badge') or {}

        return PlatformStats(
            problems_solved=solved.get('all', easy + medium + hard),
            contests_participated=to_int(contest.get('attendedContestsCount')),
            rating=rating,
            max_rating=max(max_rating, rating),
            rank=badge.get('name'),
            easy_solved=easy,
            medium_solved=medium,
            hard_solved=hard,
            acceptance_rate=acceptance_rate,
        )
