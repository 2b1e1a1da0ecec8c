from __future__ import annotations

import logging

from codetrack.platforms import Platform
from .base import BaseProvider
from .common import PlatformStats, to_int
from . import register_provider

logger = logging.getLogger(__name__)


@register_provider
class CodeforcesProvider(BaseProvider):
    PLATFORM = Platform.CODEFORCES
    BASE_URL = "https://codeforces.com/api"

    # user.status is paged; this covers all but the most prolific accounts
    MAX_SUBMISSIONS = 10000

    def fetch_stats(self, username: str) -> PlatformStats:
        info = self._call('user.info', handles=username)
        if not info:
            raise self._fail(f"Codeforces user {username!r} not found")
        user = info[0]

        contests = self._call('user.rating', handle=username)
        submissions = self._call(
            'user.status', handle=username, **{'from': 1, 'count': self.MAX_SUBMISSIONS}
        )

        return PlatformStats(
            problems_solved=self.count_solved(submissions),
            contests_participated=len(contests or []),
            rating=to_int(user.get('rating')),
            max_rating=to_int(user.get('maxRating')),
            rank=user.get('rank') or 'unrated',
        )

    def _call(self, method: str, **params):
        """Call a Codeforces API method and return its ``result``."""
        data = self._get_json(f"{self.BASE_URL}/{method}", params=params)
        if data.get('status') != 'OK':
            raise self._fail(
                f"Codeforces {method} failed: {data.get('comment', 'unknown error')}"
            )
        return data.get('result')

    @staticmethod
    def count_solved(submissions) -> int:
        """Count distinct problems with at least one accepted verdict."""
        solved = set()
        for sub in submissions or []:
            if sub.get('verdict') != 'OK':
                continue
            problem = sub.get('problem') or {}
            key = (problem.get('contestId'), problem.get('index'), problem.get('name'))
            solved.add(key)
        return len(solved)
