from __future__ import annotations

import json
import logging

from bs4 import BeautifulSoup

from codetrack.platforms import Platform
from .base import BaseProvider
from .common import PlatformStats, to_int
from . import register_provider

logger = logging.getLogger(__name__)


def _find_key(obj, names):
    """Depth-first search for the first value stored under any of *names*."""
    if isinstance(obj, dict):
        for name in names:
            if name in obj and obj[name] not in (None, ''):
                return obj[name]
        for value in obj.values():
            found = _find_key(value, names)
            if found is not None:
                return found
    elif isinstance(obj, list):
        for value in obj:
            found = _find_key(value, names)
            if found is not None:
                return found
    return None


@register_provider
class GFGProvider(BaseProvider):
    """Reads the Next.js data blob embedded in the GeeksforGeeks profile page."""

    PLATFORM = Platform.GFG
    BASE_URL = "https://www.geeksforgeeks.org"

    def fetch_stats(self, username: str) -> PlatformStats:
        resp = self._request_with_retry(f"{self.BASE_URL}/user/{username}/")
        data = self.extract_page_data(resp.text)
        if not data or _find_key(data, ('userInfo', 'userData')) is None:
            raise self._fail(f"GeeksforGeeks user {username!r} not found")
        return self.parse_stats(data)

    @staticmethod
    def extract_page_data(html: str) -> dict | None:
        soup = BeautifulSoup(html, 'html.parser')
        script = soup.find('script', id='__NEXT_DATA__')
        if script is None or not script.string:
            return None
        try:
            return json.loads(script.string)
        except ValueError:
            logger.warning("GeeksforGeeks page data is not valid JSON")
            return None

    @staticmethod
    def parse_stats(data: dict) -> PlatformStats:
        user = _find_key(data, ('userInfo', 'userData')) or {}
        submissions = _find_key(data, ('userSubmissionsInfo',)) or {}

        def solved_in(*levels):
            return sum(len(submissions.get(level) or {}) for level in levels)

        rating = to_int(_find_key(data, ('current_rating', 'contest_rating')))
        max_rating = to_int(_find_key(data, ('max_rating', 'highest_rating')))
        rank = _find_key(user, ('institute_rank',))

        return PlatformStats(
            problems_solved=to_int(user.get('total_problems_solved')),
            contests_participated=to_int(
                _find_key(data, ('contest_attended', 'no_of_contests', 'contests_attended'))
            ),
            rating=rating,
            max_rating=max(max_rating, rating),
            rank=f"Institute #{rank}" if rank else None,
            easy_solved=solved_in('School', 'Basic', 'Easy'),
            medium_solved=solved_in('Medium'),
            hard_solved=solved_in('Hard'),
        )
