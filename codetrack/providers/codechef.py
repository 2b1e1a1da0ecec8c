from __future__ import annotations

import logging
import re

from bs4 import BeautifulSoup

from codetrack.platforms import Platform
from .base import BaseProvider
from .common import PlatformStats, to_int
from . import register_provider

logger = logging.getLogger(__name__)

_HIGHEST_RATING_RE = re.compile(r'Highest\s+Rating\s*\(?\s*(\d+)', re.I)
_SOLVED_RE = re.compile(r'Total\s+Problems\s+Solved\s*:?\s*(\d+)', re.I)
_STARS_RE = re.compile(r'(\d)\s*★')


@register_provider
class CodeChefProvider(BaseProvider):
    """Scrapes the public CodeChef profile page (there is no public API)."""

    PLATFORM = Platform.CODECHEF
    BASE_URL = "https://www.codechef.com"

    def fetch_stats(self, username: str) -> PlatformStats:
        resp = self._request_with_retry(f"{self.BASE_URL}/users/{username}")
        # Unknown handles are redirected away from /users/
        if '/users/' not in (resp.url or ''):
            raise self._fail(f"CodeChef user {username!r} not found")
        stats = self.parse_profile(resp.text)
        if stats is None:
            raise self._fail(f"CodeChef user {username!r} not found")
        return stats

    @staticmethod
    def parse_profile(html: str) -> PlatformStats | None:
        """Extract stats from a profile page; None if it is not a profile."""
        soup = BeautifulSoup(html, 'html.parser')
        rating_el = soup.select_one('.rating-number')
        text = soup.get_text(' ', strip=True)
        solved_match = _SOLVED_RE.search(text)
        if rating_el is None and solved_match is None:
            return None

        rating = to_int(rating_el.get_text(strip=True)) if rating_el else 0

        highest = _HIGHEST_RATING_RE.search(text)
        max_rating = to_int(highest.group(1)) if highest else rating

        contests = 0
        contests_el = soup.select_one('.contest-participated-count b')
        if contests_el is not None:
            contests = to_int(contests_el.get_text(strip=True))

        rank = None
        stars_el = soup.select_one('.rating-star')
        stars_match = _STARS_RE.search(stars_el.get_text(' ', strip=True)) if stars_el else None
        if stars_match:
            rank = f"{stars_match.group(1)} Star"
        elif stars_el is not None:
            star_count = len(stars_el.find_all('span'))
            rank = f"{star_count} Star" if star_count else None

        return PlatformStats(
            problems_solved=to_int(solved_match.group(1)) if solved_match else 0,
            contests_participated=contests,
            rating=rating,
            max_rating=max(max_rating, rating),
            rank=rank,
        )
