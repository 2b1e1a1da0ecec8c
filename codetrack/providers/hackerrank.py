from __future__ import annotations

import logging

from codetrack.platforms import Platform
from .base import BaseProvider
from .common import PlatformStats, to_int
from . import register_provider

logger = logging.getLogger(__name__)


@register_provider
class HackerRankProvider(BaseProvider):
    PLATFORM = Platform.HACKERRANK
    BASE_URL = "https://www.hackerrank.com/rest/hackers"

    def fetch_stats(self, username: str) -> PlatformStats:
        badges = self._get_json(f"{self.BASE_URL}/{username}/badges")
        history = self._get_json(f"{self.BASE_URL}/{username}/rating_histories_elo")
        return self.parse_stats(badges, history)

    @staticmethod
    def parse_stats(badges: dict, history: dict) -> PlatformStats:
        """Combine the badges (solve counts) and rating-history payloads."""
        badge_models = (badges or {}).get('models') or []
        problems = sum(to_int(b.get('solved')) for b in badge_models)

        contests = 0
        rating = 0
        max_rating = 0
        for track in (history or {}).get('models') or []:
            events = track.get('events') or []
            contests += len(events)
            if not events:
                continue
            ratings = [to_int(e.get('rating')) for e in events]
            rating = max(rating, ratings[-1])
            max_rating = max(max_rating, max(ratings))

        best_badge = max(
            badge_models, key=lambda b: to_int(b.get('stars')), default=None
        )
        rank = None
        if best_badge and to_int(best_badge.get('stars')):
            rank = f"{best_badge.get('badge_name')} {to_int(best_badge.get('stars'))} Star"

        return PlatformStats(
            problems_solved=problems,
            contests_participated=contests,
            rating=rating,
            max_rating=max_rating,
            rank=rank,
        )
