from __future__ import annotations

import logging
from datetime import datetime

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from codetrack.extensions import db
from codetrack.models import CodingProfile, CodingStats
from codetrack.platforms import parse_platform
from codetrack.providers import get_provider_instance
from codetrack.providers.common import PlatformStats
from codetrack.services.score_service import ScoreService

logger = logging.getLogger(__name__)


class StatsService:
    """Fetches platform stats and keeps each profile's snapshot current."""

    def __init__(self, rate_limit: float = None, timeout: float = None):
        config = current_app.config
        self.rate_limit = (
            rate_limit if rate_limit is not None
            else config.get('SCRAPER_RATE_LIMIT', 0.5)
        )
        self.timeout = (
            timeout if timeout is not None
            else config.get('PROVIDER_TIMEOUT', 20.0)
        )

    def get_provider(self, platform):
        """Provider instance for *platform*; raises UnsupportedPlatformError."""
        return get_provider_instance(
            platform, rate_limit=self.rate_limit, timeout=self.timeout,
        )

    @staticmethod
    def save_stats(profile: CodingProfile, stats: PlatformStats,
                   synced_at: datetime = None) -> CodingStats:
        """Upsert the profile's snapshot and mark it synced, in one commit."""
        try:
            snapshot = profile.stats
            if snapshot is None:
                snapshot = CodingStats(profile=profile)
                db.session.add(snapshot)
            snapshot.apply(stats)
            profile.last_synced = synced_at or datetime.utcnow()
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f'Failed to save stats for profile {profile.id}: {e}')
            raise
        return snapshot

    def refresh_profile(self, profile_id: int, platform=None, username: str = None,
                        recalculate: bool = True) -> PlatformStats:
        """Fetch fresh stats for one profile, store them, rescore the student.

        ``platform`` and ``username`` default to the profile's own values;
        an explicit platform must match the profile.

        Raises:
            ValueError: unknown platform (UnsupportedPlatformError) or a
                platform that does not match the profile.
            LookupError: the profile does not exist.
            ProviderError: the platform could not be reached or the account
                does not exist.  Nothing is written in that case.
        """
        if platform is not None:
            platform = parse_platform(platform)

        profile = db.session.get(CodingProfile, profile_id)
        if profile is None:
            raise LookupError(f'Coding profile {profile_id} not found')
        if platform is not None and platform.value != profile.platform:
            raise ValueError(
                f"Platform {platform.value} does not match profile {profile_id} "
                f"({profile.platform})"
            )

        provider = self.get_provider(profile.platform)
        stats = provider.fetch_stats(username or profile.username)
        self.save_stats(profile, stats)
        logger.info(
            f'Refreshed {profile.platform} stats for {profile.username} '
            f'(profile {profile_id}): solved={stats.problems_solved}'
        )

        if recalculate:
            ScoreService.recalculate(profile.student_id)

        return stats
