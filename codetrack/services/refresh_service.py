"""Auto-refresh sweep over stale coding profiles.

A profile is stale when it has never been synced or was last synced longer
than the staleness window ago.  One sweep:

1. fetches stats for every stale profile concurrently (bounded thread pool);
   a failed fetch is recorded and leaves the profile stale,
2. stores each successful result in its own transaction,
3. recalculates the unified score of every student with at least one
   refreshed profile and upserts their refresh schedule,
4. recomputes the global ranking once.

Provider calls run in worker threads and never touch the database session;
all writes happen in the calling thread.
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import datetime, timedelta

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from codetrack.extensions import db
from codetrack.models import CodingProfile, RefreshSchedule
from codetrack.services.score_service import ScoreService
from codetrack.services.stats_service import StatsService

logger = logging.getLogger(__name__)


class RefreshService:

    def __init__(self, staleness_hours: float = None, max_workers: int = None):
        config = current_app.config
        hours = (
            staleness_hours if staleness_hours is not None
            else config.get('STALENESS_HOURS', 24)
        )
        self.window = timedelta(hours=hours)
        self.max_workers = max(1, max_workers or config.get('REFRESH_MAX_WORKERS', 4))
        self.stats_service = StatsService()

    def stale_profiles(self, now: datetime = None) -> list:
        return (
            CodingProfile.stale_query(self.window, now=now)
            .order_by(CodingProfile.id)
            .all()
        )

    def run_sweep(self, now: datetime = None) -> dict:
        """Refresh all stale profiles and return the sweep summary."""
        now = now or datetime.utcnow()
        # Plain tuples so worker results never depend on session state
        targets = [
            (p.id, p.student_id, p.platform, p.username)
            for p in self.stale_profiles(now)
        ]
        if not targets:
            logger.info('Auto-refresh: no profiles need refresh')
            return {'message': 'No profiles need refresh', 'refreshed': 0, 'total': 0}

        logger.info(f'Auto-refresh: {len(targets)} stale profile(s)')
        errors = []
        refreshed_students = []
        refreshed = 0

        for target, stats, error in self._fetch_all(targets):
            profile_id, student_id, platform, username = target
            if error is not None:
                message = f'Failed to refresh {platform} for {username}: {error}'
                logger.warning(message)
                errors.append(message)
                continue
            profile = db.session.get(CodingProfile, profile_id)
            if profile is None:
                # Unlinked while the fetch was in flight
                continue
            try:
                self.stats_service.save_stats(profile, stats, synced_at=now)
            except SQLAlchemyError as e:
                errors.append(f'Failed to save {platform} stats for {username}: {e}')
                continue
            refreshed += 1
            if student_id not in refreshed_students:
                refreshed_students.append(student_id)

        for student_id in refreshed_students:
            try:
                ScoreService.recalculate(student_id, update_ranks=False)
                RefreshSchedule.record(student_id, now, self.window)
                db.session.commit()
            except (LookupError, SQLAlchemyError) as e:
                db.session.rollback()
                message = f'Failed to recalculate score for student {student_id}: {e}'
                logger.error(message)
                errors.append(message)

        if refreshed_students:
            try:
                ScoreService.recompute_ranks()
            except SQLAlchemyError as e:
                errors.append(f'Failed to recompute ranks: {e}')

        logger.info(
            f'Auto-refresh completed: refreshed={refreshed}/{len(targets)}, '
            f'students={len(refreshed_students)}, errors={len(errors)}'
        )
        result = {
            'message': 'Auto-refresh completed',
            'refreshed': refreshed,
            'total': len(targets),
        }
        if errors:
            result['errors'] = errors
        return result

    def _fetch_all(self, targets):
        """Yield (target, stats, error) as each provider call finishes."""
        def _fetch(target):
            _, _, platform, username = target
            provider = self.stats_service.get_provider(platform)
            return provider.fetch_stats(username)

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = {executor.submit(_fetch, t): t for t in targets}
            for future in as_completed(futures):
                target = futures[future]
                try:
                    yield target, future.result(), None
                except Exception as e:
                    yield target, None, e
