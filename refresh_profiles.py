"""Run an auto-refresh sweep (or a rank recompute) from the command line.

Useful when the background scheduler is disabled, e.g. from cron.

Usage:
    python refresh_profiles.py                 # refresh every stale profile
    python refresh_profiles.py --dry-run       # list stale profiles only
    python refresh_profiles.py --ranks-only    # recompute the leaderboard ranks
    python refresh_profiles.py --staleness-hours 6 --workers 8
"""
import argparse
import logging
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from codetrack import create_app
from codetrack.services.refresh_service import RefreshService
from codetrack.services.score_service import ScoreService

logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')
logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(description='Refresh stale coding profiles')
    parser.add_argument('--dry-run', action='store_true',
                        help='List stale profiles without fetching')
    parser.add_argument('--ranks-only', action='store_true',
                        help='Only recompute leaderboard ranks')
    parser.add_argument('--staleness-hours', type=float, default=None,
                        help='Override STALENESS_HOURS for this run')
    parser.add_argument('--workers', type=int, default=None,
                        help='Override REFRESH_MAX_WORKERS for this run')
    parser.add_argument('--env', default=None,
                        help='Config name (development, production, testing)')
    args = parser.parse_args()

    app = create_app(args.env)
    with app.app_context():
        if args.ranks_only:
            ranked = ScoreService.recompute_ranks()
            logger.info(f'Recomputed ranks for {ranked} students.')
            return

        service = RefreshService(
            staleness_hours=args.staleness_hours,
            max_workers=args.workers,
        )

        if args.dry_run:
            stale = service.stale_profiles()
            if not stale:
                logger.info('No profiles need refresh. Nothing to do.')
                return
            logger.info(f'Found {len(stale)} stale profiles.')
            for profile in stale:
                synced = profile.last_synced.isoformat() if profile.last_synced else 'never'
                logger.info(
                    f'  [DRY RUN] Would refresh {profile.platform}:{profile.username} '
                    f'(profile {profile.id}, last synced {synced})'
                )
            return

        result = service.run_sweep()
        logger.info(
            f"{result['message']}: refreshed {result['refreshed']} "
            f"of {result['total']} profiles."
        )
        for error in result.get('errors', []):
            logger.warning(f'  {error}')
        if result.get('errors'):
            sys.exit(1)


if __name__ == '__main__':
    main()
