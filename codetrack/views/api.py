import logging

from flask import Blueprint, current_app, jsonify, request
from sqlalchemy.exc import SQLAlchemyError

from codetrack.platforms import is_supported
from codetrack.providers.common import ProviderError
from codetrack.services.leaderboard_service import LeaderboardService
from codetrack.services.refresh_service import RefreshService
from codetrack.services.score_service import ScoreService
from codetrack.services.stats_service import StatsService

logger = logging.getLogger(__name__)

api_bp = Blueprint('api', __name__, url_prefix='/api')


def _error(message, status):
    return jsonify({'error': message}), status


def _json_body():
    """Return the request's JSON object, or None if absent/malformed."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else None


def _as_id(value):
    """Integer id from a JSON number or digit string; None otherwise."""
    if isinstance(value, bool):
        return None
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


@api_bp.route('/scores/recalculate', methods=['POST'])
def recalculate_score():
    body = _json_body()
    student_id = _as_id(body.get('studentId')) if body else None
    if student_id is None:
        return _error('studentId is required', 400)

    try:
        result = ScoreService.recalculate(student_id)
    except LookupError as e:
        return _error(str(e), 404)
    except SQLAlchemyError as e:
        logger.error(f'Score recalculation failed for student {student_id}: {e}')
        return _error('Failed to store unified score', 500)
    return jsonify(result)


@api_bp.route('/stats/fetch', methods=['POST'])
def fetch_stats():
    body = _json_body()
    if body is None:
        return _error('Request body must be a JSON object', 400)

    platform = body.get('platform')
    if not is_supported(platform):
        return _error(f'Unsupported platform: {platform}', 400)
    profile_id = _as_id(body.get('profileId'))
    if profile_id is None:
        return _error('profileId is required', 400)
    username = (body.get('username') or '').strip() or None

    try:
        stats = StatsService().refresh_profile(
            profile_id, platform=platform, username=username,
        )
    except LookupError as e:
        return _error(str(e), 404)
    except ValueError as e:
        return _error(str(e), 400)
    except ProviderError as e:
        logger.warning(f'Stats fetch failed for profile {profile_id}: {e}')
        return _error(str(e), 502)
    except SQLAlchemyError as e:
        logger.error(f'Stats save failed for profile {profile_id}: {e}')
        return _error('Failed to store stats', 500)

    return jsonify({'success': True, 'stats': stats.as_dict()})


@api_bp.route('/refresh', methods=['POST'])
def auto_refresh():
    """Refresh every stale profile; partial failures are reported, not raised."""
    try:
        result = RefreshService().run_sweep()
    except SQLAlchemyError as e:
        logger.error(f'Auto-refresh sweep failed: {e}')
        return _error('Auto-refresh failed', 500)
    return jsonify(result)


@api_bp.route('/ranks/recompute', methods=['POST'])
def recompute_ranks():
    try:
        ranked = ScoreService.recompute_ranks()
    except SQLAlchemyError:
        return _error('Failed to store ranks', 500)
    return jsonify({'success': True, 'ranked': ranked})


@api_bp.route('/leaderboard')
def leaderboard():
    limit = request.args.get('limit', type=int)
    if limit is not None and limit <= 0:
        return _error('limit must be positive', 400)
    data = LeaderboardService.get_leaderboard(
        batch=request.args.get('batch') or None,
        department=request.args.get('department') or None,
        limit=limit,
    )
    return jsonify(data)


@api_bp.route('/students/<int:student_id>/dashboard')
def student_dashboard(student_id):
    data = LeaderboardService.get_student_dashboard(student_id)
    if data is None:
        return _error(f'Student {student_id} not found', 404)
    return jsonify(data)


@api_bp.route('/admin/overview')
def admin_overview():
    data = LeaderboardService.get_admin_overview(
        staleness_hours=current_app.config.get('STALENESS_HOURS', 24),
    )
    return jsonify(data)
