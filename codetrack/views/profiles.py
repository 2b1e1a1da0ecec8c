"""Student and coding-profile management endpoints.

Every change that affects which stats count toward a student's score
(linking, renaming or unlinking a profile) recalculates the unified score.
"""
import logging

from flask import Blueprint, jsonify, request
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from codetrack.extensions import db
from codetrack.models import CodingProfile, Student
from codetrack.platforms import Platform, UnsupportedPlatformError
from codetrack.providers.common import ProviderError
from codetrack.services.score_service import ScoreService
from codetrack.services.stats_service import StatsService

logger = logging.getLogger(__name__)

profiles_bp = Blueprint('profiles', __name__, url_prefix='/api')

_REQUIRED_STUDENT_FIELDS = ('email', 'full_name', 'student_id')


def _error(message, status):
    return jsonify({'error': message}), status


def _clean(value):
    if value is None:
        return None
    value = str(value).strip()
    return value or None


@profiles_bp.route('/students', methods=['POST'])
def create_student():
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        return _error('Request body must be a JSON object', 400)

    missing = [f for f in _REQUIRED_STUDENT_FIELDS if not _clean(body.get(f))]
    if missing:
        return _error(f'Missing required fields: {", ".join(missing)}', 400)
    if not isinstance(body.get('is_admin', False), bool):
        return _error('is_admin must be a boolean', 400)

    student = Student(
        email=_clean(body['email']).lower(),
        full_name=_clean(body['full_name']),
        student_id=_clean(body['student_id']),
        batch=_clean(body.get('batch')),
        department=_clean(body.get('department')),
        phone=_clean(body.get('phone')),
        is_admin=body.get('is_admin') is True,
    )
    db.session.add(student)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        return _error('A student with this email or student ID already exists', 409)

    # Every student has a unified score row from registration on
    try:
        ScoreService.recalculate(student.id)
    except SQLAlchemyError:
        return _error('Failed to store unified score', 500)
    logger.info(f'Registered student {student.student_id} (id={student.id})')
    return jsonify(student.to_dict()), 201


@profiles_bp.route('/students/<int:student_id>', methods=['PATCH'])
def update_student(student_id):
    student = db.session.get(Student, student_id)
    if student is None:
        return _error(f'Student {student_id} not found', 404)
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        return _error('Request body must be a JSON object', 400)

    for field in Student.EDITABLE_FIELDS:
        if field in body:
            value = _clean(body[field])
            if field in ('full_name', 'email') and not value:
                return _error(f'{field} cannot be empty', 400)
            setattr(student, field, value.lower() if field == 'email' else value)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        return _error('A student with this email already exists', 409)
    return jsonify(student.to_dict())


@profiles_bp.route('/students/<int:student_id>/profiles')
def list_profiles(student_id):
    student = db.session.get(Student, student_id)
    if student is None:
        return _error(f'Student {student_id} not found', 404)
    profiles = student.coding_profiles.order_by(CodingProfile.platform).all()
    return jsonify({'items': [p.to_dict() for p in profiles]})


@profiles_bp.route('/students/<int:student_id>/profiles', methods=['POST'])
def link_profile(student_id):
    if db.session.get(Student, student_id) is None:
        return _error(f'Student {student_id} not found', 404)
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        return _error('Request body must be a JSON object', 400)

    username = _clean(body.get('username'))
    if not username:
        return _error('username is required', 400)
    try:
        profile = CodingProfile.create(student_id, body.get('platform'), username)
    except UnsupportedPlatformError as e:
        return _error(str(e), 400)

    db.session.add(profile)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        return _error(
            f'Student {student_id} already has a {profile.platform} profile', 409
        )

    result = profile.to_dict()
    try:
        if body.get('sync'):
            try:
                StatsService().refresh_profile(profile.id, recalculate=False)
            except ProviderError as e:
                # The profile stays stale and is picked up by the next sweep
                logger.warning(f'Initial sync failed for profile {profile.id}: {e}')
                result['sync_error'] = str(e)
        ScoreService.recalculate(student_id)
    except SQLAlchemyError:
        return _error('Failed to store profile stats or score', 500)

    result.update(db.session.get(CodingProfile, profile.id).to_dict())
    return jsonify(result), 201


@profiles_bp.route('/profiles/<int:profile_id>', methods=['PATCH'])
def update_profile(profile_id):
    profile = db.session.get(CodingProfile, profile_id)
    if profile is None:
        return _error(f'Coding profile {profile_id} not found', 404)
    body = request.get_json(silent=True)
    username = _clean(body.get('username')) if isinstance(body, dict) else None
    if not username:
        return _error('username is required', 400)

    if username != profile.username:
        # Stats belong to the old account; drop them until the next sync
        profile.username = username
        profile.profile_url = Platform(profile.platform).profile_url(username)
        profile.last_synced = None
        if profile.stats is not None:
            db.session.delete(profile.stats)
        try:
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            return _error('Failed to update profile', 500)
        try:
            ScoreService.recalculate(profile.student_id)
        except SQLAlchemyError:
            return _error('Failed to store unified score', 500)

    return jsonify(profile.to_dict())


@profiles_bp.route('/profiles/<int:profile_id>', methods=['DELETE'])
def delete_profile(profile_id):
    profile = db.session.get(CodingProfile, profile_id)
    if profile is None:
        return _error(f'Coding profile {profile_id} not found', 404)

    student_id = profile.student_id
    platform = profile.platform
    db.session.delete(profile)
    try:
        db.session.commit()
        result = ScoreService.recalculate(student_id)
    except SQLAlchemyError:
        db.session.rollback()
        return _error('Failed to delete profile', 500)

    logger.info(f'Unlinked {platform} profile {profile_id} from student {student_id}')
    return jsonify({'success': True, 'totalScore': result['totalScore']})
