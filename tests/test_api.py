"""Tests for the JSON API blueprints."""

import pytest
from unittest.mock import MagicMock, patch

from sqlalchemy.exc import SQLAlchemyError

from codetrack.extensions import db as _db
from codetrack.models import CodingProfile, CodingStats, Student, UnifiedScore
from codetrack.providers.common import PlatformStats, ProviderError


def _patch_provider(stats=None, error=None):
    """Patch the provider lookup used by StatsService."""
    provider = MagicMock()
    if error is not None:
        provider.fetch_stats.side_effect = error
    else:
        provider.fetch_stats.return_value = stats
    return patch(
        'codetrack.services.stats_service.get_provider_instance',
        return_value=provider,
    )


class TestIndex:
    def test_index(self, client):
        resp = client.get('/')
        assert resp.status_code == 200
        assert resp.get_json()['name'] == 'codetrack'


class TestScoresApi:
    def test_recalculate(self, client, sample_data):
        resp = client.post('/api/scores/recalculate',
                           json={'studentId': sample_data['alice_id']})
        assert resp.status_code == 200
        data = resp.get_json()
        assert data['success'] is True
        assert data['totalScore'] == pytest.approx(25.0)
        assert set(data['platformScores']) == {
            'leetcode', 'codeforces', 'codechef', 'gfg', 'hackerrank',
        }

    def test_recalculate_requires_student_id(self, client, sample_data):
        resp = client.post('/api/scores/recalculate', json={})
        assert resp.status_code == 400
        assert 'error' in resp.get_json()

    def test_recalculate_unknown_student(self, client, db):
        resp = client.post('/api/scores/recalculate', json={'studentId': 404})
        assert resp.status_code == 404

    def test_recompute_ranks(self, client, sample_data):
        client.post('/api/scores/recalculate', json={'studentId': sample_data['bob_id']})
        client.post('/api/scores/recalculate', json={'studentId': sample_data['alice_id']})
        resp = client.post('/api/ranks/recompute')
        assert resp.get_json() == {'success': True, 'ranked': 2}


class TestStatsFetchApi:
    def test_fetch(self, client, sample_data):
        stats = PlatformStats(easy_solved=50, medium_solved=30, hard_solved=10,
                              acceptance_rate=80, contests_participated=5)
        with _patch_provider(stats=stats):
            resp = client.post('/api/stats/fetch', json={
                'platform': 'leetcode',
                'username': 'alice_lc',
                'profileId': sample_data['leetcode_profile_id'],
            })
        assert resp.status_code == 200
        data = resp.get_json()
        assert data['success'] is True
        assert data['stats']['easy_solved'] == 50

        row = UnifiedScore.query.filter_by(student_id=sample_data['alice_id']).one()
        assert row.leetcode_score == pytest.approx(37.0)

    def test_unsupported_platform(self, client, sample_data):
        resp = client.post('/api/stats/fetch', json={
            'platform': 'topcoder', 'username': 'x',
            'profileId': sample_data['leetcode_profile_id'],
        })
        assert resp.status_code == 400
        assert resp.get_json()['error'] == 'Unsupported platform: topcoder'

    def test_unknown_profile(self, client, db):
        resp = client.post('/api/stats/fetch', json={
            'platform': 'leetcode', 'username': 'x', 'profileId': 77,
        })
        assert resp.status_code == 404

    def test_platform_mismatch(self, client, sample_data):
        resp = client.post('/api/stats/fetch', json={
            'platform': 'gfg', 'username': 'x',
            'profileId': sample_data['leetcode_profile_id'],
        })
        assert resp.status_code == 400

    def test_provider_failure(self, client, sample_data):
        error = ProviderError('leetcode', 'LeetCode account not found')
        with _patch_provider(error=error):
            resp = client.post('/api/stats/fetch', json={
                'platform': 'leetcode', 'username': 'ghost',
                'profileId': sample_data['leetcode_profile_id'],
            })
        assert resp.status_code == 502
        assert resp.get_json()['error'] == 'LeetCode account not found'


class TestRefreshApi:
    def test_refresh(self, client, sample_data):
        with _patch_provider(stats=PlatformStats(easy_solved=10)):
            resp = client.post('/api/refresh')
        assert resp.status_code == 200
        assert resp.get_json() == {
            'message': 'Auto-refresh completed', 'refreshed': 1, 'total': 1,
        }

    def test_refresh_nothing_stale(self, client, db):
        resp = client.post('/api/refresh')
        assert resp.get_json()['message'] == 'No profiles need refresh'


class TestReadApi:
    def test_leaderboard(self, client, sample_data):
        client.post('/api/scores/recalculate', json={'studentId': sample_data['alice_id']})
        resp = client.get('/api/leaderboard?batch=2021')
        data = resp.get_json()
        assert resp.status_code == 200
        assert data['total'] == 1
        assert data['items'][0]['student']['student_id'] == 'CS2021001'

    def test_leaderboard_bad_limit(self, client, db):
        assert client.get('/api/leaderboard?limit=0').status_code == 400

    def test_dashboard(self, client, sample_data):
        resp = client.get(f"/api/students/{sample_data['alice_id']}/dashboard")
        assert resp.status_code == 200
        assert len(resp.get_json()['profiles']) == 2

    def test_dashboard_missing(self, client, db):
        assert client.get('/api/students/999/dashboard').status_code == 404

    def test_admin_overview(self, client, sample_data):
        data = client.get('/api/admin/overview').get_json()
        assert data['total_students'] == 2
        assert data['stale_profiles'] == 1


class TestStudentsApi:
    def test_create_student(self, client, db):
        resp = client.post('/api/students', json={
            'email': 'New@Example.edu', 'full_name': 'New Student',
            'student_id': 'ME2023001', 'batch': '2023',
        })
        assert resp.status_code == 201
        data = resp.get_json()
        assert data['email'] == 'new@example.edu'
        assert UnifiedScore.query.filter_by(student_id=data['id']).one().total_score == 0.0

    def test_create_student_missing_fields(self, client, db):
        resp = client.post('/api/students', json={'email': 'a@b.c'})
        assert resp.status_code == 400
        assert 'full_name' in resp.get_json()['error']

    def test_create_student_duplicate(self, client, sample_data):
        resp = client.post('/api/students', json={
            'email': 'alice@example.edu', 'full_name': 'Alice', 'student_id': 'Z9',
        })
        assert resp.status_code == 409

    def test_update_student(self, client, sample_data):
        resp = client.patch(f"/api/students/{sample_data['bob_id']}",
                            json={'department': 'CSE', 'student_id': 'ignored'})
        assert resp.status_code == 200
        data = resp.get_json()
        assert data['department'] == 'CSE'
        assert data['student_id'] == 'CS2021002'

    def test_update_student_empty_name(self, client, sample_data):
        resp = client.patch(f"/api/students/{sample_data['bob_id']}",
                            json={'full_name': '  '})
        assert resp.status_code == 400


class TestProfilesApi:
    def test_list_profiles(self, client, sample_data):
        resp = client.get(f"/api/students/{sample_data['alice_id']}/profiles")
        platforms = [p['platform'] for p in resp.get_json()['items']]
        assert platforms == ['codeforces', 'leetcode']

    def test_link_profile(self, client, sample_data):
        resp = client.post(f"/api/students/{sample_data['bob_id']}/profiles",
                           json={'platform': 'GFG', 'username': 'bob_gfg'})
        assert resp.status_code == 201
        data = resp.get_json()
        assert data['platform'] == 'gfg'
        assert data['profile_url'] == 'https://www.geeksforgeeks.org/user/bob_gfg'
        assert data['last_synced'] is None

    def test_link_profile_with_sync(self, client, sample_data):
        with _patch_provider(stats=PlatformStats(problems_solved=100)):
            resp = client.post(f"/api/students/{sample_data['bob_id']}/profiles",
                               json={'platform': 'gfg', 'username': 'bob_gfg', 'sync': True})
        assert resp.status_code == 201
        assert resp.get_json()['last_synced'] is not None
        row = UnifiedScore.query.filter_by(student_id=sample_data['bob_id']).one()
        assert row.gfg_score == pytest.approx(15.0)

    def test_link_profile_sync_failure_keeps_profile(self, client, sample_data):
        error = ProviderError('gfg', 'GeeksforGeeks account not found')
        with _patch_provider(error=error):
            resp = client.post(f"/api/students/{sample_data['bob_id']}/profiles",
                               json={'platform': 'gfg', 'username': 'nobody', 'sync': True})
        assert resp.status_code == 201
        assert resp.get_json()['sync_error'] == 'GeeksforGeeks account not found'
        assert CodingProfile.query.filter_by(student_id=sample_data['bob_id']).count() == 1

    def test_link_duplicate_platform(self, client, sample_data):
        resp = client.post(f"/api/students/{sample_data['alice_id']}/profiles",
                           json={'platform': 'leetcode', 'username': 'again'})
        assert resp.status_code == 409

    def test_link_unsupported_platform(self, client, sample_data):
        resp = client.post(f"/api/students/{sample_data['alice_id']}/profiles",
                           json={'platform': 'topcoder', 'username': 'x'})
        assert resp.status_code == 400

    def test_rename_profile_clears_stats(self, client, sample_data):
        client.post('/api/scores/recalculate', json={'studentId': sample_data['alice_id']})
        profile_id = sample_data['codeforces_profile_id']

        resp = client.patch(f'/api/profiles/{profile_id}', json={'username': 'alice_cf2'})
        assert resp.status_code == 200
        data = resp.get_json()
        assert data['profile_url'] == 'https://codeforces.com/profile/alice_cf2'
        assert data['last_synced'] is None

        _db.session.expire_all()
        assert CodingStats.query.filter_by(profile_id=profile_id).count() == 0
        row = UnifiedScore.query.filter_by(student_id=sample_data['alice_id']).one()
        assert row.total_score == 0.0

    def test_delete_profile(self, client, sample_data):
        client.post('/api/scores/recalculate', json={'studentId': sample_data['alice_id']})
        resp = client.delete(f"/api/profiles/{sample_data['codeforces_profile_id']}")
        assert resp.status_code == 200
        assert resp.get_json() == {'success': True, 'totalScore': 0.0}
        assert _db.session.get(Student, sample_data['alice_id']).coding_profiles.count() == 1

    def test_delete_missing_profile(self, client, db):
        assert client.delete('/api/profiles/5').status_code == 404


def _failing_recalculate():
    return patch('codetrack.views.profiles.ScoreService.recalculate',
                 side_effect=SQLAlchemyError('database is locked'))


class TestWriteFailures:
    def test_recalculate_commit_failure(self, client, sample_data):
        with patch.object(_db.session, 'commit',
                          side_effect=SQLAlchemyError('disk full')):
            resp = client.post('/api/scores/recalculate',
                               json={'studentId': sample_data['alice_id']})
        assert resp.status_code == 500
        assert resp.get_json() == {'error': 'Failed to store unified score'}
        assert UnifiedScore.query.count() == 0

    def test_create_student_score_failure(self, client, db):
        with _failing_recalculate():
            resp = client.post('/api/students', json={
                'email': 'x@example.edu', 'full_name': 'X', 'student_id': 'X1',
            })
        assert resp.status_code == 500
        assert 'error' in resp.get_json()

    def test_link_profile_score_failure(self, client, sample_data):
        with _failing_recalculate():
            resp = client.post(f"/api/students/{sample_data['bob_id']}/profiles",
                               json={'platform': 'gfg', 'username': 'bob_gfg'})
        assert resp.status_code == 500
        assert 'error' in resp.get_json()

    def test_rename_profile_score_failure(self, client, sample_data):
        with _failing_recalculate():
            resp = client.patch(f"/api/profiles/{sample_data['codeforces_profile_id']}",
                                json={'username': 'renamed'})
        assert resp.status_code == 500
        assert 'error' in resp.get_json()


class TestInputValidation:
    @pytest.mark.parametrize('value', ['false', 'true', 1, 0, None])
    def test_is_admin_must_be_boolean(self, client, db, value):
        resp = client.post('/api/students', json={
            'email': 'a@example.edu', 'full_name': 'A', 'student_id': 'A1',
            'is_admin': value,
        })
        assert resp.status_code == 400
        assert Student.query.count() == 0

    def test_is_admin_boolean_accepted(self, client, db):
        resp = client.post('/api/students', json={
            'email': 'a@example.edu', 'full_name': 'A', 'student_id': 'A1',
            'is_admin': True,
        })
        assert resp.status_code == 201
        assert resp.get_json()['is_admin'] is True

    @pytest.mark.parametrize('value', [True, False, 1.9, 'abc', [1]])
    def test_student_id_rejects_non_integers(self, client, sample_data, value):
        resp = client.post('/api/scores/recalculate', json={'studentId': value})
        assert resp.status_code == 400

    def test_student_id_accepts_integral_values(self, client, sample_data):
        alice_id = sample_data['alice_id']
        for value in (float(alice_id), str(alice_id)):
            resp = client.post('/api/scores/recalculate', json={'studentId': value})
            assert resp.status_code == 200

    def test_profile_id_rejects_bool(self, client, sample_data):
        resp = client.post('/api/stats/fetch', json={
            'platform': 'leetcode', 'username': 'x', 'profileId': True,
        })
        assert resp.status_code == 400
