"""Tests for the database models."""

from datetime import datetime, timedelta

import pytest
from sqlalchemy.exc import IntegrityError

from codetrack.models import (
    CodingProfile, CodingStats, RefreshSchedule, Student, UnifiedScore,
)
from codetrack.platforms import UnsupportedPlatformError
from codetrack.providers.common import PlatformStats


class TestStudentModel:
    def test_create_student(self, app, db):
        student = Student(email='s@example.edu', full_name='S', student_id='X1')
        db.session.add(student)
        db.session.commit()

        assert student.id is not None
        assert student.is_admin is False
        assert student.created_at is not None
        assert student.to_dict()['student_id'] == 'X1'

    def test_email_unique(self, app, db):
        db.session.add(Student(email='dup@example.edu', full_name='A', student_id='A1'))
        db.session.commit()
        db.session.add(Student(email='dup@example.edu', full_name='B', student_id='B1'))
        with pytest.raises(IntegrityError):
            db.session.commit()
        db.session.rollback()

    def test_delete_cascades(self, app, db, sample_data):
        student = db.session.get(Student, sample_data['alice_id'])
        db.session.delete(student)
        db.session.commit()

        assert CodingProfile.query.count() == 0
        assert CodingStats.query.count() == 0


class TestCodingProfileModel:
    def test_create_normalizes_platform_and_url(self, app, db, sample_data):
        profile = CodingProfile.create(sample_data['bob_id'], ' CodeChef ', ' bob_cc ')
        assert profile.platform == 'codechef'
        assert profile.username == 'bob_cc'
        assert profile.profile_url == 'https://www.codechef.com/users/bob_cc'

    def test_create_rejects_unknown_platform(self, app, db, sample_data):
        with pytest.raises(UnsupportedPlatformError):
            CodingProfile.create(sample_data['bob_id'], 'topcoder', 'bob')

    def test_one_profile_per_platform(self, app, db, sample_data):
        db.session.add(CodingProfile.create(sample_data['alice_id'], 'leetcode', 'other'))
        with pytest.raises(IntegrityError):
            db.session.commit()
        db.session.rollback()

    def test_is_stale(self, app, db, sample_data):
        window = timedelta(hours=24)
        never = db.session.get(CodingProfile, sample_data['leetcode_profile_id'])
        recent = db.session.get(CodingProfile, sample_data['codeforces_profile_id'])

        assert never.is_stale(window) is True
        assert recent.is_stale(window) is False
        assert recent.is_stale(window, now=datetime.utcnow() + timedelta(days=2)) is True

    def test_stale_query(self, app, db, sample_data):
        stale = CodingProfile.stale_query(timedelta(hours=24)).all()
        assert [p.id for p in stale] == [sample_data['leetcode_profile_id']]

        stale = CodingProfile.stale_query(timedelta(minutes=30)).all()
        assert len(stale) == 2

    def test_delete_profile_removes_stats(self, app, db, sample_data):
        profile = db.session.get(CodingProfile, sample_data['codeforces_profile_id'])
        db.session.delete(profile)
        db.session.commit()
        assert CodingStats.query.count() == 0


class TestCodingStatsModel:
    def test_apply_overwrites_snapshot(self, app, db, sample_data):
        profile = db.session.get(CodingProfile, sample_data['codeforces_profile_id'])
        profile.stats.apply(PlatformStats(problems_solved=10, rating=900))
        db.session.commit()

        stats = profile.stats.to_dict()
        assert stats['problems_solved'] == 10
        assert stats['rating'] == 900
        assert stats['contests_participated'] == 0
        assert stats['rank'] is None

    def test_one_snapshot_per_profile(self, app, db, sample_data):
        db.session.add(CodingStats(profile_id=sample_data['codeforces_profile_id']))
        with pytest.raises(IntegrityError):
            db.session.commit()
        db.session.rollback()


class TestUnifiedScoreModel:
    def test_platform_scores_roundtrip(self, app, db, sample_data):
        row = UnifiedScore(student_id=sample_data['bob_id'])
        row.set_platform_scores({'gfg': 42.5})
        row.total_score = 6.375
        db.session.add(row)
        db.session.commit()

        assert row.platform_scores == {
            'leetcode': 0.0, 'codeforces': 0.0, 'codechef': 0.0,
            'gfg': 42.5, 'hackerrank': 0.0,
        }
        assert row.rank_position is None


class TestRefreshScheduleModel:
    def test_record_upserts_and_counts(self, app, db, sample_data):
        window = timedelta(hours=24)
        first = datetime(2026, 1, 1, 12, 0)
        RefreshSchedule.record(sample_data['alice_id'], first, window)
        db.session.commit()
        RefreshSchedule.record(sample_data['alice_id'], first + window, window)
        db.session.commit()

        rows = RefreshSchedule.query.all()
        assert len(rows) == 1
        assert rows[0].refresh_count == 2
        assert rows[0].last_auto_refresh == first + window
        assert rows[0].next_refresh_due == first + 2 * window
