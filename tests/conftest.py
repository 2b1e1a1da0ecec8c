"""Shared test fixtures for the codetrack test suite."""

from datetime import datetime, timedelta

import pytest

from codetrack import create_app
from codetrack.extensions import db as _db
from codetrack.models import CodingProfile, CodingStats, Student


@pytest.fixture()
def app():
    """Create a Flask application configured for testing."""
    application = create_app('testing')
    yield application


@pytest.fixture()
def db(app):
    """Provide a clean database for each test."""
    with app.app_context():
        _db.create_all()
        yield _db
        _db.session.remove()
        _db.drop_all()


@pytest.fixture()
def client(app, db):
    """Provide a Flask test client."""
    return app.test_client()


@pytest.fixture()
def sample_data(app, db):
    """Two students in one batch, with LeetCode and Codeforces profiles.

    The LeetCode profile is stale (never synced); the Codeforces profile was
    synced an hour ago.  Returns a dict of plain IDs (not model objects) so
    they survive across Flask request context boundaries without
    DetachedInstanceError.
    """
    alice = Student(
        email='alice@example.edu',
        full_name='Alice Rao',
        student_id='CS2021001',
        batch='2021',
        department='CSE',
    )
    bob = Student(
        email='bob@example.edu',
        full_name='Bob Nair',
        student_id='CS2021002',
        batch='2021',
        department='ECE',
    )
    db.session.add_all([alice, bob])
    db.session.flush()

    leetcode = CodingProfile.create(alice.id, 'leetcode', 'alice_lc')
    codeforces = CodingProfile.create(alice.id, 'codeforces', 'alice_cf')
    codeforces.last_synced = datetime.utcnow() - timedelta(hours=1)
    db.session.add_all([leetcode, codeforces])
    db.session.flush()

    db.session.add(CodingStats(
        profile_id=codeforces.id,
        problems_solved=500,
        contests_participated=30,
        rating=2000,
        max_rating=2100,
        rank='candidate master',
    ))
    db.session.commit()

    # Return plain IDs
    return {
        'alice_id': alice.id,
        'bob_id': bob.id,
        'leetcode_profile_id': leetcode.id,
        'codeforces_profile_id': codeforces.id,
    }
