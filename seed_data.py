"""Seed demo students and their coding profiles.
Run with: python seed_data.py [--with-stats]

Profiles are created unsynced, so the next refresh sweep fetches them.
``--with-stats`` stores the sample stats below instead, which lets the
leaderboard be explored without network access.
"""
import argparse
import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from codetrack import create_app
from codetrack.extensions import db
from codetrack.models import CodingProfile, Student
from codetrack.providers.common import PlatformStats
from codetrack.services.score_service import ScoreService
from codetrack.services.stats_service import StatsService

STUDENTS = [
    {
        "email": "aarav.sharma@example.edu", "full_name": "Aarav Sharma",
        "student_id": "CS2021001", "batch": "2021", "department": "CSE",
        "profiles": {
            "leetcode": ("aarav_codes", {"problems_solved": 320, "easy_solved": 140, "medium_solved": 150, "hard_solved": 30, "contests_participated": 12, "rating": 1810, "max_rating": 1850, "acceptance_rate": 61.5}),
            "codeforces": ("aarav_cf", {"problems_solved": 410, "contests_participated": 35, "rating": 1620, "max_rating": 1701, "rank": "expert"}),
            "codechef": ("aarav_cc", {"problems_solved": 150, "contests_participated": 18, "rating": 1890, "max_rating": 1932, "rank": "4 Star"}),
        },
    },
    {
        "email": "meera.iyer@example.edu", "full_name": "Meera Iyer",
        "student_id": "CS2021014", "batch": "2021", "department": "CSE",
        "profiles": {
            "leetcode": ("meera_i", {"problems_solved": 180, "easy_solved": 90, "medium_solved": 80, "hard_solved": 10, "contests_participated": 4, "rating": 1560, "max_rating": 1560, "acceptance_rate": 55.0}),
            "gfg": ("meeraiyer", {"problems_solved": 260, "easy_solved": 120, "medium_solved": 110, "hard_solved": 30, "contests_participated": 6}),
            "hackerrank": ("meera_hr", {"problems_solved": 95, "contests_participated": 3, "rating": 1420, "max_rating": 1500, "rank": "problem-solving 5 Star"}),
        },
    },
    {
        "email": "rohan.verma@example.edu", "full_name": "Rohan Verma",
        "student_id": "EC2022007", "batch": "2022", "department": "ECE",
        "profiles": {
            "codeforces": ("rohan_v", {"problems_solved": 120, "contests_participated": 10, "rating": 1240, "max_rating": 1302, "rank": "pupil"}),
            "gfg": ("rohanverma22", {"problems_solved": 75, "easy_solved": 50, "medium_solved": 22, "hard_solved": 3, "contests_participated": 1}),
        },
    },
    {
        "email": "sara.khan@example.edu", "full_name": "Sara Khan",
        "student_id": "IT2022031", "batch": "2022", "department": "IT",
        "profiles": {},
    },
]


def seed_students(with_stats=False):
    """Seed demo students, profiles and (optionally) stats snapshots."""
    app = create_app()
    with app.app_context():
        existing_count = Student.query.count()
        if existing_count > 0:
            print(f"Students table already has {existing_count} entries. Skipping seed.")
            print("To re-seed, delete existing students first.")
            return

        for data in STUDENTS:
            student = Student(
                email=data['email'],
                full_name=data['full_name'],
                student_id=data['student_id'],
                batch=data.get('batch'),
                department=data.get('department'),
            )
            db.session.add(student)
            db.session.flush()

            for platform, (username, stats) in data['profiles'].items():
                profile = CodingProfile.create(student.id, platform, username)
                db.session.add(profile)
                if with_stats:
                    db.session.flush()
                    StatsService.save_stats(profile, PlatformStats(**stats))

        db.session.commit()

        for student in Student.query.order_by(Student.id).all():
            ScoreService.recalculate(student.id, update_ranks=False)
        ScoreService.recompute_ranks()

        print(f"Seeded {len(STUDENTS)} students with "
              f"{sum(len(s['profiles']) for s in STUDENTS)} coding profiles.")

        # Print summary
        for student in Student.query.order_by(Student.id).all():
            unified = student.unified_score
            print(f"  #{unified.rank_position} {student.full_name}: "
                  f"{unified.total_score:.2f}")


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description='Seed demo students')
    parser.add_argument('--with-stats', action='store_true',
                        help='Store sample stats instead of leaving profiles unsynced')
    seed_students(with_stats=parser.parse_args().with_stats)
