from __future__ import annotations

from collections import Counter
from datetime import datetime, timedelta

from sqlalchemy import func

from codetrack.extensions import db
from codetrack.models import CodingProfile, Student, UnifiedScore
from codetrack.platforms import Platform
from codetrack.scoring import assign_ranks, score


class LeaderboardService:
    @staticmethod
    def get_leaderboard(batch: str = None, department: str = None,
                        limit: int = None) -> dict:
        """Students ordered by total score, optionally within a batch/department.

        ``position`` is the place within the filtered view; ``rank_position``
        is the stored global rank.
        """
        query = (
            db.session.query(UnifiedScore, Student)
            .join(Student, Student.id == UnifiedScore.student_id)
            .order_by(UnifiedScore.total_score.desc(), UnifiedScore.student_id.asc())
        )
        if batch:
            query = query.filter(Student.batch == batch)
        if department:
            query = query.filter(Student.department == department)

        total = query.count()
        if limit:
            query = query.limit(limit)

        items = []
        for position, (row, student) in enumerate(query.all(), start=1):
            items.append({
                'position': position,
                'rank_position': row.rank_position,
                'student': {
                    'id': student.id,
                    'full_name': student.full_name,
                    'student_id': student.student_id,
                    'batch': student.batch,
                    'department': student.department,
                },
                'total_score': round(row.total_score or 0.0, 2),
                'platform_scores': {
                    k: round(v, 2) for k, v in row.platform_scores.items()
                },
            })
        return {'items': items, 'total': total}

    @staticmethod
    def get_student_dashboard(student_id: int, batchmate_limit: int = 5) -> dict | None:
        student = db.session.get(Student, student_id)
        if student is None:
            return None

        profiles = []
        for profile in student.coding_profiles.order_by(CodingProfile.platform):
            entry = profile.to_dict()
            entry['display_name'] = Platform(profile.platform).display_name
            entry['stats'] = profile.stats.to_dict() if profile.stats else None
            entry['score'] = round(score(profile.platform, profile.stats), 2)
            profiles.append(entry)

        unified = student.unified_score
        return {
            'student': student.to_dict(),
            'profiles': profiles,
            'totals': LeaderboardService._profile_totals(profiles),
            'unified_score': unified.to_dict() if unified else None,
            'batch_rank': LeaderboardService._batch_rank(student),
            'batchmates': LeaderboardService._batchmates(student, batchmate_limit),
        }

    @staticmethod
    def _profile_totals(profiles: list) -> dict:
        """Cross-platform sums; the rating average counts unsynced profiles as 0."""
        def total(field):
            return sum((p['stats'] or {}).get(field, 0) for p in profiles)

        return {
            'problems_solved': total('problems_solved'),
            'contests_participated': total('contests_participated'),
            'average_rating': round(total('rating') / len(profiles)) if profiles else 0,
        }

    @staticmethod
    def _batch_rank(student: Student) -> dict | None:
        """Position of *student* among scored batchmates."""
        if not student.batch or student.unified_score is None:
            return None
        rows = (
            db.session.query(UnifiedScore.student_id, UnifiedScore.total_score)
            .join(Student, Student.id == UnifiedScore.student_id)
            .filter(Student.batch == student.batch)
            .all()
        )
        positions = assign_ranks(rows)
        return {
            'batch': student.batch,
            'position': positions.get(student.id),
            'size': len(rows),
        }

    @staticmethod
    def _batchmates(student: Student, limit: int) -> list:
        """Other students of the same batch, best total first."""
        if not student.batch:
            return []
        rows = (
            db.session.query(Student, UnifiedScore)
            .outerjoin(UnifiedScore, UnifiedScore.student_id == Student.id)
            .filter(Student.batch == student.batch, Student.id != student.id)
            .order_by(func.coalesce(UnifiedScore.total_score, 0.0).desc(), Student.id.asc())
            .limit(limit)
            .all()
        )
        return [
            {
                'id': mate.id,
                'full_name': mate.full_name,
                'student_id': mate.student_id,
                'total_score': round(unified.total_score or 0.0, 2) if unified else 0.0,
                'rank_position': unified.rank_position if unified else None,
            }
            for mate, unified in rows
        ]

    @staticmethod
    def _count_by(column) -> dict:
        """Student count per non-empty value of *column*, keyed in sorted order."""
        rows = (
            db.session.query(column, func.count(Student.id))
            .filter(column.isnot(None), column != '')
            .group_by(column)
            .order_by(column)
            .all()
        )
        return {value: count for value, count in rows}

    @staticmethod
    def get_admin_overview(staleness_hours: float = 24) -> dict:
        """Aggregate counts for the admin view."""
        window = timedelta(hours=staleness_hours)
        now = datetime.utcnow()

        platform_counts = Counter(
            platform for (platform,) in db.session.query(CodingProfile.platform).all()
        )
        avg_score = db.session.query(func.avg(UnifiedScore.total_score)).scalar()
        by_department = LeaderboardService._count_by(Student.department)
        by_batch = LeaderboardService._count_by(Student.batch)

        return {
            'total_students': Student.query.count(),
            'total_profiles': CodingProfile.query.count(),
            'stale_profiles': CodingProfile.stale_query(window, now=now).count(),
            'scored_students': UnifiedScore.query.count(),
            'average_score': round(avg_score or 0.0, 2),
            'profiles_by_platform': {
                p.value: platform_counts.get(p.value, 0) for p in Platform
            },
            'departments': list(by_department),
            'batches': list(by_batch),
            'students_by_department': by_department,
            'students_by_batch': by_batch,
        }
