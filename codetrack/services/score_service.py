from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError

from codetrack.extensions import db
from codetrack.models import CodingProfile, Student, UnifiedScore
from codetrack.scoring import assign_ranks, score_all, weighted_total

logger = logging.getLogger(__name__)


class ScoreService:
    """Persists unified scores and the global ranking."""

    @staticmethod
    def platform_scores_for(student_id: int) -> dict:
        """Score each platform from the student's current stats snapshots."""
        profiles = CodingProfile.query.filter_by(student_id=student_id).all()
        stats_by_platform = {
            p.platform: p.stats for p in profiles if p.stats is not None
        }
        return score_all(stats_by_platform)

    @classmethod
    def recalculate(cls, student_id: int, update_ranks: bool = True) -> dict:
        """Recompute and upsert one student's UnifiedScore.

        The five platform scores and the total are written in a single
        transaction.  With ``update_ranks`` the global ranking is recomputed
        in that same transaction; otherwise the student's rank is cleared
        until the caller runs ``recompute_ranks``.

        Raises:
            LookupError: the student does not exist.
            SQLAlchemyError: the write failed (the session is rolled back).
        """
        if db.session.get(Student, student_id) is None:
            raise LookupError(f'Student {student_id} not found')

        scores = cls.platform_scores_for(student_id)
        total = weighted_total(scores)

        try:
            row = UnifiedScore.query.filter_by(student_id=student_id).first()
            if row is None:
                row = UnifiedScore(student_id=student_id)
                db.session.add(row)
            row.set_platform_scores(scores)
            row.total_score = total
            row.rank_position = None
            row.updated_at = datetime.utcnow()
            if update_ranks:
                db.session.flush()
                cls._apply_ranks()
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f'Score upsert failed for student {student_id}: {e}')
            raise

        logger.info(
            f'Recalculated student {student_id}: total={total:.2f} '
            f'rank={row.rank_position}'
        )
        return {
            'success': True,
            'totalScore': total,
            'platformScores': scores,
        }

    @classmethod
    def recompute_ranks(cls) -> int:
        """Rank every UnifiedScore row and commit.  Returns the row count.

        Reads a snapshot of all totals, so a concurrent recalculation for
        another student can leave that student's rank stale until the next
        recompute (last writer wins).
        """
        try:
            count = cls._apply_ranks()
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f'Rank recompute failed: {e}')
            raise
        return count

    @staticmethod
    def _apply_ranks() -> int:
        rows = UnifiedScore.query.all()
        positions = assign_ranks([(r.student_id, r.total_score) for r in rows])
        changed = 0
        for row in rows:
            position = positions[row.student_id]
            if row.rank_position != position:
                row.rank_position = position
                changed += 1
        logger.debug(f'Rank recompute: {len(rows)} rows, {changed} changed')
        return len(rows)
