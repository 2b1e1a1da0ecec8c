from __future__ import annotations

from datetime import datetime

from codetrack.extensions import db
from codetrack.platforms import ALL_PLATFORMS


class UnifiedScore(db.Model):
    """A student's per-platform scores, weighted total and leaderboard rank."""

    __tablename__ = 'unified_scores'

    id = db.Column(db.Integer, primary_key=True)
    student_id = db.Column(
        db.Integer, db.ForeignKey('students.id'),
        nullable=False, unique=True, index=True,
    )
    total_score = db.Column(db.Float, nullable=False, default=0.0, index=True)
    leetcode_score = db.Column(db.Float, nullable=False, default=0.0)
    codeforces_score = db.Column(db.Float, nullable=False, default=0.0)
    codechef_score = db.Column(db.Float, nullable=False, default=0.0)
    gfg_score = db.Column(db.Float, nullable=False, default=0.0)
    hackerrank_score = db.Column(db.Float, nullable=False, default=0.0)
    rank_position = db.Column(db.Integer, nullable=True)
    # Set when the scores change; rank-only updates leave it alone
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    student = db.relationship('Student', back_populates='unified_score')

    @property
    def platform_scores(self) -> dict:
        """Return {platform_name: score} for all five platforms."""
        return {
            p.value: getattr(self, f'{p.value}_score') or 0.0
            for p in ALL_PLATFORMS
        }

    def set_platform_scores(self, scores: dict) -> None:
        for p in ALL_PLATFORMS:
            setattr(self, f'{p.value}_score', float(scores.get(p.value, 0.0)))

    def to_dict(self) -> dict:
        return {
            'student_id': self.student_id,
            'total_score': self.total_score or 0.0,
            'platform_scores': self.platform_scores,
            'rank_position': self.rank_position,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self) -> str:
        return (
            f'<UnifiedScore student_id={self.student_id} '
            f'total={self.total_score} rank={self.rank_position}>'
        )
