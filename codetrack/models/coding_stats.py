from __future__ import annotations

from datetime import datetime

from codetrack.extensions import db

# Numeric snapshot fields copied from a provider result
STAT_FIELDS = (
    'problems_solved',
    'contests_participated',
    'rating',
    'max_rating',
    'easy_solved',
    'medium_solved',
    'hard_solved',
    'acceptance_rate',
)


class CodingStats(db.Model):
    """Latest statistics snapshot for one CodingProfile (replaced on refresh)."""

    __tablename__ = 'coding_stats'

    id = db.Column(db.Integer, primary_key=True)
    profile_id = db.Column(
        db.Integer, db.ForeignKey('coding_profiles.id'),
        nullable=False, unique=True, index=True,
    )
    problems_solved = db.Column(db.Integer, nullable=False, default=0)
    contests_participated = db.Column(db.Integer, nullable=False, default=0)
    rating = db.Column(db.Integer, nullable=False, default=0)
    max_rating = db.Column(db.Integer, nullable=False, default=0)
    rank = db.Column(db.String(50), nullable=True)
    easy_solved = db.Column(db.Integer, nullable=False, default=0)
    medium_solved = db.Column(db.Integer, nullable=False, default=0)
    hard_solved = db.Column(db.Integer, nullable=False, default=0)
    acceptance_rate = db.Column(db.Float, nullable=False, default=0.0)
    updated_at = db.Column(
        db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    profile = db.relationship('CodingProfile', back_populates='stats')

    def apply(self, stats) -> None:
        """Overwrite every snapshot field from a PlatformStats result."""
        for name in STAT_FIELDS:
            setattr(self, name, getattr(stats, name, 0) or 0)
        self.rank = getattr(stats, 'rank', None)
        self.updated_at = datetime.utcnow()

    def to_dict(self) -> dict:
        data = {name: getattr(self, name) or 0 for name in STAT_FIELDS}
        data['rank'] = self.rank
        data['updated_at'] = self.updated_at.isoformat() if self.updated_at else None
        return data

    def __repr__(self) -> str:
        return f'<CodingStats profile_id={self.profile_id} solved={self.problems_solved}>'
