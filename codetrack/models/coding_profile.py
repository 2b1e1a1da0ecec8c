from __future__ import annotations

from datetime import datetime, timedelta

from codetrack.extensions import db
from codetrack.platforms import parse_platform


class CodingProfile(db.Model):
    """A student's account on one judging platform, plus its sync state."""

    __tablename__ = 'coding_profiles'
    __table_args__ = (
        db.UniqueConstraint(
            'student_id', 'platform',
            name='uq_coding_profile_student_platform',
        ),
    )

    id = db.Column(db.Integer, primary_key=True)
    student_id = db.Column(
        db.Integer, db.ForeignKey('students.id'), nullable=False, index=True
    )
    platform = db.Column(db.String(20), nullable=False)
    username = db.Column(db.String(100), nullable=False)
    profile_url = db.Column(db.String(300), nullable=True)
    last_synced = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    # Relationships
    student = db.relationship('Student', back_populates='coding_profiles')
    stats = db.relationship(
        'CodingStats',
        back_populates='profile',
        cascade='all, delete-orphan',
        uselist=False,
    )

    @classmethod
    def create(cls, student_id: int, platform, username: str) -> 'CodingProfile':
        """Build a profile with a normalized platform and derived URL."""
        plat = parse_platform(platform)
        username = username.strip()
        return cls(
            student_id=student_id,
            platform=plat.value,
            username=username,
            profile_url=plat.profile_url(username),
        )

    def is_stale(self, window: timedelta, now: datetime = None) -> bool:
        """True when never synced or last synced longer than *window* ago."""
        if self.last_synced is None:
            return True
        now = now or datetime.utcnow()
        return self.last_synced < now - window

    @classmethod
    def stale_query(cls, window: timedelta, now: datetime = None):
        """Query for profiles that are due for an auto-refresh."""
        cutoff = (now or datetime.utcnow()) - window
        return cls.query.filter(
            db.or_(cls.last_synced.is_(None), cls.last_synced < cutoff)
        )

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'student_id': self.student_id,
            'platform': self.platform,
            'username': self.username,
            'profile_url': self.profile_url,
            'last_synced': self.last_synced.isoformat() if self.last_synced else None,
        }

    def __repr__(self) -> str:
        return (
            f'<CodingProfile {self.platform}:{self.username} '
            f'(student_id={self.student_id})>'
        )
