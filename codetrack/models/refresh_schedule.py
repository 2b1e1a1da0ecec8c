from datetime import datetime

from codetrack.extensions import db


class RefreshSchedule(db.Model):
    """When a student was last auto-refreshed and when they are next due."""

    __tablename__ = 'refresh_schedule'

    id = db.Column(db.Integer, primary_key=True)
    student_id = db.Column(
        db.Integer, db.ForeignKey('students.id'),
        nullable=False, unique=True, index=True,
    )
    last_auto_refresh = db.Column(db.DateTime, nullable=True)
    next_refresh_due = db.Column(db.DateTime, nullable=True)
    refresh_count = db.Column(db.Integer, nullable=False, default=0)

    student = db.relationship('Student', back_populates='refresh_schedule')

    @classmethod
    def record(cls, student_id, refreshed_at, window):
        """Upsert the schedule row for *student_id* (caller commits)."""
        row = cls.query.filter_by(student_id=student_id).first()
        if row is None:
            row = cls(student_id=student_id, refresh_count=0)
            db.session.add(row)
        row.last_auto_refresh = refreshed_at
        row.next_refresh_due = refreshed_at + window
        row.refresh_count = (row.refresh_count or 0) + 1
        return row

    def __repr__(self):
        return (
            f'<RefreshSchedule student_id={self.student_id} '
            f'next_due={self.next_refresh_due}>'
        )
