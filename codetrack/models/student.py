from __future__ import annotations

from datetime import datetime

from codetrack.extensions import db


class Student(db.Model):
    """A student whose coding profiles are tracked and ranked."""

    __tablename__ = 'students'

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(120), unique=True, nullable=False, index=True)
    full_name = db.Column(db.String(120), nullable=False)
    student_id = db.Column(db.String(50), unique=True, nullable=False, index=True)
    batch = db.Column(db.String(20), nullable=True, index=True)
    department = db.Column(db.String(100), nullable=True, index=True)
    phone = db.Column(db.String(30), nullable=True)
    is_admin = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(
        db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    # Relationships
    coding_profiles = db.relationship(
        'CodingProfile',
        back_populates='student',
        cascade='all, delete-orphan',
        lazy='dynamic',
    )
    unified_score = db.relationship(
        'UnifiedScore',
        back_populates='student',
        cascade='all, delete-orphan',
        uselist=False,
    )
    refresh_schedule = db.relationship(
        'RefreshSchedule',
        back_populates='student',
        cascade='all, delete-orphan',
        uselist=False,
    )

    # Fields a student or admin may edit after registration
    EDITABLE_FIELDS = ('full_name', 'email', 'batch', 'department', 'phone')

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'email': self.email,
            'full_name': self.full_name,
            'student_id': self.student_id,
            'batch': self.batch,
            'department': self.department,
            'phone': self.phone,
            'is_admin': bool(self.is_admin),
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self) -> str:
        return f'<Student {self.full_name!r} ({self.student_id})>'
