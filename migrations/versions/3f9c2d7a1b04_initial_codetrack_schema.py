"""Initial schema: students, coding profiles, stats, unified scores, refresh schedule

Revision ID: 3f9c2d7a1b04
Revises:
Create Date: 2026-10-18 10:12:31.402117

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3f9c2d7a1b04'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    from sqlalchemy import inspect
    bind = op.get_bind()
    existing_tables = inspect(bind).get_table_names()

    # db.create_all may have created the tables already
    if 'students' not in existing_tables:
        op.create_table('students',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('email', sa.String(length=120), nullable=False),
            sa.Column('full_name', sa.String(length=120), nullable=False),
            sa.Column('student_id', sa.String(length=50), nullable=False),
            sa.Column('batch', sa.String(length=20), nullable=True),
            sa.Column('department', sa.String(length=100), nullable=True),
            sa.Column('phone', sa.String(length=30), nullable=True),
            sa.Column('is_admin', sa.Boolean(), nullable=False),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.Column('updated_at', sa.DateTime(), nullable=False),
            sa.PrimaryKeyConstraint('id')
        )
        with op.batch_alter_table('students', schema=None) as batch_op:
            batch_op.create_index(batch_op.f('ix_students_email'), ['email'], unique=True)
            batch_op.create_index(batch_op.f('ix_students_student_id'), ['student_id'], unique=True)
            batch_op.create_index(batch_op.f('ix_students_batch'), ['batch'], unique=False)
            batch_op.create_index(batch_op.f('ix_students_department'), ['department'], unique=False)

    if 'coding_profiles' not in existing_tables:
        op.create_table('coding_profiles',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('student_id', sa.Integer(), nullable=False),
            sa.Column('platform', sa.String(length=20), nullable=False),
            sa.Column('username', sa.String(length=100), nullable=False),
            sa.Column('profile_url', sa.String(length=300), nullable=True),
            sa.Column('last_synced', sa.DateTime(), nullable=True),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.ForeignKeyConstraint(['student_id'], ['students.id'], ),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('student_id', 'platform', name='uq_coding_profile_student_platform')
        )
        with op.batch_alter_table('coding_profiles', schema=None) as batch_op:
            batch_op.create_index(batch_op.f('ix_coding_profiles_student_id'), ['student_id'], unique=False)

    if 'coding_stats' not in existing_tables:
        op.create_table('coding_stats',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('profile_id', sa.Integer(), nullable=False),
            sa.Column('problems_solved', sa.Integer(), nullable=False),
            sa.Column('contests_participated', sa.Integer(), nullable=False),
            sa.Column('rating', sa.Integer(), nullable=False),
            sa.Column('max_rating', sa.Integer(), nullable=False),
            sa.Column('rank', sa.String(length=50), nullable=True),
            sa.Column('easy_solved', sa.Integer(), nullable=False),
            sa.Column('medium_solved', sa.Integer(), nullable=False),
            sa.Column('hard_solved', sa.Integer(), nullable=False),
            sa.Column('acceptance_rate', sa.Float(), nullable=False),
            sa.Column('updated_at', sa.DateTime(), nullable=False),
            sa.ForeignKeyConstraint(['profile_id'], ['coding_profiles.id'], ),
            sa.PrimaryKeyConstraint('id')
        )
        with op.batch_alter_table('coding_stats', schema=None) as batch_op:
            batch_op.create_index(batch_op.f('ix_coding_stats_profile_id'), ['profile_id'], unique=True)

    if 'unified_scores' not in existing_tables:
        op.create_table('unified_scores',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('student_id', sa.Integer(), nullable=False),
            sa.Column('total_score', sa.Float(), nullable=False),
            sa.Column('leetcode_score', sa.Float(), nullable=False),
            sa.Column('codeforces_score', sa.Float(), nullable=False),
            sa.Column('codechef_score', sa.Float(), nullable=False),
            sa.Column('gfg_score', sa.Float(), nullable=False),
            sa.Column('hackerrank_score', sa.Float(), nullable=False),
            sa.Column('rank_position', sa.Integer(), nullable=True),
            sa.Column('updated_at', sa.DateTime(), nullable=False),
            sa.ForeignKeyConstraint(['student_id'], ['students.id'], ),
            sa.PrimaryKeyConstraint('id')
        )
        with op.batch_alter_table('unified_scores', schema=None) as batch_op:
            batch_op.create_index(batch_op.f('ix_unified_scores_student_id'), ['student_id'], unique=True)
            batch_op.create_index(batch_op.f('ix_unified_scores_total_score'), ['total_score'], unique=False)

    if 'refresh_schedule' not in existing_tables:
        op.create_table('refresh_schedule',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('student_id', sa.Integer(), nullable=False),
            sa.Column('last_auto_refresh', sa.DateTime(), nullable=True),
            sa.Column('next_refresh_due', sa.DateTime(), nullable=True),
            sa.Column('refresh_count', sa.Integer(), nullable=False),
            sa.ForeignKeyConstraint(['student_id'], ['students.id'], ),
            sa.PrimaryKeyConstraint('id')
        )
        with op.batch_alter_table('refresh_schedule', schema=None) as batch_op:
            batch_op.create_index(batch_op.f('ix_refresh_schedule_student_id'), ['student_id'], unique=True)


def downgrade():
    op.drop_table('refresh_schedule')
    op.drop_table('unified_scores')
    op.drop_table('coding_stats')
    op.drop_table('coding_profiles')
    op.drop_table('students')
