"""Initial results engine schema

Revision ID: 001_initial_schema
Revises:
Create Date: 2025-03-01

Creates the competition tables:
- events: competition sessions (ranking scope: region, age category, type)
- dancers: participants with registration fee tracking
- event_entries: submissions, unique item number per event
- performances: judged units, one per entry
- judges: scoring actors and administrators
- scores: one per (judge, performance)
- judge_event_assignments: one per (judge, event), at most 4 per event
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = '001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None


def _uuid_column() -> sa.Column:
    return sa.Column('uuid', postgresql.UUID(as_uuid=True), nullable=False)


def upgrade() -> None:
    """Create all results engine tables."""

    op.create_table(
        'events',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        _uuid_column(),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('region', sa.String(length=100), nullable=False),
        sa.Column('age_category', sa.String(length=50), nullable=False),
        sa.Column('performance_type', sa.String(length=20), nullable=False),
        sa.Column('event_date', sa.Date(), nullable=True),
        sa.Column('venue', sa.String(length=255), nullable=True),
        sa.Column('status', sa.String(length=50), nullable=False, server_default='upcoming'),
        sa.Column('entry_fee', sa.Numeric(precision=10, scale=2), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('now()')),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_events_uuid', 'events', ['uuid'], unique=True)
    op.create_index('ix_events_region', 'events', ['region'])
    op.create_index('idx_events_scope', 'events', ['region', 'age_category', 'performance_type'])

    op.create_table(
        'dancers',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        _uuid_column(),
        sa.Column('eodsa_id', sa.String(length=20), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('registration_fee_paid', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('registration_fee_paid_at', sa.DateTime(), nullable=True),
        sa.Column('registration_fee_mastery_level', sa.String(length=50), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('now()')),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_dancers_uuid', 'dancers', ['uuid'], unique=True)
    op.create_index('ix_dancers_eodsa_id', 'dancers', ['eodsa_id'], unique=True)

    op.create_table(
        'event_entries',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        _uuid_column(),
        sa.Column('event_id', sa.Integer(), nullable=False),
        sa.Column('contestant_id', sa.String(length=50), nullable=False),
        sa.Column('participant_ids', postgresql.JSONB(), nullable=False, server_default='[]'),
        sa.Column('entry_type', sa.String(length=20), nullable=False, server_default='live'),
        sa.Column('item_number', sa.Integer(), nullable=True),
        sa.Column('approved', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('qualified_for_nationals', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('item_name', sa.String(length=255), nullable=False),
        sa.Column('item_style', sa.String(length=100), nullable=True),
        sa.Column('choreographer', sa.String(length=255), nullable=True),
        sa.Column('mastery', sa.String(length=50), nullable=True),
        sa.Column('estimated_duration', sa.Numeric(precision=5, scale=2), nullable=True),
        sa.Column('age_category', sa.String(length=50), nullable=True),
        sa.Column('performance_type', sa.String(length=20), nullable=True),
        sa.Column('calculated_fee', sa.Numeric(precision=10, scale=2), nullable=False, server_default='0'),
        sa.Column('payment_status', sa.String(length=20), nullable=False, server_default='pending'),
        sa.Column('music_file_url', sa.String(length=1024), nullable=True),
        sa.Column('music_file_name', sa.String(length=255), nullable=True),
        sa.Column('video_file_url', sa.String(length=1024), nullable=True),
        sa.Column('video_external_url', sa.String(length=1024), nullable=True),
        sa.Column('submitted_at', sa.DateTime(), nullable=False, server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text('now()')),
        sa.ForeignKeyConstraint(['event_id'], ['events.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('event_id', 'item_number', name='uq_entries_event_item_number'),
    )
    op.create_index('ix_event_entries_uuid', 'event_entries', ['uuid'], unique=True)
    op.create_index('ix_event_entries_event_id', 'event_entries', ['event_id'])
    op.create_index('ix_event_entries_contestant_id', 'event_entries', ['contestant_id'])

    op.create_table(
        'performances',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        _uuid_column(),
        sa.Column('event_id', sa.Integer(), nullable=False),
        sa.Column('entry_id', sa.Integer(), nullable=False),
        sa.Column('contestant_id', sa.String(length=50), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('participant_names', postgresql.JSONB(), nullable=False, server_default='[]'),
        sa.Column('duration', sa.Numeric(precision=5, scale=2), nullable=True),
        sa.Column('choreographer', sa.String(length=255), nullable=True),
        sa.Column('mastery', sa.String(length=50), nullable=True),
        sa.Column('item_style', sa.String(length=100), nullable=True),
        sa.Column('item_number', sa.Integer(), nullable=True),
        sa.Column('scheduled_time', sa.DateTime(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='scheduled'),
        sa.Column('withdrawn_from_judging', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text('now()')),
        sa.ForeignKeyConstraint(['event_id'], ['events.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['entry_id'], ['event_entries.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_performances_uuid', 'performances', ['uuid'], unique=True)
    op.create_index('ix_performances_event_id', 'performances', ['event_id'])
    op.create_index('ix_performances_entry_id', 'performances', ['entry_id'], unique=True)

    op.create_table(
        'judges',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        _uuid_column(),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('is_admin', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('now()')),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_judges_uuid', 'judges', ['uuid'], unique=True)
    op.create_index('ix_judges_email', 'judges', ['email'], unique=True)

    op.create_table(
        'scores',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        _uuid_column(),
        sa.Column('judge_id', sa.Integer(), nullable=False),
        sa.Column('performance_id', sa.Integer(), nullable=False),
        sa.Column('technical_score', sa.Float(), nullable=False),
        sa.Column('musical_score', sa.Float(), nullable=False),
        sa.Column('performance_score', sa.Float(), nullable=False),
        sa.Column('styling_score', sa.Float(), nullable=False),
        sa.Column('overall_impression_score', sa.Float(), nullable=False),
        sa.Column('comments', sa.Text(), nullable=True),
        sa.Column('submitted_at', sa.DateTime(), nullable=False, server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text('now()')),
        sa.ForeignKeyConstraint(['judge_id'], ['judges.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['performance_id'], ['performances.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('judge_id', 'performance_id', name='uq_scores_judge_performance'),
    )
    op.create_index('ix_scores_uuid', 'scores', ['uuid'], unique=True)
    op.create_index('ix_scores_judge_id', 'scores', ['judge_id'])
    op.create_index('ix_scores_performance_id', 'scores', ['performance_id'])

    op.create_table(
        'judge_event_assignments',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        _uuid_column(),
        sa.Column('judge_id', sa.Integer(), nullable=False),
        sa.Column('event_id', sa.Integer(), nullable=False),
        sa.Column('assigned_by', sa.String(length=100), nullable=False),
        sa.Column('assigned_at', sa.DateTime(), nullable=False, server_default=sa.text('now()')),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='active'),
        sa.ForeignKeyConstraint(['judge_id'], ['judges.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['event_id'], ['events.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('judge_id', 'event_id', name='uq_judge_event_assignment'),
    )
    op.create_index('ix_judge_event_assignments_uuid', 'judge_event_assignments', ['uuid'], unique=True)
    op.create_index('ix_judge_event_assignments_judge_id', 'judge_event_assignments', ['judge_id'])
    op.create_index('ix_judge_event_assignments_event_id', 'judge_event_assignments', ['event_id'])


def downgrade() -> None:
    """Drop all results engine tables."""
    op.drop_table('judge_event_assignments')
    op.drop_table('scores')
    op.drop_table('judges')
    op.drop_table('performances')
    op.drop_table('event_entries')
    op.drop_table('dancers')
    op.drop_table('events')
