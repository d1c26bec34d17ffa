"""initial schema

Revision ID: 7c1e4a9d2b30
Revises:
Create Date: 2026-10-16 10:12:41.518204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '7c1e4a9d2b30'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'profiles',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('ctk', sa.String(), nullable=False),
        sa.Column('full_name', sa.String(255), nullable=True),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('avatar_url', sa.String(500), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_profiles_ctk', 'profiles', ['ctk'], unique=True)

    op.create_table(
        'trips',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('destination', sa.String(255), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('max_participants', sa.Integer(), nullable=False, server_default='10'),
        sa.Column('current_participants', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('organizer_id', sa.String(), sa.ForeignKey('profiles.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='active'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )

    op.create_table(
        'trip_participants',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('trip_id', sa.String(), sa.ForeignKey('trips.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', sa.String(), sa.ForeignKey('profiles.id', ondelete='CASCADE'), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('message', sa.Text(), nullable=True),
        sa.Column('joined_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('trip_id', 'user_id'),
    )

    op.create_table(
        'expenses',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('trip_id', sa.String(), sa.ForeignKey('trips.id', ondelete='CASCADE'), nullable=False),
        sa.Column('payer_id', sa.String(), sa.ForeignKey('profiles.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('description', sa.String(500), nullable=False),
        sa.Column('category', sa.String(20), nullable=False, server_default='other'),
        sa.Column('expense_date', sa.Date(), nullable=False),
        sa.Column('split_type', sa.String(20), nullable=False, server_default='equal'),
        sa.Column('amount_per_person', sa.Numeric(12, 2), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )

    op.create_table(
        'expense_splits',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('expense_id', sa.String(), sa.ForeignKey('expenses.id', ondelete='CASCADE'), nullable=False),
        sa.Column('participant_id', sa.String(), sa.ForeignKey('profiles.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('amount_owed', sa.Numeric(12, 2), nullable=False),
        sa.Column('paid', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('expense_id', 'participant_id'),
    )

    op.create_table(
        'activities',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('trip_id', sa.String(), sa.ForeignKey('trips.id', ondelete='CASCADE'), nullable=False),
        sa.Column('creator_id', sa.String(), sa.ForeignKey('profiles.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('location', sa.String(255), nullable=True),
        sa.Column('category', sa.String(20), nullable=False, server_default='other'),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('start_time', sa.String(5), nullable=True),
        sa.Column('end_time', sa.String(5), nullable=True),
        sa.Column('cost_per_person', sa.Numeric(12, 2), nullable=True),
        sa.Column('max_participants', sa.Integer(), nullable=True),
        sa.Column('current_participants', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('booking_url', sa.String(500), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='planned'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )

    op.create_table(
        'activity_participants',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('activity_id', sa.String(), sa.ForeignKey('activities.id', ondelete='CASCADE'), nullable=False),
        sa.Column('participant_id', sa.String(), sa.ForeignKey('profiles.id', ondelete='CASCADE'), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='confirmed'),
        sa.Column('joined_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('activity_id', 'participant_id'),
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('activity_participants')
    op.drop_table('activities')
    op.drop_table('expense_splits')
    op.drop_table('expenses')
    op.drop_table('trip_participants')
    op.drop_table('trips')
    op.drop_index('ix_profiles_ctk', table_name='profiles')
    op.drop_table('profiles')
