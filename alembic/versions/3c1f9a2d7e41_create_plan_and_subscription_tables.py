"""Create plan, subscription and payment tables

Revision ID: 3c1f9a2d7e41
Revises:
Create Date: 2025-06-02 10:12:44.318502

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '3c1f9a2d7e41'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _base_columns() -> list:
    return [
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('modified_at', sa.DateTime(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        'user',
        *_base_columns(),
        sa.Column('full_name', sa.String(), nullable=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('auth0_id', sa.String(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('is_superuser', sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
        sa.UniqueConstraint('auth0_id'),
    )
    op.create_table(
        'team',
        *_base_columns(),
        sa.Column('name', sa.String(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_table(
        'user_team',
        *_base_columns(),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('team_id', sa.Uuid(), nullable=False),
        sa.Column('role', sa.String(), nullable=False),
        sa.ForeignKeyConstraint(['team_id'], ['team.id']),
        sa.ForeignKeyConstraint(['user_id'], ['user.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'team_id', name='uq_user_team'),
    )
    op.create_table(
        'plan',
        *_base_columns(),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('price', sa.Integer(), nullable=False),
        sa.CheckConstraint('price >= 0', name='check_plan_price_non_negative'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name'),
    )
    op.create_table(
        'subscription',
        *_base_columns(),
        sa.Column('subscriber_kind', sa.String(length=20), nullable=False),
        sa.Column('subscriber_id', sa.Uuid(), nullable=False),
        sa.Column('plan_id', sa.Uuid(), nullable=False),
        sa.Column('is_cancelled', sa.Boolean(), nullable=False),
        sa.Column('plan_price', sa.Integer(), nullable=False),
        sa.Column('valid_to', sa.DateTime(timezone=False), nullable=True),
        sa.ForeignKeyConstraint(['plan_id'], ['plan.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        'ix_subscription_subscriber',
        'subscription',
        ['subscriber_kind', 'subscriber_id'],
    )
    # At most one active subscription per subscriber
    op.create_index(
        'uq_subscription_active_subscriber',
        'subscription',
        ['subscriber_kind', 'subscriber_id'],
        unique=True,
        postgresql_where=sa.text('NOT is_cancelled'),
    )
    op.create_table(
        'payment',
        *_base_columns(),
        sa.Column('subscription_id', sa.Uuid(), nullable=False),
        sa.Column('amount', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('paid_at', sa.DateTime(timezone=False), nullable=False),
        sa.CheckConstraint('amount >= 0', name='check_payment_amount_non_negative'),
        sa.ForeignKeyConstraint(['subscription_id'], ['subscription.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        'ix_payment_subscription_status',
        'payment',
        ['subscription_id', 'status'],
    )


def downgrade() -> None:
    op.drop_index('ix_payment_subscription_status', table_name='payment')
    op.drop_table('payment')
    op.drop_index('uq_subscription_active_subscriber', table_name='subscription')
    op.drop_index('ix_subscription_subscriber', table_name='subscription')
    op.drop_table('subscription')
    op.drop_table('plan')
    op.drop_table('user_team')
    op.drop_table('team')
    op.drop_table('user')
