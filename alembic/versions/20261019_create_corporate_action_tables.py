"""create users, stock_lots, corporate_actions and lot_adjustments tables

Revision ID: 20261019_corp_actions
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20261019_corp_actions'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the lot ledger tables."""
    op.create_table(
        'users',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('name', sa.String(255), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'stock_lots',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('user_id', sa.String(36), nullable=False),
        sa.Column('investment_txn_id', sa.String(64), nullable=False),
        sa.Column('symbol', sa.String(20), nullable=False),
        sa.Column('acquired_date', sa.Date(), nullable=False),
        sa.Column('original_quantity', sa.Numeric(20, 8), nullable=False),
        sa.Column('remaining_quantity', sa.Numeric(20, 8), nullable=False),
        sa.Column('cost_per_share', sa.Numeric(20, 8), nullable=False),
        sa.Column('total_cost_basis', sa.Numeric(14, 2), nullable=False),
        sa.Column('fees', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('status', sa.String(20), nullable=False, server_default='OPEN'),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_stock_lots_user_id', 'stock_lots', ['user_id'])
    op.create_index('ix_stock_lots_symbol', 'stock_lots', ['symbol'])
    op.create_index('ix_stock_lots_status', 'stock_lots', ['status'])
    op.create_index(
        'ix_stock_lots_user_symbol_acquired',
        'stock_lots',
        ['user_id', 'symbol', 'acquired_date'],
    )

    op.create_table(
        'corporate_actions',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('user_id', sa.String(36), nullable=False),
        sa.Column('symbol', sa.String(20), nullable=False),
        sa.Column('action_type', sa.String(20), nullable=False),
        sa.Column('effective_date', sa.Date(), nullable=False),
        sa.Column('ratio_from', sa.Numeric(20, 8), nullable=False),
        sa.Column('ratio_to', sa.Numeric(20, 8), nullable=False),
        sa.Column('pre_split_shares', sa.Numeric(20, 8), nullable=True),
        sa.Column('post_split_shares', sa.Numeric(20, 8), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('source', sa.String(255), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('ratio_from > 0 AND ratio_to > 0', name='ck_corporate_actions_positive_ratio'),
    )
    op.create_index('ix_corporate_actions_user_id', 'corporate_actions', ['user_id'])
    op.create_index('ix_corporate_actions_symbol', 'corporate_actions', ['symbol'])
    op.create_index('ix_corporate_actions_effective_date', 'corporate_actions', ['effective_date'])

    op.create_table(
        'lot_adjustments',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('lot_id', sa.String(36), nullable=False),
        sa.Column('corporate_action_id', sa.String(36), nullable=False),
        sa.Column('quantity_before', sa.Numeric(20, 8), nullable=False),
        sa.Column('quantity_after', sa.Numeric(20, 8), nullable=False),
        sa.Column('remaining_quantity_before', sa.Numeric(20, 8), nullable=True),
        sa.Column('remaining_quantity_after', sa.Numeric(20, 8), nullable=True),
        sa.Column('cost_per_share_before', sa.Numeric(20, 8), nullable=False),
        sa.Column('cost_per_share_after', sa.Numeric(20, 8), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['lot_id'], ['stock_lots.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['corporate_action_id'], ['corporate_actions.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('lot_id', 'corporate_action_id', name='uq_lot_adjustments_lot_action'),
    )
    op.create_index('ix_lot_adjustments_lot_id', 'lot_adjustments', ['lot_id'])
    op.create_index('ix_lot_adjustments_corporate_action_id', 'lot_adjustments', ['corporate_action_id'])


def downgrade() -> None:
    """Drop the lot ledger tables."""
    op.drop_table('lot_adjustments')
    op.drop_table('corporate_actions')
    op.drop_table('stock_lots')
    op.drop_index('ix_users_email', 'users')
    op.drop_table('users')
