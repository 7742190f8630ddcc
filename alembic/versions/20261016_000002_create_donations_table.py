"""Create donations table

Revision ID: 20261016_000002
Revises: 20261016_000001
Create Date: 2026-10-16

Donations, optionally earmarked for a program (set null when the program goes).
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20261016_000002'
down_revision: Union[str, None] = '20261016_000001'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the donations table."""
    op.create_table(
        'donations',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('program_id', sa.Integer(), nullable=True),
        sa.Column('donation_code', sa.String(50), nullable=False),
        sa.Column('donor_name', sa.String(255), nullable=True),
        sa.Column('donor_email', sa.String(255), nullable=True),
        sa.Column('donor_phone', sa.String(50), nullable=True),
        sa.Column('is_anonymous', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('amount', sa.Numeric(precision=15, scale=2), nullable=False),
        sa.Column(
            'payment_source',
            sa.Enum('manual', 'gateway', name='payment_source', create_constraint=True),
            nullable=False,
        ),
        sa.Column('payment_method', sa.String(100), nullable=True),
        sa.Column('payment_channel', sa.String(255), nullable=True),
        sa.Column(
            'status',
            sa.Enum('pending', 'paid', 'failed', 'expired', 'cancelled', name='donation_status', create_constraint=True),
            nullable=False,
            server_default='pending',
        ),
        sa.Column('gateway_order_id', sa.String(100), nullable=True),
        sa.Column('gateway_transaction_id', sa.String(100), nullable=True),
        sa.Column('gateway_va_numbers', sa.JSON(), nullable=True),
        sa.Column('gateway_raw_response', sa.JSON(), nullable=True),
        sa.Column('manual_proof_path', sa.String(255), nullable=True),
        sa.Column('paid_at', sa.DateTime(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(
            ['program_id'],
            ['programs.id'],
            name='fk_donations_program_id',
            ondelete='SET NULL',
        ),
    )
    op.create_index('ix_donations_program_id', 'donations', ['program_id'])
    op.create_index('ix_donations_donation_code', 'donations', ['donation_code'], unique=True)
    op.create_index('ix_donations_status', 'donations', ['status'])
    op.create_index('ix_donations_gateway_order_id', 'donations', ['gateway_order_id'])


def downgrade() -> None:
    """Drop the donations table."""
    op.drop_index('ix_donations_gateway_order_id', table_name='donations')
    op.drop_index('ix_donations_status', table_name='donations')
    op.drop_index('ix_donations_donation_code', table_name='donations')
    op.drop_index('ix_donations_program_id', table_name='donations')
    op.drop_table('donations')
