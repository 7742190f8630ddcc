"""Create programs table

Revision ID: 20261016_000001
Revises: None
Create Date: 2026-10-16

Fundraising programs; collected_amount is the running total of paid donations.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20261016_000001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the programs table."""
    op.create_table(
        'programs',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('slug', sa.String(255), nullable=False),
        sa.Column('category', sa.String(100), nullable=True),
        sa.Column('short_description', sa.Text(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('benefits', sa.Text(), nullable=True),
        sa.Column('target_amount', sa.Numeric(precision=15, scale=2), nullable=True),
        sa.Column('collected_amount', sa.Numeric(precision=15, scale=2), nullable=False, server_default='0'),
        sa.Column('thumbnail_path', sa.String(255), nullable=True),
        sa.Column('banner_path', sa.String(255), nullable=True),
        sa.Column('is_highlight', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            'status',
            sa.Enum('draft', 'active', 'completed', 'archived', name='program_status', create_constraint=True),
            nullable=False,
            server_default='draft'
        ),
        sa.Column('deadline_days', sa.Integer(), nullable=True),
        sa.Column('published_at', sa.Date(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_index('ix_programs_slug', 'programs', ['slug'], unique=True)
    op.create_index('ix_programs_status', 'programs', ['status'])


def downgrade() -> None:
    """Drop the programs table."""
    op.drop_index('ix_programs_status', table_name='programs')
    op.drop_index('ix_programs_slug', table_name='programs')
    op.drop_table('programs')
