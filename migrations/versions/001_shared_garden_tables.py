"""Create shared garden tables

Revision ID: 001
Revises:
Create Date: 2026-10-18 10:00:00.000000

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create shared garden tables"""

    # 1. One versioned JSON document per couple
    op.create_table('garden_documents',
        sa.Column('couple_key', sa.String(255), nullable=False, comment='Sorted user ids joined with an underscore'),
        sa.Column('user1_id', sa.String(128), nullable=False, comment='Lexicographically first partner'),
        sa.Column('user2_id', sa.String(128), nullable=False, comment='Lexicographically second partner'),
        sa.Column('document', sa.JSON(), nullable=False, comment='Serialized GardenState'),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1', comment='Optimistic concurrency version'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),

        sa.PrimaryKeyConstraint('couple_key'),
        sa.CheckConstraint('version >= 1', name='ck_garden_documents_version'),
    )

    op.create_index('ix_garden_documents_user1_id', 'garden_documents', ['user1_id'])
    op.create_index('ix_garden_documents_user2_id', 'garden_documents', ['user2_id'])

    # 2. Per-user wallets, written only inside a garden document transaction
    op.create_table('garden_wallets',
        sa.Column('user_id', sa.String(128), nullable=False, comment='Opaque user id'),
        sa.Column('gold', sa.Integer(), nullable=False, server_default='0', comment='Gold balance'),
        sa.Column('water', sa.Integer(), nullable=False, server_default='0', comment='Water drops'),
        sa.Column('max_water', sa.Integer(), nullable=False, server_default='3', comment='Water drop capacity'),
        sa.Column('last_water_earned_day_key', sa.String(10), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),

        sa.PrimaryKeyConstraint('user_id'),
        sa.CheckConstraint('gold >= 0', name='ck_garden_wallets_gold'),
        sa.CheckConstraint('water >= 0', name='ck_garden_wallets_water'),
        sa.CheckConstraint('max_water <= 3', name='ck_garden_wallets_max_water'),
    )


def downgrade() -> None:
    """Drop shared garden tables"""
    op.drop_table('garden_wallets')
    op.drop_index('ix_garden_documents_user2_id', table_name='garden_documents')
    op.drop_index('ix_garden_documents_user1_id', table_name='garden_documents')
    op.drop_table('garden_documents')
