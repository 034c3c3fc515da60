"""Add optimistic concurrency version to garden wallets

Revision ID: 002
Revises: 001
Create Date: 2026-10-18 14:00:00.000000

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '002'
down_revision: Union[str, None] = '001'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Version wallet rows so balance writes are compare-and-set"""
    with op.batch_alter_table('garden_wallets') as batch_op:
        batch_op.add_column(
            sa.Column('version', sa.Integer(), nullable=False, server_default='1', comment='Optimistic concurrency version')
        )
        batch_op.create_check_constraint('ck_garden_wallets_version', 'version >= 1')


def downgrade() -> None:
    """Drop the wallet version column"""
    with op.batch_alter_table('garden_wallets') as batch_op:
        batch_op.drop_constraint('ck_garden_wallets_version', type_='check')
        batch_op.drop_column('version')
