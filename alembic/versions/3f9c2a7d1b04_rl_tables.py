"""Arm counters, experiment totals and experiment registry

Revision ID: 3f9c2a7d1b04
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '3f9c2a7d1b04'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table('rl_arm_data',
        sa.Column('experiment_id', sa.String(length=255), nullable=False),
        sa.Column('arm_id', sa.String(length=255), nullable=False),
        sa.Column('turns', sa.BigInteger(), nullable=False, server_default='0'),
        sa.Column('rewards', sa.BigInteger(), nullable=False, server_default='0'),
        sa.Column('created', sa.BigInteger(), nullable=False, server_default='0'),
        sa.Column('updated', sa.BigInteger(), nullable=False, server_default='0'),
        sa.PrimaryKeyConstraint('experiment_id', 'arm_id'),
    )
    op.create_index('ix_rl_arm_data_experiment_updated', 'rl_arm_data', ['experiment_id', 'updated'], unique=False)

    op.create_table('rl_experiment_totals',
        sa.Column('experiment_id', sa.String(length=255), nullable=False),
        sa.Column('total_turns', sa.BigInteger(), nullable=False, server_default='0'),
        sa.Column('created', sa.BigInteger(), nullable=False, server_default='0'),
        sa.Column('updated', sa.BigInteger(), nullable=False, server_default='0'),
        sa.PrimaryKeyConstraint('experiment_id'),
    )

    op.create_table('rl_experiment_registry',
        sa.Column('experiment_id', sa.String(length=255), nullable=False),
        sa.Column('module', sa.String(length=255), nullable=False),
        sa.Column('experiment_name', sa.String(length=255), nullable=True),
        sa.Column('registered_at', sa.BigInteger(), nullable=False, server_default='0'),
        sa.PrimaryKeyConstraint('experiment_id'),
    )
    op.create_index(op.f('ix_rl_experiment_registry_module'), 'rl_experiment_registry', ['module'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_rl_experiment_registry_module'), table_name='rl_experiment_registry')
    op.drop_table('rl_experiment_registry')
    op.drop_table('rl_experiment_totals')
    op.drop_index('ix_rl_arm_data_experiment_updated', table_name='rl_arm_data')
    op.drop_table('rl_arm_data')
