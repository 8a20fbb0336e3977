"""Add active flag to configs

Revision ID: add_config_active_flag
Revises: add_video_labels
Create Date: 2025-09-02

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'add_config_active_flag'
down_revision = 'add_video_labels'
branch_labels = None
depends_on = None


def upgrade():
    with op.batch_alter_table('configs', schema=None) as batch_op:
        batch_op.add_column(sa.Column('active', sa.Boolean(), nullable=False, server_default=sa.true()))


def downgrade():
    with op.batch_alter_table('configs', schema=None) as batch_op:
        batch_op.drop_column('active')
