"""Add video labels and session key for analytics

Revision ID: add_video_labels
Revises: 3b1f9c2d7e10
Create Date: 2025-05-19

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'add_video_labels'
down_revision = '3b1f9c2d7e10'
branch_labels = None
depends_on = None


def upgrade():
    with op.batch_alter_table('configs', schema=None) as batch_op:
        batch_op.add_column(sa.Column('video_label', sa.String(length=255), nullable=True))

    with op.batch_alter_table('views', schema=None) as batch_op:
        batch_op.add_column(sa.Column('video_label', sa.String(length=255), nullable=True))
        batch_op.add_column(sa.Column('session_key', sa.String(length=255), nullable=True))


def downgrade():
    with op.batch_alter_table('views', schema=None) as batch_op:
        batch_op.drop_column('session_key')
        batch_op.drop_column('video_label')

    with op.batch_alter_table('configs', schema=None) as batch_op:
        batch_op.drop_column('video_label')
