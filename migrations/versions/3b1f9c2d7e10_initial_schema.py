"""Initial schema

Revision ID: 3b1f9c2d7e10
Revises:
Create Date: 2025-03-04 10:12:41.518203

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3b1f9c2d7e10'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    # Configs table (one row per tenant / area scope)
    op.create_table('configs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('tenant_id', sa.String(length=64), nullable=False),
        sa.Column('area_id', sa.String(length=64), nullable=True),
        sa.Column('area_key', sa.String(length=64), nullable=False, server_default=''),
        sa.Column('label', sa.String(length=255), nullable=True),
        sa.Column('video_url', sa.String(length=512), nullable=False),
        sa.Column('min_duration', sa.Integer(), nullable=False, server_default='10'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('tenant_id', 'area_key', name='uq_configs_tenant_area')
    )
    op.create_index(op.f('ix_configs_tenant_id'), 'configs', ['tenant_id'], unique=False)

    # Views table (append-only)
    op.create_table('views',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('tenant_id', sa.String(length=64), nullable=False),
        sa.Column('area_id', sa.String(length=64), nullable=True),
        sa.Column('area_name', sa.String(length=255), nullable=True),
        sa.Column('customer_id', sa.String(length=128), nullable=True),
        sa.Column('customer_email', sa.String(length=255), nullable=True),
        sa.Column('video_url', sa.String(length=512), nullable=True),
        sa.Column('seconds_watched', sa.Integer(), nullable=False),
        sa.Column('completed', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_views_tenant_id'), 'views', ['tenant_id'], unique=False)
    op.create_index(op.f('ix_views_created_at'), 'views', ['created_at'], unique=False)


def downgrade():
    op.drop_index(op.f('ix_views_created_at'), table_name='views')
    op.drop_index(op.f('ix_views_tenant_id'), table_name='views')
    op.drop_table('views')
    op.drop_index(op.f('ix_configs_tenant_id'), table_name='configs')
    op.drop_table('configs')
