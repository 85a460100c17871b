"""Add payment_method column to orders.

Revision ID: 002_add_payment_method
Revises: 001_create_orders
Create Date: 2026-10-05
"""
from alembic import op
import sqlalchemy as sa

revision = '002_add_payment_method'
down_revision = '001_create_orders'
branch_labels = None
depends_on = None


def upgrade() -> None:
    columns = {c['name'] for c in sa.inspect(op.get_bind()).get_columns('orders')}
    if 'payment_method' in columns:
        return

    op.add_column(
        'orders',
        sa.Column('payment_method', sa.String(10), server_default='card', nullable=False),
    )


def downgrade() -> None:
    with op.batch_alter_table('orders') as batch_op:
        batch_op.drop_column('payment_method')
