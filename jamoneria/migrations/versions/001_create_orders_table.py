"""Create orders table.

Revision ID: 001_create_orders
Revises:
Create Date: 2026-09-28
"""
from alembic import op
import sqlalchemy as sa

revision = '001_create_orders'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Databases created before migrations were introduced already have the table
    if sa.inspect(op.get_bind()).has_table('orders'):
        return

    op.create_table(
        'orders',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('order_id', sa.String(16), nullable=False),
        sa.Column('customer_name', sa.String(255), nullable=False),
        sa.Column('customer_email', sa.String(255), nullable=False),
        sa.Column('address', sa.String(500), nullable=False),
        sa.Column('city', sa.String(255), nullable=False),
        sa.Column('postal_code', sa.String(20), nullable=False),
        sa.Column('product_name', sa.String(255), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('payment_status', sa.String(20), server_default='pending', nullable=False),
        sa.Column('checkout_session_id', sa.String(255), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_orders_order_id', 'orders', ['order_id'], unique=True)


def downgrade() -> None:
    op.drop_index('ix_orders_order_id', table_name='orders')
    op.drop_table('orders')
