"""Create equipment and rentals tables

Revision ID: 3f9c1a7e2b40
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f9c1a7e2b40'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'equipment',
        sa.Column('id', sa.String(length=128), primary_key=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('price', sa.Float(), nullable=False),
        sa.Column('stock', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('category', sa.String(length=100), nullable=True),
        sa.Column('detail', sa.Text(), nullable=True),
        sa.Column('image', sa.String(length=500), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('stock >= 0', name='ck_equipment_stock_non_negative'),
    )
    op.create_index('ix_equipment_category', 'equipment', ['category'])

    op.create_table(
        'rentals',
        sa.Column('id', sa.String(length=64), primary_key=True),
        sa.Column('user_id', sa.String(length=128), nullable=False),
        sa.Column('equipment_id', sa.String(length=128), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('price', sa.Float(), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='active'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('quantity > 0', name='ck_rentals_quantity_positive'),
        sa.CheckConstraint('end_date > start_date', name='ck_rentals_date_range'),
    )
    op.create_index('ix_rentals_user_id', 'rentals', ['user_id'])
    op.create_index('ix_rentals_equipment_id', 'rentals', ['equipment_id'])


def downgrade() -> None:
    op.drop_index('ix_rentals_equipment_id', table_name='rentals')
    op.drop_index('ix_rentals_user_id', table_name='rentals')
    op.drop_table('rentals')
    op.drop_index('ix_equipment_category', table_name='equipment')
    op.drop_table('equipment')
