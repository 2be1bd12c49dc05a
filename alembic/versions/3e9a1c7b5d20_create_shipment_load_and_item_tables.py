"""create shipment, shipment_load and load_item tables

Revision ID: 3e9a1c7b5d20
Revises:
Create Date: 2026-10-19 09:12:41.508213

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3e9a1c7b5d20'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _audit_columns() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('created_by', sa.String(length=64), server_default=sa.text("'system@local'"), nullable=False),
        sa.Column('last_changed_by', sa.String(length=64), server_default=sa.text("'system@local'"), nullable=False),
    ]


def upgrade() -> None:
    # 1. Shipment
    op.create_table(
        'shipment',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('shipment_number', sa.String(length=40), nullable=False),
        sa.Column('origin', sa.String(length=255), nullable=False),
        sa.Column('destination', sa.String(length=255), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('shipper_id', sa.Integer(), nullable=False),
        sa.Column('forwarder_id', sa.Integer(), nullable=True),
        sa.Column('estimated_departure', sa.DateTime(), nullable=True),
        sa.Column('estimated_arrival', sa.DateTime(), nullable=True),
        sa.Column('actual_departure', sa.DateTime(), nullable=True),
        sa.Column('actual_arrival', sa.DateTime(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        *_audit_columns(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_shipment_shipment_number', 'shipment', ['shipment_number'], unique=True)
    op.create_index('ix_shipment_status', 'shipment', ['status'], unique=False)
    op.create_index('ix_shipment_shipper_id', 'shipment', ['shipper_id'], unique=False)
    op.create_index('ix_shipment_forwarder_id', 'shipment', ['forwarder_id'], unique=False)

    # 2. Shipment Load
    op.create_table(
        'shipment_load',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('shipment_id', sa.Integer(), nullable=False),
        sa.Column('load_number', sa.String(length=50), nullable=False),
        sa.Column('reference', sa.String(length=100), nullable=False),
        sa.Column('transport_mode', sa.String(length=10), nullable=False),
        sa.Column('status', sa.String(length=30), nullable=False),
        sa.Column('container_number', sa.String(length=20), nullable=True),
        sa.Column('container_size', sa.String(length=10), nullable=True),
        sa.Column('container_type', sa.String(length=50), nullable=True),
        sa.Column('weight', sa.Float(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('pickup_address', sa.String(length=255), nullable=True),
        sa.Column('delivery_address', sa.String(length=255), nullable=True),
        sa.Column('pickup_date', sa.DateTime(), nullable=True),
        sa.Column('delivery_date', sa.DateTime(), nullable=True),
        *_audit_columns(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['shipment_id'], ['shipment.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_shipment_load_shipment_id', 'shipment_load', ['shipment_id'], unique=False)
    op.create_index('ix_shipment_load_load_number', 'shipment_load', ['load_number'], unique=True)

    # 3. Load Item
    op.create_table(
        'load_item',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('shipment_load_id', sa.Integer(), nullable=False),
        sa.Column('type', sa.String(length=10), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('dangerous_goods', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        sa.Column('special_instructions', sa.Text(), nullable=True),
        sa.Column('specifications', sa.JSON(), nullable=False),
        *_audit_columns(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['shipment_load_id'], ['shipment_load.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_load_item_shipment_load_id', 'load_item', ['shipment_load_id'], unique=False)


def downgrade() -> None:
    op.drop_index('ix_load_item_shipment_load_id', table_name='load_item')
    op.drop_table('load_item')
    op.drop_index('ix_shipment_load_load_number', table_name='shipment_load')
    op.drop_index('ix_shipment_load_shipment_id', table_name='shipment_load')
    op.drop_table('shipment_load')
    op.drop_index('ix_shipment_forwarder_id', table_name='shipment')
    op.drop_index('ix_shipment_shipper_id', table_name='shipment')
    op.drop_index('ix_shipment_status', table_name='shipment')
    op.drop_index('ix_shipment_shipment_number', table_name='shipment')
    op.drop_table('shipment')
