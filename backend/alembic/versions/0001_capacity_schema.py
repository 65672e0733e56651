"""capacity schema

Revision ID: 0001_capacity_schema
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '0001_capacity_schema'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _hospital_fk():
    return sa.ForeignKey('hospitals.id', ondelete='CASCADE')


def upgrade() -> None:
    """Upgrade schema."""

    op.create_table(
        'hospitals',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('slug', sa.Text, nullable=False, unique=True),
        sa.Column('name', sa.Text, nullable=False),
        sa.Column('created_at', sa.Text, server_default=sa.text('CURRENT_TIMESTAMP')),
    )

    op.create_table(
        'slot_templates',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('hospital_id', sa.Integer, _hospital_fk(), nullable=False),
        sa.Column('dow', sa.Integer, nullable=False),
        sa.Column('start', sa.Text, nullable=False),
        sa.Column('end', sa.Text, nullable=False),
        sa.Column('capacity', sa.Integer, nullable=False, server_default=sa.text('0')),
    )
    op.create_index('ix_slot_templates_hospital_id', 'slot_templates', ['hospital_id'])

    op.create_table(
        'capacity_overrides',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('hospital_id', sa.Integer, _hospital_fk(), nullable=False),
        sa.Column('date', sa.Date, nullable=False),
        sa.Column('resource_key', sa.Text, nullable=False, server_default=sa.text("''")),
        sa.Column('is_closed', sa.Boolean, nullable=False, server_default=sa.text('1')),
        sa.Column('updated_at', sa.Text, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.UniqueConstraint('hospital_id', 'date', 'resource_key'),
    )

    op.create_table(
        'capacity_defaults',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('hospital_id', sa.Integer, _hospital_fk(), nullable=False, unique=True),
        sa.Column('basic_cap', sa.Integer, nullable=False, server_default=sa.text('0')),
        sa.Column('nhis_cap', sa.Integer, nullable=False, server_default=sa.text('0')),
        sa.Column('special_cap', sa.Integer, nullable=False, server_default=sa.text('0')),
    )

    # Legacy day-level closures
    op.create_table(
        'slot_exceptions',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('hospital_id', sa.Integer, _hospital_fk(), nullable=False),
        sa.Column('date', sa.Date, nullable=False),
        sa.UniqueConstraint('hospital_id', 'date'),
    )
    for table in ('calendar_closes', 'day_closes'):
        op.create_table(
            table,
            sa.Column('id', sa.Integer, primary_key=True),
            sa.Column('hospital_id', sa.Integer, _hospital_fk(), nullable=False),
            sa.Column('date', sa.Date, nullable=False),
        )
    op.create_table(
        'holidays',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('hospital_id', sa.Integer, _hospital_fk(), nullable=False),
        sa.Column('date', sa.Date, nullable=False),
        sa.Column('name', sa.Text),
        sa.Column('closed', sa.Boolean, nullable=False, server_default=sa.text('1')),
    )

    op.create_table(
        'bookings',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('hospital_id', sa.Integer, _hospital_fk(), nullable=False),
        sa.Column('date', sa.Date, nullable=False),
        sa.Column('status', sa.Text, nullable=False, server_default=sa.text("'PENDING'")),
        sa.Column('created_at', sa.Text, nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
    )
    op.create_index('ix_bookings_hospital_id', 'bookings', ['hospital_id'])
    op.create_index('ix_bookings_hospital_date', 'bookings', ['hospital_id', 'date'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('ix_bookings_hospital_date', table_name='bookings')
    op.drop_index('ix_bookings_hospital_id', table_name='bookings')
    for table in (
        'bookings',
        'holidays',
        'day_closes',
        'calendar_closes',
        'slot_exceptions',
        'capacity_defaults',
        'capacity_overrides',
        'slot_templates',
        'hospitals',
    ):
        op.drop_table(table)
