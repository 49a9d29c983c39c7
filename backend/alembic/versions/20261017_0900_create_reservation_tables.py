"""Create reservation and archive tables

Revision ID: create_reservation_tables
Revises:
Create Date: 2026-10-17 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = 'create_reservation_tables'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table('reservations',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('confirmation_code', sa.String(length=32), nullable=False),
        sa.Column('cancellation_token', sa.String(length=36), nullable=False),
        sa.Column('guest_name', sa.String(length=50), nullable=False),
        sa.Column('guest_surname', sa.String(length=50)),
        sa.Column('guest_email', sa.String(length=100), nullable=False),
        sa.Column('guest_phone', sa.String(length=20)),
        sa.Column('reservation_date', sa.Date(), nullable=False),
        sa.Column('reservation_time', sa.Time(), nullable=False),
        sa.Column('party_size', sa.Integer(), nullable=False),
        sa.Column('location_preference', sa.Enum('INDIFERENTE', 'INTERIOR', 'TERRAZA', name='locationpreference')),
        sa.Column('occasion', sa.String(length=100)),
        sa.Column('allergies', sa.Text()),
        sa.Column('comments', sa.Text()),
        sa.Column('status', sa.Enum('REQUESTED', 'CONFIRMED', 'CANCELLED', name='reservationstatus')),
        sa.Column('unit_id', sa.String(length=20), nullable=False),
        sa.Column('table_ids', sa.JSON()),
        sa.Column('ip_address', sa.String(length=45)),
        sa.Column('user_agent', sa.String(length=255)),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(timezone=True)),
        sa.Column('confirmed_at', sa.DateTime(timezone=True)),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('cancellation_token'),
    )
    op.create_index('ix_reservations_id', 'reservations', ['id'])
    op.create_index('ix_reservations_confirmation_code', 'reservations', ['confirmation_code'], unique=True)
    op.create_index('ix_reservations_guest_email', 'reservations', ['guest_email'])
    op.create_index('ix_reservations_reservation_date', 'reservations', ['reservation_date'])
    op.create_index('ix_reservations_status', 'reservations', ['status'])
    op.create_index('idx_reservation_date_time', 'reservations', ['reservation_date', 'reservation_time'])
    op.create_index('idx_reservation_status_date', 'reservations', ['status', 'reservation_date'])

    op.create_table('reservation_archive',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('reservation_id', sa.Integer(), nullable=False),
        sa.Column('confirmation_code', sa.String(length=32), nullable=False),
        sa.Column('action', sa.String(length=50), nullable=False),
        sa.Column('snapshot', sa.JSON(), nullable=False),
        sa.Column('reason', sa.Text()),
        sa.Column('user_ip', sa.String(length=45)),
        sa.Column('user_agent', sa.String(length=255)),
        sa.Column('cancelled_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_reservation_archive_id', 'reservation_archive', ['id'])
    op.create_index('idx_reservation_archive_reservation_id', 'reservation_archive', ['reservation_id'])
    op.create_index('idx_reservation_archive_code', 'reservation_archive', ['confirmation_code'])


def downgrade():
    op.drop_table('reservation_archive')
    op.drop_table('reservations')
    sa.Enum(name='reservationstatus').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='locationpreference').drop(op.get_bind(), checkfirst=True)
