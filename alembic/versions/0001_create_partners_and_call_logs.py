"""create partners and call_logs

Revision ID: 0001_create_call_logs
Revises:
Create Date: 2026-10-17 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_create_call_logs'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table('partners',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=True),
        sa.Column('phone', sa.String(length=32), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_partners_id'), 'partners', ['id'], unique=False)
    op.create_index(op.f('ix_partners_phone'), 'partners', ['phone'], unique=True)

    op.create_table('call_logs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('call_sid', sa.String(length=255), nullable=False),
        sa.Column('partner_id', sa.Integer(), nullable=True),
        sa.Column('customer_number', sa.String(length=32), nullable=False),
        sa.Column('call_direction', sa.String(length=20), nullable=False),
        sa.Column('duration', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('recording_url', sa.Text(), nullable=True),
        sa.Column('transcription', sa.Text(), nullable=True),
        sa.Column('chargeable', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('call_status', sa.String(length=20), nullable=False),
        sa.Column('provider_status', sa.String(length=50), nullable=True),
        sa.Column('voicemail', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('voicemail_transcription', sa.Text(), nullable=True),
        sa.Column('missed_by', sa.String(length=20), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['partner_id'], ['partners.id'], ),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_call_logs_id'), 'call_logs', ['id'], unique=False)
    op.create_index(op.f('ix_call_logs_call_sid'), 'call_logs', ['call_sid'], unique=True)
    op.create_index(op.f('ix_call_logs_partner_id'), 'call_logs', ['partner_id'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_call_logs_partner_id'), table_name='call_logs')
    op.drop_index(op.f('ix_call_logs_call_sid'), table_name='call_logs')
    op.drop_index(op.f('ix_call_logs_id'), table_name='call_logs')
    op.drop_table('call_logs')
    op.drop_index(op.f('ix_partners_phone'), table_name='partners')
    op.drop_index(op.f('ix_partners_id'), table_name='partners')
    op.drop_table('partners')
