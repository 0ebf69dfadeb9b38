"""create_attendance_tables

Revision ID: a1c4e7f0b2d5
Revises:
Create Date: 2026-10-17 09:00:00.000000

사용자, 리프레시 토큰, 근태 상태, 근태 기록, 수정 요청 테이블 생성.
Create users, refresh_tokens, user_states, attendance_records and
time_edit_requests.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID


# revision identifiers, used by Alembic.
revision: str = 'a1c4e7f0b2d5'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # users — 사용자 계정 (email is the login identifier)
    op.create_table(
        'users',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('email', sa.String(255), nullable=False, unique=True),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('is_admin', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.text('true'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # refresh_tokens — 리프레시 토큰 (rotated on refresh, revoked on logout)
    op.create_table(
        'refresh_tokens',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('token', sa.String(512), nullable=False, unique=True),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # user_states — 사용자당 현재 근태 상태 한 행 (one row per user)
    op.create_table(
        'user_states',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('current_state', sa.String(20), server_default='not_checked_in', nullable=False),
        sa.Column('last_updated', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    # attendance_records — 사용자+영업일당 한 행 (one row per user per business day)
    op.create_table(
        'attendance_records',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('check_in', sa.DateTime(timezone=True), nullable=True),
        sa.Column('break_start', sa.DateTime(timezone=True), nullable=True),
        sa.Column('break_end', sa.DateTime(timezone=True), nullable=True),
        sa.Column('check_out', sa.DateTime(timezone=True), nullable=True),
        sa.Column('is_absent', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint('user_id', 'date', name='uq_attendance_record_user_date'),
    )
    op.create_index('ix_attendance_records_date', 'attendance_records', ['date'])

    # time_edit_requests — 근태 시각 수정 요청 (pending → approved | rejected)
    op.create_table(
        'time_edit_requests',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('record_id', UUID(as_uuid=True), sa.ForeignKey('attendance_records.id', ondelete='CASCADE'), nullable=False),
        sa.Column('field', sa.String(20), nullable=False),
        sa.Column('old_value', sa.DateTime(timezone=True), nullable=True),
        sa.Column('new_value', sa.DateTime(timezone=True), nullable=False),
        sa.Column('reason', sa.Text(), nullable=False),
        sa.Column('status', sa.String(20), server_default='pending', nullable=False),
        sa.Column('decided_by', UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_time_edit_requests_status_created', 'time_edit_requests', ['status', 'created_at'])
    op.create_index('ix_time_edit_requests_record', 'time_edit_requests', ['record_id'])


def downgrade() -> None:
    op.drop_index('ix_time_edit_requests_record', table_name='time_edit_requests')
    op.drop_index('ix_time_edit_requests_status_created', table_name='time_edit_requests')
    op.drop_table('time_edit_requests')
    op.drop_index('ix_attendance_records_date', table_name='attendance_records')
    op.drop_table('attendance_records')
    op.drop_table('user_states')
    op.drop_table('refresh_tokens')
    op.drop_table('users')
