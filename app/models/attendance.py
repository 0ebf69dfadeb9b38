"""근태 관리 관련 SQLAlchemy ORM 모델 정의.

Attendance management SQLAlchemy ORM model definitions.

Tables:
    - user_states: 사용자별 현재 근태 상태 (One current-state row per user)
    - attendance_records: 영업일별 근태 기록 (One record per user per business day)
    - time_edit_requests: 근태 시각 수정 요청 (Amendment requests for recorded times)
"""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, ForeignKey, Index, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.core.enums import AttendanceState, EditRequestStatus
from app.database import Base, UTCDateTime, utcnow


class UserState(Base):
    """사용자 근태 상태 모델 — 사용자당 단일 행.

    User state model — Singleton row per user holding the current phase.
    Created lazily on the first state query or action, or on registration.
    ``last_updated`` only moves forward.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        user_id: 사용자 FK, 고유 (Owning user, unique)
        current_state: 현재 상태 (not_checked_in | checked_in | on_break | checked_out | absent)
        last_updated: 마지막 상태 변경 시각 UTC (Last state write, UTC)
    """

    __tablename__ = "user_states"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 사용자 FK — One state row per user
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    # 현재 상태 — AttendanceState value
    current_state: Mapped[str] = mapped_column(
        String(20), nullable=False, default=AttendanceState.NOT_CHECKED_IN.value
    )
    # 마지막 갱신 — Interpreted in the business timezone for business-day math
    last_updated: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=utcnow)

    @property
    def state(self) -> AttendanceState:
        """열거형 상태 — current_state as an AttendanceState."""
        return AttendanceState(self.current_state)


class AttendanceRecord(Base):
    """영업일 근태 기록 모델.

    Attendance record model — One row per user per business day.
    Created on the first check-in or absence of a business day, mutated in
    place for the rest of that day, and never deleted.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        user_id: 사용자 FK (Owning user)
        date: 영업일 키 — 영업일 현지 00:00 (Business-day key: local 00:00 of the business date)
        check_in: 출근 시각 (Check-in time)
        break_start: 휴식 시작 시각 (Break start time)
        break_end: 휴식 종료 시각 (Break end time)
        check_out: 퇴근 시각 (Check-out time)
        is_absent: 결근 여부 (Absence flag; implies all four times unset)
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp)

    Constraints:
        uq_attendance_record_user_date: 사용자+영업일 중복 불가
            (At most one record per user per business day)
    """

    __tablename__ = "attendance_records"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    # 영업일 키 — Start instant of the business date (local midnight, stored UTC)
    date: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    check_in: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    break_start: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    break_end: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    check_out: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    is_absent: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_attendance_record_user_date"),
        Index("ix_attendance_records_date", "date"),
    )


class TimeEditRequest(Base):
    """근태 시각 수정 요청 모델.

    Time edit request model — A user's proposal to change one timestamp on
    one of their records, decided once by an administrator.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        user_id: 요청자 FK (Requesting user, the record owner)
        record_id: 대상 근태 기록 FK (Target attendance record)
        field: 수정 필드 (check_in | check_out | break_start | break_end)
        old_value: 요청 시점의 기존 값 (Snapshot of the field at request time)
        new_value: 요청 값 (Requested new value)
        reason: 수정 사유 (Reason, required)
        status: 상태 (pending | approved | rejected)
        decided_by: 처리한 관리자 FK (Admin who decided, if decided)
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp)
    """

    __tablename__ = "time_edit_requests"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    record_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("attendance_records.id", ondelete="CASCADE"), nullable=False
    )
    field: Mapped[str] = mapped_column(String(20), nullable=False)
    old_value: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    new_value: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    # 상태 — "pending" → "approved" | "rejected", exactly once
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=EditRequestStatus.PENDING.value
    )
    decided_by: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow)

    __table_args__ = (
        Index("ix_time_edit_requests_status_created", "status", "created_at"),
        Index("ix_time_edit_requests_record", "record_id"),
    )
