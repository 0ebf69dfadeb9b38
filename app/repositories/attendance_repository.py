"""근태 관리 레포지토리 — 사용자 상태 및 근태 기록 DB 쿼리 담당.

Attendance Repository — Persistence for the per-user state row and the
per-business-day attendance records. Together with the edit-request
repository this is the store the attendance core depends on.
"""

import uuid
from datetime import datetime
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy import Row, Select, func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.enums import AttendanceState
from app.models.attendance import AttendanceRecord, UserState
from app.models.user import User
from app.repositories.base import BaseRepository

# ON CONFLICT DO NOTHING 을 지원하는 방언별 insert
# Dialect-specific insert constructs supporting ON CONFLICT DO NOTHING
_UPSERT_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


class UserStateRepository(BaseRepository[UserState]):
    """사용자 상태 레포지토리.

    User state repository. Reads used by attendance actions lock the row
    (SELECT ... FOR UPDATE) so actions for the same user serialize.

    Extends:
        BaseRepository[UserState]
    """

    def __init__(self) -> None:
        super().__init__(UserState)

    async def get_user_state(
        self,
        db: AsyncSession,
        user_id: UUID,
        for_update: bool = False,
    ) -> UserState | None:
        """사용자의 상태 행을 조회합니다.

        Retrieve the user's state row, optionally locking it.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 사용자 UUID (User UUID)
            for_update: 행 잠금 여부 (Lock the row until the transaction ends)

        Returns:
            UserState | None: 상태 행 또는 None (State row or None)
        """
        query: Select = select(UserState).where(UserState.user_id == user_id)
        if for_update:
            # 잠금 후 최신 값으로 갱신 — Refresh identity-map copies with the locked values
            query = query.with_for_update().execution_options(populate_existing=True)
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def create_user_state(
        self,
        db: AsyncSession,
        user_id: UUID,
        initial_state: AttendanceState,
        now: datetime,
    ) -> UserState:
        """사용자 상태 행을 생성합니다 (동시 생성 시 기존 행 유지).

        Create the user's state row. Concurrent creators do not fail: on
        backends supporting ON CONFLICT the losing insert is a no-op and the
        existing row is returned, locked.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 사용자 UUID (User UUID)
            initial_state: 초기 상태 (Initial state)
            now: 생성 시각 (Creation time, used as last_updated)

        Returns:
            UserState: 생성되었거나 이미 존재하던 상태 행 (Created or pre-existing row)
        """
        insert_fn = _UPSERT_INSERTS.get(db.get_bind().dialect.name)
        if insert_fn is None:
            return await self.create(
                db,
                {
                    "user_id": user_id,
                    "current_state": initial_state.value,
                    "last_updated": now,
                },
            )

        stmt = (
            insert_fn(UserState)
            .values(
                id=uuid.uuid4(),
                user_id=user_id,
                current_state=initial_state.value,
                last_updated=now,
            )
            .on_conflict_do_nothing(index_elements=["user_id"])
        )
        await db.execute(stmt)
        locked = await db.execute(
            select(UserState)
            .where(UserState.user_id == user_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return locked.scalar_one()

    async def get_or_create_locked(
        self,
        db: AsyncSession,
        user_id: UUID,
        now: datetime,
    ) -> UserState:
        """상태 행을 잠금 조회하고, 없으면 생성합니다.

        Lock and return the user's state row, creating it lazily.
        """
        state: UserState | None = await self.get_user_state(db, user_id, for_update=True)
        if state is None:
            state = await self.create_user_state(db, user_id, AttendanceState.NOT_CHECKED_IN, now)
        return state

    async def update_user_state(
        self,
        db: AsyncSession,
        state: UserState,
        new_state: AttendanceState,
        last_updated: datetime,
    ) -> UserState:
        """상태와 마지막 갱신 시각을 기록합니다.

        Write the new state. ``last_updated`` never moves backwards.
        """
        if state.last_updated is not None and state.last_updated > last_updated:
            last_updated = state.last_updated
        return await self.apply(
            db,
            state,
            {"current_state": new_state.value, "last_updated": last_updated},
        )


class AttendanceRecordRepository(BaseRepository[AttendanceRecord]):
    """영업일 근태 기록 레포지토리.

    Attendance record repository.

    Extends:
        BaseRepository[AttendanceRecord]
    """

    def __init__(self) -> None:
        super().__init__(AttendanceRecord)

    async def find_record_for_business_day(
        self,
        db: AsyncSession,
        user_id: UUID,
        day_key: datetime,
        for_update: bool = False,
    ) -> AttendanceRecord | None:
        """특정 영업일의 사용자 근태 기록을 조회합니다.

        Retrieve the user's record for the given business-day key.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 사용자 UUID (User UUID)
            day_key: 영업일 키 (Business-day key instant)
            for_update: 행 잠금 여부 (Lock the row)

        Returns:
            AttendanceRecord | None: 근태 기록 또는 None (Record or None)
        """
        query: Select = (
            select(AttendanceRecord)
            .where(AttendanceRecord.user_id == user_id)
            .where(AttendanceRecord.date == day_key)
        )
        if for_update:
            query = query.with_for_update().execution_options(populate_existing=True)
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def create_record(
        self,
        db: AsyncSession,
        user_id: UUID,
        day_key: datetime,
        fields: dict[str, Any],
    ) -> AttendanceRecord:
        """영업일 근태 기록을 생성합니다.

        Create the record for a business day with the given initial fields.
        """
        data: dict[str, Any] = {"user_id": user_id, "date": day_key, "is_absent": False}
        data.update(fields)
        return await self.create(db, data)

    async def update_record(
        self,
        db: AsyncSession,
        record: AttendanceRecord,
        field_changes: dict[str, Any],
    ) -> AttendanceRecord:
        """근태 기록 필드를 변경합니다 — Apply field changes to a record."""
        return await self.apply(db, record, field_changes)

    async def get_user_records(
        self,
        db: AsyncSession,
        user_id: UUID,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[AttendanceRecord], int]:
        """특정 사용자의 근태 기록 목록을 조회합니다.

        Retrieve paginated records of one user, newest business day first.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 사용자 UUID (User UUID)
            date_from: 시작 영업일 키, 포함 (Inclusive lower bound on day key)
            date_to: 종료 영업일 키, 포함 (Inclusive upper bound on day key)
            page: 페이지 번호 (Page number)
            per_page: 페이지당 항목 수 (Items per page)

        Returns:
            tuple[Sequence[AttendanceRecord], int]: (근태 목록, 전체 개수)
        """
        query: Select = select(AttendanceRecord).where(AttendanceRecord.user_id == user_id)
        if date_from is not None:
            query = query.where(AttendanceRecord.date >= date_from)
        if date_to is not None:
            query = query.where(AttendanceRecord.date <= date_to)
        query = query.order_by(AttendanceRecord.date.desc())
        return await self.get_paginated(db, query, page, per_page)

    async def get_records_with_users(
        self,
        db: AsyncSession,
        date_from: datetime,
        date_to: datetime,
        user_id: UUID | None = None,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[Row[Any]], int]:
        """기간 내 전체 사용자 근태 기록을 사용자 이름과 함께 조회합니다.

        Retrieve paginated (record, user name) rows for all users whose
        business-day key lies in [date_from, date_to], newest first.

        Returns:
            tuple[Sequence[Row], int]: ((기록, 이름) 행 목록, 전체 개수)
        """
        query: Select = (
            select(AttendanceRecord, User.name)
            .join(User, User.id == AttendanceRecord.user_id)
            .where(AttendanceRecord.date >= date_from)
            .where(AttendanceRecord.date <= date_to)
        )
        if user_id is not None:
            query = query.where(AttendanceRecord.user_id == user_id)
        query = query.order_by(AttendanceRecord.date.desc(), User.name.asc())

        count_query: Select = select(func.count()).select_from(query.subquery())
        total: int = (await db.execute(count_query)).scalar() or 0

        offset: int = (page - 1) * per_page
        result = await db.execute(query.offset(offset).limit(per_page))
        return result.all(), total


# 싱글턴 인스턴스 — Singleton instances
user_state_repository: UserStateRepository = UserStateRepository()
attendance_record_repository: AttendanceRecordRepository = AttendanceRecordRepository()
