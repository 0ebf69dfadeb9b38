"""근태 관리 서비스 — 상태 조회, 근태 동작, 근태 기록 조회.

Attendance Service — Orchestrates every attendance action:
lock the user's state row → reconcile a stale state → load today's record
→ plan the transition → persist record and state together.

Domain rejections are returned as DomainError values. Persistence
failures are raised as StoreUnavailableError.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy.exc import DisconnectionError, InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.business_day import (
    BusinessDay,
    business_date_of,
    business_day_for_date,
    date_of_key,
    resolve_business_day,
)
from app.core.enums import AttendanceAction, AttendanceState
from app.core.errors import DomainError, StoreUnavailableError
from app.core.reconciler import Reconciliation, reconcile
from app.core.state_machine import TransitionPlan, allowed_actions, plan_transition
from app.database import utcnow
from app.models.attendance import AttendanceRecord, UserState
from app.repositories.attendance_repository import attendance_record_repository, user_state_repository
from app.utils import activity_log
from app.utils.activity_log import LogAction

# 동작별 활동 로그 분류 — Activity action per attendance action
_ACTION_LOG: dict[AttendanceAction, LogAction] = {
    AttendanceAction.CHECK_IN: LogAction.CHECK_IN,
    AttendanceAction.START_BREAK: LogAction.START_BREAK,
    AttendanceAction.END_BREAK: LogAction.END_BREAK,
    AttendanceAction.CHECK_OUT: LogAction.CHECK_OUT,
    AttendanceAction.RECHECK_IN: LogAction.RECHECK_IN,
    AttendanceAction.MARK_ABSENT: LogAction.ABSENT,
}


@dataclass(frozen=True)
class AttendanceOutcome:
    """근태 조회/동작 결과.

    Result of a state query or an accepted action.

    Attributes:
        state: 현재 상태 (Authoritative state after the call)
        record: 오늘의 근태 기록 또는 None (Today's record, if any)
        message: 결과 메시지 (Success message; empty for queries)
        allowed_actions: 현재 상태에서 가능한 동작 (Actions legal from state)
        was_reset: 이번 호출에서 새 영업일로 초기화되었는지
                   (Whether this call reset a state left over from an earlier business day)
    """

    state: AttendanceState
    record: AttendanceRecord | None
    message: str = ""
    allowed_actions: list[AttendanceAction] = field(default_factory=list)
    was_reset: bool = False


@contextmanager
def store_errors(user_id: UUID | None = None) -> Iterator[None]:
    """저장소 장애를 StoreUnavailableError로 변환합니다.

    Translate driver-level connectivity failures into StoreUnavailableError.
    The request session is discarded without commit, so nothing half-written
    becomes visible.
    """
    try:
        yield
    except (OperationalError, InterfaceError, DisconnectionError) as exc:
        activity_log.error(
            LogAction.STORE_UNAVAILABLE,
            "저장소에 접근할 수 없습니다 (Attendance store unavailable)",
            user_id,
            error=type(exc).__name__,
        )
        raise StoreUnavailableError() from exc


def break_minutes(record: AttendanceRecord) -> int | None:
    """휴식 시간(분) — Break length in whole minutes, if the break is closed."""
    if record.break_start is None or record.break_end is None:
        return None
    return round((record.break_end - record.break_start).total_seconds() / 60)


def work_hours(record: AttendanceRecord) -> float | None:
    """순 근무 시간 — Hours between check-in and check-out minus the break."""
    if record.check_in is None or record.check_out is None:
        return None
    minutes: float = (record.check_out - record.check_in).total_seconds() / 60
    minutes -= break_minutes(record) or 0
    return round(minutes / 60, 2)


class AttendanceService:
    """근태 관리 서비스.

    Attendance service: state queries, the six attendance actions, and
    record listings for users and administrators.
    """

    # === 상태 조정 (Reconciliation) ===

    async def _reconciled_state(
        self,
        db: AsyncSession,
        user_state: UserState,
        now: datetime,
    ) -> Reconciliation:
        # 지난 영업일 상태면 초기화 후 저장 — Persist a reset before anything else reads the state
        result: Reconciliation = reconcile(user_state.state, user_state.last_updated, now)
        if result.was_reset:
            previous: AttendanceState = user_state.state
            await user_state_repository.update_user_state(db, user_state, result.state, now)
            activity_log.info(
                LogAction.STATE_RESET,
                "새 영업일로 상태를 초기화했습니다 (State reset for new business day)",
                user_state.user_id,
                previous_state=previous.value,
            )
        return result

    # === 상태 조회 (State Query) ===

    async def get_state(
        self,
        db: AsyncSession,
        user_id: UUID,
        now: datetime | None = None,
    ) -> AttendanceOutcome:
        """현재 근태 상태와 오늘의 기록을 조회합니다.

        Return the user's reconciled state and today's record. Creates the
        state row on first use and persists a stale-state reset.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 사용자 UUID (User UUID)
            now: 기준 시각, 기본값 현재 (Reference time, default: now)

        Returns:
            AttendanceOutcome: 상태, 오늘 기록, 가능한 동작, 초기화 여부
                (State, record, allowed actions, and whether a reset happened)

        Raises:
            StoreUnavailableError: 저장소 장애 시 (When the store is unreachable)
        """
        now = now or utcnow()
        with store_errors(user_id):
            user_state: UserState = await user_state_repository.get_or_create_locked(db, user_id, now)
            reconciled: Reconciliation = await self._reconciled_state(db, user_state, now)
            state: AttendanceState = reconciled.state
            day: BusinessDay = resolve_business_day(now)
            record: AttendanceRecord | None = await attendance_record_repository.find_record_for_business_day(
                db, user_id, day.key
            )
        return AttendanceOutcome(
            state=state,
            record=record,
            allowed_actions=allowed_actions(state),
            was_reset=reconciled.was_reset,
        )

    # === 근태 동작 (Attendance Actions) ===

    async def perform(
        self,
        db: AsyncSession,
        user_id: UUID,
        action: AttendanceAction,
        now: datetime | None = None,
    ) -> AttendanceOutcome | DomainError:
        """근태 동작을 검증하고 적용합니다.

        Validate and apply one attendance action. The user's state row stays
        locked for the rest of the transaction, so concurrent actions for the
        same user are serialized.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 사용자 UUID (User UUID)
            action: 요청 동작 (Requested action)
            now: 동작 시각, 기본값 현재 (Action time, default: now)

        Returns:
            AttendanceOutcome | DomainError: 적용 결과 또는 거부 사유
                (Applied outcome, or a rejection carrying the current state)

        Raises:
            StoreUnavailableError: 저장소 장애 시 (When the store is unreachable)
        """
        now = now or utcnow()
        with store_errors(user_id):
            user_state: UserState = await user_state_repository.get_or_create_locked(db, user_id, now)
            reconciled: Reconciliation = await self._reconciled_state(db, user_state, now)
            state: AttendanceState = reconciled.state

            day: BusinessDay = resolve_business_day(now)
            record: AttendanceRecord | None = await attendance_record_repository.find_record_for_business_day(
                db, user_id, day.key, for_update=True
            )

            plan: TransitionPlan | DomainError = plan_transition(state, action, record, now)
            if isinstance(plan, DomainError):
                activity_log.warn(
                    LogAction.TRANSITION_REJECTED,
                    plan.message,
                    user_id,
                    requested_action=action.value,
                    current_state=state.value,
                    code=plan.kind.value,
                )
                return plan

            if plan.create_record:
                record = await attendance_record_repository.create_record(
                    db, user_id, day.key, plan.record_changes
                )
            elif plan.record_changes:
                record = await attendance_record_repository.update_record(db, record, plan.record_changes)

            await user_state_repository.update_user_state(db, user_state, plan.next_state, now)

        activity_log.info(
            _ACTION_LOG[action],
            plan.message,
            user_id,
            previous_state=plan.previous_state.value,
            next_state=plan.next_state.value,
            business_date=day.business_date.isoformat(),
        )
        return AttendanceOutcome(
            state=plan.next_state,
            record=record,
            message=plan.message,
            allowed_actions=allowed_actions(plan.next_state),
            was_reset=reconciled.was_reset,
        )

    async def check_in(
        self, db: AsyncSession, user_id: UUID, now: datetime | None = None
    ) -> AttendanceOutcome | DomainError:
        """출근 — Check in."""
        return await self.perform(db, user_id, AttendanceAction.CHECK_IN, now)

    async def start_break(
        self, db: AsyncSession, user_id: UUID, now: datetime | None = None
    ) -> AttendanceOutcome | DomainError:
        """휴식 시작 — Start a break."""
        return await self.perform(db, user_id, AttendanceAction.START_BREAK, now)

    async def end_break(
        self, db: AsyncSession, user_id: UUID, now: datetime | None = None
    ) -> AttendanceOutcome | DomainError:
        """휴식 종료 — End the break."""
        return await self.perform(db, user_id, AttendanceAction.END_BREAK, now)

    async def check_out(
        self, db: AsyncSession, user_id: UUID, now: datetime | None = None
    ) -> AttendanceOutcome | DomainError:
        """퇴근 — Check out."""
        return await self.perform(db, user_id, AttendanceAction.CHECK_OUT, now)

    async def recheck_in(
        self, db: AsyncSession, user_id: UUID, now: datetime | None = None
    ) -> AttendanceOutcome | DomainError:
        """재출근 — Check in again after checking out."""
        return await self.perform(db, user_id, AttendanceAction.RECHECK_IN, now)

    async def mark_absent(
        self, db: AsyncSession, user_id: UUID, now: datetime | None = None
    ) -> AttendanceOutcome | DomainError:
        """결근 처리 — Mark today as absent."""
        return await self.perform(db, user_id, AttendanceAction.MARK_ABSENT, now)

    # === 기록 조회 (Record Listing) ===

    async def get_my_records(
        self,
        db: AsyncSession,
        user_id: UUID,
        date_from: date | None = None,
        date_to: date | None = None,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[AttendanceRecord], int]:
        """내 근태 기록 목록을 조회합니다.

        List the user's own records, newest business day first.
        Bounds are business dates, both inclusive.
        """
        key_from: datetime | None = business_day_for_date(date_from).key if date_from else None
        key_to: datetime | None = business_day_for_date(date_to).key if date_to else None
        with store_errors(user_id):
            return await attendance_record_repository.get_user_records(
                db, user_id, key_from, key_to, page, per_page
            )

    async def get_records(
        self,
        db: AsyncSession,
        date_from: date | None = None,
        date_to: date | None = None,
        user_id: UUID | None = None,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[list[dict[str, Any]], int]:
        """관리자용 기간별 근태 기록 목록을 조회합니다.

        List all users' records whose business date lies in
        [date_from, date_to]. Both bounds default to the current business
        date; a reversed range is swapped.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            date_from: 시작 영업일 (First business date, inclusive)
            date_to: 종료 영업일 (Last business date, inclusive)
            user_id: 사용자 필터, 선택 (Optional user filter)
            page: 페이지 번호 (Page number)
            per_page: 페이지당 항목 수 (Items per page)

        Returns:
            tuple[list[dict], int]: (사용자 이름과 근무 시간이 포함된 응답 목록, 전체 개수)
                ((Response dicts with user name and durations, total count))
        """
        today: date = business_date_of(utcnow())
        first: date = date_from or today
        last: date = date_to or first
        if first > last:
            first, last = last, first

        with store_errors():
            rows, total = await attendance_record_repository.get_records_with_users(
                db,
                business_day_for_date(first).key,
                business_day_for_date(last).key,
                user_id,
                page,
                per_page,
            )
        return [self.build_response(record, user_name) for record, user_name in rows], total

    # === 응답 구성 (Response Building) ===

    def build_response(
        self,
        record: AttendanceRecord,
        user_name: str | None = None,
    ) -> dict[str, Any]:
        """근태 기록 응답 딕셔너리를 구성합니다.

        Build the record response dict, including the business date and the
        break / work durations.
        """
        return {
            "id": str(record.id),
            "user_id": str(record.user_id),
            "user_name": user_name,
            "date": record.date,
            "business_date": date_of_key(record.date),
            "check_in": record.check_in,
            "break_start": record.break_start,
            "break_end": record.break_end,
            "check_out": record.check_out,
            "is_absent": record.is_absent,
            "break_minutes": break_minutes(record),
            "work_hours": work_hours(record),
            "created_at": record.created_at,
            "updated_at": record.updated_at,
        }

    def build_state_response(self, outcome: AttendanceOutcome) -> dict[str, Any]:
        """상태 응답 딕셔너리 — State response dict: state, record, message, allowed actions, reset flag."""
        return {
            "state": outcome.state.value,
            "record": self.build_response(outcome.record) if outcome.record is not None else None,
            "message": outcome.message,
            "allowed_actions": [action.value for action in outcome.allowed_actions],
            "was_reset": outcome.was_reset,
        }


# 싱글턴 인스턴스 — Singleton instance
attendance_service: AttendanceService = AttendanceService()
