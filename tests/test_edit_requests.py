"""근태 수정 요청 테스트 — 제출 검증, 승인/반려, 목록.

Edit request tests — Submission checks, single decision, and listings.
"""

from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.enums import EditRequestStatus
from app.core.errors import DomainError, ErrorKind
from app.models.attendance import TimeEditRequest
from app.models.user import User
from app.services.attendance_service import attendance_service
from app.services.edit_request_service import edit_request_service, parse_new_value
from tests.conftest import jst


async def worked_day(db: AsyncSession, user: User):
    await attendance_service.check_in(db, user.id, jst(2026, 3, 1, 9, 0))
    outcome = await attendance_service.check_out(db, user.id, jst(2026, 3, 1, 18, 0))
    return outcome.record


class TestParseNewValue:
    """요청 시각 해석."""

    def test_wall_clock_time(self):
        assert parse_new_value("09:30", date(2026, 3, 1)) == jst(2026, 3, 1, 9, 30)

    def test_wall_clock_time_with_seconds(self):
        assert parse_new_value("18:00:15", date(2026, 3, 1)) == jst(2026, 3, 1, 18, 0, 15)

    def test_early_morning_is_next_calendar_date(self):
        assert parse_new_value("02:00", date(2026, 3, 1)) == jst(2026, 3, 2, 2, 0)

    def test_iso_inside_business_day(self):
        assert parse_new_value("2026-03-01T10:15:00+09:00", date(2026, 3, 1)) == jst(2026, 3, 1, 10, 15)

    def test_naive_iso_is_business_timezone(self):
        assert parse_new_value("2026-03-02T01:00:00", date(2026, 3, 1)) == jst(2026, 3, 2, 1, 0)

    def test_iso_outside_business_day(self):
        assert parse_new_value("2026-03-02T05:00:00+09:00", date(2026, 3, 1)) is None

    def test_invalid_values(self):
        assert parse_new_value("25:00", date(2026, 3, 1)) is None
        assert parse_new_value("noon", date(2026, 3, 1)) is None


class TestSubmit:
    """수정 요청 제출."""

    async def test_submit_snapshots_old_value(self, db: AsyncSession, staff_user: User):
        """제출 시 현재 값이 old_value로 저장된다."""
        record = await worked_day(db, staff_user)
        result = await edit_request_service.submit(
            db, staff_user.id, record.id, "checkIn", "08:45", "지각 처리 오류"
        )
        assert isinstance(result, TimeEditRequest)
        assert result.status == EditRequestStatus.PENDING.value
        assert result.field == "check_in"
        assert result.old_value == jst(2026, 3, 1, 9, 0)
        assert result.new_value == jst(2026, 3, 1, 8, 45)

    async def test_invalid_field(self, db: AsyncSession, staff_user: User):
        record = await worked_day(db, staff_user)
        result = await edit_request_service.submit(db, staff_user.id, record.id, "lunch", "12:00", "reason")
        assert isinstance(result, DomainError)
        assert result.kind == ErrorKind.VALIDATION

    async def test_blank_reason(self, db: AsyncSession, staff_user: User):
        record = await worked_day(db, staff_user)
        result = await edit_request_service.submit(db, staff_user.id, record.id, "check_in", "08:45", "   ")
        assert result.kind == ErrorKind.VALIDATION

    async def test_unparseable_value(self, db: AsyncSession, staff_user: User):
        record = await worked_day(db, staff_user)
        result = await edit_request_service.submit(db, staff_user.id, record.id, "check_in", "soon", "reason")
        assert result.kind == ErrorKind.VALIDATION

    async def test_other_users_record(self, db: AsyncSession, staff_user: User, other_user: User):
        """다른 사용자의 기록은 NOT_FOUND."""
        record = await worked_day(db, staff_user)
        result = await edit_request_service.submit(db, other_user.id, record.id, "check_in", "08:45", "reason")
        assert result.kind == ErrorKind.NOT_FOUND

    async def test_absence_record(self, db: AsyncSession, staff_user: User):
        outcome = await attendance_service.mark_absent(db, staff_user.id, jst(2026, 3, 1, 8, 0))
        result = await edit_request_service.submit(
            db, staff_user.id, outcome.record.id, "check_in", "09:00", "reason"
        )
        assert result.kind == ErrorKind.VALIDATION

    async def test_break_end_without_break_start(self, db: AsyncSession, staff_user: User):
        """휴식 시작이 없으면 휴식 종료 수정 불가."""
        record = await worked_day(db, staff_user)
        result = await edit_request_service.submit(db, staff_user.id, record.id, "breakEnd", "13:00", "reason")
        assert result.kind == ErrorKind.VALIDATION


class TestDecide:
    """승인/반려."""

    async def test_approve_updates_record(self, db: AsyncSession, staff_user: User, admin_user: User):
        """승인하면 기록에 새 값이 반영된다."""
        record = await worked_day(db, staff_user)
        submitted = await edit_request_service.submit(
            db, staff_user.id, record.id, "check_out", "19:30", "야근 누락"
        )

        decided = await edit_request_service.decide(db, submitted.id, admin_user, approve=True)
        assert decided.status == EditRequestStatus.APPROVED.value
        assert decided.decided_by == admin_user.id

        state = await attendance_service.get_state(db, staff_user.id, jst(2026, 3, 1, 20, 0))
        assert state.record.check_out == jst(2026, 3, 1, 19, 30)

    async def test_reject_leaves_record(self, db: AsyncSession, staff_user: User, admin_user: User):
        record = await worked_day(db, staff_user)
        submitted = await edit_request_service.submit(
            db, staff_user.id, record.id, "check_out", "19:30", "야근 누락"
        )

        decided = await edit_request_service.decide(db, submitted.id, admin_user, approve=False)
        assert decided.status == EditRequestStatus.REJECTED.value

        state = await attendance_service.get_state(db, staff_user.id, jst(2026, 3, 1, 20, 0))
        assert state.record.check_out == jst(2026, 3, 1, 18, 0)

    async def test_second_decision_is_rejected(self, db: AsyncSession, staff_user: User, admin_user: User):
        """이미 처리된 요청은 다시 처리할 수 없다."""
        record = await worked_day(db, staff_user)
        submitted = await edit_request_service.submit(
            db, staff_user.id, record.id, "check_in", "08:30", "reason"
        )
        await edit_request_service.decide(db, submitted.id, admin_user, approve=False)

        result = await edit_request_service.decide(db, submitted.id, admin_user, approve=True)
        assert isinstance(result, DomainError)
        assert result.kind == ErrorKind.ALREADY_DECIDED

    async def test_non_admin_forbidden(self, db: AsyncSession, staff_user: User):
        record = await worked_day(db, staff_user)
        submitted = await edit_request_service.submit(
            db, staff_user.id, record.id, "check_in", "08:30", "reason"
        )
        result = await edit_request_service.decide(db, submitted.id, staff_user, approve=True)
        assert result.kind == ErrorKind.FORBIDDEN

    async def test_missing_request(self, db: AsyncSession, admin_user: User, staff_user: User):
        result = await edit_request_service.decide(db, staff_user.id, admin_user, approve=True)
        assert result.kind == ErrorKind.NOT_FOUND


class TestListing:
    """수정 요청 목록."""

    async def test_admin_list_by_status(self, db: AsyncSession, staff_user: User, admin_user: User):
        record = await worked_day(db, staff_user)
        first = await edit_request_service.submit(db, staff_user.id, record.id, "check_in", "08:30", "a")
        await edit_request_service.submit(db, staff_user.id, record.id, "check_out", "18:30", "b")
        await edit_request_service.decide(db, first.id, admin_user, approve=True)

        pending, pending_total = await edit_request_service.list_requests(db, "pending")
        assert pending_total == 1
        assert pending[0]["field"] == "check_out"
        assert pending[0]["user_name"] == "Test Staff"

        everything, total = await edit_request_service.list_requests(db, "all")
        assert total == 2
        assert everything[0]["status"] == "pending"

    async def test_invalid_status(self, db: AsyncSession):
        result = await edit_request_service.list_requests(db, "done")
        assert isinstance(result, DomainError)
        assert result.kind == ErrorKind.VALIDATION

    async def test_list_for_user_by_record(self, db: AsyncSession, staff_user: User):
        record = await worked_day(db, staff_user)
        await edit_request_service.submit(db, staff_user.id, record.id, "check_in", "08:30", "a")
        requests = await edit_request_service.list_for_user(db, staff_user.id, record.id)
        assert len(requests) == 1
