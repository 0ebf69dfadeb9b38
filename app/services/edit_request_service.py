"""근태 수정 요청 서비스 — 제출, 승인/반려, 목록 조회.

Edit Request Service — Users propose a corrected time for one field of one
of their records; an administrator approves or rejects it exactly once.
Approval writes the new value into the record in the same transaction as
the status change.
"""

import re
from datetime import date, datetime, time, timezone
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.business_day import BusinessDay, business_day_for_date, combine_business_time, date_of_key, get_zone
from app.core.enums import EditableField, EditRequestStatus
from app.core.errors import DomainError, already_decided, forbidden, not_found, validation_error
from app.database import utcnow
from app.models.attendance import AttendanceRecord, TimeEditRequest
from app.models.user import User
from app.repositories.attendance_repository import attendance_record_repository
from app.repositories.edit_request_repository import edit_request_repository
from app.services.attendance_service import store_errors
from app.utils import activity_log
from app.utils.activity_log import LogAction

# HH:MM 또는 HH:MM:SS — Wall-clock time input
_TIME_PATTERN: re.Pattern[str] = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")

# 수정 필드별 선행 필드 — Field that must already be set before editing the key
_PAIRED_FIELD: dict[EditableField, EditableField] = {
    EditableField.CHECK_OUT: EditableField.CHECK_IN,
    EditableField.BREAK_END: EditableField.BREAK_START,
}

RECORD_NOT_FOUND_MESSAGE: str = "근태 기록을 찾을 수 없습니다 (Attendance record not found)"
REQUEST_NOT_FOUND_MESSAGE: str = "수정 요청을 찾을 수 없습니다 (Edit request not found)"


def parse_new_value(value: str, business_date: date) -> datetime | None:
    """요청 시각을 해석합니다.

    Interpret a requested value for a record of the given business date.

    ``HH:MM`` / ``HH:MM:SS`` is a wall-clock time on that business day
    (before the start hour means the next calendar date). Anything else must
    be an ISO-8601 datetime inside the business day; naive values are read
    in the business timezone.

    Returns:
        datetime | None: UTC 시각, 해석 불가 시 None (Aware UTC datetime, or None)
    """
    text: str = value.strip()
    match = _TIME_PATTERN.match(text)
    if match:
        hour, minute, second = int(match.group(1)), int(match.group(2)), int(match.group(3) or 0)
        if hour > 23 or minute > 59 or second > 59:
            return None
        return combine_business_time(business_date, time(hour, minute, second))

    try:
        parsed: datetime = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=get_zone())

    day: BusinessDay = business_day_for_date(business_date)
    if not day.contains(parsed):
        return None
    return parsed.astimezone(timezone.utc)


class EditRequestService:
    """근태 수정 요청 서비스.

    Edit request workflow: submit, decide, and listings.
    """

    async def submit(
        self,
        db: AsyncSession,
        user_id: UUID,
        record_id: UUID,
        field: str,
        new_value: str,
        reason: str,
    ) -> TimeEditRequest | DomainError:
        """근태 시각 수정 요청을 제출합니다.

        Submit a pending edit request for one field of the user's record.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 요청자 UUID (Requesting user, must own the record)
            record_id: 대상 근태 기록 UUID (Target record)
            field: 수정 필드 — checkIn | checkOut | breakStart | breakEnd (snake_case도 허용)
            new_value: 요청 시각 — HH:MM, HH:MM:SS 또는 ISO 8601 (Requested time)
            reason: 수정 사유 (Reason, required)

        Returns:
            TimeEditRequest | DomainError: 생성된 요청 또는 오류
                (Created pending request, or VALIDATION / NOT_FOUND)
        """
        editable: EditableField | None = EditableField.parse(field)
        if editable is None:
            return validation_error(
                f"수정할 수 없는 필드입니다: {field} (Invalid field. Use: checkIn, checkOut, breakStart, breakEnd)"
            )
        if not reason or not reason.strip():
            return validation_error("수정 사유를 입력해주세요 (Reason is required)")

        with store_errors(user_id):
            record: AttendanceRecord | None = await attendance_record_repository.get_by_id(db, record_id)
            if record is None or record.user_id != user_id:
                return not_found(RECORD_NOT_FOUND_MESSAGE)

            if record.is_absent:
                return validation_error(
                    "결근 기록은 수정 요청할 수 없습니다 (Absence records cannot be edited)"
                )
            paired: EditableField | None = _PAIRED_FIELD.get(editable)
            if paired is not None and getattr(record, paired.value) is None:
                return validation_error(
                    f"{paired.value} 기록이 없어 수정할 수 없습니다 "
                    f"({paired.value} is not recorded; cannot edit {editable.value})"
                )

            parsed: datetime | None = parse_new_value(new_value, date_of_key(record.date))
            if parsed is None:
                return validation_error(
                    f"유효하지 않은 시각입니다: {new_value} "
                    "(Invalid time. Use HH:MM or an ISO datetime within the record's business day)"
                )

            edit_request: TimeEditRequest = await edit_request_repository.create_edit_request(
                db,
                {
                    "user_id": user_id,
                    "record_id": record.id,
                    "field": editable.value,
                    "old_value": getattr(record, editable.value),
                    "new_value": parsed,
                    "reason": reason.strip(),
                    "status": EditRequestStatus.PENDING.value,
                },
            )

        activity_log.info(
            LogAction.EDIT_REQUEST,
            "수정 요청을 제출했습니다 (Edit request submitted)",
            user_id,
            request_id=edit_request.id,
            record_id=record.id,
            field=editable.value,
            new_value=parsed,
        )
        return edit_request

    async def decide(
        self,
        db: AsyncSession,
        request_id: UUID,
        actor: User,
        approve: bool,
        now: datetime | None = None,
    ) -> TimeEditRequest | DomainError:
        """수정 요청을 승인하거나 반려합니다.

        Approve or reject a pending request. Approval writes the new value
        into the target record; both rows are locked for the transaction.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            request_id: 수정 요청 UUID (Edit request UUID)
            actor: 처리하는 사용자 (Deciding user, must be an admin)
            approve: 승인 여부 (True to approve, False to reject)
            now: 처리 시각 (Decision time, default: now)

        Returns:
            TimeEditRequest | DomainError: 처리된 요청 또는 오류
                (Decided request, or FORBIDDEN / NOT_FOUND / ALREADY_DECIDED)
        """
        if not actor.is_admin:
            return forbidden("관리자만 처리할 수 있습니다 (Admin privileges required)")

        now = now or utcnow()
        with store_errors(actor.id):
            edit_request: TimeEditRequest | None = await edit_request_repository.get_edit_request(
                db, request_id, for_update=True
            )
            if edit_request is None:
                return not_found(REQUEST_NOT_FOUND_MESSAGE)
            if edit_request.status != EditRequestStatus.PENDING.value:
                return already_decided(
                    f"이미 처리된 요청입니다 (Edit request already {edit_request.status})"
                )

            if approve:
                record: AttendanceRecord | None = await attendance_record_repository.get_by_id(
                    db, edit_request.record_id, for_update=True
                )
                if record is None:
                    return not_found(RECORD_NOT_FOUND_MESSAGE)
                await attendance_record_repository.update_record(
                    db, record, {edit_request.field: edit_request.new_value}
                )

            status: EditRequestStatus = EditRequestStatus.APPROVED if approve else EditRequestStatus.REJECTED
            edit_request = await edit_request_repository.update_edit_request_status(
                db, edit_request, status, actor.id, now
            )

        activity_log.info(
            LogAction.EDIT_REQUEST_APPROVE if approve else LogAction.EDIT_REQUEST_REJECT,
            "수정 요청을 승인했습니다 (Edit request approved)"
            if approve
            else "수정 요청을 반려했습니다 (Edit request rejected)",
            actor.id,
            request_id=edit_request.id,
            requester_id=edit_request.user_id,
            field=edit_request.field,
        )
        return edit_request

    async def list_for_user(
        self,
        db: AsyncSession,
        user_id: UUID,
        record_id: UUID | None = None,
    ) -> Sequence[TimeEditRequest]:
        """내 수정 요청 목록 — The user's requests, newest first."""
        with store_errors(user_id):
            return await edit_request_repository.get_user_requests(db, user_id, record_id)

    async def list_requests(
        self,
        db: AsyncSession,
        status: str | None = None,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[list[dict[str, Any]], int] | DomainError:
        """관리자용 수정 요청 목록을 조회합니다.

        List requests for administrators, filtered by status. ``None`` or
        ``"all"`` returns every status with pending requests first.
        """
        status_filter: EditRequestStatus | None = None
        if status is not None and status != "all":
            try:
                status_filter = EditRequestStatus(status)
            except ValueError:
                return validation_error(
                    f"유효하지 않은 상태입니다: {status} (Invalid status. Use: pending, approved, rejected, all)"
                )

        with store_errors():
            rows, total = await edit_request_repository.get_requests_with_users(
                db, status_filter, page, per_page
            )
        return [self.build_response(req, user_name) for req, user_name in rows], total

    def build_response(
        self,
        edit_request: TimeEditRequest,
        user_name: str | None = None,
    ) -> dict[str, Any]:
        """수정 요청 응답 딕셔너리를 구성합니다 — Build the edit request response dict."""
        return {
            "id": str(edit_request.id),
            "user_id": str(edit_request.user_id),
            "user_name": user_name,
            "record_id": str(edit_request.record_id),
            "field": edit_request.field,
            "old_value": edit_request.old_value,
            "new_value": edit_request.new_value,
            "reason": edit_request.reason,
            "status": edit_request.status,
            "decided_by": str(edit_request.decided_by) if edit_request.decided_by else None,
            "created_at": edit_request.created_at,
            "updated_at": edit_request.updated_at,
        }


# 싱글턴 인스턴스 — Singleton instance
edit_request_service: EditRequestService = EditRequestService()
