"""근태 관련 Pydantic 요청/응답 스키마 정의.

Attendance-related Pydantic request/response schema definitions.
Covers the current-state view, action results, and record listings.
"""

from datetime import date, datetime

from pydantic import BaseModel


class AttendanceRecordResponse(BaseModel):
    """근태 기록 응답 스키마.

    Attendance record response schema with computed durations.

    Attributes:
        id: 근태 기록 UUID (Record identifier)
        user_id: 사용자 UUID (Owner)
        user_name: 사용자 이름 (Owner name, admin listings only)
        date: 영업일 키 (Business-day key instant)
        business_date: 영업일 날짜 (Business date)
        check_in: 출근 시각 (Check-in time)
        break_start: 휴식 시작 시각 (Break start)
        break_end: 휴식 종료 시각 (Break end)
        check_out: 퇴근 시각 (Check-out time)
        is_absent: 결근 여부 (Absence flag)
        break_minutes: 휴식 시간(분) (Break length in minutes)
        work_hours: 순 근무 시간 (Net work hours)
    """

    id: str
    user_id: str
    user_name: str | None = None  # 사용자 이름 — 관리자 목록에서만 (Admin listings only)
    date: datetime  # 영업일 키 — 영업일 현지 00:00 (Local 00:00 of the business date)
    business_date: date
    check_in: datetime | None
    break_start: datetime | None
    break_end: datetime | None
    check_out: datetime | None
    is_absent: bool
    break_minutes: int | None = None  # 휴식 종료 전이면 None (None until the break is closed)
    work_hours: float | None = None  # 퇴근 전이면 None (None until checked out)
    created_at: datetime
    updated_at: datetime


class AttendanceStateResponse(BaseModel):
    """근태 상태 응답 스키마.

    Returned by the state query and by every accepted action.

    Attributes:
        state: 현재 상태 (not_checked_in | checked_in | on_break | checked_out | absent)
        record: 오늘의 근태 기록 (Today's record, nullable)
        message: 결과 메시지 (Action message; empty for state queries)
        allowed_actions: 가능한 동작 목록 (Actions legal from the current state)
        was_reset: 새 영업일로 상태가 초기화되었는지 (True when this call reset a stale state)
    """

    state: str
    record: AttendanceRecordResponse | None = None
    message: str = ""
    allowed_actions: list[str] = []
    was_reset: bool = False
