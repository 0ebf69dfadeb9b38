"""근태 도메인 열거형 정의.

Attendance domain enumerations.
Values are the lowercase strings persisted in the database and returned
by the API.
"""

from enum import Enum


class AttendanceState(str, Enum):
    """사용자의 현재 근태 단계 — The user's current attendance phase."""

    NOT_CHECKED_IN = "not_checked_in"  # 영업일 초기 상태 (Initial state of every business day)
    CHECKED_IN = "checked_in"
    ON_BREAK = "on_break"
    CHECKED_OUT = "checked_out"
    ABSENT = "absent"  # 당일 종료 상태 (Terminal for the business day)


class AttendanceAction(str, Enum):
    """근태 동작 — Attendance actions a user can request."""

    CHECK_IN = "check_in"
    START_BREAK = "start_break"
    END_BREAK = "end_break"
    CHECK_OUT = "check_out"
    RECHECK_IN = "recheck_in"
    MARK_ABSENT = "mark_absent"


class EditableField(str, Enum):
    """수정 요청 대상 필드 — Record fields an edit request may amend."""

    CHECK_IN = "check_in"
    CHECK_OUT = "check_out"
    BREAK_START = "break_start"
    BREAK_END = "break_end"

    @classmethod
    def parse(cls, value: str) -> "EditableField | None":
        """snake_case 또는 camelCase 필드명을 해석합니다.

        Resolve a field name given as snake_case ("check_in") or
        camelCase ("checkIn"). Returns None for anything else.
        """
        normalized: str = "".join(
            "_" + ch.lower() if ch.isupper() else ch for ch in value.strip()
        )
        try:
            return cls(normalized)
        except ValueError:
            return None


class EditRequestStatus(str, Enum):
    """수정 요청 상태 — PENDING → APPROVED | REJECTED, exactly once."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
