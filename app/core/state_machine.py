"""근태 상태 머신 — 단일 전이 테이블 기반.

Attendance state machine driven by a single transition table.

    not_checked_in --check_in--> checked_in --start_break--> on_break
    on_break --end_break--> checked_in --check_out--> checked_out
    checked_out --recheck_in--> checked_in
    not_checked_in --mark_absent--> absent

Every (state, action) pair missing from TRANSITIONS is rejected with an
INVALID_TRANSITION error and no mutation. plan_transition() is pure: it
decides what should change, and the service applies the plan to the
record and the user state in one transaction.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Protocol

from app.core.enums import AttendanceAction, AttendanceState
from app.core.errors import DomainError, invalid_transition, not_found

RecordChanges = dict[str, Any]


class RecordFields(Protocol):
    """상태 머신이 읽는 근태 기록 필드 — Record fields the state machine reads."""

    check_in: datetime | None
    break_start: datetime | None
    break_end: datetime | None
    check_out: datetime | None
    is_absent: bool


@dataclass(frozen=True)
class Transition:
    """전이 테이블 항목.

    One row of the transition table.

    Attributes:
        next_state: 전이 후 상태 (State after the transition)
        effect: 기록 변경 계산 함수 (Computes record field changes)
        message: 성공 메시지 (Success message)
        requires_record: 오늘 기록이 있어야 하는지 (Whether today's record must exist)
        guard: 추가 조건, 거부 사유 문자열 또는 None 반환
               (Extra guard returning a rejection message, or None to allow)
    """

    next_state: AttendanceState
    effect: Callable[[RecordFields | None, datetime], RecordChanges]
    message: str
    requires_record: bool = True
    guard: Callable[[RecordFields | None], str | None] | None = None


@dataclass(frozen=True)
class TransitionPlan:
    """승인된 전이 계획.

    An accepted transition: what to write and where to move.

    Attributes:
        action: 요청된 동작 (Requested action)
        previous_state: 전이 전 상태 (State before)
        next_state: 전이 후 상태 (State after)
        create_record: 새 기록 생성 여부 (Whether today's record must be created)
        record_changes: 기록에 적용할 필드 변경 (Field changes for the record)
        message: 성공 메시지 (Success message)
    """

    action: AttendanceAction
    previous_state: AttendanceState
    next_state: AttendanceState
    create_record: bool
    record_changes: RecordChanges = field(default_factory=dict)
    message: str = ""


# === 기록 변경 함수 (Record effects) ===

def _check_in_effect(record: RecordFields | None, now: datetime) -> RecordChanges:
    return {"check_in": now, "is_absent": False}


def _absent_effect(record: RecordFields | None, now: datetime) -> RecordChanges:
    return {"is_absent": True}


def _start_break_effect(record: RecordFields | None, now: datetime) -> RecordChanges:
    changes: RecordChanges = {"break_start": now, "break_end": None}
    # 출근 시각 누락 시 보정 — Backfill a missing check-in first
    if record is None or record.check_in is None:
        changes["check_in"] = now
    return changes


def _end_break_effect(record: RecordFields | None, now: datetime) -> RecordChanges:
    return {"break_end": now}


def _check_out_effect(record: RecordFields | None, now: datetime) -> RecordChanges:
    changes: RecordChanges = {"check_out": now}
    if record is None or record.check_in is None:
        changes["check_in"] = now
    return changes


def _no_effect(record: RecordFields | None, now: datetime) -> RecordChanges:
    # 재출근은 출근 시각을 다시 찍지 않음 — Re-entry does not re-stamp check_in
    return {}


def _absence_guard(record: RecordFields | None) -> str | None:
    if record is None:
        return None
    if any(
        value is not None
        for value in (record.check_in, record.break_start, record.break_end, record.check_out)
    ):
        return "이미 근태 시각이 기록되어 결근 처리할 수 없습니다 (Times already recorded; cannot mark absent)"
    return None


# 전이 테이블 — The single source of truth for legal transitions
TRANSITIONS: dict[tuple[AttendanceState, AttendanceAction], Transition] = {
    (AttendanceState.NOT_CHECKED_IN, AttendanceAction.CHECK_IN): Transition(
        next_state=AttendanceState.CHECKED_IN,
        effect=_check_in_effect,
        message="출근했습니다 (Checked in)",
        requires_record=False,
    ),
    (AttendanceState.NOT_CHECKED_IN, AttendanceAction.MARK_ABSENT): Transition(
        next_state=AttendanceState.ABSENT,
        effect=_absent_effect,
        message="결근으로 기록했습니다 (Marked absent)",
        requires_record=False,
        guard=_absence_guard,
    ),
    (AttendanceState.CHECKED_IN, AttendanceAction.START_BREAK): Transition(
        next_state=AttendanceState.ON_BREAK,
        effect=_start_break_effect,
        message="휴식을 시작했습니다 (Break started)",
    ),
    (AttendanceState.ON_BREAK, AttendanceAction.END_BREAK): Transition(
        next_state=AttendanceState.CHECKED_IN,
        effect=_end_break_effect,
        message="휴식을 종료했습니다 (Break ended)",
    ),
    (AttendanceState.CHECKED_IN, AttendanceAction.CHECK_OUT): Transition(
        next_state=AttendanceState.CHECKED_OUT,
        effect=_check_out_effect,
        message="퇴근했습니다 (Checked out)",
    ),
    (AttendanceState.CHECKED_OUT, AttendanceAction.RECHECK_IN): Transition(
        next_state=AttendanceState.CHECKED_IN,
        effect=_no_effect,
        message="다시 출근했습니다 (Checked in again)",
    ),
}

# 동작별 거부 메시지 — Rejection message per action
_REJECTION_MESSAGES: dict[AttendanceAction, str] = {
    AttendanceAction.CHECK_IN: "미출근 상태에서만 출근할 수 있습니다 (Check-in is only allowed before checking in)",
    AttendanceAction.START_BREAK: "출근 상태에서만 휴식을 시작할 수 있습니다 (Break can only start while checked in)",
    AttendanceAction.END_BREAK: "휴식 중에만 휴식을 종료할 수 있습니다 (Break can only end while on break)",
    AttendanceAction.CHECK_OUT: "출근 상태에서만 퇴근할 수 있습니다 (Check-out is only allowed while checked in)",
    AttendanceAction.RECHECK_IN: "퇴근 상태에서만 재출근할 수 있습니다 (Re-check-in is only allowed after checking out)",
    AttendanceAction.MARK_ABSENT: "출근 등록 후에는 결근 처리할 수 없습니다 (Cannot mark absent after checking in)",
}

NO_RECORD_MESSAGE: str = "오늘의 근태 기록이 없습니다 (No attendance record for today)"


def allowed_actions(state: AttendanceState) -> list[AttendanceAction]:
    """현재 상태에서 가능한 동작 목록 — Actions legal from the given state."""
    return [action for (from_state, action) in TRANSITIONS if from_state == state]


def plan_transition(
    state: AttendanceState,
    action: AttendanceAction,
    record: RecordFields | None,
    now: datetime,
) -> TransitionPlan | DomainError:
    """상태 전이를 검증하고 계획을 계산합니다.

    Validate a requested action against the current state and today's
    record, and compute the resulting state and record mutation.

    Args:
        state: 현재 (조정 완료된) 상태 (Current, already reconciled state)
        action: 요청된 동작 (Requested action)
        record: 오늘의 근태 기록 또는 None (Today's record, or None)
        now: 현재 시각 (Time of the action)

    Returns:
        TransitionPlan | DomainError: 전이 계획 또는 거부 사유
            (Plan to apply, or a rejection carrying the current state)
    """
    transition: Transition | None = TRANSITIONS.get((state, action))
    if transition is None:
        return invalid_transition(_REJECTION_MESSAGES[action], state)

    if transition.requires_record and record is None:
        return not_found(NO_RECORD_MESSAGE, state)

    if transition.guard is not None:
        rejection: str | None = transition.guard(record)
        if rejection is not None:
            return invalid_transition(rejection, state)

    return TransitionPlan(
        action=action,
        previous_state=state,
        next_state=transition.next_state,
        create_record=record is None,
        record_changes=transition.effect(record, now),
        message=transition.message,
    )
