"""지난 영업일 상태 조정 — 새 영업일에 남은 상태를 초기화할지 판단.

Stale-state reconciliation.
A user who checked in yesterday and never checked out must not stay
"checked in" today. On every state read and before every transition the
stored state is compared against the current business day; if it belongs
to an earlier one it is reset to NOT_CHECKED_IN.

This is lazy: a user's state is only reset the next time it is read or
acted on. There is no background sweep.
"""

from dataclasses import dataclass
from datetime import datetime
from zoneinfo import ZoneInfo

from app.core.business_day import business_date_of
from app.core.enums import AttendanceState


@dataclass(frozen=True)
class Reconciliation:
    """조정 결과.

    Attributes:
        state: 유효 상태 (Effective state to act on)
        was_reset: 초기화 여부 (Whether the stored state must be reset and persisted)
    """

    state: AttendanceState
    was_reset: bool


def reconcile(
    current_state: AttendanceState,
    last_updated: datetime,
    now: datetime,
    tz: ZoneInfo | None = None,
    start_hour: int | None = None,
) -> Reconciliation:
    """저장된 상태가 지난 영업일의 것인지 판단합니다.

    Decide whether the stored state belongs to an earlier business day.

    The state is reset only when the business day of ``now`` is strictly
    later than the business day of ``last_updated`` and the stored state is
    not already NOT_CHECKED_IN.

    Args:
        current_state: 저장된 상태 (Stored state)
        last_updated: 저장된 상태의 마지막 갱신 시각 (When the stored state was last written)
        now: 현재 시각 (Current time)
        tz: 영업일 타임존 (Business timezone, default: configured)
        start_hour: 영업일 시작 시각 (Business-day start hour, default: configured)

    Returns:
        Reconciliation: 유효 상태와 초기화 여부 (Effective state and reset flag)
    """
    if current_state == AttendanceState.NOT_CHECKED_IN:
        return Reconciliation(current_state, False)

    today = business_date_of(now, tz, start_hour)
    stored_day = business_date_of(last_updated, tz, start_hour)
    if today > stored_day:
        return Reconciliation(AttendanceState.NOT_CHECKED_IN, True)
    return Reconciliation(current_state, False)
