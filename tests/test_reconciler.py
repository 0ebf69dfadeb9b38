"""지난 영업일 상태 조정 테스트.

Stale-state reconciliation tests.
"""

import pytest

from app.core.enums import AttendanceState
from app.core.reconciler import reconcile
from tests.conftest import jst


class TestReconcile:
    """영업일 경계 기준 초기화 판단."""

    @pytest.mark.parametrize(
        "state",
        [
            AttendanceState.CHECKED_IN,
            AttendanceState.ON_BREAK,
            AttendanceState.CHECKED_OUT,
            AttendanceState.ABSENT,
        ],
    )
    def test_state_from_previous_business_day_is_reset(self, state):
        result = reconcile(state, jst(2026, 3, 1, 9, 0), jst(2026, 3, 2, 5, 0))
        assert result.state == AttendanceState.NOT_CHECKED_IN
        assert result.was_reset is True

    def test_same_business_day_after_midnight_is_kept(self):
        result = reconcile(AttendanceState.CHECKED_IN, jst(2026, 3, 1, 22, 0), jst(2026, 3, 2, 3, 59))
        assert result.state == AttendanceState.CHECKED_IN
        assert result.was_reset is False

    def test_reset_exactly_at_start_hour(self):
        result = reconcile(AttendanceState.ON_BREAK, jst(2026, 3, 1, 22, 0), jst(2026, 3, 2, 4, 0))
        assert result.was_reset is True

    def test_not_checked_in_is_never_reset(self):
        result = reconcile(AttendanceState.NOT_CHECKED_IN, jst(2026, 2, 1, 9, 0), jst(2026, 3, 2, 9, 0))
        assert result.state == AttendanceState.NOT_CHECKED_IN
        assert result.was_reset is False

    def test_several_days_later(self):
        result = reconcile(AttendanceState.CHECKED_OUT, jst(2026, 3, 1, 18, 0), jst(2026, 3, 9, 12, 0))
        assert result.was_reset is True
