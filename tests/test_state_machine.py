"""근태 상태 머신 테스트 — 전이 테이블, 거부, 기록 변경.

State machine tests — Transition table totality, rejections, and record
effects.
"""

from types import SimpleNamespace

import pytest

from app.core.enums import AttendanceAction, AttendanceState
from app.core.errors import DomainError, ErrorKind
from app.core.state_machine import TRANSITIONS, TransitionPlan, allowed_actions, plan_transition
from tests.conftest import jst

NOW = jst(2026, 3, 1, 12, 0)

LEGAL = {
    (AttendanceState.NOT_CHECKED_IN, AttendanceAction.CHECK_IN): AttendanceState.CHECKED_IN,
    (AttendanceState.NOT_CHECKED_IN, AttendanceAction.MARK_ABSENT): AttendanceState.ABSENT,
    (AttendanceState.CHECKED_IN, AttendanceAction.START_BREAK): AttendanceState.ON_BREAK,
    (AttendanceState.ON_BREAK, AttendanceAction.END_BREAK): AttendanceState.CHECKED_IN,
    (AttendanceState.CHECKED_IN, AttendanceAction.CHECK_OUT): AttendanceState.CHECKED_OUT,
    (AttendanceState.CHECKED_OUT, AttendanceAction.RECHECK_IN): AttendanceState.CHECKED_IN,
}


def record(**fields) -> SimpleNamespace:
    values = {
        "check_in": None,
        "break_start": None,
        "break_end": None,
        "check_out": None,
        "is_absent": False,
    }
    values.update(fields)
    return SimpleNamespace(**values)


class TestTransitionTable:
    """전이 테이블 전체성."""

    def test_table_matches_legal_transitions(self):
        assert {key: t.next_state for key, t in TRANSITIONS.items()} == LEGAL

    @pytest.mark.parametrize("state", list(AttendanceState))
    @pytest.mark.parametrize("action", list(AttendanceAction))
    def test_every_pair_is_accepted_or_rejected(self, state, action):
        existing = None if action in (AttendanceAction.CHECK_IN, AttendanceAction.MARK_ABSENT) else record(
            check_in=jst(2026, 3, 1, 9, 0)
        )
        result = plan_transition(state, action, existing, NOW)
        if (state, action) in LEGAL:
            assert isinstance(result, TransitionPlan)
            assert result.next_state == LEGAL[(state, action)]
            assert result.previous_state == state
        else:
            assert isinstance(result, DomainError)
            assert result.kind == ErrorKind.INVALID_TRANSITION
            assert result.current_state == state

    def test_allowed_actions(self):
        assert set(allowed_actions(AttendanceState.CHECKED_IN)) == {
            AttendanceAction.START_BREAK,
            AttendanceAction.CHECK_OUT,
        }
        assert allowed_actions(AttendanceState.ABSENT) == []


class TestRecordEffects:
    """동작별 기록 변경."""

    def test_check_in_creates_record(self):
        plan = plan_transition(AttendanceState.NOT_CHECKED_IN, AttendanceAction.CHECK_IN, None, NOW)
        assert plan.create_record is True
        assert plan.record_changes == {"check_in": NOW, "is_absent": False}

    def test_check_in_updates_existing_empty_record(self):
        plan = plan_transition(AttendanceState.NOT_CHECKED_IN, AttendanceAction.CHECK_IN, record(), NOW)
        assert plan.create_record is False
        assert plan.record_changes["check_in"] == NOW

    def test_start_break_clears_previous_break_end(self):
        existing = record(check_in=jst(2026, 3, 1, 9), break_start=jst(2026, 3, 1, 10), break_end=jst(2026, 3, 1, 11))
        plan = plan_transition(AttendanceState.CHECKED_IN, AttendanceAction.START_BREAK, existing, NOW)
        assert plan.record_changes == {"break_start": NOW, "break_end": None}

    def test_start_break_backfills_missing_check_in(self):
        plan = plan_transition(AttendanceState.CHECKED_IN, AttendanceAction.START_BREAK, record(), NOW)
        assert plan.record_changes["check_in"] == NOW

    def test_check_out_backfills_missing_check_in(self):
        plan = plan_transition(AttendanceState.CHECKED_IN, AttendanceAction.CHECK_OUT, record(), NOW)
        assert plan.record_changes == {"check_out": NOW, "check_in": NOW}

    def test_check_out_overwrites_previous_check_out(self):
        existing = record(check_in=jst(2026, 3, 1, 9), check_out=jst(2026, 3, 1, 11))
        plan = plan_transition(AttendanceState.CHECKED_IN, AttendanceAction.CHECK_OUT, existing, NOW)
        assert plan.record_changes == {"check_out": NOW}

    def test_recheck_in_changes_nothing(self):
        existing = record(check_in=jst(2026, 3, 1, 9), check_out=jst(2026, 3, 1, 11))
        plan = plan_transition(AttendanceState.CHECKED_OUT, AttendanceAction.RECHECK_IN, existing, NOW)
        assert plan.record_changes == {}
        assert plan.next_state == AttendanceState.CHECKED_IN


class TestGuards:
    """전이 조건."""

    def test_missing_record_is_not_found_with_current_state(self):
        result = plan_transition(AttendanceState.CHECKED_IN, AttendanceAction.START_BREAK, None, NOW)
        assert isinstance(result, DomainError)
        assert result.kind == ErrorKind.NOT_FOUND
        assert result.current_state == AttendanceState.CHECKED_IN

    def test_absence_rejected_when_times_recorded(self):
        existing = record(check_in=jst(2026, 3, 1, 9))
        result = plan_transition(AttendanceState.NOT_CHECKED_IN, AttendanceAction.MARK_ABSENT, existing, NOW)
        assert isinstance(result, DomainError)
        assert result.kind == ErrorKind.INVALID_TRANSITION
        assert result.current_state == AttendanceState.NOT_CHECKED_IN

    def test_absence_allowed_on_empty_record(self):
        plan = plan_transition(AttendanceState.NOT_CHECKED_IN, AttendanceAction.MARK_ABSENT, record(), NOW)
        assert plan.record_changes == {"is_absent": True}

    def test_rejection_detail_format(self):
        result = plan_transition(AttendanceState.ABSENT, AttendanceAction.CHECK_IN, None, NOW)
        assert result.to_detail() == {
            "code": "invalid_transition",
            "message": result.message,
            "current_state": "absent",
        }
