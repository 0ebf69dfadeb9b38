"""영업일 계산 테스트 — 04:00 경계, 키, 범위, 시각 결합.

Business-day resolution tests — 04:00 boundary, day key, range, and
combining wall-clock times with a business date.
"""

from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo

from app.core.business_day import (
    business_date_of,
    business_day_for_date,
    combine_business_time,
    date_of_key,
    resolve_business_day,
)
from tests.conftest import JST, jst


class TestBusinessDateOf:
    """영업일 날짜 판정."""

    def test_after_start_hour_is_same_date(self):
        assert business_date_of(jst(2026, 3, 1, 9, 0)) == date(2026, 3, 1)

    def test_before_start_hour_is_previous_date(self):
        assert business_date_of(jst(2026, 3, 2, 2, 30)) == date(2026, 3, 1)

    def test_utc_instant_is_converted_to_local(self):
        # 2026-03-01 17:30 UTC = 2026-03-02 02:30 JST
        instant = datetime(2026, 3, 1, 17, 30, tzinfo=timezone.utc)
        assert business_date_of(instant) == date(2026, 3, 1)

    def test_boundary_exactly_at_start_hour(self):
        assert business_date_of(jst(2026, 3, 2, 4, 0)) == date(2026, 3, 2)

    def test_last_millisecond_before_start_hour(self):
        instant = jst(2026, 3, 2, 3, 59, 59) + timedelta(microseconds=999000)
        assert business_date_of(instant) == date(2026, 3, 1)

    def test_naive_datetime_is_treated_as_utc(self):
        # 18:00 UTC = 03:00 JST next day → previous business date
        assert business_date_of(datetime(2026, 3, 1, 18, 0)) == date(2026, 3, 1)

    def test_custom_start_hour(self):
        assert business_date_of(jst(2026, 3, 2, 5, 0), start_hour=6) == date(2026, 3, 1)


class TestResolveBusinessDay:
    """영업일 키와 범위."""

    def test_key_is_local_midnight_of_business_date(self):
        day = resolve_business_day(jst(2026, 3, 2, 2, 30))
        assert day.business_date == date(2026, 3, 1)
        assert day.key.astimezone(JST).replace(tzinfo=None) == datetime(2026, 3, 1, 0, 0)

    def test_range_is_one_day_minus_one_millisecond(self):
        day = resolve_business_day(jst(2026, 3, 1, 12, 0))
        assert day.end - day.start == timedelta(hours=24) - timedelta(milliseconds=1)

    def test_range_bounds(self):
        day = resolve_business_day(jst(2026, 3, 1, 12, 0))
        assert day.start == jst(2026, 3, 1, 4, 0)
        assert day.end == jst(2026, 3, 2, 3, 59, 59) + timedelta(microseconds=999000)

    def test_instants_in_same_window_share_key(self):
        evening = resolve_business_day(jst(2026, 3, 1, 22, 0))
        after_midnight = resolve_business_day(jst(2026, 3, 2, 2, 0))
        next_morning = resolve_business_day(jst(2026, 3, 2, 4, 0))
        assert evening.key == after_midnight.key
        assert next_morning.key != evening.key

    def test_contains(self):
        day = business_day_for_date(date(2026, 3, 1))
        assert day.contains(jst(2026, 3, 1, 4, 0))
        assert day.contains(jst(2026, 3, 2, 3, 59))
        assert not day.contains(jst(2026, 3, 2, 4, 0))
        assert not day.contains(jst(2026, 3, 1, 3, 59))

    def test_date_of_key_round_trip(self):
        day = business_day_for_date(date(2026, 12, 31))
        assert date_of_key(day.key) == date(2026, 12, 31)

    def test_other_timezone(self):
        new_york = ZoneInfo("America/New_York")
        instant = datetime(2026, 7, 1, 3, 0, tzinfo=new_york)
        assert business_date_of(instant, tz=new_york) == date(2026, 6, 30)


class TestCombineBusinessTime:
    """영업일 날짜 + 현지 시각 결합."""

    def test_daytime_stays_on_business_date(self):
        result = combine_business_time(date(2026, 3, 1), time(9, 30))
        assert result == jst(2026, 3, 1, 9, 30)
        assert result.tzinfo == timezone.utc

    def test_early_morning_moves_to_next_calendar_date(self):
        result = combine_business_time(date(2026, 3, 1), time(2, 0))
        assert result == jst(2026, 3, 2, 2, 0)

    def test_start_hour_itself_stays_on_business_date(self):
        result = combine_business_time(date(2026, 3, 1), time(4, 0))
        assert result == jst(2026, 3, 1, 4, 0)
