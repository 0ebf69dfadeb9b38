"""영업일 계산 모듈 — 04:00 경계 기준.

Business-day resolution module.
A business day is not a calendar day: it runs from 04:00 local time to
03:59:59.999 on the next calendar day, so an overnight shift that ends at
02:00 still belongs to the day it started on.

All functions are pure. The timezone and start hour default to the
configured BUSINESS_TIMEZONE / BUSINESS_DAY_START_HOUR.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from functools import lru_cache
from zoneinfo import ZoneInfo

from app.config import settings

_ONE_MILLISECOND: timedelta = timedelta(milliseconds=1)


@dataclass(frozen=True)
class BusinessDay:
    """영업일 — 날짜 키와 유효 시간 범위.

    A resolved business day.

    Attributes:
        business_date: 영업일 달력 날짜 (Calendar date the business day is named after)
        key: 영업일 키 — 해당 날짜 현지 00:00 (Day key: local 00:00 of business_date)
        start: 범위 시작 — 현지 04:00 (Range start: local 04:00 of business_date)
        end: 범위 끝 — 익일 현지 03:59:59.999 (Range end: next day 03:59:59.999 local)
    """

    business_date: date
    key: datetime
    start: datetime
    end: datetime

    def contains(self, instant: datetime) -> bool:
        """주어진 시각이 이 영업일 범위에 포함되는지 — Whether instant falls in this day."""
        return self.start <= _as_aware(instant) <= self.end


@lru_cache(maxsize=16)
def get_zone(name: str | None = None) -> ZoneInfo:
    """IANA 타임존 객체를 반환합니다 — Return the ZoneInfo for name (default: configured)."""
    return ZoneInfo(name or settings.BUSINESS_TIMEZONE)


def _as_aware(instant: datetime) -> datetime:
    # naive 값은 UTC로 간주 — Naive datetimes are interpreted as UTC
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant


def _start_hour(start_hour: int | None) -> int:
    return settings.BUSINESS_DAY_START_HOUR if start_hour is None else start_hour


def business_date_of(
    instant: datetime,
    tz: ZoneInfo | None = None,
    start_hour: int | None = None,
) -> date:
    """시각이 속한 영업일 날짜를 계산합니다.

    Compute the business date of an instant: the previous calendar date when
    the local hour is before the start hour, otherwise the current one.

    Args:
        instant: 대상 시각 (Instant to resolve; naive values are UTC)
        tz: 영업일 타임존 (Business timezone, default: configured)
        start_hour: 영업일 시작 시각 (Business-day start hour, default: configured)

    Returns:
        date: 영업일 날짜 (Business date)
    """
    zone: ZoneInfo = tz or get_zone()
    local: datetime = _as_aware(instant).astimezone(zone)
    if local.hour < _start_hour(start_hour):
        return local.date() - timedelta(days=1)
    return local.date()


def business_day_for_date(
    business_date: date,
    tz: ZoneInfo | None = None,
    start_hour: int | None = None,
) -> BusinessDay:
    """영업일 날짜로부터 키와 범위를 구성합니다.

    Build the BusinessDay (key and range) for a given business date.
    The range end is computed in wall-clock time, so it is exactly
    24 hours minus 1 ms after the start unless a DST transition falls
    inside the day.
    """
    zone: ZoneInfo = tz or get_zone()
    hour: int = _start_hour(start_hour)
    key: datetime = datetime.combine(business_date, time.min, tzinfo=zone)
    start: datetime = datetime.combine(business_date, time(hour), tzinfo=zone)
    next_start: datetime = datetime.combine(business_date + timedelta(days=1), time(hour), tzinfo=zone)
    return BusinessDay(
        business_date=business_date,
        key=key,
        start=start,
        end=next_start - _ONE_MILLISECOND,
    )


def resolve_business_day(
    instant: datetime,
    tz: ZoneInfo | None = None,
    start_hour: int | None = None,
) -> BusinessDay:
    """시각이 속한 영업일을 계산합니다.

    Resolve the business day (key, range start, range end) an instant
    belongs to. Total for any valid instant; there are no error cases.

    Args:
        instant: 대상 시각 (Instant to resolve)
        tz: 영업일 타임존 (Business timezone, default: configured)
        start_hour: 영업일 시작 시각 (Business-day start hour, default: configured)

    Returns:
        BusinessDay: 영업일 키와 범위 (Business-day key and range)

    Example:
        >>> resolve_business_day(datetime(2026, 3, 1, 17, 30, tzinfo=timezone.utc))
        # 2026-03-02 02:30 JST → business date 2026-03-01
    """
    return business_day_for_date(business_date_of(instant, tz, start_hour), tz, start_hour)


def combine_business_time(
    business_date: date,
    local_time: time,
    tz: ZoneInfo | None = None,
    start_hour: int | None = None,
) -> datetime:
    """영업일 날짜와 현지 시각을 결합합니다.

    Combine a business date with a wall-clock time. Times before the start
    hour belong to the following calendar date (e.g. 02:00 on business day
    D is D+1 02:00 local).

    Returns:
        datetime: UTC aware 시각 (Aware UTC datetime)
    """
    zone: ZoneInfo = tz or get_zone()
    calendar_date: date = business_date
    if local_time.hour < _start_hour(start_hour):
        calendar_date = business_date + timedelta(days=1)
    return datetime.combine(calendar_date, local_time, tzinfo=zone).astimezone(timezone.utc)


def date_of_key(key: datetime, tz: ZoneInfo | None = None) -> date:
    """영업일 키에서 영업일 날짜를 복원합니다 — Business date named by a day key."""
    zone: ZoneInfo = tz or get_zone()
    return _as_aware(key).astimezone(zone).date()
