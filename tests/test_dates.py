"""
날짜 유틸리티 테스트
"""
from datetime import date, datetime

import pytest

from app.gym.dates import (
    add_days,
    add_months,
    day_diff,
    duration_months,
    format_calendar_date,
    is_calendar_date,
    month_key,
    parse_calendar_date,
    to_local_date,
)


class TestParseCalendarDate:
    """날짜 문자열 파싱 테스트"""

    def test_zero_padded(self):
        assert parse_calendar_date("2024-01-05") == date(2024, 1, 5)

    def test_single_digit_month_day(self):
        """월/일 1자리 허용"""
        assert parse_calendar_date("2024-1-5") == date(2024, 1, 5)

    def test_invalid_format(self):
        assert parse_calendar_date("2024/01/05") is None
        assert parse_calendar_date("24-01-05") is None
        assert parse_calendar_date("") is None
        assert parse_calendar_date(None) is None

    def test_nonexistent_date(self):
        """존재하지 않는 날짜"""
        assert parse_calendar_date("2024-02-30") is None
        assert parse_calendar_date("2023-13-01") is None


class TestIsCalendarDate:
    """엄격한 형식 검증 테스트"""

    def test_strict_format_required(self):
        assert is_calendar_date("2024-02-29") is True
        assert is_calendar_date("2024-2-29") is False

    def test_non_leap_year(self):
        assert is_calendar_date("2023-02-29") is False


class TestFormatAndAdd:
    """포맷 및 일/월 더하기 테스트"""

    def test_format_zero_pads(self):
        assert format_calendar_date(date(2024, 1, 5)) == "2024-01-05"
        assert month_key(date(2024, 3, 9)) == "2024-03"

    def test_add_days_rollover(self):
        """월/연도 넘김"""
        assert add_days("2024-01-31", 1) == "2024-02-01"
        assert add_days("2023-12-31", 1) == "2024-01-01"
        assert add_days("2024-03-01", -1) == "2024-02-29"

    def test_add_zero_days(self):
        assert add_days("2024-03-01", 0) == "2024-03-01"

    def test_add_days_invalid(self):
        with pytest.raises(ValueError):
            add_days("not-a-date", 1)

    def test_add_months_clamps_to_month_end(self):
        """1월 31일 + 1개월 → 2월 말일"""
        assert add_months("2024-01-31", 1) == "2024-02-29"
        assert add_months("2023-01-31", 1) == "2023-02-28"

    def test_add_months_year_rollover(self):
        assert add_months("2024-11-15", 3) == "2025-02-15"
        assert add_months("2024-03-31", -1) == "2024-02-29"


class TestDayDiff:
    """오늘 기준 일수 차이 테스트"""

    def test_future_past_today(self):
        today = date(2024, 1, 15)
        assert day_diff("2024-01-20", today) == 5
        assert day_diff("2024-01-14", today) == -1
        assert day_diff("2024-01-15", today) == 0


class TestDurationMonths:
    """회원권 개월 수 테스트"""

    def test_whole_months(self):
        assert duration_months("2024-01-15", "2024-03-15") == 2
        assert duration_months("2024-01-01", "2025-01-01") == 12

    def test_minimum_one(self):
        """같은 달이면 최소 1"""
        assert duration_months("2024-01-01", "2024-01-20") == 1

    def test_month_field_difference(self):
        """일자와 무관하게 연/월 필드 차이"""
        assert duration_months("2024-01-31", "2024-02-01") == 1
        assert duration_months("2024-01-20", "2024-03-05") == 2

    def test_inverted_range_defaults_to_one(self):
        assert duration_months("2024-03-15", "2024-01-15") == 1

    def test_unparseable_defaults_to_one(self):
        assert duration_months("bad", "2024-01-15") == 1
        assert duration_months("2024-01-15", "") == 1


class TestToLocalDate:
    """타임스탬프 → 체육관 시간대 날짜 테스트"""

    def test_utc_timestamp_converted(self):
        """UTC 16:30 → 서울 다음날 01:30"""
        assert to_local_date("2024-01-14T16:30:00+00:00", "Asia/Seoul") == date(2024, 1, 15)

    def test_naive_timestamp_kept(self):
        assert to_local_date("2024-01-14T10:00:00", "Asia/Seoul") == date(2024, 1, 14)

    def test_datetime_input(self):
        assert to_local_date(datetime(2024, 1, 14, 23, 0), "Asia/Seoul") == date(2024, 1, 14)

    def test_invalid(self):
        assert to_local_date(None, "Asia/Seoul") is None
        assert to_local_date("", "Asia/Seoul") is None
        assert to_local_date("garbage", "Asia/Seoul") is None
