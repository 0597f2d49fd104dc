"""
날짜 유틸리티

- YYYY-MM-DD 문자열 <-> 달력 날짜 변환 (시간대 변환 없음)
- 일/월 더하기, 오늘 기준 일수 차이, 개월 수 계산
- "오늘"은 설정된 체육관 시간대 기준으로 결정
"""
import calendar
import re
from datetime import date, datetime, timedelta
from typing import Optional, Union
from zoneinfo import ZoneInfo

# 엄격한 형식 (입력 검증용)
DATE_REGEX = re.compile(r"^\d{4}-\d{2}-\d{2}$")

# 파싱 허용 형식 (월/일 1~2자리)
_CALENDAR_DATE_REGEX = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")


def parse_calendar_date(value: Optional[str]) -> Optional[date]:
    """
    YYYY-MM-DD 문자열을 달력 날짜로 변환

    형식이 맞지 않거나 존재하지 않는 날짜면 None
    """
    if not isinstance(value, str):
        return None
    matched = _CALENDAR_DATE_REGEX.match(value.strip())
    if not matched:
        return None
    year, month, day = (int(part) for part in matched.groups())
    try:
        return date(year, month, day)
    except ValueError:
        return None


def is_calendar_date(value: Optional[str]) -> bool:
    """엄격한 YYYY-MM-DD 형식이면서 실제 존재하는 날짜인지"""
    if not isinstance(value, str) or not DATE_REGEX.match(value):
        return False
    return parse_calendar_date(value) is not None


def format_calendar_date(value: date) -> str:
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def _require_date(value: str) -> date:
    parsed = parse_calendar_date(value)
    if parsed is None:
        raise ValueError(f"잘못된 날짜 형식: {value!r}")
    return parsed


def add_days(date_str: str, days: int) -> str:
    """날짜에 일수 더하기 (월/연도 넘김 처리)"""
    return format_calendar_date(_require_date(date_str) + timedelta(days=days))


def add_months(date_str: str, months: int) -> str:
    """
    날짜에 개월 수 더하기

    결과 월의 일수가 부족하면 말일로 맞춤 (1월 31일 + 1개월 → 2월 28/29일)
    """
    base = _require_date(date_str)
    year = base.year + (base.month - 1 + months) // 12
    month = (base.month - 1 + months) % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return format_calendar_date(date(year, month, min(base.day, last_day)))


def day_diff(target: str, today: date) -> int:
    """오늘 기준 일수 차이 (양수=미래, 음수=과거, 0=오늘)"""
    return (_require_date(target) - today).days


def duration_months(start_str: str, expire_str: str) -> int:
    """
    시작일~만료일 개월 수 (연/월 필드 차이, 최소 1)

    만료일이 시작일보다 앞서거나 파싱 불가면 1
    """
    start = parse_calendar_date(start_str)
    end = parse_calendar_date(expire_str)
    if start is None or end is None or end < start:
        return 1
    diff = (end.year - start.year) * 12 + (end.month - start.month)
    return max(1, diff)


def month_key(value: date) -> str:
    return f"{value.year:04d}-{value.month:02d}"


def now_in(tz_name: str) -> datetime:
    """체육관 시간대 기준 현재 시각"""
    return datetime.now(ZoneInfo(tz_name))


def today_in(tz_name: str) -> date:
    """체육관 시간대 기준 오늘 날짜"""
    return now_in(tz_name).date()


def to_local_date(value: Union[str, datetime, None], tz_name: str) -> Optional[date]:
    """
    타임스탬프(ISO 문자열 또는 datetime)를 체육관 시간대의 날짜로 변환

    시간대 정보가 없는 값은 이미 현지 시각으로 간주
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        moment = value
    else:
        try:
            moment = datetime.fromisoformat(str(value).strip())
        except ValueError:
            return None
    if moment.tzinfo is not None:
        moment = moment.astimezone(ZoneInfo(tz_name))
    return moment.date()
