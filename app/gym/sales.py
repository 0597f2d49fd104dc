"""
추정 매출 집계

회원권 기간(개월) × 월 단가로 매출을 추정한다.
실제 결제 내역이 아니므로 정지 기간, 일할 계산, 할인은 반영하지 않는다.
"""
import calendar
import math
import re
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from .dates import duration_months, format_calendar_date, month_key, parse_calendar_date, to_local_date
from .models import DailySalesPoint, SalesReport

DEFAULT_UNIT_PRICE = 150000
MIN_UNIT_PRICE = 10000
MAX_UNIT_PRICE = 500000

_MONTH_REGEX = re.compile(r"^(\d{4})-(\d{2})$")


@dataclass(frozen=True)
class MonthRef:
    """집계 대상 월"""
    year: int
    month: int

    @property
    def key(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"

    @property
    def label(self) -> str:
        return f"{self.year}년 {self.month}월"


def normalize_month(raw: Optional[str], today: date) -> MonthRef:
    """YYYY-MM 파싱 (형식 오류/범위 밖이면 이번 달)"""
    fallback = MonthRef(today.year, today.month)
    if not raw:
        return fallback
    matched = _MONTH_REGEX.match(raw.strip())
    if not matched:
        return fallback
    year, month = int(matched.group(1)), int(matched.group(2))
    if not 1 <= month <= 12:
        return fallback
    return MonthRef(year, month)


def shift_month(base: MonthRef, delta: int) -> MonthRef:
    index = base.year * 12 + (base.month - 1) + delta
    return MonthRef(index // 12, index % 12 + 1)


def normalize_unit_price(raw: Any) -> int:
    """월 단가 (숫자가 아니면 기본값, 범위 밖이면 최소/최대로 맞춤)"""
    if raw is None or raw == "":
        return DEFAULT_UNIT_PRICE
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return DEFAULT_UNIT_PRICE
    if not math.isfinite(value):
        return DEFAULT_UNIT_PRICE
    return int(min(MAX_UNIT_PRICE, max(MIN_UNIT_PRICE, value)))


def build_daily_series(month: MonthRef) -> List[DailySalesPoint]:
    """해당 월 일자별 0 초기화 버킷"""
    days = calendar.monthrange(month.year, month.month)[1]
    return [
        DailySalesPoint(
            date=format_calendar_date(date(month.year, month.month, day)),
            day=day,
        )
        for day in range(1, days + 1)
    ]


def _effective_start(member: Dict[str, Any], tz_name: str) -> Optional[date]:
    """start_date가 있으면 start_date, 없으면 created_at의 날짜"""
    if member.get("start_date"):
        return parse_calendar_date(member["start_date"])
    return to_local_date(member.get("created_at"), tz_name)


def estimate_sales(
    members: Iterable[Dict[str, Any]],
    selected: MonthRef,
    unit_price: int,
    today: date,
    tz_name: str
) -> SalesReport:
    """
    월별/일별 추정 매출

    - 회원의 추정 매출 전체를 시작일이 속한 월에 귀속
    - 선택한 월이면 시작일 일자 버킷에도 반영
    - 이번 달/지난 달 합계는 선택 월과 무관하게 오늘 기준
    """
    daily_sales = build_daily_series(selected)
    monthly: Dict[str, int] = {}

    for member in members:
        if member.get("deleted_at") or not member.get("expire_date"):
            continue

        start = _effective_start(member, tz_name)
        if start is None:
            continue

        estimated = duration_months(format_calendar_date(start), member["expire_date"]) * unit_price
        key = month_key(start)
        monthly[key] = monthly.get(key, 0) + estimated

        if key != selected.key:
            continue

        point = daily_sales[start.day - 1]
        point.estimated_sales += estimated
        point.member_count += 1

    current = MonthRef(today.year, today.month)
    previous = shift_month(current, -1)

    return SalesReport(
        unit_price=unit_price,
        selected_month=selected.key,
        selected_month_label=selected.label,
        daily_sales=daily_sales,
        selected_month_sales=sum(point.estimated_sales for point in daily_sales),
        current_month_sales=monthly.get(current.key, 0),
        previous_month_sales=monthly.get(previous.key, 0),
    )
