"""
회원 입력값 정규화
- 전화번호, 성별, 띠/그랄, 날짜, 텍스트
"""
import re
from typing import Any, Optional

from .dates import is_calendar_date


# =============================================================================
# 정규화 매핑 테이블
# =============================================================================

GENDER_NORMALIZE_MAP = {
    # 표준 형식
    "남": "남",
    "여": "여",
    # 풀네임
    "남자": "남",
    "여자": "여",
    # 영문
    "m": "남",
    "f": "여",
    "male": "남",
    "female": "여",
}

# 띠 순서 (낮은 단계 → 높은 단계)
BELT_VALUES = (
    "흰띠",
    "그레이띠",
    "오렌지띠",
    "초록띠",
    "파란띠",
    "보라띠",
    "갈색띠",
    "검은띠",
)

BELT_GRAL_VALUES = (0, 1, 2, 3, 4)

_NON_DIGIT = re.compile(r"\D")


# =============================================================================
# 정규화 함수들
# =============================================================================

def normalize_phone(value: Any) -> str:
    """전화번호에서 숫자만 남김: 010-1234 5678 → 01012345678"""
    if not isinstance(value, str):
        return ""
    return _NON_DIGIT.sub("", value)


def normalize_gender(value: Any) -> Optional[str]:
    """성별 정규화: 남자/male/m → 남, 여자/female/f → 여"""
    if not isinstance(value, str):
        return None
    return GENDER_NORMALIZE_MAP.get(value.strip().lower())


def normalize_text(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    normalized = value.strip()
    return normalized or None


def normalize_belt(value: Any) -> Optional[str]:
    normalized = normalize_text(value)
    if normalized in BELT_VALUES:
        return normalized
    return None


def normalize_belt_gral(value: Any) -> Optional[int]:
    """그랄(띠 단계) 0~4, 그 외 None"""
    if value is None or value == "" or isinstance(value, bool):
        return None
    if isinstance(value, int):
        number = value
    elif isinstance(value, float) and value.is_integer():
        number = int(value)
    elif isinstance(value, str) and value.strip().lstrip("-").isdigit():
        number = int(value.strip())
    else:
        return None
    return number if number in BELT_GRAL_VALUES else None


def normalize_date(value: Any) -> Optional[str]:
    """YYYY-MM-DD 형식의 실제 날짜만 허용, 그 외 None"""
    normalized = normalize_text(value)
    if normalized is None or not is_calendar_date(normalized):
        return None
    return normalized
