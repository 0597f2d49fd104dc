"""
Gym Console Models

Pydantic 모델 정의
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from .normalizer import (
    normalize_belt,
    normalize_belt_gral,
    normalize_date,
    normalize_gender,
    normalize_phone,
    normalize_text,
)


# =============================================
# Enums
# =============================================

class MemberGender(str, Enum):
    """성별 (저장값)"""
    MALE = "남"
    FEMALE = "여"


class Belt(str, Enum):
    """띠 (낮은 단계 → 높은 단계)"""
    WHITE = "흰띠"
    GREY = "그레이띠"
    ORANGE = "오렌지띠"
    GREEN = "초록띠"
    BLUE = "파란띠"
    PURPLE = "보라띠"
    BROWN = "갈색띠"
    BLACK = "검은띠"


class MembershipState(str, Enum):
    """회원권 상태"""
    ACTIVE = "ACTIVE"   # 이용중
    PAUSED = "PAUSED"   # 정지 (만료일 카운트 멈춤)


class MemberStatus(str, Enum):
    """만료일 기준 파생 상태"""
    NORMAL = "NORMAL"       # 정상
    EXPIRING = "EXPIRING"   # 7일 이내 만료
    OVERDUE = "OVERDUE"     # 만료 지남


class MemberAction(str, Enum):
    """회원권 상태 전이 액션"""
    PAUSE = "PAUSE"
    RESUME = "RESUME"


# =============================================
# 입력 검증 헬퍼
# =============================================

def _required_text(value: Any, message: str) -> str:
    normalized = normalize_text(value)
    if normalized is None:
        raise ValueError(message)
    return normalized


def _required_phone(value: Any) -> str:
    phone = normalize_phone(value)
    if not phone:
        raise ValueError("전화번호 누락")
    return phone


def _required_gender(value: Any) -> str:
    if isinstance(value, MemberGender):
        return value.value
    gender = normalize_gender(value)
    if gender is None:
        raise ValueError("gender must be 남 or 여")
    return gender


def _required_date(value: Any, field_name: str) -> str:
    normalized = normalize_date(value)
    if normalized is None:
        raise ValueError(f"{field_name} must be YYYY-MM-DD")
    return normalized


def _optional_date(value: Any, field_name: str) -> Optional[str]:
    if value is None or value == "":
        return None
    return _required_date(value, field_name)


def _optional_belt(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    if isinstance(value, Belt):
        return value.value
    belt = normalize_belt(value)
    if belt is None:
        raise ValueError("belt is invalid")
    return belt


def _required_belt_gral(value: Any) -> int:
    belt_gral = normalize_belt_gral(value)
    if belt_gral is None:
        raise ValueError("belt_gral must be 0~4")
    return belt_gral


def _optional_belt_gral(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    return _required_belt_gral(value)


# =============================================
# Member Models
# =============================================

class Member(BaseModel):
    """회원 레코드"""
    id: str
    gym_id: str
    name: str
    phone: str
    gender: Optional[MemberGender] = None
    birth_date: Optional[str] = None

    # 띠 (선택)
    belt: Optional[Belt] = None
    belt_gral: Optional[int] = None

    # 회원권 기간
    start_date: Optional[str] = None
    expire_date: str

    # 정지 상태
    membership_state: MembershipState = MembershipState.ACTIVE
    paused_at: Optional[datetime] = None
    paused_days_total: int = 0

    memo: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None

    # 파생 필드 (저장 안 됨)
    status: Optional[MemberStatus] = None

    @field_validator("id", "gym_id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        return str(value) if value is not None else value

    @field_validator("membership_state", mode="before")
    @classmethod
    def _default_state(cls, value: Any) -> Any:
        return value or MembershipState.ACTIVE

    @field_validator("paused_days_total", mode="before")
    @classmethod
    def _default_paused_days(cls, value: Any) -> Any:
        return value or 0


class MemberCreate(BaseModel):
    """회원 등록 요청"""
    name: str
    phone: str
    gender: MemberGender
    expire_date: str
    start_date: Optional[str] = None
    birth_date: Optional[str] = None
    belt: Optional[Belt] = None
    belt_gral: Optional[int] = None
    memo: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def _validate_name(cls, value: Any) -> str:
        return _required_text(value, "이름 누락")

    @field_validator("phone", mode="before")
    @classmethod
    def _validate_phone(cls, value: Any) -> str:
        return _required_phone(value)

    @field_validator("gender", mode="before")
    @classmethod
    def _validate_gender(cls, value: Any) -> str:
        return _required_gender(value)

    @field_validator("expire_date", mode="before")
    @classmethod
    def _validate_expire_date(cls, value: Any) -> str:
        return _required_date(value, "expire_date")

    @field_validator("start_date", "birth_date", mode="before")
    @classmethod
    def _validate_optional_dates(cls, value: Any, info: ValidationInfo) -> Optional[str]:
        return _optional_date(value, info.field_name)

    @field_validator("belt", mode="before")
    @classmethod
    def _validate_belt(cls, value: Any) -> Optional[str]:
        return _optional_belt(value)

    @field_validator("belt_gral", mode="before")
    @classmethod
    def _validate_belt_gral(cls, value: Any) -> Optional[int]:
        return _optional_belt_gral(value)

    @field_validator("memo", mode="before")
    @classmethod
    def _validate_memo(cls, value: Any) -> Optional[str]:
        return normalize_text(value)


class MemberUpdate(BaseModel):
    """
    회원 수정 요청

    action(PAUSE/RESUME)이 있으면 상태 전이, 없으면 전달된 필드만 수정.
    생략된 필드와 null로 전달된 필드를 구분한다 (model_fields_set).
    """
    action: Optional[MemberAction] = None
    name: Optional[str] = None
    phone: Optional[str] = None
    gender: Optional[MemberGender] = None
    birth_date: Optional[str] = None
    belt: Optional[Belt] = None
    belt_gral: Optional[int] = None
    start_date: Optional[str] = None
    expire_date: Optional[str] = None
    memo: Optional[str] = None

    @field_validator("action", mode="before")
    @classmethod
    def _upper_action(cls, value: Any) -> Any:
        return value.strip().upper() if isinstance(value, str) else value

    @field_validator("name", mode="before")
    @classmethod
    def _validate_name(cls, value: Any) -> str:
        return _required_text(value, "이름 누락")

    @field_validator("phone", mode="before")
    @classmethod
    def _validate_phone(cls, value: Any) -> str:
        return _required_phone(value)

    @field_validator("gender", mode="before")
    @classmethod
    def _validate_gender(cls, value: Any) -> str:
        return _required_gender(value)

    @field_validator("expire_date", mode="before")
    @classmethod
    def _validate_expire_date(cls, value: Any) -> str:
        return _required_date(value, "expire_date")

    @field_validator("start_date", "birth_date", mode="before")
    @classmethod
    def _validate_optional_dates(cls, value: Any, info: ValidationInfo) -> Optional[str]:
        return _optional_date(value, info.field_name)

    @field_validator("belt", mode="before")
    @classmethod
    def _validate_belt(cls, value: Any) -> Optional[str]:
        return _optional_belt(value)

    @field_validator("belt_gral", mode="before")
    @classmethod
    def _validate_belt_gral(cls, value: Any) -> int:
        # 수정 시에는 null로 지울 수 없음
        return _required_belt_gral(value)

    @field_validator("memo", mode="before")
    @classmethod
    def _validate_memo(cls, value: Any) -> Optional[str]:
        return normalize_text(value)

    def to_patch(self) -> Dict[str, Any]:
        """전달된 필드만 저장용 dict로 변환"""
        fields = self.model_fields_set - {"action"}
        return self.model_dump(include=fields, mode="json")


class MemberListResponse(BaseModel):
    """회원 목록 응답"""
    items: List[Member]
    count: int
    page: int
    page_size: int


# =============================================
# CSV Import Models
# =============================================

class CsvMemberPayload(BaseModel):
    """검증된 CSV 행"""
    row: int
    name: str
    phone: str
    gender: MemberGender
    start_date: Optional[str] = None
    expire_date: str
    memo: Optional[str] = None


class ImportRowError(BaseModel):
    """행 단위 오류"""
    row: int
    reason: str


class ImportSummary(BaseModel):
    """CSV 가져오기 결과"""
    total: int = 0
    created: int = 0
    updated: int = 0
    failed: int = 0
    errors: List[ImportRowError] = Field(default_factory=list)


# =============================================
# Dashboard Models
# =============================================

class DailySalesPoint(BaseModel):
    """일별 추정 매출"""
    date: str
    day: int
    estimated_sales: int = 0
    member_count: int = 0


class SalesReport(BaseModel):
    """추정 매출 집계"""
    unit_price: int
    selected_month: str
    selected_month_label: str
    daily_sales: List[DailySalesPoint]
    selected_month_sales: int
    current_month_sales: int
    previous_month_sales: int


class DashboardResponse(SalesReport):
    """대시보드 (상태 카운트 + 추정 매출)"""
    overdue_count: int
    expiring_7d_count: int
    new_this_month: int


# =============================================
# Gym Models
# =============================================

class GymCreate(BaseModel):
    """체육관 생성"""
    name: str = Field(..., min_length=1, max_length=100)

    @field_validator("name", mode="before")
    @classmethod
    def _validate_name(cls, value: Any) -> str:
        return _required_text(value, "name is required")


class MeResponse(BaseModel):
    """로그인 사용자 정보"""
    user_id: str
    gym_id: Optional[str] = None
    gym_name: Optional[str] = None
