"""
Gym Console Module

체육관/도장 회원 관리 콘솔
- 회원 관리 (인적사항, 띠, 회원권 기간, 정지/재개)
- CSV 일괄 등록
- 대시보드 (만료 현황, 추정 매출)

라우터는 app.gym.router에서 직접 가져온다 (database 패키지와의 순환 import 방지).
"""

from .models import (
    Belt,
    MemberGender,
    MemberStatus,
    MembershipState,
    MemberAction
)
from .errors import (
    MemberError,
    ValidationError,
    InvalidStateError,
    NotFoundError,
    StoreError
)
from .service import MemberService

__all__ = [
    "Belt",
    "MemberGender",
    "MemberStatus",
    "MembershipState",
    "MemberAction",
    "MemberError",
    "ValidationError",
    "InvalidStateError",
    "NotFoundError",
    "StoreError",
    "MemberService"
]
