"""
회원 만료 상태 분류
"""
from datetime import date
from typing import Any, Dict

from .dates import day_diff
from .models import MemberStatus, MembershipState

# 만료 임박 기준 (오늘 포함 7일 이내)
EXPIRING_WINDOW_DAYS = 7


def classify_status(expire_date: str, today: date) -> MemberStatus:
    """만료일 기준 상태: 지남 → OVERDUE, 7일 이내 → EXPIRING, 그 외 → NORMAL"""
    diff = day_diff(expire_date, today)
    if diff < 0:
        return MemberStatus.OVERDUE
    if diff <= EXPIRING_WINDOW_DAYS:
        return MemberStatus.EXPIRING
    return MemberStatus.NORMAL


def attach_status(member: Dict[str, Any], today: date) -> Dict[str, Any]:
    """회원 레코드에 파생 상태 추가 (정지/삭제 회원은 None)"""
    status = None
    is_paused = member.get("membership_state") == MembershipState.PAUSED.value
    if not is_paused and not member.get("deleted_at") and member.get("expire_date"):
        status = classify_status(member["expire_date"], today)
    return {**member, "status": status}
