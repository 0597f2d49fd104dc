"""
회원권 정지/재개 처리

- PAUSE: ACTIVE → PAUSED, paused_at 기록 (만료일/누적 정지일 유지)
- RESUME: PAUSED → ACTIVE, 정지된 일수만큼 만료일 연장 후 누적

정지 기간은 만료일 계산에서 제외된다.
"""
from datetime import date, datetime
from typing import Any, Dict, Optional, Union

from loguru import logger

from .dates import add_days, to_local_date
from .errors import InvalidStateError
from .models import MembershipState


def current_state(member: Dict[str, Any]) -> MembershipState:
    """저장된 상태 (값이 없으면 ACTIVE)"""
    return MembershipState(member.get("membership_state") or MembershipState.ACTIVE.value)


def paused_days_between(
    paused_at: Union[str, datetime, None],
    today: date,
    tz_name: str
) -> int:
    """정지 시작일 ~ 오늘 사이의 일수 (자정 기준 절삭, 최소 0)"""
    paused_day = to_local_date(paused_at, tz_name)
    if paused_day is None:
        return 0
    return max(0, (today - paused_day).days)


def pause(member: Dict[str, Any], now: datetime) -> Optional[Dict[str, Any]]:
    """
    정지 패치 생성

    이미 정지 상태면 None (기존 paused_at 유지)
    """
    if current_state(member) == MembershipState.PAUSED:
        logger.info(f"이미 정지된 회원: {member.get('id')}")
        return None

    return {
        "membership_state": MembershipState.PAUSED.value,
        "paused_at": now.isoformat(),
    }


def resume(member: Dict[str, Any], today: date, tz_name: str) -> Dict[str, Any]:
    """
    재개 패치 생성

    정지 상태가 아니면 InvalidStateError.
    같은 날 정지/재개하면 만료일은 그대로, paused_at만 해제된다.
    """
    if current_state(member) != MembershipState.PAUSED:
        raise InvalidStateError("member is not paused")

    paused_days = paused_days_between(member.get("paused_at"), today, tz_name)

    current_expire_date = str(member.get("expire_date") or "")
    next_expire_date = (
        add_days(current_expire_date, paused_days) if paused_days > 0 else current_expire_date
    )
    paused_days_total = int(member.get("paused_days_total") or 0) + paused_days

    return {
        "membership_state": MembershipState.ACTIVE.value,
        "paused_at": None,
        "paused_days_total": paused_days_total,
        "expire_date": next_expire_date,
    }
