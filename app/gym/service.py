"""
Member Service

회원 관리 서비스 - 등록/수정/정지/재개/삭제, CSV 가져오기, 대시보드
저장소와 현재 시각은 외부에서 주입한다.
"""

from datetime import date, datetime
from typing import Any, Callable, Dict, List, Optional

from loguru import logger

from . import membership
from .config import GymSettings
from .csv_import import import_members
from .dates import now_in, to_local_date
from .errors import ValidationError
from .models import (
    DashboardResponse,
    Member,
    MemberAction,
    MemberCreate,
    MemberListResponse,
    MemberStatus,
    MembershipState,
    MemberUpdate,
    ImportSummary,
)
from .sales import MonthRef, estimate_sales, normalize_month, normalize_unit_price
from .status import attach_status
from .store import MemberStore

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 200


class MemberService:
    """회원 관리 서비스"""

    def __init__(
        self,
        store: MemberStore,
        settings: GymSettings,
        clock: Optional[Callable[[], datetime]] = None
    ):
        self.store = store
        self.settings = settings
        self._clock = clock or (lambda: now_in(settings.timezone))

    def now(self) -> datetime:
        return self._clock()

    def today(self) -> date:
        return self.now().date()

    def _to_member(self, row: Dict[str, Any]) -> Member:
        return Member.model_validate(attach_status(row, self.today()))

    # =============================================
    # 조회
    # =============================================

    async def list_members(
        self,
        gym_id: str,
        status: Optional[str] = None,
        q: Optional[str] = None,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE
    ) -> MemberListResponse:
        """
        회원 목록 (만료일 오름차순)

        - status: NORMAL / EXPIRING / OVERDUE (그 외 값은 무시)
        - q: 이름 또는 전화번호 부분검색
        """
        page = max(1, page)
        page_size = min(max(1, page_size), MAX_PAGE_SIZE)

        rows = await self.store.list_members(gym_id, query=(q or "").strip() or None)
        members = [self._to_member(row) for row in rows]

        if status in MemberStatus.__members__:
            members = [m for m in members if m.status == MemberStatus(status)]

        start = (page - 1) * page_size
        return MemberListResponse(
            items=members[start:start + page_size],
            count=len(members),
            page=page,
            page_size=page_size,
        )

    async def get_member(self, gym_id: str, member_id: str) -> Member:
        return self._to_member(await self.store.get_member(gym_id, member_id))

    # =============================================
    # 등록/수정/삭제
    # =============================================

    async def create_member(self, gym_id: str, payload: MemberCreate) -> Member:
        """회원 등록 (ACTIVE, 누적 정지일 0)"""
        record = payload.model_dump(mode="json")
        record.update({
            "gym_id": gym_id,
            "membership_state": MembershipState.ACTIVE.value,
            "paused_at": None,
            "paused_days_total": 0,
        })
        inserted = await self.store.insert_member(record)
        logger.info(f"회원 등록: {inserted.get('id')} ({payload.name})")
        return self._to_member(inserted)

    async def update_member(self, gym_id: str, member_id: str, payload: MemberUpdate) -> Member:
        """PATCH 요청 처리: action이 있으면 정지/재개, 없으면 필드 수정"""
        if payload.action == MemberAction.PAUSE:
            return await self.pause_member(gym_id, member_id)
        if payload.action == MemberAction.RESUME:
            return await self.resume_member(gym_id, member_id)

        patch = payload.to_patch()
        if not patch:
            raise ValidationError("수정할 항목이 없습니다")

        updated = await self.store.update_member(gym_id, member_id, patch)
        return self._to_member(updated)

    async def delete_member(self, gym_id: str, member_id: str) -> str:
        """소프트 삭제 (deleted_at 기록)"""
        deleted = await self.store.update_member(
            gym_id, member_id, {"deleted_at": self.now().isoformat()}
        )
        logger.info(f"회원 삭제: {member_id}")
        return str(deleted.get("id", member_id))

    # =============================================
    # 정지/재개
    # =============================================

    async def pause_member(self, gym_id: str, member_id: str) -> Member:
        current = await self.store.get_member(gym_id, member_id)
        patch = membership.pause(current, self.now())
        if patch is None:
            return self._to_member(current)

        updated = await self.store.update_member(gym_id, member_id, patch)
        logger.info(f"회원권 정지: {member_id}")
        return self._to_member(updated)

    async def resume_member(self, gym_id: str, member_id: str) -> Member:
        current = await self.store.get_member(gym_id, member_id)
        patch = membership.resume(current, self.today(), self.settings.timezone)

        updated = await self.store.update_member(gym_id, member_id, patch)
        logger.info(
            f"회원권 재개: {member_id} (만료일 {current.get('expire_date')} → {patch['expire_date']}, "
            f"누적 정지 {patch['paused_days_total']}일)"
        )
        return self._to_member(updated)

    # =============================================
    # CSV 가져오기
    # =============================================

    async def import_csv(self, gym_id: str, content: str) -> ImportSummary:
        return await import_members(self.store, gym_id, content)

    # =============================================
    # 대시보드
    # =============================================

    async def get_dashboard(
        self,
        gym_id: str,
        month: Optional[str] = None,
        unit_price: Any = None
    ) -> DashboardResponse:
        """상태별 회원 수 + 추정 매출"""
        today = self.today()
        tz_name = self.settings.timezone
        selected = normalize_month(month, today)
        price = normalize_unit_price(unit_price)

        rows = await self.store.list_members(gym_id)
        counts = self._count_members(rows, today, tz_name)
        report = estimate_sales(rows, selected, price, today, tz_name)

        return DashboardResponse(**report.model_dump(), **counts)

    def _count_members(self, rows: List[Dict[str, Any]], today: date, tz_name: str) -> Dict[str, int]:
        current = MonthRef(today.year, today.month)
        overdue = 0
        expiring = 0
        new_this_month = 0

        for row in rows:
            status = attach_status(row, today)["status"]
            if status == MemberStatus.OVERDUE:
                overdue += 1
            elif status == MemberStatus.EXPIRING:
                expiring += 1

            created = to_local_date(row.get("created_at"), tz_name)
            if created and (created.year, created.month) == (current.year, current.month):
                new_this_month += 1

        return {
            "overdue_count": overdue,
            "expiring_7d_count": expiring,
            "new_this_month": new_this_month,
        }
