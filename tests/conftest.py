"""
Pytest configuration and fixtures for Gym Console tests
"""

import sys
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Dict, List, Optional
from zoneinfo import ZoneInfo

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.gym.config import GymSettings
from app.gym.errors import NotFoundError, StoreError
from app.gym.service import MemberService

SEOUL = ZoneInfo("Asia/Seoul")


class FakeClock:
    """테스트용 고정 시계"""

    def __init__(self, now: datetime):
        self.current = now

    def __call__(self) -> datetime:
        return self.current

    def advance(self, days: int = 0, hours: int = 0):
        self.current = self.current + timedelta(days=days, hours=hours)


class FakeMemberStore:
    """메모리 기반 회원 저장소 (Supabase 대체)"""

    def __init__(self, created_at: str = "2024-01-10T01:00:00+00:00"):
        self.members: Dict[str, Dict[str, Any]] = {}
        self.created_at = created_at
        self.fail_phones = set()
        self.inserts: List[Dict[str, Any]] = []
        self.updates: List[Dict[str, Any]] = []
        self._next_id = 1

    def _new_id(self) -> str:
        member_id = f"m-{self._next_id}"
        self._next_id += 1
        return member_id

    def add(self, **fields) -> Dict[str, Any]:
        """테스트 데이터 직접 추가"""
        record = {
            "id": self._new_id(),
            "gym_id": "gym-1",
            "name": "홍길동",
            "phone": "01000000000",
            "gender": "남",
            "birth_date": None,
            "belt": None,
            "belt_gral": None,
            "start_date": None,
            "expire_date": "2024-12-31",
            "membership_state": "ACTIVE",
            "paused_at": None,
            "paused_days_total": 0,
            "memo": None,
            "created_at": self.created_at,
            "updated_at": self.created_at,
            "deleted_at": None,
        }
        record.update(fields)
        self.members[record["id"]] = record
        return record

    def _live(self, gym_id: str) -> List[Dict[str, Any]]:
        return [
            m for m in self.members.values()
            if m["gym_id"] == gym_id and not m.get("deleted_at")
        ]

    async def find_by_phones(self, gym_id: str, phones: List[str]) -> List[Dict[str, Any]]:
        return [
            {"id": m["id"], "phone": m["phone"]}
            for m in self._live(gym_id) if m["phone"] in phones
        ]

    async def get_member(self, gym_id: str, member_id: str) -> Dict[str, Any]:
        for m in self._live(gym_id):
            if m["id"] == member_id:
                return dict(m)
        raise NotFoundError("회원을 찾을 수 없습니다")

    async def list_members(self, gym_id: str, query: Optional[str] = None) -> List[Dict[str, Any]]:
        rows = self._live(gym_id)
        if query:
            rows = [m for m in rows if query in m["name"] or query in m["phone"]]
        return [dict(m) for m in sorted(rows, key=lambda m: m["expire_date"])]

    async def insert_member(self, record: Dict[str, Any]) -> Dict[str, Any]:
        if record.get("phone") in self.fail_phones:
            raise StoreError("duplicate key value violates unique constraint")
        self.inserts.append(dict(record))
        return self.add(**record)

    async def update_member(self, gym_id: str, member_id: str, patch: Dict[str, Any]) -> Dict[str, Any]:
        current = await self.get_member(gym_id, member_id)
        if current["phone"] in self.fail_phones:
            raise StoreError("update failed")
        self.updates.append({"id": member_id, **patch})
        self.members[member_id].update(patch)
        return dict(self.members[member_id])


class FakeGymStore:
    """메모리 기반 체육관 저장소"""

    def __init__(self):
        self.tokens = {"valid-token": "user-1", "no-gym-token": "user-2"}
        self.gyms = {"user-1": {"gym_id": "gym-1", "gym_name": "강남 주짓수"}}

    async def get_user_id(self, access_token: str) -> Optional[str]:
        return self.tokens.get(access_token)

    async def get_gym_for_user(self, user_id: str) -> Optional[Dict[str, Any]]:
        return self.gyms.get(user_id)

    async def create_gym(self, name: str, owner_user_id: str) -> Dict[str, Any]:
        gym = {"id": f"gym-{len(self.gyms) + 1}", "name": name}
        self.gyms[owner_user_id] = {"gym_id": gym["id"], "gym_name": name}
        return gym


@pytest.fixture
def settings():
    return GymSettings(timezone="Asia/Seoul")


@pytest.fixture
def clock():
    """2024-01-15 10:00 (KST)"""
    return FakeClock(datetime(2024, 1, 15, 10, 0, tzinfo=SEOUL))


@pytest.fixture
def store():
    return FakeMemberStore()


@pytest.fixture
def gym_store():
    return FakeGymStore()


@pytest.fixture
def service(store, settings, clock):
    return MemberService(store, settings, clock=clock)
