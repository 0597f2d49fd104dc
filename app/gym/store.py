"""
저장소 인터페이스

코어 로직은 이 프로토콜에만 의존하고, 실제 구현은 database.supabase_client 참고.
모든 조회/수정은 gym_id 범위로 제한되며 삭제된(deleted_at) 회원은 제외된다.
"""
from typing import Any, Dict, List, Optional, Protocol


class MemberStore(Protocol):
    """회원 저장소"""

    async def find_by_phones(self, gym_id: str, phones: List[str]) -> List[Dict[str, Any]]:
        """전화번호 목록으로 회원 조회 → [{id, phone}]"""
        ...

    async def get_member(self, gym_id: str, member_id: str) -> Dict[str, Any]:
        """회원 단건 조회 (없으면 NotFoundError)"""
        ...

    async def list_members(self, gym_id: str, query: Optional[str] = None) -> List[Dict[str, Any]]:
        """회원 전체 조회 (만료일 오름차순, query는 이름/전화번호 부분검색)"""
        ...

    async def insert_member(self, record: Dict[str, Any]) -> Dict[str, Any]:
        ...

    async def update_member(self, gym_id: str, member_id: str, patch: Dict[str, Any]) -> Dict[str, Any]:
        """조건부 수정 (id + gym_id + 미삭제), 대상 없으면 NotFoundError"""
        ...


class GymStore(Protocol):
    """체육관/사용자 저장소"""

    async def get_user_id(self, access_token: str) -> Optional[str]:
        ...

    async def get_gym_for_user(self, user_id: str) -> Optional[Dict[str, Any]]:
        """→ {gym_id, gym_name} 또는 None"""
        ...

    async def create_gym(self, name: str, owner_user_id: str) -> Dict[str, Any]:
        ...
