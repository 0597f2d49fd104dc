"""
Supabase 데이터베이스 클라이언트
"""
import re
from typing import Any, Dict, List, Optional

from loguru import logger
from supabase import Client, create_client

from app.gym.config import SupabaseConfig
from app.gym.errors import NotFoundError, StoreError
from app.gym.normalizer import normalize_phone

MEMBERS_TABLE = "members"
GYMS_TABLE = "gyms"
GYM_USERS_TABLE = "gym_users"

# PostgREST or_ 필터 구분자
_FILTER_DELIMITERS = re.compile(r"[,()]")

# 숫자/하이픈/공백만으로 된 검색어 (전화번호 검색)
_PHONE_QUERY = re.compile(r"^[\d\-\s]*\d[\d\-\s]*$")


def build_search_filter(query: str) -> Optional[str]:
    """
    이름/전화번호 부분검색용 or_ 필터

    구분자(,())는 제거, 전화번호 형태면 숫자만으로 비교 (010-1234 → 0101234)
    """
    term = _FILTER_DELIMITERS.sub("", query).strip()
    if not term:
        return None
    phone_term = normalize_phone(term) if _PHONE_QUERY.match(term) else term
    return f"name.ilike.%{term}%,phone.ilike.%{phone_term}%"


def create_supabase_client(config: SupabaseConfig) -> Client:
    """
    Supabase 클라이언트 생성

    수명 관리는 호출자 담당 (서버는 startup 시 생성해 app.state에 보관)
    """
    if not config.supabase_url or not config.supabase_key:
        raise ValueError("SUPABASE_URL과 SUPABASE_KEY 환경변수를 설정해주세요")
    return create_client(config.supabase_url, config.supabase_key)


def _execute(query, action: str):
    """쿼리 실행, 백엔드 오류는 StoreError로 변환"""
    try:
        return query.execute()
    except Exception as e:
        logger.error(f"{action} 오류: {e}")
        message = getattr(e, "message", None) or str(e)
        raise StoreError(message) from e


class SupabaseMemberStore:
    """회원 저장소 (gym_id 범위, 삭제 회원 제외)"""

    def __init__(self, client: Client):
        self.client = client

    def _live_members(self, gym_id: str, columns: str = "*"):
        return self.client.table(MEMBERS_TABLE).select(columns).eq(
            "gym_id", gym_id
        ).is_("deleted_at", "null")

    # ==================== 조회 ====================

    async def find_by_phones(self, gym_id: str, phones: List[str]) -> List[Dict[str, Any]]:
        """전화번호로 기존 회원 조회"""
        if not phones:
            return []
        result = _execute(
            self._live_members(gym_id, "id, phone").in_("phone", phones),
            "전화번호 회원 조회"
        )
        return result.data or []

    async def get_member(self, gym_id: str, member_id: str) -> Dict[str, Any]:
        """회원 단건 조회"""
        result = _execute(
            self._live_members(gym_id).eq("id", member_id).limit(1),
            "회원 조회"
        )
        if not result.data:
            raise NotFoundError("회원을 찾을 수 없습니다")
        return result.data[0]

    async def list_members(self, gym_id: str, query: Optional[str] = None) -> List[Dict[str, Any]]:
        """회원 목록 (만료일 오름차순)"""
        search = self._live_members(gym_id)
        search_filter = build_search_filter(query) if query else None
        if search_filter:
            search = search.or_(search_filter)
        result = _execute(search.order("expire_date"), "회원 목록 조회")
        return result.data or []

    # ==================== 저장 ====================

    async def insert_member(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """회원 등록"""
        result = _execute(
            self.client.table(MEMBERS_TABLE).insert(record),
            "회원 등록"
        )
        if not result.data:
            raise StoreError("회원 등록 결과가 비어 있습니다")
        return result.data[0]

    async def update_member(self, gym_id: str, member_id: str, patch: Dict[str, Any]) -> Dict[str, Any]:
        """조건부 수정 (id + gym_id + 미삭제)"""
        result = _execute(
            self.client.table(MEMBERS_TABLE).update(patch).eq(
                "id", member_id
            ).eq("gym_id", gym_id).is_("deleted_at", "null"),
            "회원 수정"
        )
        if not result.data:
            raise NotFoundError("회원을 찾을 수 없습니다")
        return result.data[0]


class SupabaseGymStore:
    """체육관/사용자 저장소"""

    def __init__(self, client: Client):
        self.client = client

    async def get_user_id(self, access_token: str) -> Optional[str]:
        """액세스 토큰 → 사용자 ID (유효하지 않으면 None)"""
        try:
            user_response = self.client.auth.get_user(access_token)
        except Exception as e:
            logger.warning(f"토큰 검증 실패: {e}")
            return None

        if not user_response or not user_response.user:
            return None
        return str(user_response.user.id)

    async def get_gym_for_user(self, user_id: str) -> Optional[Dict[str, Any]]:
        """사용자의 소속 체육관"""
        result = _execute(
            self.client.table(GYM_USERS_TABLE).select(
                "gym_id, gyms:gyms(id, name)"
            ).eq("user_id", user_id).limit(1),
            "체육관 조회"
        )
        if not result.data or not result.data[0].get("gym_id"):
            return None

        row = result.data[0]
        gym = row.get("gyms") or {}
        return {
            "gym_id": str(row["gym_id"]),
            "gym_name": gym.get("name"),
        }

    async def create_gym(self, name: str, owner_user_id: str) -> Dict[str, Any]:
        """체육관 생성 + 생성자를 OWNER로 등록"""
        result = _execute(
            self.client.table(GYMS_TABLE).insert({"name": name}),
            "체육관 생성"
        )
        if not result.data:
            raise StoreError("체육관 생성 결과가 비어 있습니다")
        gym = result.data[0]

        _execute(
            self.client.table(GYM_USERS_TABLE).insert({
                "gym_id": gym["id"],
                "user_id": owner_user_id,
                "role": "OWNER",
            }),
            "체육관 사용자 등록"
        )
        logger.info(f"체육관 생성: {gym['id']} ({name})")
        return gym
