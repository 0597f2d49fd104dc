"""
Gym Console Dependencies

인증, 체육관(테넌트) 확인, 서비스 주입
"""

from typing import Optional

from fastapi import Depends, HTTPException, Request, status

from database.supabase_client import SupabaseGymStore, SupabaseMemberStore
from .config import GymSettings, get_gym_settings
from .service import MemberService


class GymContext:
    """로그인 사용자 + 소속 체육관"""

    def __init__(
        self,
        user_id: str,
        gym_id: str,
        gym_name: Optional[str] = None
    ):
        self.user_id = user_id
        self.gym_id = gym_id
        self.gym_name = gym_name


# =============================================
# 저장소/서비스
# =============================================

def get_member_store(request: Request) -> SupabaseMemberStore:
    return SupabaseMemberStore(request.app.state.supabase)


def get_gym_store(request: Request) -> SupabaseGymStore:
    return SupabaseGymStore(request.app.state.supabase)


def get_member_service(
    store: SupabaseMemberStore = Depends(get_member_store),
    settings: GymSettings = Depends(get_gym_settings)
) -> MemberService:
    return MemberService(store, settings)


# =============================================
# 인증
# =============================================

async def get_current_user_id(
    request: Request,
    gym_store: SupabaseGymStore = Depends(get_gym_store)
) -> str:
    """Authorization: Bearer 토큰 → Supabase 사용자 ID"""
    auth_header = request.headers.get("Authorization") or ""
    if not auth_header.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing Authorization Bearer token"
        )

    token = auth_header[len("Bearer "):].strip()
    user_id = await gym_store.get_user_id(token) if token else None
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token"
        )
    return user_id


async def get_current_gym(
    user_id: str = Depends(get_current_user_id),
    gym_store: SupabaseGymStore = Depends(get_gym_store)
) -> GymContext:
    """로그인 사용자의 체육관 (없으면 404)"""
    gym = await gym_store.get_gym_for_user(user_id)
    if not gym:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No gym"
        )
    return GymContext(
        user_id=user_id,
        gym_id=gym["gym_id"],
        gym_name=gym.get("gym_name"),
    )
