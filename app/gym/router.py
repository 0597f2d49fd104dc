"""
Gym Console Router

회원 관리 콘솔 API
- 로그인 사용자/체육관
- 회원 목록/조회/등록/수정/정지/재개/삭제
- CSV 일괄 등록
- 대시보드 (상태 카운트 + 추정 매출)
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, Request, UploadFile
from fastapi.responses import JSONResponse
from loguru import logger

from database.supabase_client import SupabaseGymStore
from .dependencies import (
    GymContext,
    get_current_gym,
    get_current_user_id,
    get_gym_store,
    get_member_service,
)
from .csv_import import decode_csv_bytes
from .errors import InvalidStateError, MemberError, NotFoundError, StoreError, ValidationError
from .models import (
    DashboardResponse,
    GymCreate,
    ImportSummary,
    MeResponse,
    MemberCreate,
    MemberListResponse,
    MemberUpdate,
)
from .service import DEFAULT_PAGE_SIZE, MemberService

router = APIRouter(prefix="/api", tags=["Gym Console"])

# 오류 유형 → HTTP 상태 코드
ERROR_STATUS_CODES = {
    ValidationError: 400,
    InvalidStateError: 400,
    NotFoundError: 404,
    StoreError: 500,
}


async def member_error_handler(request: Request, exc: MemberError) -> JSONResponse:
    """코어 오류를 HTTP 응답으로 변환"""
    status_code = ERROR_STATUS_CODES.get(type(exc), 500)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} 실패: {exc.message}")
    return JSONResponse(status_code=status_code, content={"detail": exc.message})


# =============================================
# 사용자/체육관
# =============================================

@router.get("/me", response_model=MeResponse)
async def get_me(
    user_id: str = Depends(get_current_user_id),
    gym_store: SupabaseGymStore = Depends(get_gym_store)
):
    """로그인 사용자와 소속 체육관"""
    gym = await gym_store.get_gym_for_user(user_id)
    return MeResponse(
        user_id=user_id,
        gym_id=gym["gym_id"] if gym else None,
        gym_name=gym.get("gym_name") if gym else None,
    )


@router.post("/gyms")
async def create_gym(
    data: GymCreate,
    user_id: str = Depends(get_current_user_id),
    gym_store: SupabaseGymStore = Depends(get_gym_store)
):
    """
    체육관 생성

    이미 체육관이 있는 사용자는 다시 만들 수 없습니다.
    """
    existing = await gym_store.get_gym_for_user(user_id)
    if existing:
        raise HTTPException(
            status_code=409,
            detail="Gym already exists for this user"
        )

    gym = await gym_store.create_gym(data.name, user_id)
    return {"gym": gym}


# =============================================
# 회원 관리
# =============================================

@router.get("/members", response_model=MemberListResponse)
async def list_members(
    status: Optional[str] = Query(None, description="NORMAL | EXPIRING | OVERDUE"),
    q: Optional[str] = Query(None, description="이름/전화번호 검색"),
    page: int = Query(1),
    page_size: int = Query(DEFAULT_PAGE_SIZE, alias="pageSize"),
    gym: GymContext = Depends(get_current_gym),
    service: MemberService = Depends(get_member_service)
):
    """회원 목록 (만료일 오름차순)"""
    return await service.list_members(gym.gym_id, status=status, q=q, page=page, page_size=page_size)


@router.post("/members", status_code=201)
async def create_member(
    data: MemberCreate,
    gym: GymContext = Depends(get_current_gym),
    service: MemberService = Depends(get_member_service)
):
    """회원 등록"""
    member = await service.create_member(gym.gym_id, data)
    return {"member": member}


@router.get("/members/{member_id}")
async def get_member(
    member_id: str,
    gym: GymContext = Depends(get_current_gym),
    service: MemberService = Depends(get_member_service)
):
    """회원 단건 조회"""
    member = await service.get_member(gym.gym_id, member_id)
    return {"member": member}


@router.patch("/members/{member_id}")
async def update_member(
    member_id: str,
    data: MemberUpdate,
    gym: GymContext = Depends(get_current_gym),
    service: MemberService = Depends(get_member_service)
):
    """
    회원 수정

    - {"action": "PAUSE"}: 회원권 정지
    - {"action": "RESUME"}: 회원권 재개 (정지 일수만큼 만료일 연장)
    - 그 외: 전달된 필드만 수정
    """
    member = await service.update_member(gym.gym_id, member_id, data)
    return {"member": member}


@router.delete("/members/{member_id}")
async def delete_member(
    member_id: str,
    gym: GymContext = Depends(get_current_gym),
    service: MemberService = Depends(get_member_service)
):
    """회원 삭제 (소프트 삭제)"""
    deleted_id = await service.delete_member(gym.gym_id, member_id)
    return {"ok": True, "id": deleted_id}


# =============================================
# CSV 가져오기
# =============================================

@router.post("/import/members", response_model=ImportSummary)
async def import_members_csv(
    file: UploadFile = File(...),
    gym: GymContext = Depends(get_current_gym),
    service: MemberService = Depends(get_member_service)
):
    """
    CSV 회원 일괄 등록

    필수 헤더: 이름(name), 전화번호(phone), 성별(gender), 만료일(expire_date)
    전화번호가 같은 기존 회원은 수정, 없으면 등록합니다.
    """
    content = decode_csv_bytes(await file.read())
    return await service.import_csv(gym.gym_id, content)


# =============================================
# 대시보드
# =============================================

@router.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard(
    month: Optional[str] = Query(None, description="YYYY-MM (기본: 이번 달)"),
    unit_price: Optional[str] = Query(None, alias="unitPrice", description="월 단가"),
    gym: GymContext = Depends(get_current_gym),
    service: MemberService = Depends(get_member_service)
):
    """상태별 회원 수 + 추정 매출"""
    return await service.get_dashboard(gym.gym_id, month=month, unit_price=unit_price)
