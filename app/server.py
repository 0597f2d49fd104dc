"""
Gym Console - FastAPI 웹 서버
체육관/도장 회원 관리 콘솔 API

데이터 소스: Supabase (gym_id 단위 테넌트 분리)
"""
from fastapi import FastAPI
from loguru import logger
from dotenv import load_dotenv

from app.gym.config import get_supabase_config
from app.gym.errors import MemberError
from app.gym.router import router as gym_router, member_error_handler
from database.supabase_client import create_supabase_client

# 환경변수 로드
load_dotenv()

# FastAPI 앱
app = FastAPI(
    title="Gym Console",
    description="체육관 회원 관리 콘솔 - 회원권 만료/정지 관리, CSV 일괄 등록, 추정 매출 대시보드",
    version="1.0.0"
)

# 회원 관리 라우터 등록
app.include_router(gym_router)

# 코어 오류 → HTTP 상태 코드
app.add_exception_handler(MemberError, member_error_handler)


# ==================== Lifecycle ====================

@app.on_event("startup")
async def startup_event():
    """서버 시작 시 Supabase 클라이언트 생성"""
    app.state.supabase = create_supabase_client(get_supabase_config())
    logger.info("✅ 서버 시작 완료 - Supabase 연결 준비")


@app.on_event("shutdown")
async def shutdown_event():
    """서버 종료 시 정리"""
    app.state.supabase = None
    logger.info("서버 종료됨")


@app.get("/api/health")
async def api_health():
    """서버 상태"""
    return {
        "status": "ok",
        "supabase_connected": getattr(app.state, "supabase", None) is not None
    }
