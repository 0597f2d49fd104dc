"""
Gym Console 설정
"""
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

load_dotenv()


class SupabaseConfig(BaseSettings):
    """Supabase 설정"""

    supabase_url: str = Field(default="", description="Supabase Project URL")
    supabase_key: str = Field(default="", description="Supabase service role key")

    class Config:
        env_prefix = ""
        case_sensitive = False
        extra = "ignore"


class GymSettings(BaseSettings):
    """회원 관리 콘솔 설정"""

    # "오늘" 기준 시간대 (만료 상태, 정지 일수, 매출 집계 모두 이 시간대 기준)
    timezone: str = Field(default="Asia/Seoul", description="기준 시간대")

    # 서버
    host: str = Field(default="0.0.0.0", description="서버 호스트")
    port: int = Field(default=8000, description="서버 포트")

    # 로깅
    log_level: str = Field(default="INFO", description="콘솔 로그 레벨")
    log_dir: str = Field(default="logs", description="로그 파일 디렉토리")

    class Config:
        env_prefix = "GYM_"
        case_sensitive = False
        extra = "ignore"


@lru_cache()
def get_supabase_config() -> SupabaseConfig:
    return SupabaseConfig()


@lru_cache()
def get_gym_settings() -> GymSettings:
    return GymSettings()
