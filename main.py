"""
Gym Console 메인

- serve: API 서버 실행
- import: CSV 파일로 회원 일괄 등록
"""
import asyncio
import json
import sys
from pathlib import Path

from loguru import logger

from app.gym.config import get_gym_settings, get_supabase_config
from app.gym.csv_import import decode_csv_bytes
from app.gym.errors import MemberError
from app.gym.service import MemberService
from database.supabase_client import SupabaseMemberStore, create_supabase_client


def setup_logging():
    """로깅 설정"""
    settings = get_gym_settings()
    logger.remove()
    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        level=settings.log_level
    )
    logger.add(
        f"{settings.log_dir}/gym_console_{{time:YYYY-MM-DD}}.log",
        rotation="1 day",
        retention="30 days",
        level="DEBUG"
    )


async def run_import(gym_id: str, csv_path: Path) -> int:
    """CSV 파일 회원 일괄 등록"""
    if not csv_path.exists():
        logger.error(f"파일을 찾을 수 없음: {csv_path}")
        return 1

    client = create_supabase_client(get_supabase_config())
    service = MemberService(SupabaseMemberStore(client), get_gym_settings())

    try:
        summary = await service.import_csv(gym_id, decode_csv_bytes(csv_path.read_bytes()))
    except MemberError as e:
        logger.error(f"CSV 가져오기 실패: {e.message}")
        return 1

    print(json.dumps(summary.model_dump(), ensure_ascii=False, indent=2))
    return 0 if summary.failed == 0 else 2


def run_server():
    """API 서버 실행"""
    import uvicorn

    settings = get_gym_settings()
    uvicorn.run(
        "app.server:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower()
    )


def main():
    """메인 함수"""
    import argparse

    parser = argparse.ArgumentParser(description="체육관 회원 관리 콘솔")
    parser.add_argument(
        "--mode",
        choices=["serve", "import"],
        default="serve",
        help="실행 모드"
    )
    parser.add_argument("--gym-id", help="가져올 체육관 ID (import 모드)")
    parser.add_argument("--file", type=Path, help="CSV 파일 경로 (import 모드)")

    args = parser.parse_args()
    setup_logging()

    if args.mode == "import":
        if not args.gym_id or not args.file:
            parser.error("import 모드에는 --gym-id와 --file이 필요합니다")
        sys.exit(asyncio.run(run_import(args.gym_id, args.file)))

    run_server()


if __name__ == "__main__":
    main()
