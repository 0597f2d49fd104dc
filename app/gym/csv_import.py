"""
CSV 회원 일괄 등록

parse → 헤더 매핑 → 행 검증 → 기존 회원과 대조(전화번호 기준) → 결과 요약

- 헤더는 영문/한글 모두 허용 (이름/name, 전화번호/phone ...)
- 행 오류는 해당 행만 실패 처리하고 다음 행 계속 진행
- 같은 파일 안에서 같은 전화번호가 다시 나오면 방금 등록한 회원을 수정 (마지막 행 우선)
"""
import csv
import io
from typing import Dict, List, Optional, Union

from loguru import logger

from .dates import is_calendar_date
from .errors import NotFoundError, StoreError, ValidationError
from .models import CsvMemberPayload, ImportRowError, ImportSummary, MembershipState
from .normalizer import normalize_gender, normalize_phone
from .store import MemberStore

# 응답에 포함할 최대 오류 수
MAX_REPORTED_ERRORS = 20

REQUIRED_FIELDS = ("name", "phone", "gender", "expire_date")

HEADER_MAP = {
    "name": "name",
    "이름": "name",
    "phone": "phone",
    "전화번호": "phone",
    "전화": "phone",
    "gender": "gender",
    "성별": "gender",
    "start_date": "start_date",
    "startdate": "start_date",
    "시작일": "start_date",
    "expire_date": "expire_date",
    "expiredate": "expire_date",
    "만료일": "expire_date",
    "memo": "memo",
    "메모": "memo",
}


# 엑셀에서 저장한 CSV는 cp949인 경우가 많음
CSV_ENCODINGS = ("utf-8", "cp949")


# =============================================================================
# 파싱
# =============================================================================

def decode_csv_bytes(raw: bytes) -> str:
    """업로드된 CSV 바이트를 문자열로 (UTF-8 → CP949 순서로 시도)"""
    for encoding in CSV_ENCODINGS:
        try:
            return raw.decode(encoding)
        except UnicodeDecodeError:
            continue
    raise ValidationError("CSV 파일 인코딩을 읽을 수 없습니다 (UTF-8 또는 CP949)")


def parse_csv(content: str) -> List[List[str]]:
    """
    CSV 문자열 → 행 목록

    - 따옴표 필드, 필드 내 쉼표/줄바꿈, "" 이스케이프 지원
    - \\n, \\r\\n 줄바꿈 모두 허용
    - 빈 줄은 빈 리스트로 반환 (가져오기 시 건너뜀)
    """
    return list(csv.reader(io.StringIO(content, newline="")))


# =============================================================================
# 헤더 매핑
# =============================================================================

def normalize_header(header: str) -> str:
    """BOM 제거, 소문자, 공백 제거, '-' → '_'"""
    normalized = header.strip()
    if normalized.startswith("\ufeff"):
        normalized = normalized[1:]
    normalized = normalized.strip().lower()
    normalized = "".join(normalized.split())
    return normalized.replace("-", "_")


def map_headers(header_row: List[str]) -> Dict[str, int]:
    """논리 필드 → 컬럼 인덱스 (중복 시 첫 컬럼 우선, 모르는 컬럼 무시)"""
    mapped: Dict[str, int] = {}
    for index, header in enumerate(header_row):
        field = HEADER_MAP.get(normalize_header(header))
        if field is None or field in mapped:
            continue
        mapped[field] = index
    return mapped


def _get_cell(row: List[str], index: Optional[int]) -> str:
    if index is None or index >= len(row):
        return ""
    return row[index].strip()


# =============================================================================
# 행 검증
# =============================================================================

def validate_csv_row(
    row: List[str],
    mapped: Dict[str, int],
    row_number: int
) -> Union[CsvMemberPayload, ImportRowError]:
    """행 검증: 첫 번째 실패 항목이 오류 사유가 된다"""
    name = _get_cell(row, mapped.get("name"))
    phone = normalize_phone(_get_cell(row, mapped.get("phone")))
    gender = normalize_gender(_get_cell(row, mapped.get("gender")))
    start_date = _get_cell(row, mapped.get("start_date"))
    expire_date = _get_cell(row, mapped.get("expire_date"))
    memo = _get_cell(row, mapped.get("memo"))

    if not name:
        return ImportRowError(row=row_number, reason="이름 누락")
    if not phone:
        return ImportRowError(row=row_number, reason="전화번호 누락")
    if not gender:
        return ImportRowError(row=row_number, reason="성별은 남/여만 허용")
    if not expire_date:
        return ImportRowError(row=row_number, reason="만료일 누락")
    if not is_calendar_date(expire_date):
        return ImportRowError(row=row_number, reason="만료일 형식 오류(YYYY-MM-DD)")
    if start_date and not is_calendar_date(start_date):
        return ImportRowError(row=row_number, reason="시작일 형식 오류(YYYY-MM-DD)")

    return CsvMemberPayload(
        row=row_number,
        name=name,
        phone=phone,
        gender=gender,
        start_date=start_date or None,
        expire_date=expire_date,
        memo=memo or None,
    )


def _is_empty_row(row: List[str]) -> bool:
    return all(cell.strip() == "" for cell in row)


# =============================================================================
# 가져오기
# =============================================================================

async def import_members(store: MemberStore, gym_id: str, content: str) -> ImportSummary:
    """
    CSV 내용을 회원 데이터로 반영

    파일 단위 오류(빈 파일, 데이터 행 없음, 필수 헤더 누락)는 ValidationError,
    그 외 문제는 행 단위 오류로 요약에 포함된다. 전체 트랜잭션은 없다.
    """
    if not content.strip():
        raise ValidationError("CSV file is empty")

    rows = parse_csv(content)
    if len(rows) < 2:
        raise ValidationError("CSV must include header + data rows")

    mapped = map_headers(rows[0])
    missing = [field for field in REQUIRED_FIELDS if field not in mapped]
    if missing:
        raise ValidationError(f"Missing required headers: {', '.join(missing)}")

    payloads: List[CsvMemberPayload] = []
    errors: List[ImportRowError] = []

    # 첫 데이터 행 = 2행 (헤더 포함 번호)
    for row_number, row in enumerate(rows[1:], start=2):
        if _is_empty_row(row):
            continue
        validated = validate_csv_row(row, mapped, row_number)
        if isinstance(validated, ImportRowError):
            errors.append(validated)
            continue
        payloads.append(validated)

    if not payloads:
        logger.info(f"CSV 가져오기: 유효한 행 없음 (오류 {len(errors)}건)")
        return ImportSummary(
            total=0,
            failed=len(errors),
            errors=errors[:MAX_REPORTED_ERRORS],
        )

    phones = list(dict.fromkeys(payload.phone for payload in payloads))
    existing = await store.find_by_phones(gym_id, phones)
    existing_map = {member["phone"]: str(member["id"]) for member in existing}

    created = 0
    updated = 0
    failed = len(errors)

    for payload in payloads:
        member_id = existing_map.get(payload.phone)
        try:
            if member_id:
                # 시트에 없는 필드(띠 등)는 건드리지 않음
                await store.update_member(gym_id, member_id, {
                    "name": payload.name,
                    "gender": payload.gender.value,
                    "start_date": payload.start_date,
                    "expire_date": payload.expire_date,
                    "memo": payload.memo,
                })
                updated += 1
                continue

            inserted = await store.insert_member({
                "gym_id": gym_id,
                "name": payload.name,
                "phone": payload.phone,
                "gender": payload.gender.value,
                "start_date": payload.start_date,
                "expire_date": payload.expire_date,
                "memo": payload.memo,
                "membership_state": MembershipState.ACTIVE.value,
                "paused_at": None,
                "paused_days_total": 0,
            })
        except (StoreError, NotFoundError) as e:
            logger.warning(f"CSV {payload.row}행 저장 실패: {e.message}")
            failed += 1
            errors.append(ImportRowError(row=payload.row, reason=e.message))
            continue

        created += 1
        if inserted.get("id") and inserted.get("phone"):
            existing_map[inserted["phone"]] = str(inserted["id"])

    logger.info(
        f"CSV 가져오기 완료: 총 {len(payloads)}건 (등록 {created}, 수정 {updated}, 실패 {failed})"
    )

    return ImportSummary(
        total=len(payloads),
        created=created,
        updated=updated,
        failed=failed,
        errors=errors[:MAX_REPORTED_ERRORS],
    )
