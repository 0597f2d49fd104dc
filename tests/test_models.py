"""
입력 모델 검증 테스트
"""
import pytest
from pydantic import ValidationError as PydanticValidationError

from app.gym.models import (
    Belt,
    GymCreate,
    Member,
    MemberAction,
    MemberCreate,
    MemberGender,
    MembershipState,
    MemberUpdate,
)
from app.gym.normalizer import normalize_belt_gral, normalize_gender, normalize_phone


class TestNormalizer:
    """정규화 함수 테스트"""

    @pytest.mark.parametrize("raw,expected", [
        ("남", "남"), ("여자", "여"), ("M", "남"), (" Female ", "여"), ("기타", None), (None, None),
    ])
    def test_gender(self, raw, expected):
        assert normalize_gender(raw) == expected

    def test_phone(self):
        assert normalize_phone("010-1234 5678") == "01012345678"
        assert normalize_phone(1012345678) == ""

    @pytest.mark.parametrize("raw,expected", [
        (0, 0), (4, 4), ("3", 3), (2.0, 2), (5, None), ("-1", None), (2.5, None), (True, None), ("", None),
    ])
    def test_belt_gral(self, raw, expected):
        assert normalize_belt_gral(raw) == expected


class TestMemberCreate:
    """회원 등록 입력 테스트"""

    def test_minimal(self):
        payload = MemberCreate(name="홍길동", phone="01012345678", gender="여", expire_date="2024-12-31")
        assert payload.gender == MemberGender.FEMALE
        assert payload.start_date is None
        assert payload.belt is None

    def test_empty_optional_strings(self):
        payload = MemberCreate(
            name="홍길동", phone="010", gender="남", expire_date="2024-12-31",
            start_date="", belt="", belt_gral="", memo="  ",
        )
        assert payload.start_date is None
        assert payload.belt is None
        assert payload.belt_gral is None
        assert payload.memo is None

    @pytest.mark.parametrize("overrides,field", [
        ({"name": "  "}, "name"),
        ({"phone": "---"}, "phone"),
        ({"gender": "x"}, "gender"),
        ({"expire_date": "2024-02-30"}, "expire_date"),
        ({"start_date": "2024-1-1"}, "start_date"),
        ({"belt": "빨간띠"}, "belt"),
        ({"belt_gral": 7}, "belt_gral"),
    ])
    def test_invalid_fields(self, overrides, field):
        data = {"name": "홍길동", "phone": "01012345678", "gender": "남", "expire_date": "2024-12-31"}
        data.update(overrides)
        with pytest.raises(PydanticValidationError) as exc_info:
            MemberCreate(**data)
        assert exc_info.value.errors()[0]["loc"] == (field,)


class TestMemberUpdate:
    """회원 수정 입력 테스트"""

    def test_patch_only_sent_fields(self):
        payload = MemberUpdate(belt="보라띠", memo=None)
        assert payload.to_patch() == {"belt": "보라띠", "memo": None}

    def test_action_case_insensitive(self):
        assert MemberUpdate(action=" resume ").action == MemberAction.RESUME

    def test_action_excluded_from_patch(self):
        assert MemberUpdate(action="PAUSE").to_patch() == {}

    def test_belt_gral_update(self):
        assert MemberUpdate(belt_gral="3").to_patch() == {"belt_gral": 3}

    @pytest.mark.parametrize("raw", [None, "", 9])
    def test_belt_gral_cannot_be_cleared(self, raw):
        """수정 시 null/빈 값 그랄은 거부"""
        with pytest.raises(PydanticValidationError) as exc_info:
            MemberUpdate(belt_gral=raw)
        assert "belt_gral must be 0~4" in str(exc_info.value)

    def test_belt_can_be_cleared(self):
        assert MemberUpdate(belt=None).to_patch() == {"belt": None}

    def test_unknown_action(self):
        with pytest.raises(PydanticValidationError):
            MemberUpdate(action="FREEZE")


class TestMember:
    """저장 레코드 변환 테스트"""

    def test_defaults_from_nulls(self):
        member = Member.model_validate({
            "id": 12,
            "gym_id": "gym-1",
            "name": "홍길동",
            "phone": "010",
            "gender": "남",
            "belt": "검은띠",
            "expire_date": "2024-12-31",
            "membership_state": None,
            "paused_days_total": None,
            "created_at": "2024-01-10T01:00:00+00:00",
        })
        assert member.id == "12"
        assert member.belt == Belt.BLACK
        assert member.membership_state == MembershipState.ACTIVE
        assert member.paused_days_total == 0


class TestGymCreate:
    """체육관 생성 입력 테스트"""

    def test_name_trimmed(self):
        assert GymCreate(name="  강남 주짓수 ").name == "강남 주짓수"

    def test_blank_name(self):
        with pytest.raises(PydanticValidationError):
            GymCreate(name="   ")
