"""
Gym Member Errors

회원 관리 코어에서 발생하는 오류 유형
HTTP 상태 코드 변환은 라우터에서 담당
"""


class MemberError(Exception):
    """회원 관리 오류 기본 클래스"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(MemberError):
    """입력값 누락/형식 오류"""


class InvalidStateError(MemberError):
    """허용되지 않는 상태 전이 (예: 정지 상태가 아닌 회원 재개)"""


class NotFoundError(MemberError):
    """존재하지 않는 회원 또는 다른 체육관 소속"""


class StoreError(MemberError):
    """저장소(Supabase) 오류"""
