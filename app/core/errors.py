# app/core/errors.py
"""
서비스 계층에서 발생시키는 도메인 예외 정의.

각 예외는 응답에 사용할 error_code와 HTTP 상태 코드를 가지고 있으며,
app/__init__.py의 전역 에러 핸들러가 이를 JSON 응답으로 변환합니다.
"""


class JournalError(Exception):
    """모든 도메인 예외의 기반 클래스."""
    error_code = "INTERNAL_SERVER_ERROR"
    status_code = 500
    default_message = "서버 내부에서 예상치 못한 오류가 발생했습니다."

    def __init__(self, message: str = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    def to_dict(self) -> dict:
        return {"error_code": self.error_code, "message": self.message}


class AuthRequired(JournalError):
    """로그인이 필요한 동작을 비로그인 상태에서 요청한 경우. 클라이언트는 로그인 창을 띄웁니다."""
    error_code = "AUTH_REQUIRED"
    status_code = 401
    default_message = "로그인이 필요합니다."


class PermissionDenied(JournalError, PermissionError):
    """본인 소유가 아닌 문서를 수정/삭제하려 하거나 저장소가 쓰기를 거부한 경우."""
    error_code = "FORBIDDEN"
    status_code = 403
    default_message = "이 작업을 수행할 권한이 없습니다."


class NotFound(JournalError, LookupError):
    error_code = "NOT_FOUND"
    status_code = 404
    default_message = "요청한 리소스를 찾을 수 없습니다."


class ValidationFailure(JournalError, ValueError):
    """필수 입력값이 비어 있는 경우. 저장소 호출 전에 차단됩니다."""
    error_code = "VALIDATION_ERROR"
    status_code = 400
    default_message = "입력값이 올바르지 않습니다."


class ConfirmationRequired(ValidationFailure):
    """삭제와 같이 되돌릴 수 없는 동작에 확인(confirm=true)이 빠진 경우."""
    error_code = "CONFIRMATION_REQUIRED"
    default_message = "삭제하려면 확인이 필요합니다. (confirm=true)"


class NetworkOrStoreFailure(JournalError):
    """Firestore/Storage 호출이 실패한 경우 (주요 쓰기 작업)."""
    error_code = "STORE_FAILURE"
    status_code = 502
    default_message = "저장소와 통신하는 중 오류가 발생했습니다."
