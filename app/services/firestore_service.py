# app/services/firestore_service.py
import logging
from contextlib import contextmanager

from google.api_core import exceptions as google_exceptions

from app.core import errors


@contextmanager
def store_write(description: str):
    """
    Firestore 쓰기 작업을 감싸서 저장소 오류를 도메인 예외로 변환합니다.

    - 권한 거부(보안 규칙) → PermissionDenied
    - 그 외 API/네트워크 오류 → NetworkOrStoreFailure

    사용 예:
        with store_write("좋아요 추가"):
            entry_ref.update({'likes': firestore.ArrayUnion([uid])})
    """
    try:
        yield
    except google_exceptions.PermissionDenied as e:
        logging.error(f"Firestore 쓰기 권한 거부 ({description}): {e}")
        raise errors.PermissionDenied(f"{description} 권한이 없습니다.") from e
    except (google_exceptions.GoogleAPIError, ConnectionError, TimeoutError) as e:
        logging.error(f"Firestore 쓰기 실패 ({description}): {e}", exc_info=True)
        raise errors.NetworkOrStoreFailure(f"{description} 중 오류가 발생했습니다.") from e
