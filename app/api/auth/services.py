# app/api/auth/services.py
import logging
from datetime import datetime
from typing import Dict, Any, Tuple

from firebase_admin import firestore, auth as firebase_auth

from app.api.users.services import ProfileService
from app.core.errors import AuthRequired
from app.models.user import UserProfile
from app.utils.datetime_utils import DateTimeUtils


class AuthService:
    """
    Firebase Authentication 로그인 결과를 이 서비스의 JWT 세션으로 연결합니다.
    - Firebase ID 토큰 검증 후 프로필을 생성/갱신
    - 로그아웃한 토큰의 jti를 'revoked_tokens' 컬렉션에 보관
    """

    def __init__(self, profile_service: ProfileService, db=None, verify_id_token=None):
        self.db = db or firestore.client()
        self.revoked_tokens_ref = self.db.collection('revoked_tokens')
        self.profile_service = profile_service
        self._verify_id_token = verify_id_token or firebase_auth.verify_id_token

    def sign_in_with_id_token(self, id_token: str) -> Tuple[UserProfile, bool]:
        """
        Firebase ID 토큰을 검증하고 프로필을 가져옵니다. 첫 로그인이면 프로필을 만듭니다.

        :return: (프로필, 신규 사용자 여부)
        """
        try:
            decoded = self._verify_id_token(id_token)
        except (ValueError, firebase_auth.InvalidIdTokenError, firebase_auth.ExpiredIdTokenError) as e:
            logging.warning(f"Firebase ID 토큰 검증 실패: {e}")
            raise AuthRequired("유효하지 않은 로그인 토큰입니다.") from e

        identity: Dict[str, Any] = {
            'uid': decoded['uid'],
            'email': decoded.get('email'),
            'name': decoded.get('name'),
            'picture': decoded.get('picture'),
        }
        is_new_user = self.profile_service.get_profile(identity['uid']) is None
        profile = self.profile_service.get_or_create_profile(identity)
        logging.info(f"로그인 처리 완료 (uid: {profile.uid}, new: {is_new_user})")
        return profile, is_new_user

    # --- Blocklist 관련 로직 ---
    def add_token_to_blocklist(self, jti: str, expires: datetime):
        """전달받은 토큰의 jti를 만료 시간과 함께 Firestore에 저장합니다."""
        try:
            self.revoked_tokens_ref.document(jti).set({
                'revokedAt': DateTimeUtils.now_ms(),
                'expiresAt': DateTimeUtils.to_timestamp_ms(expires),
            })
        except Exception as e:
            logging.error(f"Blocklist 토큰 추가 실패 (jti: {jti}): {e}")

    def is_token_revoked(self, jwt_payload: dict) -> bool:
        """jti를 이용해 해당 토큰이 무효화 목록에 있는지 확인합니다."""
        doc = self.revoked_tokens_ref.document(jwt_payload['jti']).get()
        return doc.exists

    def logout_user(self, access_jti: str, access_exp: int, refresh_jti: str, refresh_exp: int):
        """Access 토큰과 Refresh 토큰을 모두 Blocklist에 추가합니다."""
        self.add_token_to_blocklist(access_jti, DateTimeUtils.from_timestamp_ms(access_exp * 1000))
        self.add_token_to_blocklist(refresh_jti, DateTimeUtils.from_timestamp_ms(refresh_exp * 1000))
        logging.info(f"사용자 로그아웃 처리 완료. JTI: {access_jti[:8]}..., {refresh_jti[:8]}...")
