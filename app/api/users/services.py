# app/api/users/services.py
import logging
from typing import Optional, Dict, Any

from firebase_admin import firestore

from app.models.user import UserProfile
from app.services.firestore_service import store_write
from app.utils.datetime_utils import DateTimeUtils


class ProfileService:
    """
    'users' 컬렉션을 담당하는 프로필 저장소.
    - 최초 로그인 시 프로필 문서를 지연 생성
    - 로그인할 때마다 인증 정보(email/displayName/photoURL)를 갱신
    - 장비/지역 등 사용자가 편집하는 프로필 수정
    팔로우 관계(followers/following)의 변경은 SocialService가 담당합니다.
    """
    EDITABLE_FIELDS = {'display_name': 'displayName', 'equipment': 'equipment', 'region': 'region'}

    def __init__(self, db=None):
        self.db = db or firestore.client()
        self.users_ref = self.db.collection('users')

    def get_profile(self, uid: str) -> Optional[UserProfile]:
        doc = self.users_ref.document(uid).get()
        if not doc.exists:
            return None
        data = doc.to_dict()
        data.setdefault('uid', uid)
        return UserProfile.from_dict(data)

    def get_or_create_profile(self, identity: Dict[str, Any]) -> UserProfile:
        """
        Firebase ID 토큰에서 얻은 인증 정보로 프로필을 가져오거나 새로 만듭니다.

        :param identity: {'uid', 'email', 'name', 'picture'} (Firebase 토큰 클레임)
        :return: 최신 UserProfile
        """
        uid = identity.get('uid')
        if not uid:
            raise ValueError("인증 정보에 'uid'가 필요합니다.")

        identity_fields = {
            'email': identity.get('email'),
            'displayName': identity.get('name'),
            'photoURL': identity.get('picture'),
        }
        user_ref = self.users_ref.document(uid)
        doc = user_ref.get()

        if not doc.exists:
            new_profile = UserProfile(
                uid=uid,
                email=identity_fields['email'],
                display_name=identity_fields['displayName'],
                photo_url=identity_fields['photoURL'],
                created_at=DateTimeUtils.now_ms()
            )
            with store_write("프로필 생성"):
                user_ref.set(new_profile.to_dict())
            logging.info(f"신규 프로필 생성 (uid: {uid})")
            return new_profile

        # 기존 사용자: 인증 정보에서 온 필드만 갱신합니다.
        # 사용자가 직접 바꾼 displayName은 토큰에 이름이 없을 때 유지합니다.
        refresh = {k: v for k, v in identity_fields.items() if v is not None}
        if refresh:
            with store_write("프로필 갱신"):
                user_ref.update(refresh)
        data = doc.to_dict()
        data.update(refresh)
        data.setdefault('uid', uid)
        return UserProfile.from_dict(data)

    def update_profile(self, uid: str, update_data: Dict[str, Any]) -> Optional[UserProfile]:
        """displayName/equipment/region을 부분 업데이트합니다."""
        user_ref = self.users_ref.document(uid)
        if not user_ref.get().exists:
            return None

        payload = {stored: update_data[key] for key, stored in self.EDITABLE_FIELDS.items() if key in update_data}
        if payload:
            with store_write("프로필 수정"):
                user_ref.update(payload)
        return self.get_profile(uid)
