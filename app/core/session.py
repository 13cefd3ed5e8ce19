# app/core/session.py
"""
요청 단위의 로그인 세션 컨텍스트.

전역 상태 대신 SessionContext 객체를 만들어 서비스에 명시적으로 전달합니다.
- on_auth_changed: 인증 정보(JWT identity)가 들어오거나 사라질 때 (로그인/로그아웃)
- on_profile_snapshot: 'users' 문서를 읽어왔을 때
- teardown: 요청 종료 시 정리
"""
import logging
from dataclasses import dataclass
from typing import Optional, FrozenSet

from flask import current_app, g
from flask_jwt_extended import verify_jwt_in_request, get_jwt_identity

from app.core.errors import AuthRequired
from app.models.user import UserProfile


@dataclass(frozen=True)
class Viewer:
    """현재 요청을 보낸 로그인 사용자."""
    uid: str
    display_name: Optional[str] = None
    photo_url: Optional[str] = None


class SessionContext:
    def __init__(self):
        self._identity: Optional[str] = None
        self._profile: Optional[UserProfile] = None

    def on_auth_changed(self, identity: Optional[str]) -> None:
        if identity != self._identity:
            # 다른 사용자로 바뀌거나 로그아웃하면 이전 프로필은 더 이상 유효하지 않음
            self._profile = None
        self._identity = identity

    def on_profile_snapshot(self, profile: Optional[UserProfile]) -> None:
        if profile is not None and profile.uid != self._identity:
            logging.warning(f"세션 사용자와 다른 프로필 스냅샷은 무시합니다 (session: {self._identity}, profile: {profile.uid})")
            return
        self._profile = profile

    def teardown(self) -> None:
        self._identity = None
        self._profile = None

    @property
    def is_authenticated(self) -> bool:
        return self._identity is not None

    @property
    def profile(self) -> Optional[UserProfile]:
        return self._profile

    @property
    def viewer(self) -> Optional[Viewer]:
        if self._identity is None:
            return None
        if self._profile is None:
            return Viewer(uid=self._identity)
        return Viewer(uid=self._identity, display_name=self._profile.display_name, photo_url=self._profile.photo_url)

    @property
    def following(self) -> FrozenSet[str]:
        if self._profile is None:
            return frozenset()
        return frozenset(self._profile.following)

    def require_viewer(self) -> Viewer:
        viewer = self.viewer
        if viewer is None:
            raise AuthRequired()
        return viewer


def current_session() -> SessionContext:
    """
    요청의 JWT(선택)와 프로필 문서로 SessionContext를 만들어 g에 보관합니다.
    같은 요청 안에서는 한 번만 생성됩니다.
    """
    if 'session_context' in g:
        return g.session_context

    session = SessionContext()
    verify_jwt_in_request(optional=True)
    identity = get_jwt_identity()
    session.on_auth_changed(identity)
    if identity:
        session.on_profile_snapshot(current_app.services['profiles'].get_profile(identity))

    g.session_context = session
    return session


def teardown_session(exc=None) -> None:
    """app.teardown_request에 등록되어 요청이 끝나면 세션을 정리합니다."""
    session = g.pop('session_context', None)
    if session is not None:
        session.teardown()
