# app/api/feed/composer.py
"""
피드 정렬.

입력: createdAt 내림차순으로 정렬된 관측 일지 목록(저장소가 보내준 순서)과 사용자의 팔로우 집합.
출력: 팔로우한 사용자의 일지를 먼저, 같은 그룹 안에서는 최신순으로 보여주는 순열.
"""
import threading
from typing import AbstractSet, Optional, Sequence, Tuple

from app.models.journal import JournalEntry


def compose_feed(entries: Sequence[JournalEntry], viewer_following: Optional[AbstractSet[str]]) -> Sequence[JournalEntry]:
    """
    비로그인이거나 팔로우한 사용자가 없으면 입력을 그대로(같은 객체) 반환합니다.
    그 외에는 (팔로우 여부, createdAt) 기준 내림차순 안정 정렬을 수행합니다.
    키가 같은 일지끼리는 입력 순서를 유지하며, 어떤 일지도 빠지거나 중복되지 않습니다.
    """
    if not viewer_following:
        return entries

    # sorted()는 안정 정렬이므로 키가 같으면 입력 순서가 유지됩니다.
    return sorted(
        entries,
        key=lambda entry: (1 if entry.user_id in viewer_following else 0, entry.created_at),
        reverse=True,
    )


class FeedComposer:
    """
    compose_feed 결과를 (스냅샷 버전, 팔로우 집합) 단위로 메모이즈합니다.
    스냅샷 버전이 바뀌면 이전 결과는 모두 버립니다.
    """

    def __init__(self, max_cached: int = 256):
        self.max_cached = max_cached
        self._lock = threading.Lock()
        self._version: Optional[int] = None
        self._cache = {}

    def compose(self, version: Optional[int], entries: Tuple[JournalEntry, ...], viewer_following: Optional[AbstractSet[str]]) -> Sequence[JournalEntry]:
        """version이 None이면 (실시간 스냅샷이 아닌 직접 조회 결과) 캐시하지 않습니다."""
        if not viewer_following or version is None:
            return compose_feed(entries, viewer_following)

        key = frozenset(viewer_following)
        with self._lock:
            if version != self._version:
                self._version = version
                self._cache = {}
            cached = self._cache.get(key)
        if cached is not None:
            return cached

        composed = tuple(compose_feed(entries, key))
        with self._lock:
            if version == self._version:
                if len(self._cache) >= self.max_cached:
                    self._cache.clear()
                self._cache[key] = composed
        return composed

    def invalidate(self, version: int, items=None) -> None:
        """
        LiveQuery 구독자. 새 스냅샷이 도착하면 캐시를 비웁니다.
        리스너를 다시 시작해 버전 번호가 처음부터 매겨져도 이전 결과가 남지 않습니다.
        """
        with self._lock:
            self._version = version
            self._cache = {}
