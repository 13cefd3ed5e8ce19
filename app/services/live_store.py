# app/services/live_store.py
import logging
import threading
from typing import Any, Callable, List, Optional, Tuple

Listener = Callable[[int, tuple], None]


class LiveQuery:
    """
    Firestore 쿼리의 실시간 스냅샷을 보관하고 구독자에게 전달하는 반응형 저장소.

    Firestore 리스너가 스냅샷을 보내면 mapper로 변환한 불변 튜플과 버전 번호를 저장하고
    모든 구독자에게 알립니다. 화면(피드)은 언제나 이 저장소의 최신 스냅샷에서만 만들어지며,
    쓰기 작업의 결과를 이곳에 직접 반영하지 않습니다 (저장소가 다시 보내줄 때까지 기다림).

    Firestore는 스냅샷 콜백을 별도 스레드에서 호출하므로 내부 상태는 Lock으로 보호합니다.
    """

    def __init__(self, query, mapper: Callable[[Any], Any], name: str = 'query'):
        self.query = query
        self.mapper = mapper
        self.name = name
        self._lock = threading.Lock()
        self._listeners: List[Listener] = []
        self._version = 0
        self._items: Optional[tuple] = None
        self._watch = None

    def start(self) -> "LiveQuery":
        if self._watch is None:
            self._watch = self.query.on_snapshot(self._on_snapshot)
            logging.info(f"LiveQuery '{self.name}': 실시간 리스너를 등록했습니다.")
        return self

    def stop(self) -> None:
        watch = self._watch
        self._watch = None
        if watch is not None:
            try:
                watch.unsubscribe()
            except Exception as e:
                logging.warning(f"LiveQuery '{self.name}': 리스너 해제 실패: {e}")
        with self._lock:
            self._listeners.clear()
        logging.info(f"LiveQuery '{self.name}': 리스너를 해제했습니다.")

    def snapshot(self) -> Tuple[int, Optional[tuple]]:
        """(버전, 항목 튜플)을 반환합니다. 아직 스냅샷이 없으면 항목은 None입니다."""
        with self._lock:
            return self._version, self._items

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        구독자를 등록하고 구독 해제 함수를 반환합니다.
        이미 받은 스냅샷이 있으면 즉시 한 번 전달합니다.
        """
        with self._lock:
            self._listeners.append(listener)
            version, items = self._version, self._items

        if items is not None:
            self._notify(listener, version, items)

        def unsubscribe():
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def publish(self, documents) -> None:
        """문서 스냅샷 목록을 변환하여 새 버전으로 저장하고 구독자에게 알립니다."""
        items = tuple(self.mapper(doc) for doc in documents)
        with self._lock:
            self._version += 1
            self._items = items
            version = self._version
            listeners = list(self._listeners)

        for listener in listeners:
            self._notify(listener, version, items)

    def _on_snapshot(self, col_snapshot, changes, read_time):
        try:
            self.publish(col_snapshot)
        except Exception as e:
            logging.error(f"LiveQuery '{self.name}': 스냅샷 처리 실패: {e}", exc_info=True)

    def _notify(self, listener: Listener, version: int, items: tuple) -> None:
        try:
            listener(version, items)
        except Exception as e:
            # 한 구독자의 오류가 다른 구독자 알림을 막지 않도록 기록만 합니다.
            logging.error(f"LiveQuery '{self.name}': 구독자 알림 실패: {e}", exc_info=True)
