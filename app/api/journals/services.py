# app/api/journals/services.py
import logging
from typing import Optional, Dict, Any, List, Tuple, Callable

from firebase_admin import firestore

from app.core.errors import AuthRequired, NotFound, PermissionDenied, ValidationFailure, ConfirmationRequired
from app.core.session import Viewer
from app.models.journal import JournalEntry, Coordinates
from app.models.user import UserProfile
from app.services.firestore_service import store_write
from app.services.live_store import LiveQuery
from app.services.storage_service import StorageService
from app.utils.datetime_utils import DateTimeUtils

DEFAULT_AUTHOR_NAME = '익명의 천문학자'
# 지도 기본 중심 (대한민국 중앙)과 줌 레벨
DEFAULT_MAP_CENTER = (36.5, 127.5)
DEFAULT_MAP_ZOOM = 7


class JournalService:
    """
    'journals' 컬렉션을 담당하는 관측 일지 저장소.
    - createdAt 내림차순의 전체 일지 목록 (실시간 스냅샷 또는 직접 조회)
    - 일지 작성/수정/삭제 (작성자 본인만)
    - 지도 마커, 공유 링크
    좋아요/댓글 변경은 SocialService가 담당합니다.
    """

    def __init__(self, storage_service: Optional[StorageService] = None, db=None, base_url: str = ''):
        self.db = db or firestore.client()
        self.journals_ref = self.db.collection('journals')
        self.storage_service = storage_service
        self.base_url = base_url
        self.live: Optional[LiveQuery] = None

    # --- 목록 조회 ---
    def _ordered_query(self):
        return self.journals_ref.order_by('createdAt', direction=firestore.Query.DESCENDING)

    @staticmethod
    def _to_entry(doc) -> JournalEntry:
        return JournalEntry.from_dict(doc.to_dict(), doc_id=doc.id)

    def start_live(self, on_snapshot: Optional[Callable[[int, tuple], None]] = None) -> LiveQuery:
        """
        실시간 리스너를 시작합니다. 이후 목록 조회는 리스너가 받은 최신 스냅샷을 사용합니다.
        on_snapshot이 주어지면 새 스냅샷마다 (버전, 일지 튜플)로 호출됩니다.
        """
        if self.live is None:
            self.live = LiveQuery(self._ordered_query(), self._to_entry, name='journals').start()
            if on_snapshot is not None:
                self.live.subscribe(on_snapshot)
        return self.live

    def stop_live(self) -> None:
        # LiveQuery.stop()이 구독자도 함께 해제합니다.
        if self.live is not None:
            self.live.stop()
            self.live = None

    def current_snapshot(self) -> Tuple[Optional[int], Tuple[JournalEntry, ...]]:
        """
        (스냅샷 버전, createdAt 내림차순 일지 튜플)을 반환합니다.
        실시간 스냅샷이 아직 없으면 직접 조회하며, 이때 버전은 None입니다.
        """
        if self.live is not None:
            version, items = self.live.snapshot()
            if items is not None:
                return version, items
        return None, tuple(self._to_entry(doc) for doc in self._ordered_query().stream())

    def list_entries(self) -> Tuple[JournalEntry, ...]:
        return self.current_snapshot()[1]

    def get_entry(self, entry_id: str) -> JournalEntry:
        doc = self.journals_ref.document(entry_id).get()
        if not doc.exists:
            raise NotFound("관측 일지를 찾을 수 없습니다.")
        return self._to_entry(doc)

    @staticmethod
    def find_in(entries, entry_id: Optional[str]) -> Optional[JournalEntry]:
        """딥 링크(?entry=<id>)로 지정된 일지를 현재 목록에서 찾습니다."""
        if not entry_id:
            return None
        return next((e for e in entries if e.id == entry_id), None)

    # --- 작성/수정/삭제 ---
    @staticmethod
    def _validate_required(data: Dict[str, Any]) -> None:
        if not (data.get('title') or '').strip() or not (data.get('description') or '').strip():
            raise ValidationFailure("제목과 관측 내용은 필수입니다.")

    def create_entry(self, viewer: Optional[Viewer], data: Dict[str, Any], profile: Optional[UserProfile] = None) -> JournalEntry:
        """
        새 관측 일지를 저장합니다. 장비/관측지를 비워두면 프로필의 기본값을 사용합니다.

        :param viewer: 로그인 사용자 (없으면 AuthRequired)
        :param data: 검증된 요청 데이터 (snake_case)
        :param profile: 기본값을 가져올 작성자 프로필
        """
        if viewer is None:
            raise AuthRequired()
        self._validate_required(data)

        entry = JournalEntry(
            id=None,
            user_id=viewer.uid,
            created_at=DateTimeUtils.now_ms(),
            author_name=viewer.display_name or DEFAULT_AUTHOR_NAME,
            image_url=data.get('image_url') or None,
            coordinates=Coordinates.from_dict(data.get('coordinates')),
            **{name: data.get(name) or '' for name in JournalEntry.EDITABLE_FIELDS},
        )
        if profile is not None:
            entry.equipment = entry.equipment or profile.equipment
            entry.location = entry.location or profile.region

        doc_ref = self.journals_ref.document()
        with store_write("관측 일지 저장"):
            doc_ref.set(entry.to_dict())
        entry.id = doc_ref.id
        logging.info(f"관측 일지 생성 완료 (id: {entry.id}, user: {viewer.uid})")
        return entry

    def _get_owned_entry(self, viewer: Optional[Viewer], entry_id: str) -> JournalEntry:
        if viewer is None:
            raise AuthRequired()
        entry = self.get_entry(entry_id)
        if entry.user_id != viewer.uid:
            raise PermissionDenied("본인이 작성한 관측 일지만 수정하거나 삭제할 수 있습니다.")
        return entry

    def update_entry(self, viewer: Optional[Viewer], entry_id: str, data: Dict[str, Any]) -> JournalEntry:
        """
        작성자 본인의 일지를 수정합니다. userId/createdAt/likes/comments는 변경하지 않습니다.
        """
        entry = self._get_owned_entry(viewer, entry_id)
        merged = {name: data.get(name, getattr(entry, name)) for name in JournalEntry.EDITABLE_FIELDS}
        self._validate_required(merged)

        update_data = dict(merged)
        update_data['authorName'] = viewer.display_name or entry.author_name or DEFAULT_AUTHOR_NAME
        if 'image_url' in data:
            update_data['imageUrl'] = data['image_url'] or ''
        if 'coordinates' in data:
            coordinates = Coordinates.from_dict(data['coordinates'])
            update_data['coordinates'] = coordinates.to_dict() if coordinates else firestore.DELETE_FIELD

        with store_write("관측 일지 수정"):
            self.journals_ref.document(entry_id).update(update_data)
        return self.get_entry(entry_id)

    def delete_entry(self, viewer: Optional[Viewer], entry_id: str, confirmed: bool = False) -> None:
        """
        작성자 본인의 일지를 삭제합니다. confirmed=True가 아니면 아무것도 삭제하지 않습니다.
        업로드된 사진 삭제는 부가 작업이므로 실패해도 기록만 남깁니다.
        """
        entry = self._get_owned_entry(viewer, entry_id)
        if not confirmed:
            raise ConfirmationRequired("정말로 이 기록을 삭제하려면 확인이 필요합니다.")

        with store_write("관측 일지 삭제"):
            self.journals_ref.document(entry_id).delete()
        logging.info(f"관측 일지 삭제 완료 (id: {entry_id}, user: {viewer.uid})")

        if entry.image_url and self.storage_service is not None:
            try:
                self.storage_service.delete_by_url(entry.image_url)
            except Exception as e:
                logging.warning(f"Storage 이미지 삭제 실패 (url: {entry.image_url}): {e}")

    # --- 지도 / 공유 ---
    def map_markers(self, entries=None) -> Dict[str, Any]:
        """
        좌표가 있는 일지만 지도 마커로 변환합니다. 위도/경도가 0이거나 없으면 제외합니다.
        마커가 있으면 모든 마커를 포함하는 경계를, 없으면 기본 중심/줌을 함께 반환합니다.
        """
        if entries is None:
            entries = self.list_entries()

        markers: List[Dict[str, Any]] = []
        for entry in entries:
            coordinates = entry.coordinates
            if not coordinates or not coordinates.lat or not coordinates.lng:
                continue
            markers.append({
                'id': entry.id,
                'title': entry.title,
                'target': entry.target,
                'imageUrl': entry.image_url,
                'lat': coordinates.lat,
                'lng': coordinates.lng,
            })

        if not markers:
            return {'markers': [], 'bounds': None, 'center': list(DEFAULT_MAP_CENTER), 'zoom': DEFAULT_MAP_ZOOM}

        lats = [m['lat'] for m in markers]
        lngs = [m['lng'] for m in markers]
        return {
            'markers': markers,
            'bounds': [[min(lats), min(lngs)], [max(lats), max(lngs)]],
            'center': None,
            'zoom': None,
        }

    def share_payload(self, entry_id: str) -> Dict[str, str]:
        """공유하기에 사용할 제목/본문/딥 링크를 만듭니다."""
        entry = self.get_entry(entry_id)
        base_url = self.base_url.split('?')[0]
        return {
            'title': f"UJU: {entry.title}",
            'text': f"{entry.observers} 대원의 우주 관측 기록을 확인해보세요!\n관측 대상: {entry.target}\n\n",
            'url': f"{base_url}?entry={entry.id}",
        }
