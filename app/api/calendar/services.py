# app/api/calendar/services.py
import logging
from typing import Optional, Dict, Any, List

from firebase_admin import firestore

from app.core.errors import AuthRequired, NotFound, PermissionDenied, ValidationFailure, ConfirmationRequired
from app.core.session import Viewer
from app.data.astronomical_events import ASTRONOMICAL_EVENTS_2025
from app.models.calendar_event import CalendarEvent, EventType
from app.services.firestore_service import store_write
from app.utils.datetime_utils import DateTimeUtils

DEFAULT_AUTHOR_NAME = '익명의 천문학자'


class CalendarService:
    """
    천문 캘린더 서비스.
    연간 주요 천문 현상(정적 일정)과 사용자가 등록한 'calendar_events' 일정을 합쳐서 보여줍니다.
    사용자 일정은 등록한 본인만 수정/삭제할 수 있습니다.
    """

    def __init__(self, db=None, static_events: Optional[List[Dict[str, Any]]] = None):
        self.db = db or firestore.client()
        self.events_ref = self.db.collection('calendar_events')
        source = ASTRONOMICAL_EVENTS_2025 if static_events is None else static_events
        self.static_events = [CalendarEvent.from_dict(data) for data in source]

    def _stored_events(self) -> List[CalendarEvent]:
        query = self.events_ref.order_by('date', direction=firestore.Query.ASCENDING)
        return [CalendarEvent.from_dict(doc.to_dict(), doc_id=doc.id) for doc in query.stream()]

    def list_events(self, year: Optional[int] = None, month: Optional[int] = None) -> List[CalendarEvent]:
        """
        정적 일정과 사용자 일정을 날짜순으로 반환합니다. 같은 날짜는 정적 일정이 먼저 옵니다.
        year와 month가 모두 주어지면 해당 월의 일정만 반환합니다.
        """
        events = sorted(self.static_events + self._stored_events(), key=lambda e: e.date)
        if year is None or month is None:
            return events

        try:
            start, end = DateTimeUtils.get_month_range(year, month)
        except ValueError as e:
            raise ValidationFailure(str(e)) from e
        start_str, end_str = DateTimeUtils.to_date_string(start), DateTimeUtils.to_date_string(end)
        return [e for e in events if start_str <= e.date <= end_str]

    def events_on(self, date_value: Any) -> List[CalendarEvent]:
        """특정 날짜(YYYY-MM-DD)의 일정 목록."""
        date_str = self._normalize_date(date_value)
        return [e for e in self.list_events() if e.date == date_str]

    def get_event(self, event_id: str) -> CalendarEvent:
        doc = self.events_ref.document(event_id).get()
        if not doc.exists:
            raise NotFound("일정을 찾을 수 없습니다.")
        return CalendarEvent.from_dict(doc.to_dict(), doc_id=doc.id)

    @staticmethod
    def _normalize_date(value: Any) -> str:
        try:
            return DateTimeUtils.normalize_date_string(value)
        except ValueError as e:
            raise ValidationFailure("날짜 형식이 올바르지 않습니다. (YYYY-MM-DD)") from e

    @staticmethod
    def _parse_type(value: Optional[str]) -> EventType:
        if not value:
            return EventType.USER
        try:
            return EventType(value)
        except ValueError as e:
            raise ValidationFailure(f"'{value}'은(는) 유효한 일정 유형이 아닙니다.") from e

    def create_event(self, viewer: Optional[Viewer], data: Dict[str, Any]) -> CalendarEvent:
        """새 일정을 등록합니다. 제목/날짜/설명은 필수입니다."""
        if viewer is None:
            raise AuthRequired()
        if not (data.get('title') or '').strip() or not (data.get('description') or '').strip() or not data.get('date'):
            raise ValidationFailure("제목, 날짜, 설명은 필수입니다.")

        event = CalendarEvent(
            date=self._normalize_date(data['date']),
            title=data['title'],
            description=data['description'],
            time=data.get('time') or None,
            type=self._parse_type(data.get('type')),
            user_id=viewer.uid,
            author_name=viewer.display_name or DEFAULT_AUTHOR_NAME,
            created_at=DateTimeUtils.now_ms(),
        )
        doc_ref = self.events_ref.document()
        with store_write("일정 저장"):
            doc_ref.set(event.to_dict())
        event.id = doc_ref.id
        logging.info(f"캘린더 일정 생성 완료 (id: {event.id}, user: {viewer.uid})")
        return event

    def _get_owned_event(self, viewer: Optional[Viewer], event_id: str) -> CalendarEvent:
        if viewer is None:
            raise AuthRequired()
        event = self.get_event(event_id)
        if event.user_id != viewer.uid:
            raise PermissionDenied("본인이 등록한 일정만 수정하거나 삭제할 수 있습니다.")
        return event

    def update_event(self, viewer: Optional[Viewer], event_id: str, data: Dict[str, Any]) -> CalendarEvent:
        """본인 일정의 제목/날짜/시간/유형/설명을 수정합니다. userId와 createdAt은 바뀌지 않습니다."""
        event = self._get_owned_event(viewer, event_id)

        update_data: Dict[str, Any] = {}
        for name in ('title', 'description'):
            if name in data:
                if not (data[name] or '').strip():
                    raise ValidationFailure("제목, 날짜, 설명은 필수입니다.")
                update_data[name] = data[name]
        if 'date' in data:
            update_data['date'] = self._normalize_date(data['date'])
        if 'time' in data:
            update_data['time'] = data['time'] or ''
        if 'type' in data:
            update_data['type'] = self._parse_type(data['type']).value

        if update_data:
            with store_write("일정 수정"):
                self.events_ref.document(event_id).update(update_data)
        return self.get_event(event.id)

    def delete_event(self, viewer: Optional[Viewer], event_id: str, confirmed: bool = False) -> None:
        """본인 일정을 삭제합니다. confirmed=True가 필요합니다."""
        self._get_owned_event(viewer, event_id)
        if not confirmed:
            raise ConfirmationRequired("정말로 이 일정을 삭제하려면 확인이 필요합니다.")
        with store_write("일정 삭제"):
            self.events_ref.document(event_id).delete()
        logging.info(f"캘린더 일정 삭제 완료 (id: {event_id}, user: {viewer.uid})")
