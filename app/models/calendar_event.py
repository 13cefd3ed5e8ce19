# app/models/calendar_event.py
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Dict, Any

class EventType(Enum):
    """천문 일정 유형"""
    METEOR = "meteor"
    PLANET = "planet"
    MOON = "moon"
    ECLIPSE = "eclipse"
    OTHER = "other"
    USER = "user"  # 사용자가 직접 등록한 일정

@dataclass
class CalendarEvent:
    """
    천문 캘린더 일정.
    - 정적 일정(연간 주요 천문 현상)은 id/user_id가 없고 수정할 수 없습니다.
    - 사용자 일정은 Firestore 'calendar_events' 컬렉션에 저장됩니다.
    """
    date: str  # YYYY-MM-DD
    title: str
    description: str
    type: EventType = EventType.USER
    time: Optional[str] = None
    id: Optional[str] = None
    user_id: Optional[str] = None
    author_name: Optional[str] = None
    created_at: Optional[int] = None

    @property
    def is_static(self) -> bool:
        return self.id is None

    @classmethod
    def from_dict(cls, data: Dict[str, Any], doc_id: Optional[str] = None) -> "CalendarEvent":
        raw_type = data.get('type') or EventType.USER.value
        try:
            event_type = EventType(raw_type)
        except ValueError:
            event_type = EventType.OTHER
        return cls(
            id=doc_id or data.get('id'),
            date=data.get('date') or '',
            title=data.get('title') or '',
            description=data.get('description') or '',
            time=data.get('time') or None,
            type=event_type,
            user_id=data.get('userId'),
            author_name=data.get('authorName'),
            created_at=data.get('createdAt'),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Firestore 저장용 딕셔너리 (Enum은 문자열 값으로 변환)."""
        return {
            'date': self.date,
            'title': self.title,
            'description': self.description,
            'time': self.time or '',
            'type': self.type.value,
            'userId': self.user_id,
            'authorName': self.author_name,
            'createdAt': self.created_at,
        }
