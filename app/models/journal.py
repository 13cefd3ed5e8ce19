# app/models/journal.py
from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any

@dataclass(frozen=True)
class Coordinates:
    """지도 표시용 관측 위치."""
    lat: float
    lng: float

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["Coordinates"]:
        if not data:
            return None
        try:
            return cls(lat=float(data['lat']), lng=float(data['lng']))
        except (KeyError, TypeError, ValueError):
            return None

    def to_dict(self) -> Dict[str, float]:
        return {'lat': self.lat, 'lng': self.lng}

@dataclass
class Comment:
    """
    관측 일지 문서의 'comments' 배열에 저장되는 댓글.
    user_name은 작성 시점의 스냅샷이며, 이후 닉네임이 바뀌어도 갱신되지 않습니다.
    """
    id: str
    user_id: str
    user_name: str
    text: str
    created_at: int

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Comment":
        return cls(
            id=str(data['id']),
            user_id=data['userId'],
            user_name=data.get('userName') or '',
            text=data.get('text') or '',
            created_at=int(data.get('createdAt') or 0),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'userId': self.user_id,
            'userName': self.user_name,
            'text': self.text,
            'createdAt': self.created_at,
        }

@dataclass
class JournalEntry:
    """
    Firestore 'journals' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    - likes: 사용자 uid 집합 (배열로 저장되지만 중복 없는 집합으로 취급)
    - comments: 작성 순서가 곧 표시 순서인 댓글 목록
    """
    id: Optional[str]
    user_id: str
    created_at: int
    title: str = ''
    date: str = ''
    location: str = ''
    equipment: str = ''
    target: str = ''
    description: str = ''
    observers: str = ''
    author_name: str = ''
    image_url: Optional[str] = None
    coordinates: Optional[Coordinates] = None
    likes: List[str] = field(default_factory=list)
    comments: List[Comment] = field(default_factory=list)

    # 소유자가 수정할 수 있는 텍스트 필드 (저장 필드명 기준)
    EDITABLE_FIELDS = ('title', 'date', 'location', 'equipment', 'target', 'description', 'observers')

    @classmethod
    def from_dict(cls, data: Dict[str, Any], doc_id: Optional[str] = None) -> "JournalEntry":
        """Firestore 문서(camelCase)로부터 인스턴스를 생성합니다. doc_id가 주어지면 문서 ID를 사용합니다."""
        return cls(
            id=doc_id or data.get('id'),
            user_id=data.get('userId', ''),
            created_at=int(data.get('createdAt') or 0),
            title=data.get('title') or '',
            date=data.get('date') or '',
            location=data.get('location') or '',
            equipment=data.get('equipment') or '',
            target=data.get('target') or '',
            description=data.get('description') or '',
            observers=data.get('observers') or '',
            author_name=data.get('authorName') or '',
            image_url=data.get('imageUrl') or None,
            coordinates=Coordinates.from_dict(data.get('coordinates')),
            # 배열이지만 집합으로 취급: 혹시 중복이 저장되어 있어도 한 번만 노출
            likes=list(dict.fromkeys(data.get('likes') or [])),
            comments=[Comment.from_dict(c) for c in (data.get('comments') or [])],
        )

    def to_dict(self) -> Dict[str, Any]:
        """Firestore 저장용 딕셔너리. 문서 ID는 필드로 저장하지 않습니다."""
        data = {
            'userId': self.user_id,
            'createdAt': self.created_at,
            'title': self.title,
            'date': self.date,
            'location': self.location,
            'equipment': self.equipment,
            'target': self.target,
            'description': self.description,
            'observers': self.observers,
            'authorName': self.author_name,
            'imageUrl': self.image_url or '',
            'likes': list(self.likes),
            'comments': [c.to_dict() for c in self.comments],
        }
        if self.coordinates:
            data['coordinates'] = self.coordinates.to_dict()
        return data
