# app/models/user.py
from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any

@dataclass
class UserProfile:
    """
    Firestore 'users' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    문서 ID는 Firebase Authentication의 uid와 같습니다.
    """
    uid: str
    email: Optional[str] = None
    display_name: Optional[str] = None
    photo_url: Optional[str] = None
    equipment: str = ''  # 새 관측 일지 작성 시 기본 장비
    region: str = ''     # 새 관측 일지 작성 시 기본 관측지
    followers: List[str] = field(default_factory=list)
    following: List[str] = field(default_factory=list)
    created_at: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserProfile":
        """Firestore 문서(camelCase)로부터 인스턴스를 생성합니다. 누락된 필드는 기본값을 사용합니다."""
        return cls(
            uid=data['uid'],
            email=data.get('email'),
            display_name=data.get('displayName'),
            photo_url=data.get('photoURL'),
            equipment=data.get('equipment') or '',
            region=data.get('region') or '',
            followers=list(dict.fromkeys(data.get('followers') or [])),
            following=list(dict.fromkeys(data.get('following') or [])),
            created_at=data.get('createdAt'),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'uid': self.uid,
            'email': self.email,
            'displayName': self.display_name,
            'photoURL': self.photo_url,
            'equipment': self.equipment,
            'region': self.region,
            'followers': list(self.followers),
            'following': list(self.following),
            'createdAt': self.created_at,
        }
