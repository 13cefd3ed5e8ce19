# conftest.py
"""
테스트 공용 fixture.

Firestore 대신 메모리에서 동작하는 FakeFirestore를 사용합니다.
- document().set/update/delete/get, 자동 ID
- update()에서 ArrayUnion/ArrayRemove/DELETE_FIELD 처리
- order_by/where/limit/stream 쿼리, on_snapshot 리스너 (쓰기마다 동기 호출)
- fail_on()으로 특정 문서의 쓰기 실패를 주입
- calls에 모든 쓰기 호출을 기록
"""
import copy
import itertools
from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock

import pytest
from firebase_admin import firestore
from flask_jwt_extended import create_access_token
from google.api_core import exceptions as google_exceptions

from app import create_app
from app.api.auth.services import AuthService
from app.api.calendar.services import CalendarService
from app.api.feed.composer import FeedComposer
from app.api.journals.services import JournalService
from app.api.social.services import SocialService
from app.api.users.services import ProfileService
from app.services.openai_service import OpenAIService


class FakeSnapshot:
    def __init__(self, doc_id: str, data: Optional[Dict[str, Any]]):
        self.id = doc_id
        self._data = data
        self.exists = data is not None

    def to_dict(self):
        return copy.deepcopy(self._data) if self._data is not None else None


class FakeWatch:
    def __init__(self, db, listener):
        self._db = db
        self._listener = listener

    def unsubscribe(self):
        if self._listener in self._db.listeners:
            self._db.listeners.remove(self._listener)


class FakeQuery:
    def __init__(self, collection, orders=None, filters=None, limit_count=None):
        self.collection = collection
        self.orders = orders or []
        self.filters = filters or []
        self.limit_count = limit_count

    def order_by(self, field_path, direction='ASCENDING'):
        return FakeQuery(self.collection, self.orders + [(field_path, direction)], self.filters, self.limit_count)

    def where(self, field_path, op_string, value):
        return FakeQuery(self.collection, self.orders, self.filters + [(field_path, op_string, value)], self.limit_count)

    def limit(self, count):
        return FakeQuery(self.collection, self.orders, self.filters, count)

    def _matches(self, data):
        for field_path, op, value in self.filters:
            current = data.get(field_path)
            if op == '==' and current != value:
                return False
            if op == 'array_contains' and value not in (current or []):
                return False
        return True

    def stream(self):
        docs = [
            FakeSnapshot(doc_id, data)
            for doc_id, data in self.collection.db.store.get(self.collection.name, {}).items()
            if self._matches(data)
        ]
        # 뒤의 정렬 기준부터 적용 (안정 정렬)
        for field_path, direction in reversed(self.orders):
            docs.sort(key=lambda d: d._data.get(field_path), reverse=(direction == 'DESCENDING'))
        if self.limit_count is not None:
            docs = docs[:self.limit_count]
        return iter(docs)

    def get(self):
        return list(self.stream())

    def on_snapshot(self, callback):
        listener = (self, callback)
        self.collection.db.listeners.append(listener)
        callback(self.get(), [], None)
        return FakeWatch(self.collection.db, listener)


class FakeDocumentRef:
    def __init__(self, collection, doc_id):
        self.collection = collection
        self.id = doc_id

    @property
    def path(self):
        return f"{self.collection.name}/{self.id}"

    @property
    def _docs(self):
        return self.collection.db.store.setdefault(self.collection.name, {})

    def get(self):
        return FakeSnapshot(self.id, copy.deepcopy(self._docs.get(self.id)))

    def set(self, data):
        self.collection.db.record('set', self.path, data)
        self._docs[self.id] = copy.deepcopy(data)
        self.collection.db.notify(self.collection.name)

    def update(self, data):
        self.collection.db.record('update', self.path, data)
        if self.id not in self._docs:
            raise google_exceptions.NotFound(f"No document to update: {self.path}")
        current = self._docs[self.id]
        for key, value in data.items():
            if value is firestore.DELETE_FIELD:
                current.pop(key, None)
            elif isinstance(value, firestore.ArrayUnion):
                items = current.setdefault(key, [])
                for item in value.values:
                    if item not in items:
                        items.append(copy.deepcopy(item))
            elif isinstance(value, firestore.ArrayRemove):
                current[key] = [item for item in current.get(key, []) if item not in value.values]
            else:
                current[key] = copy.deepcopy(value)
        self.collection.db.notify(self.collection.name)

    def delete(self):
        self.collection.db.record('delete', self.path, None)
        self._docs.pop(self.id, None)
        self.collection.db.notify(self.collection.name)


class FakeCollection(FakeQuery):
    def __init__(self, db, name):
        self.db = db
        self.name = name
        super().__init__(self)

    def document(self, doc_id=None):
        return FakeDocumentRef(self, doc_id or f"doc{next(self.db.id_counter)}")


class FakeFirestore:
    def __init__(self):
        self.store: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self.calls: List[tuple] = []
        self.listeners: List[tuple] = []
        self.failures: Dict[str, Exception] = {}
        self.id_counter = itertools.count(1)

    def collection(self, name):
        return FakeCollection(self, name)

    def add_document(self, collection, doc_id, data):
        """테스트 준비용: 기록 없이 문서를 넣습니다."""
        self.store.setdefault(collection, {})[doc_id] = copy.deepcopy(data)
        self.notify(collection)

    def data(self, collection, doc_id):
        return copy.deepcopy(self.store.get(collection, {}).get(doc_id))

    def fail_on(self, path, exception):
        """'users/u2' 형식의 문서 경로에 대한 쓰기가 exception을 발생시키도록 합니다."""
        self.failures[path] = exception

    def record(self, op, path, data):
        self.calls.append((op, path, data))
        if path in self.failures:
            raise self.failures[path]

    def writes_to(self, path):
        return [call for call in self.calls if call[1] == path]

    def notify(self, collection):
        for query, callback in list(self.listeners):
            if query.collection.name == collection:
                callback(query.get(), [], None)


@pytest.fixture
def fake_db():
    return FakeFirestore()


@pytest.fixture
def storage_mock():
    storage = MagicMock()
    storage.upload_journal_image.return_value = 'https://storage.googleapis.com/test-bucket/journal_images/u1/1_m42.jpg'
    return storage


@pytest.fixture
def verify_id_token_mock():
    return MagicMock(return_value={'uid': 'u1', 'email': 'u1@example.com', 'name': '별지기', 'picture': None})


@pytest.fixture
def services(fake_db, storage_mock, verify_id_token_mock):
    profiles = ProfileService(db=fake_db)
    return {
        'storage': storage_mock,
        'openai': OpenAIService(client=None),
        'profiles': profiles,
        'auth': AuthService(profile_service=profiles, db=fake_db, verify_id_token=verify_id_token_mock),
        'journals': JournalService(storage_service=storage_mock, db=fake_db, base_url='https://starlight.example.com/'),
        'feed': FeedComposer(),
        'social': SocialService(db=fake_db),
        'calendar': CalendarService(db=fake_db),
    }


@pytest.fixture
def app(services):
    app = create_app('testing', services=services)
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers(app):
    """uid로 Access Token을 만들어 Authorization 헤더를 반환하는 함수."""
    def _make(uid: str):
        with app.app_context():
            token = create_access_token(identity=uid)
        return {'Authorization': f'Bearer {token}'}
    return _make
