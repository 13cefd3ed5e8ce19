# app/api/journals/test_journal_services.py
"""
관측 일지 저장소 테스트 (메모리 Firestore 사용)

사용법: python -m pytest app/api/journals/test_journal_services.py -v
"""
import pytest
from google.api_core import exceptions as google_exceptions

from app.api.feed.composer import FeedComposer
from app.api.journals.services import JournalService, DEFAULT_AUTHOR_NAME, DEFAULT_MAP_CENTER, DEFAULT_MAP_ZOOM
from app.api.social.services import SocialService
from app.core.errors import (
    AuthRequired, NotFound, PermissionDenied, ValidationFailure, ConfirmationRequired, NetworkOrStoreFailure
)
from app.core.session import Viewer
from app.models.user import UserProfile


@pytest.fixture
def journals(fake_db, storage_mock):
    return JournalService(storage_service=storage_mock, db=fake_db, base_url='https://starlight.example.com/')


def seed(fake_db, doc_id, user_id, created_at, **extra):
    data = {'userId': user_id, 'createdAt': created_at, 'title': doc_id, 'likes': [], 'comments': []}
    data.update(extra)
    fake_db.add_document('journals', doc_id, data)


def ids(entries):
    return [e.id for e in entries]


# --- 목록 ---
def test_list_entries_newest_first(journals, fake_db):
    seed(fake_db, 'old', 'u1', 100)
    seed(fake_db, 'new', 'u2', 300)
    seed(fake_db, 'mid', 'u1', 200)

    assert [e.id for e in journals.list_entries()] == ['new', 'mid', 'old']


def test_current_snapshot_without_live_has_no_version(journals, fake_db):
    seed(fake_db, 'e1', 'u1', 100)
    version, entries = journals.current_snapshot()
    assert version is None
    assert [e.id for e in entries] == ['e1']


def test_live_snapshot_reflects_store_echo(journals, fake_db):
    """쓰기 결과는 직접 반영하지 않고, 저장소가 다시 보낸 스냅샷으로만 갱신됨"""
    seed(fake_db, 'e1', 'u1', 100)
    live = journals.start_live()
    first_version, entries = journals.current_snapshot()
    assert entries[0].likes == []

    SocialService(db=fake_db).toggle_like('e1', Viewer(uid='u2'))

    version, entries = journals.current_snapshot()
    assert version > first_version
    assert entries[0].likes == ['u2']

    journals.stop_live()
    assert journals.live is None
    assert fake_db.listeners == []
    assert live.snapshot()[0] == version


def test_get_entry_not_found(journals):
    with pytest.raises(NotFound):
        journals.get_entry('missing')


def test_find_in_resolves_deep_link(journals, fake_db):
    seed(fake_db, 'e1', 'u1', 100)
    entries = journals.list_entries()

    assert journals.find_in(entries, 'e1').id == 'e1'
    assert journals.find_in(entries, 'nope') is None
    assert journals.find_in(entries, None) is None


# --- 작성 ---
def test_create_entry_sets_server_fields(journals, fake_db):
    viewer = Viewer(uid='u1', display_name='별지기')
    entry = journals.create_entry(viewer, {
        'title': '토성의 고리', 'description': '고리가 선명하게 보였다', 'target': '토성',
        'coordinates': {'lat': 37.5, 'lng': 127.0},
    })

    stored = fake_db.data('journals', entry.id)
    assert stored['userId'] == 'u1'
    assert stored['authorName'] == '별지기'
    assert stored['likes'] == [] and stored['comments'] == []
    assert stored['coordinates'] == {'lat': 37.5, 'lng': 127.0}
    assert isinstance(stored['createdAt'], int)


def test_create_entry_uses_profile_defaults(journals, fake_db):
    profile = UserProfile(uid='u1', equipment='돕소니언 8인치', region='강원도 화천')
    entry = journals.create_entry(Viewer(uid='u1'), {'title': 'M31', 'description': '안드로메다'}, profile=profile)

    stored = fake_db.data('journals', entry.id)
    assert stored['equipment'] == '돕소니언 8인치'
    assert stored['location'] == '강원도 화천'
    assert stored['authorName'] == DEFAULT_AUTHOR_NAME


@pytest.mark.parametrize('data', [
    {'title': '', 'description': '내용'},
    {'title': '제목', 'description': '   '},
    {'title': '제목'},
])
def test_create_entry_requires_title_and_description(journals, fake_db, data):
    with pytest.raises(ValidationFailure):
        journals.create_entry(Viewer(uid='u1'), data)
    assert fake_db.calls == []


def test_create_entry_requires_viewer(journals):
    with pytest.raises(AuthRequired):
        journals.create_entry(None, {'title': '제목', 'description': '내용'})


# --- 수정 ---
def test_update_entry_keeps_immutable_fields(journals, fake_db):
    seed(fake_db, 'e1', 'u1', 100, description='원본', likes=['u2'],
         comments=[{'id': 'c1', 'userId': 'u2', 'userName': 'b', 'text': 'hi', 'createdAt': 1}])

    entry = journals.update_entry(Viewer(uid='u1'), 'e1', {'title': '새 제목', 'coordinates': None})

    assert entry.title == '새 제목'
    stored = fake_db.data('journals', 'e1')
    assert stored['userId'] == 'u1'
    assert stored['createdAt'] == 100
    assert stored['likes'] == ['u2']
    assert len(stored['comments']) == 1
    assert 'coordinates' not in stored


def test_update_entry_by_other_user(journals, fake_db):
    seed(fake_db, 'e1', 'u1', 100, description='원본')
    with pytest.raises(PermissionDenied):
        journals.update_entry(Viewer(uid='u2'), 'e1', {'title': '남의 글'})
    assert fake_db.calls == []


def test_update_entry_store_failure(journals, fake_db):
    seed(fake_db, 'e1', 'u1', 100, description='원본')
    fake_db.fail_on('journals/e1', google_exceptions.DeadlineExceeded('timeout'))
    with pytest.raises(NetworkOrStoreFailure):
        journals.update_entry(Viewer(uid='u1'), 'e1', {'title': '새 제목'})


# --- 삭제 ---
def test_delete_entry_requires_confirmation(journals, fake_db):
    seed(fake_db, 'e1', 'u1', 100)
    with pytest.raises(ConfirmationRequired):
        journals.delete_entry(Viewer(uid='u1'), 'e1')
    assert fake_db.data('journals', 'e1') is not None

    journals.delete_entry(Viewer(uid='u1'), 'e1', confirmed=True)
    assert fake_db.data('journals', 'e1') is None


def test_delete_entry_image_cleanup_is_best_effort(journals, fake_db, storage_mock):
    seed(fake_db, 'e1', 'u1', 100, imageUrl='https://storage.googleapis.com/b/journal_images/u1/1_a.jpg')
    storage_mock.delete_by_url.side_effect = RuntimeError('blob missing')

    journals.delete_entry(Viewer(uid='u1'), 'e1', confirmed=True)

    assert fake_db.data('journals', 'e1') is None
    storage_mock.delete_by_url.assert_called_once()


def test_delete_entry_by_other_user(journals, fake_db):
    seed(fake_db, 'e1', 'u1', 100)
    with pytest.raises(PermissionDenied):
        journals.delete_entry(Viewer(uid='u2'), 'e1', confirmed=True)


# --- 지도 / 공유 ---
def test_map_markers_skip_missing_or_zero_coordinates(journals, fake_db):
    seed(fake_db, 'seoul', 'u1', 300, coordinates={'lat': 37.5, 'lng': 127.0})
    seed(fake_db, 'jeju', 'u1', 200, coordinates={'lat': 33.4, 'lng': 126.5})
    seed(fake_db, 'zero', 'u1', 150, coordinates={'lat': 0, 'lng': 0})
    seed(fake_db, 'none', 'u1', 100)

    result = journals.map_markers()

    assert [m['id'] for m in result['markers']] == ['seoul', 'jeju']
    assert result['bounds'] == [[33.4, 126.5], [37.5, 127.0]]


def test_map_markers_default_view_when_empty(journals):
    result = journals.map_markers()
    assert result['markers'] == []
    assert result['center'] == list(DEFAULT_MAP_CENTER)
    assert result['zoom'] == DEFAULT_MAP_ZOOM


def test_share_payload(journals, fake_db):
    seed(fake_db, 'e1', 'u1', 100, title='플레이아데스', observers='아빠와 아들', target='M45')

    payload = journals.share_payload('e1')

    assert payload['title'] == 'UJU: 플레이아데스'
    assert payload['text'].startswith('아빠와 아들 대원의 우주 관측 기록을 확인해보세요!')
    assert 'M45' in payload['text']
    assert payload['url'] == 'https://starlight.example.com/?entry=e1'


def test_live_restart_refreshes_subscribed_feed(journals, fake_db):
    """재시작 후 버전이 1부터 다시 시작해도 피드 메모가 새 스냅샷을 반영"""
    feed = FeedComposer()
    seed(fake_db, 'a1', 'A', 300)
    seed(fake_db, 'b1', 'B', 200)

    journals.start_live(on_snapshot=feed.invalidate)
    version, entries = journals.current_snapshot()
    assert ids(feed.compose(version, entries, {'B'})) == ['b1', 'a1']
    journals.stop_live()

    seed(fake_db, 'b2', 'B', 400)
    journals.start_live(on_snapshot=feed.invalidate)
    restarted_version, entries = journals.current_snapshot()

    assert restarted_version == version
    assert ids(feed.compose(restarted_version, entries, {'B'})) == ['b2', 'b1', 'a1']


def test_live_publish_clears_subscribed_feed(journals, fake_db):
    feed = FeedComposer()
    seed(fake_db, 'a1', 'A', 300)
    journals.start_live(on_snapshot=feed.invalidate)
    version, entries = journals.current_snapshot()
    feed.compose(version, entries, {'B'})

    seed(fake_db, 'b1', 'B', 200)

    assert feed._cache == {}
    assert feed._version == journals.current_snapshot()[0]
    journals.stop_live()
