# app/api/feed/test_feed_composer.py
"""
피드 정렬 테스트

사용법: python -m pytest app/api/feed/test_feed_composer.py -v
"""
import random

from app.api.feed.composer import compose_feed, FeedComposer
from app.models.journal import JournalEntry


def make_entry(entry_id, user_id, created_at):
    return JournalEntry(id=entry_id, user_id=user_id, created_at=created_at)


def ids(entries):
    return [e.id for e in entries]


def test_followed_authors_come_first():
    """팔로우한 사용자의 일지가 먼저, 나머지는 기존 순서를 유지"""
    entries = (make_entry('a1', 'A', 300), make_entry('b1', 'B', 200), make_entry('a2', 'A', 100))

    composed = compose_feed(entries, {'B'})

    assert ids(composed) == ['b1', 'a1', 'a2']


def test_no_viewer_returns_input_unchanged():
    entries = (make_entry('a1', 'A', 300), make_entry('b1', 'B', 200))

    assert compose_feed(entries, None) is entries
    assert compose_feed(entries, frozenset()) is entries


def test_following_nobody_in_feed_keeps_order():
    entries = [make_entry('a1', 'A', 300), make_entry('b1', 'B', 200), make_entry('c1', 'C', 100)]

    assert ids(compose_feed(entries, {'Z'})) == ['a1', 'b1', 'c1']


def test_equal_keys_keep_input_order():
    """같은 작성자/같은 시각의 일지는 입력 순서를 유지 (안정 정렬)"""
    entries = [make_entry('x1', 'A', 100), make_entry('x2', 'A', 100), make_entry('x3', 'B', 100)]

    assert ids(compose_feed(entries, {'A'})) == ['x1', 'x2', 'x3']
    assert ids(compose_feed(entries, {'B'})) == ['x3', 'x1', 'x2']


def test_composition_is_a_permutation():
    """어떤 일지도 빠지거나 중복되지 않음"""
    rng = random.Random(7)
    entries = sorted(
        (make_entry(f"e{i}", rng.choice('ABCDE'), rng.randint(1, 50)) for i in range(60)),
        key=lambda e: e.created_at,
        reverse=True,
    )
    following = {'B', 'D'}

    composed = compose_feed(entries, following)

    assert sorted(ids(composed)) == sorted(ids(entries))
    flags = [e.user_id in following for e in composed]
    # 팔로우 그룹이 모두 앞에 위치
    assert flags == sorted(flags, reverse=True)
    # 각 그룹 안에서는 createdAt 내림차순
    for group in (True, False):
        times = [e.created_at for e in composed if (e.user_id in following) == group]
        assert times == sorted(times, reverse=True)


def test_composer_memoises_per_snapshot_version():
    composer = FeedComposer()
    entries = (make_entry('a1', 'A', 300), make_entry('b1', 'B', 200))

    first = composer.compose(1, entries, frozenset({'B'}))
    second = composer.compose(1, entries, {'B'})

    assert first is second
    assert ids(first) == ['b1', 'a1']


def test_composer_new_version_invalidates_cache():
    composer = FeedComposer()
    old_entries = (make_entry('a1', 'A', 300), make_entry('b1', 'B', 200))
    new_entries = (make_entry('b2', 'B', 400),) + old_entries

    first = composer.compose(1, old_entries, {'B'})
    second = composer.compose(2, new_entries, {'B'})

    assert first is not second
    assert ids(second) == ['b2', 'b1', 'a1']


def test_composer_without_version_does_not_cache():
    composer = FeedComposer()
    entries = (make_entry('a1', 'A', 300), make_entry('b1', 'B', 200))

    first = composer.compose(None, entries, {'B'})
    second = composer.compose(None, entries, {'B'})

    assert ids(first) == ids(second) == ['b1', 'a1']
    assert first is not second


def test_invalidate_clears_memo_for_same_version():
    """리스너를 다시 시작해 같은 버전 번호가 다시 오더라도 새 스냅샷으로 계산"""
    composer = FeedComposer()
    old_entries = (make_entry('a1', 'A', 300), make_entry('b1', 'B', 200))
    new_entries = (make_entry('b2', 'B', 400),) + old_entries

    first = composer.compose(1, old_entries, {'B'})
    composer.invalidate(1, new_entries)
    second = composer.compose(1, new_entries, {'B'})

    assert first is not second
    assert ids(second) == ['b2', 'b1', 'a1']
