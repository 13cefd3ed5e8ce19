# app/api/auth/test_auth_routes.py
"""
로그인 세션 / 토큰 재발급 / 로그아웃 API 테스트

사용법: python -m pytest app/api/auth/test_auth_routes.py -v
"""
from firebase_admin import auth as firebase_auth
from google.api_core import exceptions as google_exceptions


def test_session_creates_profile_and_tokens(client, fake_db, verify_id_token_mock):
    response = client.post('/api/auth/session', json={'idToken': 'firebase-id-token'})

    assert response.status_code == 200
    body = response.json
    assert body['user_id'] == 'u1'
    assert body['is_new_user'] is True
    assert body['access_token'] and body['refresh_token']
    assert body['user_info']['displayName'] == '별지기'
    verify_id_token_mock.assert_called_once_with('firebase-id-token')
    assert fake_db.data('users', 'u1')['email'] == 'u1@example.com'


def test_second_session_is_not_new(client, fake_db):
    fake_db.add_document('users', 'u1', {'uid': 'u1', 'displayName': '옛 이름', 'region': '양평'})

    body = client.post('/api/auth/session', json={'idToken': 't'}).json

    assert body['is_new_user'] is False
    assert body['user_info']['region'] == '양평'
    assert fake_db.data('users', 'u1')['displayName'] == '별지기'


def test_invalid_id_token(client, verify_id_token_mock):
    verify_id_token_mock.side_effect = firebase_auth.InvalidIdTokenError('bad token')

    response = client.post('/api/auth/session', json={'idToken': 'bad'})

    assert response.status_code == 401
    assert response.json['error_code'] == 'AUTH_REQUIRED'


def test_session_requires_id_token(client):
    assert client.post('/api/auth/session', json={}).status_code == 400


def test_refresh_and_logout(client, fake_db):
    tokens = client.post('/api/auth/session', json={'idToken': 't'}).json
    refresh_headers = {'Authorization': f"Bearer {tokens['refresh_token']}"}

    response = client.post('/api/auth/token/refresh', headers=refresh_headers)
    assert response.status_code == 200
    assert response.json['access_token']

    response = client.post('/api/auth/logout', json={
        'access_token': tokens['access_token'], 'refresh_token': tokens['refresh_token'],
    })
    assert response.status_code == 200
    assert len(fake_db.store['revoked_tokens']) == 2

    # 로그아웃한 토큰은 더 이상 사용할 수 없음
    assert client.post('/api/auth/token/refresh', headers=refresh_headers).status_code == 401
    response = client.get('/api/users/me', headers={'Authorization': f"Bearer {tokens['access_token']}"})
    assert response.status_code == 401


def test_logout_with_malformed_token(client):
    response = client.post('/api/auth/logout', json={'access_token': 'x', 'refresh_token': 'y'})
    assert response.status_code == 422


def test_session_profile_store_failure(client, fake_db):
    fake_db.fail_on('users/u1', google_exceptions.ServiceUnavailable('offline'))

    response = client.post('/api/auth/session', json={'idToken': 't'})

    assert response.status_code == 502
    assert response.json['error_code'] == 'STORE_FAILURE'
