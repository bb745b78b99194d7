# surfspot/core/test_security.py
"""
권한 판정 헬퍼와 JWT 콜백 동작 테스트

사용법: python -m pytest surfspot/core/test_security.py -v
"""

from datetime import timedelta

from flask_jwt_extended import create_access_token

from conftest import ALICE_ID, ADMIN_ID
from surfspot.core.security import is_admin, is_owner_or_admin

def test_is_admin():
    assert is_admin({"user_id": "u", "role": "admin"})
    assert not is_admin({"user_id": "u", "role": "user"})
    assert not is_admin(None)

def test_is_owner_or_admin():
    assert is_owner_or_admin("u-1", {"user_id": "u-1", "role": "user"})
    assert is_owner_or_admin("u-1", {"user_id": "u-2", "role": "admin"})
    assert not is_owner_or_admin("u-1", {"user_id": "u-2", "role": "user"})
    assert not is_owner_or_admin(None, {"user_id": "u-2", "role": "user"})
    assert not is_owner_or_admin("u-1", None)

def test_invalid_token_is_rejected(client):
    res = client.get('/api/user', headers={"Authorization": "Bearer not-a-jwt"})
    assert res.status_code == 401
    assert res.get_json() == {"error": "Invalid token"}

def test_expired_token_is_rejected(app, client):
    with app.app_context():
        token = create_access_token(identity=ALICE_ID, expires_delta=timedelta(seconds=-1))
    res = client.get('/api/user', headers={"Authorization": f"Bearer {token}"})
    assert res.status_code == 401
    assert res.get_json() == {"error": "Token has expired"}

def test_role_is_read_from_store_on_every_request(client, db, auth_headers, spot_factory):
    spot_id = spot_factory()
    headers = auth_headers(ADMIN_ID)

    res = client.put(f'/api/spots/{spot_id}', json={"region": "Oahu"}, headers=headers)
    assert res.status_code == 200

    db.collection('users').document(ADMIN_ID).update({"role": "user"})

    res = client.put(f'/api/spots/{spot_id}', json={"region": "Maui"}, headers=headers)
    assert res.status_code == 403
