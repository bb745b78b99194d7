# surfspot/api/users/test_user_routes.py

from conftest import ALICE_ID

def test_get_current_user(client, auth_headers):
    res = client.get('/api/user', headers=auth_headers(ALICE_ID))

    assert res.status_code == 200
    body = res.get_json()
    assert body["_id"] == ALICE_ID
    assert body["email"] == "alice@example.com"
    assert body["username"] == "alice"
    assert body["role"] == "user"
    assert "createdAt" in body

def test_get_current_user_requires_token(client):
    res = client.get('/api/user')
    assert res.status_code == 401
    assert res.get_json() == {"error": "Not authenticated"}

def test_token_for_unknown_user_is_rejected(client, auth_headers):
    res = client.get('/api/user', headers=auth_headers("ghost"))
    assert res.status_code == 401
    assert res.get_json() == {"error": "Not authenticated"}

def test_populate_attaches_user_summary(app):
    user_service = app.services['users']
    records = [{"user_id": ALICE_ID}, {"user_id": "ghost"}, {"user_id": None}]

    user_service.populate(records)

    assert records[0]["user"]["username"] == "alice"
    assert "role" not in records[0]["user"]
    assert records[1]["user"] is None
    assert records[2]["user"] is None
