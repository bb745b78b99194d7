# surfspot/test_app_factory.py
"""
앱 팩토리와 Firestore 핸들 수명 주기 테스트

사용법: python -m pytest surfspot/test_app_factory.py -v
"""

from surfspot import create_app, close_database

def test_injected_handle_is_shared_by_services(app, db):
    assert app.db is db
    for name in ('users', 'auth', 'comments', 'spots'):
        assert app.services[name].db is db

def test_close_database_releases_handle(app, db):
    assert db.closed is False
    close_database(app)
    assert db.closed is True

def test_close_database_without_handle_is_noop(db):
    app = create_app('testing', db=db)
    app.db = None
    close_database(app)
    assert db.closed is False
