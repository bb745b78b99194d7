# conftest.py
"""
pytest 공용 픽스처

실제 Firestore 대신 메모리 기반 대역(FakeFirestore)을 create_app에 주입합니다.
서비스 코드가 사용하는 API(collection/document/where/order_by/limit/stream/batch,
ArrayUnion/ArrayRemove)만 흉내 냅니다.
"""

import copy
import uuid
from datetime import timedelta

import pytest
from flask_jwt_extended import create_access_token, create_refresh_token
from firebase_admin import firestore
from google.api_core.exceptions import NotFound

from surfspot import create_app
from surfspot.models.comment import Comment
from surfspot.models.spot import SurfSpot
from surfspot.models.user import User, UserRole
from surfspot.utils.datetime_utils import DateTimeUtils


def _apply_transforms(current, changes):
    result = copy.deepcopy(current)
    for key, value in changes.items():
        if isinstance(value, firestore.ArrayUnion):
            existing = list(result.get(key) or [])
            for item in value.values:
                if item not in existing:
                    existing.append(item)
            result[key] = existing
        elif isinstance(value, firestore.ArrayRemove):
            result[key] = [item for item in (result.get(key) or []) if item not in value.values]
        else:
            result[key] = copy.deepcopy(value)
    return result


class FakeSnapshot:
    def __init__(self, reference, data):
        self.reference = reference
        self._data = data

    @property
    def id(self):
        return self.reference.id

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return copy.deepcopy(self._data) if self._data is not None else None


class FakeDocumentReference:
    def __init__(self, collection, doc_id):
        self._collection = collection
        self.id = doc_id

    def get(self):
        return FakeSnapshot(self, self._collection._docs.get(self.id))

    def set(self, data):
        self._collection._docs[self.id] = _apply_transforms({}, data)

    def update(self, changes):
        if self.id not in self._collection._docs:
            raise NotFound(f"No document to update: {self._collection.name}/{self.id}")
        self._collection._docs[self.id] = _apply_transforms(self._collection._docs[self.id], changes)

    def delete(self):
        self._collection._docs.pop(self.id, None)


class FakeQuery:
    def __init__(self, collection, filters=None, order=None, limit_count=None):
        self._collection = collection
        self._filters = filters or []
        self._order = order
        self._limit = limit_count

    def _copy(self, **kwargs):
        params = dict(filters=list(self._filters), order=self._order, limit_count=self._limit)
        params.update(kwargs)
        return FakeQuery(self._collection, **params)

    def where(self, field, op, value):
        return self._copy(filters=self._filters + [(field, op, value)])

    def order_by(self, field, direction=None):
        return self._copy(order=(field, direction == firestore.Query.DESCENDING))

    def limit(self, count):
        return self._copy(limit_count=count)

    @staticmethod
    def _matches(data, field, op, value):
        actual = data.get(field)
        if op == '==':
            return actual == value
        if op == 'in':
            return actual in value
        if op == 'array_contains':
            return value in (actual or [])
        raise NotImplementedError(op)

    def stream(self):
        snapshots = [
            FakeSnapshot(FakeDocumentReference(self._collection, doc_id), copy.deepcopy(data))
            for doc_id, data in self._collection._docs.items()
            if all(self._matches(data, f, op, v) for f, op, v in self._filters)
        ]
        if self._order:
            field, descending = self._order
            snapshots.sort(key=lambda snap: snap.to_dict().get(field), reverse=descending)
        if self._limit is not None:
            snapshots = snapshots[:self._limit]
        return iter(snapshots)

    def get(self):
        return list(self.stream())


class FakeCollection(FakeQuery):
    def __init__(self, name, docs):
        self.name = name
        self._docs = docs
        super().__init__(self)

    def document(self, doc_id=None):
        return FakeDocumentReference(self, doc_id or uuid.uuid4().hex)


class FakeWriteBatch:
    def __init__(self, db):
        self._db = db
        self._ops = []

    def set(self, reference, data):
        self._ops.append(lambda: reference.set(data))

    def update(self, reference, changes):
        self._ops.append(lambda: reference.update(changes))

    def delete(self, reference):
        self._ops.append(reference.delete)

    def commit(self):
        # 하나라도 실패하면 배치 전체가 반영되지 않습니다.
        backup = copy.deepcopy(self._db._store)
        try:
            for op in self._ops:
                op()
        except Exception:
            for name, docs in backup.items():
                self._db._store[name].clear()
                self._db._store[name].update(docs)
            raise
        self._db.commits += 1


class FakeFirestore:
    def __init__(self):
        self._store = {}
        self.commits = 0
        self.closed = False

    def collection(self, name):
        docs = self._store.setdefault(name, {})
        return FakeCollection(name, docs)

    def batch(self):
        return FakeWriteBatch(self)

    def close(self):
        self.closed = True


# --- 픽스처 ---

ALICE_ID = "user-alice"
BOB_ID = "user-bob"
ADMIN_ID = "user-admin"

@pytest.fixture
def db():
    fake_db = FakeFirestore()
    for user_id, username, role in [
        (ALICE_ID, "alice", UserRole.USER),
        (BOB_ID, "bob", UserRole.USER),
        (ADMIN_ID, "admin", UserRole.ADMIN),
    ]:
        user = User(user_id=user_id, email=f"{username}@example.com", username=username,
                    image=f"https://img.example.com/{username}.png", provider="google", role=role)
        fake_db.collection('users').document(user_id).set(DateTimeUtils.for_firestore(user.to_dict()))
    return fake_db

@pytest.fixture
def app(db):
    return create_app('testing', db=db)

@pytest.fixture
def client(app):
    return app.test_client()

@pytest.fixture
def auth_headers(app):
    """사용자 ID로 Access Token을 발급해 Authorization 헤더를 만듭니다."""
    def _make(user_id):
        with app.app_context():
            token = create_access_token(identity=user_id)
        return {"Authorization": f"Bearer {token}"}
    return _make

@pytest.fixture
def refresh_token_for(app):
    def _make(user_id):
        with app.app_context():
            return create_refresh_token(identity=user_id)
    return _make

@pytest.fixture
def spot_factory(db):
    """Firestore에 스팟 문서를 직접 만들어 ID를 반환합니다."""
    def _make(**overrides):
        data = {
            "spot_id": uuid.uuid4().hex,
            "name": "Pipeline",
            "user_id": ALICE_ID,
            "region": "North Shore",
            "country": "USA",
        }
        data.update(overrides)
        spot = SurfSpot.from_dict(data)
        db.collection('spots').document(spot.spot_id).set(DateTimeUtils.for_firestore(spot.to_dict()))
        return spot.spot_id
    return _make

@pytest.fixture
def comment_factory(db):
    """
    댓글 문서를 만들고 스팟의 comments 목록에 ID를 추가합니다.
    생성 순서대로 created_at이 1분씩 증가합니다.
    """
    base_time = DateTimeUtils.now() - timedelta(days=1)
    counter = {"n": 0}

    def _make(spot_id, user_id=ALICE_ID, text="Great waves", rating=None, parent_id=None):
        counter["n"] += 1
        created_at = base_time + timedelta(minutes=counter["n"])
        comment = Comment(
            comment_id=uuid.uuid4().hex,
            spot_id=spot_id,
            user_id=user_id,
            text=text,
            rating=rating,
            parent_id=parent_id,
            created_at=created_at,
            updated_at=created_at,
        )
        db.collection('comments').document(comment.comment_id).set(DateTimeUtils.for_firestore(comment.to_dict()))
        spot_ref = db.collection('spots').document(spot_id)
        if spot_ref.get().exists:
            spot_ref.update({'comments': firestore.ArrayUnion([comment.comment_id])})
        return comment.comment_id
    return _make
