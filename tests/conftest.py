"""Shared fixtures: an in-memory Firestore stand-in and the Flask test app."""
from __future__ import annotations

import copy
import itertools
from datetime import datetime, timezone

import pytest
from google.api_core import exceptions as gexc
from google.cloud.firestore_v1.transforms import ArrayRemove, ArrayUnion, Increment

from config import Config
from cipm import create_app


# ---------------------------------------------------------------------------
# In-memory Firestore
# ---------------------------------------------------------------------------

class FakeSnapshot:
    def __init__(self, doc_id, data):
        self.id = doc_id
        self._data = data

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return copy.deepcopy(self._data) if self._data is not None else None


def _apply_transforms(current, updates):
    result = dict(current)
    for key, value in updates.items():
        if isinstance(value, ArrayUnion):
            existing = list(result.get(key) or [])
            result[key] = existing + [v for v in value.values if v not in existing]
        elif isinstance(value, ArrayRemove):
            result[key] = [v for v in (result.get(key) or []) if v not in value.values]
        elif isinstance(value, Increment):
            result[key] = (result.get(key) or 0) + value.value
        else:
            result[key] = copy.deepcopy(value)
    return result


class FakeDocumentRef:
    def __init__(self, store, collection, doc_id):
        self._store = store
        self._collection = collection
        self.id = doc_id

    @property
    def _docs(self):
        return self._store.setdefault(self._collection, {})

    def get(self):
        return FakeSnapshot(self.id, self._docs.get(self.id))

    def set(self, data):
        self._docs[self.id] = _apply_transforms({}, data)

    def update(self, data):
        if self.id not in self._docs:
            raise gexc.NotFound(f'No document to update: {self._collection}/{self.id}')
        self._docs[self.id] = _apply_transforms(self._docs[self.id], data)

    def delete(self):
        self._docs.pop(self.id, None)


def _matches(data, flt):
    value = data.get(flt.field_path)
    if flt.op_string == '==':
        return value == flt.value
    if flt.op_string == 'in':
        return value in flt.value
    if flt.op_string == 'array_contains':
        return flt.value in (value or [])
    raise NotImplementedError(flt.op_string)


class FakeQuery:
    def __init__(self, store, collection, filters=(), limit=None):
        self._store = store
        self._collection = collection
        self._filters = list(filters)
        self._limit = limit

    def where(self, filter=None):
        return FakeQuery(self._store, self._collection, self._filters + [filter], self._limit)

    def limit(self, count):
        return FakeQuery(self._store, self._collection, self._filters, count)

    def order_by(self, *args, **kwargs):
        return self

    def stream(self):
        docs = self._store.get(self._collection, {})
        results = [
            FakeSnapshot(doc_id, copy.deepcopy(data))
            for doc_id, data in docs.items()
            if all(_matches(data, f) for f in self._filters)
        ]
        return iter(results[:self._limit] if self._limit else results)


class FakeCollection(FakeQuery):
    def __init__(self, store, name, ids):
        super().__init__(store, name)
        self._ids = ids

    def document(self, doc_id=None):
        return FakeDocumentRef(self._store, self._collection, doc_id or next(self._ids))

    def add(self, data):
        ref = self.document()
        ref.set(data)
        return datetime.now(timezone.utc), ref


class FakeBatch:
    def __init__(self):
        self._ops = []
        self.committed = False

    def update(self, ref, data):
        self._ops.append(lambda: ref.update(data))

    def delete(self, ref):
        self._ops.append(ref.delete)

    def commit(self):
        for op in self._ops:
            op()
        self.committed = True


class FakeFirestore:
    """The subset of the Firestore client the DAO uses."""

    def __init__(self):
        self.store = {}
        self._ids = (f'doc{n}' for n in itertools.count(1))

    def collection(self, name):
        return FakeCollection(self.store, name, self._ids)

    def batch(self):
        return FakeBatch()

    # Test helpers
    def seed(self, collection, doc_id, data):
        self.store.setdefault(collection, {})[doc_id] = copy.deepcopy(data)

    def docs(self, collection):
        return self.store.get(collection, {})


# ---------------------------------------------------------------------------
# App fixtures
# ---------------------------------------------------------------------------

class TestConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-secret'
    WTF_CSRF_ENABLED = False
    FIREBASE_INIT = False
    FIREBASE_WEB_API_KEY = 'test-api-key'
    SOCKETIO_ASYNC_MODE = 'threading'
    ADMIN_OVERRIDE_UIDS = ['override-uid']


@pytest.fixture
def fake_db(monkeypatch):
    db = FakeFirestore()
    monkeypatch.setattr('cipm.firestore_dao.get_db', lambda: db)
    return db


@pytest.fixture
def emitted(monkeypatch):
    """Socket.IO broadcasts made during the test, as (event, payload, room)."""
    calls = []
    monkeypatch.setattr('cipm.events._broadcast', lambda event, payload, room: calls.append((event, payload, room)))
    return calls


@pytest.fixture
def app(fake_db, emitted):
    return create_app(TestConfig)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def login_as(monkeypatch, fake_db):
    """Authenticate every request as the given user (stored in Usuarios too)."""
    def _login(uid, role, name=None, email=None):
        user = {
            'id': uid,
            'name': name or uid.title(),
            'email': email or f'{uid}@cipm.edu',
            'role': role,
            'avatar': '',
        }
        fake_db.seed('Usuarios', uid, user)
        monkeypatch.setattr('cipm.decorators._verify_session', lambda: dict(user, uid=uid))
        return user
    return _login
