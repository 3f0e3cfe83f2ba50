import json
import uuid
from datetime import datetime, timezone

import pytest

from eduportal.documents import (
    DuplicateDocument,
    FileUserDocumentStore,
    MongoUserDocumentStore,
    UserDocument,
)


def _register(client, **overrides):
    body = {'email': 'u@x.com', 'password': 'pw', 'user_type': 'student', 'name': 'Uma'}
    body.update(overrides)
    return client.post('/api/users/register', json=body)


def test_register_returns_user_without_password(client, settings):
    r = _register(client)
    assert r.status_code == 201
    body = r.json()
    assert body['message'] == 'User registered successfully!'
    user = body['user']
    assert user['email'] == 'u@x.com'
    assert user['user_type'] == 'student'
    assert user['name'] == 'Uma'
    assert user['created_at'] == user['updated_at']
    assert 'password' not in user and 'password_hash' not in user

    stored = json.loads(settings.USER_DOCUMENTS_PATH.read_text(encoding='utf-8'))
    assert stored['u@x.com']['password_hash'] != 'pw'
    assert client.app.state.hasher.verify('pw', stored['u@x.com']['password_hash'])


def test_register_name_is_optional(client):
    r = _register(client, name=None, user_type='institute')
    assert r.status_code == 201
    assert r.json()['user']['name'] is None


@pytest.mark.parametrize("overrides", [
    {'email': None},
    {'password': ''},
    {'user_type': None},
    {'user_type': 'Student'},
    {'user_type': 'teacher'},
])
def test_register_rejects_bad_input(client, overrides):
    r = _register(client, **overrides)
    assert r.status_code == 400
    assert r.json() == {'error': 'Error registering user'}


def test_register_rejects_duplicate_email(client):
    assert _register(client).status_code == 201
    r = _register(client, user_type='admin')
    assert r.status_code == 400
    assert r.json() == {'error': 'Error registering user'}


def test_unusable_store_is_server_error(client, monkeypatch):
    from eduportal.documents import DocumentStoreUnavailable

    def broken_insert(_document):
        raise DocumentStoreUnavailable('disk full')

    monkeypatch.setattr(client.app.state.user_store, 'insert', broken_insert)
    r = _register(client)
    assert r.status_code == 500
    assert r.json() == {'error': 'Error registering user'}


def _document(email='d@x.com'):
    now = datetime.now(timezone.utc)
    return UserDocument(email=email, password_hash='h', user_type='admin', created_at=now, updated_at=now)


def test_file_store_round_trip(tmp_path):
    store = FileUserDocumentStore(tmp_path / 'nested' / 'users.json')
    assert store.get_by_email('d@x.com') is None
    doc = _document()
    store.insert(doc)
    assert store.get_by_email('d@x.com') == doc
    with pytest.raises(DuplicateDocument):
        store.insert(_document())


def _can_connect_mongo(url: str = "mongodb://localhost:27017") -> bool:
    try:
        from pymongo import MongoClient
        client = MongoClient(url, serverSelectionTimeoutMS=1000)
        client.admin.command("ping")
        client.close()
        return True
    except Exception:
        return False


@pytest.mark.skipif(not _can_connect_mongo(), reason="MongoDB is not running on localhost:27017")
def test_mongo_store_matches_file_store_contract():
    db_name = f"eduportal_test_{uuid.uuid4().hex}"
    store = MongoUserDocumentStore("mongodb://localhost:27017", db_name)
    try:
        doc = _document()
        store.insert(doc)
        fetched = store.get_by_email('d@x.com')
        assert fetched.email == doc.email
        assert fetched.user_type == 'admin'
        with pytest.raises(DuplicateDocument):
            store.insert(_document())
        # index creation is idempotent
        MongoUserDocumentStore("mongodb://localhost:27017", db_name).close()
    finally:
        store._client.drop_database(db_name)
        store.close()


def test_existing_email_is_rejected_before_hashing(tmp_path):
    from unittest.mock import MagicMock

    from eduportal.documents import RegistrationFailed, UserRegistrationService

    store = FileUserDocumentStore(tmp_path / 'users.json')
    store.insert(_document('d@x.com'))
    hasher = MagicMock()
    with pytest.raises(RegistrationFailed):
        UserRegistrationService(store, hasher).register('d@x.com', 'pw', 'student')
    assert hasher.method_calls == []


def test_unreadable_store_on_lookup_is_server_error(client, monkeypatch):
    from eduportal.documents import DocumentStoreUnavailable

    def broken_lookup(_email):
        raise DocumentStoreUnavailable('corrupt file')

    monkeypatch.setattr(client.app.state.user_store, 'get_by_email', broken_lookup)
    r = _register(client)
    assert r.status_code == 500
    assert r.json() == {'error': 'Error registering user'}
