"""
Tests for the in-memory creator session store.
"""

import pytest

from stream_avatar.sessions import SessionStore


def test_create_and_get():
    store = SessionStore(ttl_seconds=60)
    session = store.create()
    assert store.get(session.session_id) is session
    assert len(store) == 1


def test_unknown_session_raises():
    with pytest.raises(KeyError):
        SessionStore().get("nope")


def test_expired_sessions_are_dropped():
    store = SessionStore(ttl_seconds=10)
    session = store.create()
    session.updated_at -= 11

    with pytest.raises(KeyError):
        store.get(session.session_id)
    assert len(store) == 0


def test_save_refreshes_expiry():
    store = SessionStore(ttl_seconds=10)
    session = store.create()
    session.updated_at -= 9
    store.save(session)
    session.updated_at -= 5
    assert store.get(session.session_id) is session


def test_purge_expired():
    store = SessionStore(ttl_seconds=10)
    stale = store.create()
    fresh = store.create()
    stale.updated_at -= 60

    assert store.purge_expired() == 1
    assert store.get(fresh.session_id) is fresh


def test_delete():
    store = SessionStore()
    session = store.create()
    assert store.delete(session.session_id) is True
    assert store.delete(session.session_id) is False
