"""
Тесты хранилища сессии: срок действия токена, сохранение и загрузка
"""

from datetime import datetime, timedelta, timezone

import pytest

from workout_client.constants import (
    STORAGE_AUTH_TOKEN_KEY,
    STORAGE_AUTH_USER_KEY,
    STORAGE_TOKEN_EXPIRES_AT_KEY,
)
from workout_client.core.session import SessionStore, parse_timestamp


# ==================== Authentication state ====================

def test_empty_storage_gives_unauthenticated_session(session):
    assert session.token is None
    assert session.user is None
    assert session.is_authenticated() is False
    assert session.time_left() == 0


def test_set_and_clear_sequence_tracks_latest_call(session, clock):
    """is_authenticated отражает последний set_session / clear_session"""
    expires = clock() + timedelta(hours=2)

    session.set_session("a", None, expires)
    assert session.is_authenticated()

    session.clear_session()
    assert not session.is_authenticated()

    session.set_session("b")
    assert session.is_authenticated()
    assert session.token == "b"

    session.clear_session()
    session.clear_session()
    assert not session.is_authenticated()


def test_expiry_inside_buffer_counts_as_expired(session, clock):
    session.set_session("tok", expires_at=clock() + timedelta(seconds=60))
    assert session.is_authenticated() is False


def test_expiry_outside_buffer_is_authenticated(session, clock):
    session.set_session("tok", expires_at=clock() + timedelta(seconds=3600))
    assert session.is_authenticated() is True


def test_custom_buffer_per_call(session, clock):
    session.set_session("tok", expires_at=clock() + timedelta(seconds=60))
    assert session.is_authenticated(buffer_seconds=30) is True
    assert session.is_authenticated(buffer_seconds=60) is False


def test_session_without_expiry_never_expires(session, clock):
    session.set_session("tok")
    clock.advance(10 * 365 * 24 * 3600)
    assert session.is_authenticated() is True
    assert session.time_left() == 0


def test_expiry_is_rechecked_as_time_passes(session, clock):
    session.set_session("tok", expires_at=clock() + timedelta(seconds=900))
    assert session.is_authenticated()
    clock.advance(600)
    assert not session.is_authenticated()


# ==================== time_left ====================

def test_time_left_counts_down_and_floors(session, clock):
    session.set_session("tok", expires_at=clock() + timedelta(seconds=100))
    assert session.time_left() == 100
    clock.advance(0.5)
    assert session.time_left() == 99


@pytest.mark.parametrize("elapsed", [100, 101, 5000])
def test_time_left_is_zero_at_and_after_expiry(session, clock, elapsed):
    session.set_session("tok", expires_at=clock() + timedelta(seconds=100))
    clock.advance(elapsed)
    assert session.time_left() == 0


# ==================== Persistence ====================

def test_set_session_persists_all_fields(session, storage):
    session.set_session("tok", {"username": "ivan", "name": "Иван"}, "2026-10-20T12:00:00Z")

    assert storage.get_item(STORAGE_AUTH_TOKEN_KEY) == "tok"
    assert storage.get_item(STORAGE_TOKEN_EXPIRES_AT_KEY) == "2026-10-20T12:00:00Z"
    assert '"Иван"' in storage.get_item(STORAGE_AUTH_USER_KEY)


def test_reload_reproduces_token_and_expiry(session, storage, clock):
    session.set_session("tok", {"username": "ivan"}, "2026-10-20T12:00:00Z")

    reloaded = SessionStore(storage, clock=clock)
    reloaded.init()

    assert reloaded.token == "tok"
    assert reloaded.user == {"username": "ivan"}
    assert reloaded.get_token_expiration() == "2026-10-20T12:00:00Z"
    assert reloaded.expires_at == datetime(2026, 10, 20, 12, tzinfo=timezone.utc)
    assert reloaded.is_authenticated()


def test_empty_user_profile_round_trips(session, storage, clock):
    session.set_session("tok", {})

    reloaded = SessionStore(storage, clock=clock)
    reloaded.init()

    assert storage.get_item(STORAGE_AUTH_USER_KEY) == "{}"
    assert reloaded.user == {}


def test_malformed_user_json_is_dropped_on_reload(storage, clock):
    storage.set_item(STORAGE_AUTH_TOKEN_KEY, "tok")
    storage.set_item(STORAGE_AUTH_USER_KEY, "{not json")

    store = SessionStore(storage, clock=clock)
    store.init()

    assert store.token == "tok"
    assert store.user is None
    assert store.is_authenticated()


def test_malformed_expiry_degrades_to_empty_session(storage, clock):
    storage.set_item(STORAGE_AUTH_TOKEN_KEY, "tok")
    storage.set_item(STORAGE_TOKEN_EXPIRES_AT_KEY, "tomorrow-ish")

    store = SessionStore(storage, clock=clock)
    store.init()

    assert store.token is None
    assert not store.is_authenticated()


def test_persistence_is_additive(session, storage, clock):
    """Поле, не переданное в set_session, не затирает сохранённое значение"""
    session.set_session("old", {"username": "ivan"}, "2026-10-20T12:00:00Z")
    session.set_session("new")

    assert session.user is None
    assert session.expires_at is None
    assert storage.get_item(STORAGE_AUTH_TOKEN_KEY) == "new"
    assert storage.get_item(STORAGE_AUTH_USER_KEY) is not None
    assert storage.get_item(STORAGE_TOKEN_EXPIRES_AT_KEY) == "2026-10-20T12:00:00Z"

    reloaded = SessionStore(storage, clock=clock)
    reloaded.init()
    assert reloaded.token == "new"
    assert reloaded.user == {"username": "ivan"}


def test_clear_session_removes_persisted_fields(session, storage):
    session.set_session("tok", {"username": "ivan"}, "2026-10-20T12:00:00Z")
    session.clear_session()

    for key in (STORAGE_AUTH_TOKEN_KEY, STORAGE_AUTH_USER_KEY, STORAGE_TOKEN_EXPIRES_AT_KEY):
        assert key not in storage
    assert session.state.token is None


def test_datetime_expiry_is_stored_as_iso(session, storage):
    session.set_session("tok", expires_at=datetime(2026, 10, 20, 12, 0))
    assert storage.get_item(STORAGE_TOKEN_EXPIRES_AT_KEY) == "2026-10-20T12:00:00+00:00"


def test_set_session_rejects_malformed_expiry(session):
    with pytest.raises(ValueError):
        session.set_session("tok", expires_at="not a date")


# ==================== Timestamps ====================

@pytest.mark.parametrize(
    "raw",
    ["2026-10-20T12:00:00Z", "2026-10-20T12:00:00.000Z", "2026-10-20T15:00:00+03:00", "2026-10-20T12:00:00"],
)
def test_parse_timestamp_formats(raw):
    assert parse_timestamp(raw) == datetime(2026, 10, 20, 12, tzinfo=timezone.utc)
