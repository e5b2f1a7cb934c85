from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from inventory_desk.core.errors import AuthError
from inventory_desk.data.service import TransportError
from inventory_desk.session.auth_store import MemoryAuthStore
from inventory_desk.session.models import Session
from inventory_desk.session.store import SessionStore


def _listen(store: SessionStore) -> list[tuple[str | None, str]]:
    events: list[tuple[str | None, str]] = []
    store.on_session_change(lambda session, reason: events.append((session.user_id if session else None, reason)))
    return events


def test_sign_in_sets_persists_and_notifies(sessions, seller_id) -> None:
    events = _listen(sessions)

    session = sessions.sign_in("seller@example.com", "seller-pass")

    assert session.user_id == seller_id
    assert sessions.get_current_session() == session
    assert sessions.persistence.load() == session
    assert events == [(seller_id, "signed_in")]


def test_bad_credentials_raise_auth_error(sessions, seller_id) -> None:
    events = _listen(sessions)

    with pytest.raises(AuthError) as exc:
        sessions.sign_in("seller@example.com", "nope-nope")

    assert exc.value.code == "invalid_credentials"
    assert sessions.get_current_session() is None
    assert events == []


def test_blank_credentials_never_reach_backend(stub_sessions, stub_service) -> None:
    with pytest.raises(AuthError) as exc:
        stub_sessions.sign_in("   ", "secret")

    assert exc.value.code == "VALIDATION_ERROR"
    assert stub_service.calls == []


def test_expiry_clears_session_and_notifies(sessions, seller_id, clock) -> None:
    sessions.sign_in("seller@example.com", "seller-pass")
    events = _listen(sessions)

    clock.advance(hours=2)

    assert sessions.get_current_session() is None
    assert events == [(None, "expired")]
    assert sessions.persistence.load() is None


def test_require_session_raises_when_signed_out(sessions) -> None:
    with pytest.raises(AuthError) as exc:
        sessions.require_session()

    assert exc.value.code == "SESSION_REQUIRED"


def test_sign_out_clears_locally_even_when_backend_fails(stub_sessions, stub_service) -> None:
    stub_sessions.sign_in("stub@example.com", "secret")
    stub_service.sign_out_error = TransportError(code="NETWORK_ERROR", message="offline")
    events = _listen(stub_sessions)

    with pytest.raises(AuthError) as exc:
        stub_sessions.sign_out()

    assert exc.value.code == "NETWORK_ERROR"
    assert stub_sessions.get_current_session() is None
    assert events == [(None, "signed_out")]


def test_unsubscribe_stops_notifications(stub_sessions) -> None:
    events: list[str] = []
    unsubscribe = stub_sessions.on_session_change(lambda session, reason: events.append(reason))
    unsubscribe()

    stub_sessions.sign_in("stub@example.com", "secret")

    assert events == []


def test_restore_uses_live_session_and_drops_expired(stub_service) -> None:
    persistence = MemoryAuthStore()
    persistence.save(stub_service.session)
    store = SessionStore(stub_service, persistence)
    events = _listen(store)

    assert store.restore() == stub_service.session
    assert events == [("user-1", "restored")]

    expired = Session(user_id="u2", access_token="t", expires_at=datetime.now(tz=timezone.utc) - timedelta(minutes=1))
    persistence.save(expired)
    stale = SessionStore(stub_service, persistence)
    assert stale.restore() is None
    assert persistence.load() is None


def test_sign_up_returns_new_identity(sessions) -> None:
    user = sessions.sign_up("fresh@example.com", "fresh-pass")

    assert user.email == "fresh@example.com"
    assert sessions.get_current_session() is None


def test_oauth_callback_fragment_establishes_session(stub_sessions, stub_service) -> None:
    session = stub_sessions.complete_oauth(
        "http://localhost:3000/#access_token=oauth-token&refresh_token=r1&expires_in=3600&token_type=bearer"
    )

    assert session.user_id == "user-1"
    assert session.access_token == "oauth-token"
    assert session.refresh_token == "r1"
    assert session.expires_at is not None
    assert ("get_user", "oauth-token") in stub_service.calls


def test_oauth_callback_errors(stub_sessions) -> None:
    with pytest.raises(AuthError) as denied:
        stub_sessions.complete_oauth("http://localhost:3000/?error=access_denied&error_description=User+denied")
    with pytest.raises(AuthError) as missing:
        stub_sessions.complete_oauth("http://localhost:3000/#token_type=bearer")

    assert denied.value.code == "access_denied"
    assert denied.value.message == "User denied"
    assert missing.value.code == "OAUTH_NO_TOKEN"


def test_oauth_url_from_backend(stub_sessions) -> None:
    assert stub_sessions.oauth_url("google").endswith("provider=google")


def test_oauth_unavailable_locally_is_auth_error(sessions) -> None:
    with pytest.raises(AuthError) as exc:
        sessions.oauth_url("google")

    assert exc.value.code == "validation_failed"
