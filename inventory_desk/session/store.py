from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Protocol
from urllib.parse import parse_qs, urlsplit

from inventory_desk.core.errors import AuthError, session_required
from inventory_desk.core.logging import get_logger, log_action
from inventory_desk.data.errors import translate
from inventory_desk.data.service import DataService, ServiceError
from inventory_desk.session.models import AuthUser, Session
from inventory_desk.session.tokens import validate_token

logger = get_logger(__name__)

SessionListener = Callable[[Session | None, str], None]


class SessionPersistence(Protocol):
    def save(self, session: Session) -> None: ...

    def load(self) -> Session | None: ...

    def clear(self) -> None: ...


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


class SessionStore:
    """Owns the current session and tells subscribers whenever it changes.

    Reasons passed to listeners: ``restored``, ``signed_in``, ``signed_out``
    and ``expired``.
    """

    def __init__(
        self,
        service: DataService,
        persistence: SessionPersistence,
        *,
        oauth_redirect_url: str = "http://localhost:3000/",
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.service = service
        self.persistence = persistence
        self.oauth_redirect_url = oauth_redirect_url
        self._clock = clock
        self._session: Session | None = None
        self._listeners: list[SessionListener] = []

    # ── reads ─────────────────────────────────────────────
    def get_current_session(self) -> Session | None:
        if self._session is not None and self._session.is_expired(self._clock()):
            log_action(logger, "session", "expire", self._session.user_id, "expired")
            self._set(None, "expired")
        return self._session

    def require_session(self) -> Session:
        session = self.get_current_session()
        if session is None:
            raise session_required()
        return session

    def on_session_change(self, listener: SessionListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ── lifecycle ─────────────────────────────────────────
    def restore(self) -> Session | None:
        stored = self.persistence.load()
        if stored is None:
            return None
        if stored.is_expired(self._clock()):
            self.persistence.clear()
            return None
        self._set(stored, "restored")
        return stored

    def sign_in(self, email: str, password: str) -> Session:
        email = (email or "").strip()
        if not email or not password:
            raise AuthError(code="VALIDATION_ERROR", message="Email and password are required.")
        try:
            session = self.service.sign_in_with_password(email, password)
        except ServiceError as exc:
            log_action(logger, "session", "sign_in", None, "error", code=exc.code)
            raise translate(exc, AuthError) from exc
        self._set(session, "signed_in")
        log_action(logger, "session", "sign_in", session.user_id, "success")
        return session

    def sign_up(self, email: str, password: str) -> AuthUser:
        email = (email or "").strip()
        if not email or not password:
            raise AuthError(code="VALIDATION_ERROR", message="Email and password are required.")
        try:
            user = self.service.sign_up(email, password)
        except ServiceError as exc:
            log_action(logger, "session", "sign_up", None, "error", code=exc.code)
            raise translate(exc, AuthError) from exc
        log_action(logger, "session", "sign_up", user.id, "success")
        return user

    def sign_out(self) -> None:
        session = self._session
        if session is None:
            return
        failure: AuthError | None = None
        try:
            self.service.sign_out(session.access_token)
        except ServiceError as exc:
            failure = translate(exc, AuthError)
        finally:
            self._set(None, "signed_out")
        log_action(logger, "session", "sign_out", session.user_id, "error" if failure else "success")
        if failure is not None:
            raise failure

    def oauth_url(self, provider: str) -> str:
        try:
            return self.service.authorize_url(provider, self.oauth_redirect_url)
        except ServiceError as exc:
            raise translate(exc, AuthError) from exc

    def complete_oauth(self, callback_url: str) -> Session:
        """Establish a session from the redirect the provider sent the browser to."""
        parts = urlsplit(callback_url)
        params = {key: values[0] for key, values in parse_qs(parts.fragment or parts.query).items() if values}
        if "error" in params:
            raise AuthError(
                code=params["error"],
                message=params.get("error_description") or "OAuth sign-in failed.",
            )
        access_token = params.get("access_token")
        if not access_token:
            raise AuthError(code="OAUTH_NO_TOKEN", message="OAuth redirect did not include an access token.")

        try:
            user = self.service.get_user(access_token)
        except ServiceError as exc:
            raise translate(exc, AuthError) from exc

        session = Session(
            user_id=user.id,
            email=user.email,
            access_token=access_token,
            refresh_token=params.get("refresh_token"),
            expires_at=self._oauth_expiry(params, access_token),
        )
        self._set(session, "signed_in")
        log_action(logger, "session", "oauth", session.user_id, "success")
        return session

    # ── internals ─────────────────────────────────────────
    def _oauth_expiry(self, params: dict[str, str], access_token: str) -> datetime | None:
        if params.get("expires_at", "").isdigit():
            return datetime.fromtimestamp(int(params["expires_at"]), tz=timezone.utc)
        if params.get("expires_in", "").isdigit():
            return self._clock() + timedelta(seconds=int(params["expires_in"]))
        return validate_token(access_token, self._clock()).expires_at

    def _set(self, session: Session | None, reason: str) -> None:
        self._session = session
        if session is None:
            self.persistence.clear()
        else:
            self.persistence.save(session)
        for listener in list(self._listeners):
            listener(session, reason)
