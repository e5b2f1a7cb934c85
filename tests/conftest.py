from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from inventory_desk.access.roles import RoleResolver
from inventory_desk.data.local.db import create_db_engine, create_session_factory
from inventory_desk.data.local.seed import seed_user
from inventory_desk.data.local.security import TokenIssuer
from inventory_desk.data.local.service import LocalDataService
from inventory_desk.data.service import ServiceError
from inventory_desk.resources.collection import build_collections
from inventory_desk.resources.disputes import DisputeThread
from inventory_desk.session.auth_store import MemoryAuthStore
from inventory_desk.session.models import AuthUser, Session
from inventory_desk.session.store import SessionStore

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "admin-pass"
USER_EMAIL = "seller@example.com"
USER_PASSWORD = "seller-pass"


class Clock:
    def __init__(self) -> None:
        self.now = datetime.now(tz=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


@dataclass
class StubService:
    """Scriptable backend double that records every call."""

    session: Session = field(
        default_factory=lambda: Session(
            user_id="user-1",
            email="stub@example.com",
            access_token="stub-token",
            expires_at=datetime.now(tz=timezone.utc) + timedelta(hours=1),
        )
    )
    rows: list[dict[str, Any]] = field(default_factory=list)
    query_error: ServiceError | None = None
    insert_error: ServiceError | None = None
    sign_out_error: ServiceError | None = None
    calls: list[tuple[str, Any]] = field(default_factory=list)

    def sign_up(self, email: str, password: str) -> AuthUser:
        self.calls.append(("sign_up", email))
        return AuthUser(id="new-user", email=email)

    def sign_in_with_password(self, email: str, password: str) -> Session:
        self.calls.append(("sign_in", email))
        return self.session

    def sign_out(self, access_token: str) -> None:
        self.calls.append(("sign_out", access_token))
        if self.sign_out_error is not None:
            raise self.sign_out_error

    def get_user(self, access_token: str) -> AuthUser:
        self.calls.append(("get_user", access_token))
        return AuthUser(id=self.session.user_id, email=self.session.email)

    def authorize_url(self, provider: str, redirect_to: str) -> str:
        return f"https://auth.example.test/authorize?provider={provider}"

    def query(self, table: str, *, access_token, filters=None, order=None, limit=None) -> list[dict[str, Any]]:
        self.calls.append(("query", table))
        if self.query_error is not None:
            raise self.query_error
        return list(self.rows)

    def insert(self, table: str, fields: dict[str, Any], *, access_token) -> dict[str, Any]:
        self.calls.append(("insert", table))
        if self.insert_error is not None:
            raise self.insert_error
        return {"id": "row-1", "created_at": datetime.now(tz=timezone.utc).isoformat(), **fields}

    def count(self, name: str) -> int:
        return sum(1 for call, _ in self.calls if call == name)


@pytest.fixture
def service() -> LocalDataService:
    engine = create_db_engine("sqlite+pysqlite:///:memory:")
    return LocalDataService(create_session_factory(engine), TokenIssuer(secret_key="test-secret"))


@pytest.fixture
def admin_id(service: LocalDataService) -> str:
    return seed_user(service.session_factory, ADMIN_EMAIL, ADMIN_PASSWORD)


@pytest.fixture
def seller_id(service: LocalDataService) -> str:
    return service.sign_up(USER_EMAIL, USER_PASSWORD).id


@pytest.fixture
def clock() -> Clock:
    return Clock()


@pytest.fixture
def sessions(service: LocalDataService, clock: Clock) -> SessionStore:
    return SessionStore(service, MemoryAuthStore(), clock=clock)


@pytest.fixture
def roles(service: LocalDataService, sessions: SessionStore) -> RoleResolver:
    return RoleResolver(service, sessions)


@pytest.fixture
def collections(service, sessions, roles):
    return build_collections(service, sessions, roles)


@pytest.fixture
def thread(service, sessions) -> DisputeThread:
    return DisputeThread(service, sessions)


@pytest.fixture
def stub_service() -> StubService:
    return StubService()


@pytest.fixture
def stub_sessions(stub_service: StubService) -> SessionStore:
    return SessionStore(stub_service, MemoryAuthStore())


@pytest.fixture
def as_admin(sessions: SessionStore, admin_id: str):
    def _sign_in() -> Session:
        if sessions.get_current_session() is not None:
            sessions.sign_out()
        return sessions.sign_in(ADMIN_EMAIL, ADMIN_PASSWORD)

    return _sign_in


@pytest.fixture
def as_seller(sessions: SessionStore, seller_id: str):
    def _sign_in() -> Session:
        if sessions.get_current_session() is not None:
            sessions.sign_out()
        return sessions.sign_in(USER_EMAIL, USER_PASSWORD)

    return _sign_in
