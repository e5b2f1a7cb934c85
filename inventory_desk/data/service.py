from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

from inventory_desk.session.models import AuthUser, Session


@dataclass
class ServiceError(Exception):
    code: str
    message: str
    details: Any = None
    status_code: int = 0

    def __str__(self) -> str:
        return f"[{self.status_code}] {self.code}: {self.message}"


class TransportError(ServiceError):
    """Network failure before the backend answered."""


class PolicyDenied(ServiceError):
    """Row-level policy rejected the operation."""


@dataclass(frozen=True)
class Filter:
    column: str
    value: Any
    op: str = "eq"


@dataclass(frozen=True)
class Order:
    column: str
    ascending: bool = False


class DataService(Protocol):
    """Hosted auth plus tabular data, authorized per row on the backend."""

    def sign_up(self, email: str, password: str) -> AuthUser: ...

    def sign_in_with_password(self, email: str, password: str) -> Session: ...

    def sign_out(self, access_token: str) -> None: ...

    def get_user(self, access_token: str) -> AuthUser: ...

    def authorize_url(self, provider: str, redirect_to: str) -> str: ...

    def query(
        self,
        table: str,
        *,
        access_token: str | None,
        filters: list[Filter] | None = None,
        order: Order | None = None,
        limit: int | None = None,
    ) -> list[dict[str, Any]]: ...

    def insert(self, table: str, fields: dict[str, Any], *, access_token: str | None) -> dict[str, Any]: ...
