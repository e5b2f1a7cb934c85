from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any
from urllib.parse import urlencode

from inventory_desk.core.config import Settings
from inventory_desk.data.http_client import HttpClient
from inventory_desk.data.service import Filter, Order, ServiceError
from inventory_desk.session.models import AuthUser, Session

AUTH_PREFIX = "/auth/v1"
REST_PREFIX = "/rest/v1"


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    return str(value)


def build_query_params(
    filters: list[Filter] | None,
    order: Order | None,
    limit: int | None,
) -> list[tuple[str, str]]:
    params: list[tuple[str, str]] = [("select", "*")]
    for item in filters or []:
        params.append((item.column, f"{item.op}.{_format_value(item.value)}"))
    if order is not None:
        params.append(("order", f"{order.column}.{'asc' if order.ascending else 'desc'}"))
    if limit is not None:
        params.append(("limit", str(limit)))
    return params


def session_from_token_payload(payload: dict[str, Any]) -> Session:
    user = payload.get("user") or {}
    access_token = payload.get("access_token")
    if not access_token or not user.get("id"):
        raise ServiceError(code="INVALID_TOKEN_RESPONSE", message="Token response without access token or user")

    expires_at: datetime | None = None
    if isinstance(payload.get("expires_at"), (int, float)):
        expires_at = datetime.fromtimestamp(payload["expires_at"], tz=timezone.utc)
    elif isinstance(payload.get("expires_in"), (int, float)):
        expires_at = datetime.now(tz=timezone.utc) + timedelta(seconds=payload["expires_in"])

    return Session(
        user_id=str(user["id"]),
        email=user.get("email"),
        access_token=str(access_token),
        refresh_token=payload.get("refresh_token"),
        expires_at=expires_at,
    )


class RemoteDataService:
    def __init__(self, http: HttpClient) -> None:
        self.http = http

    @classmethod
    def from_settings(cls, settings: Settings) -> "RemoteDataService":
        return cls(
            HttpClient(
                base_url=settings.API_URL,
                api_key=settings.API_KEY,
                timeout_seconds=settings.TIMEOUT_SECONDS,
                verify_ssl=settings.VERIFY_SSL,
            )
        )

    def sign_up(self, email: str, password: str) -> AuthUser:
        data = self.http.request("POST", f"{AUTH_PREFIX}/signup", json_body={"email": email, "password": password})
        if not isinstance(data, dict):
            raise ServiceError(code="INVALID_RESPONSE", message="Expected sign-up response to be a JSON object")
        user = data.get("user") if isinstance(data.get("user"), dict) else data
        return AuthUser(id=str(user.get("id") or ""), email=user.get("email") or email)

    def sign_in_with_password(self, email: str, password: str) -> Session:
        data = self.http.request(
            "POST",
            f"{AUTH_PREFIX}/token",
            params={"grant_type": "password"},
            json_body={"email": email, "password": password},
        )
        if not isinstance(data, dict):
            raise ServiceError(code="INVALID_RESPONSE", message="Expected token response to be a JSON object")
        return session_from_token_payload(data)

    def sign_out(self, access_token: str) -> None:
        self.http.request("POST", f"{AUTH_PREFIX}/logout", access_token=access_token)

    def get_user(self, access_token: str) -> AuthUser:
        data = self.http.request("GET", f"{AUTH_PREFIX}/user", access_token=access_token)
        if not isinstance(data, dict):
            raise ServiceError(code="INVALID_RESPONSE", message="Expected user response to be a JSON object")
        return AuthUser(id=str(data["id"]), email=data.get("email"))

    def authorize_url(self, provider: str, redirect_to: str) -> str:
        query = urlencode({"provider": provider, "redirect_to": redirect_to})
        return f"{self.http.base_url.rstrip('/')}{AUTH_PREFIX}/authorize?{query}"

    def query(
        self,
        table: str,
        *,
        access_token: str | None,
        filters: list[Filter] | None = None,
        order: Order | None = None,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        data = self.http.request(
            "GET",
            f"{REST_PREFIX}/{table}",
            access_token=access_token,
            params=build_query_params(filters, order, limit),
        )
        if data is None:
            return []
        if not isinstance(data, list):
            raise ServiceError(code="INVALID_RESPONSE", message=f"Expected a list of {table} rows")
        return [row for row in data if isinstance(row, dict)]

    def insert(self, table: str, fields: dict[str, Any], *, access_token: str | None) -> dict[str, Any]:
        data = self.http.request(
            "POST",
            f"{REST_PREFIX}/{table}",
            access_token=access_token,
            json_body=fields,
            headers={"Prefer": "return=representation"},
        )
        if isinstance(data, list) and data and isinstance(data[0], dict):
            return data[0]
        if isinstance(data, dict):
            return data
        return dict(fields)
