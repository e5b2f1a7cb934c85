from __future__ import annotations

import json
from datetime import datetime, timezone

import pytest
import responses

from inventory_desk.data.http_client import HttpClient
from inventory_desk.data.remote import RemoteDataService, build_query_params, session_from_token_payload
from inventory_desk.data.service import Filter, Order, ServiceError

BASE_URL = "https://demo.supabase.co"


def _service() -> RemoteDataService:
    return RemoteDataService(HttpClient(base_url=BASE_URL, api_key="anon-key"))


def test_query_params_encode_filters_order_and_limit() -> None:
    params = build_query_params(
        [Filter("user_id", "u1"), Filter("fit_for_processing", True), Filter("quantity", 2, op="gte")],
        Order("created_at"),
        1,
    )

    assert params == [
        ("select", "*"),
        ("user_id", "eq.u1"),
        ("fit_for_processing", "eq.true"),
        ("quantity", "gte.2"),
        ("order", "created_at.desc"),
        ("limit", "1"),
    ]


def test_session_from_token_payload_prefers_expires_at() -> None:
    session = session_from_token_payload(
        {
            "access_token": "abc",
            "refresh_token": "r1",
            "expires_at": 1_900_000_000,
            "expires_in": 3600,
            "user": {"id": "u1", "email": "a@b.co"},
        }
    )

    assert session.user_id == "u1"
    assert session.refresh_token == "r1"
    assert session.expires_at == datetime.fromtimestamp(1_900_000_000, tz=timezone.utc)


def test_session_from_token_payload_requires_user() -> None:
    with pytest.raises(ServiceError):
        session_from_token_payload({"access_token": "abc"})


@responses.activate
def test_sign_in_posts_password_grant() -> None:
    responses.add(
        responses.POST,
        f"{BASE_URL}/auth/v1/token",
        json={"access_token": "abc", "expires_in": 3600, "user": {"id": "u1", "email": "a@b.co"}},
        status=200,
    )

    session = _service().sign_in_with_password("a@b.co", "secret1")

    request = responses.calls[0].request
    assert "grant_type=password" in request.url
    assert json.loads(request.body) == {"email": "a@b.co", "password": "secret1"}
    assert session.access_token == "abc"
    assert session.expires_at is not None


@responses.activate
def test_query_reads_rest_table_with_params() -> None:
    responses.add(responses.GET, f"{BASE_URL}/rest/v1/products", json=[{"id": "p1"}, "junk"], status=200)

    rows = _service().query("products", access_token="t", order=Order("created_at"))

    assert rows == [{"id": "p1"}]
    assert "order=created_at.desc" in responses.calls[0].request.url


@responses.activate
def test_insert_asks_for_representation_and_returns_first_row() -> None:
    responses.add(
        responses.POST,
        f"{BASE_URL}/rest/v1/returns",
        json=[{"id": "r1", "product_name": "Milk"}],
        status=201,
    )

    row = _service().insert("returns", {"product_name": "Milk"}, access_token="t")

    assert row == {"id": "r1", "product_name": "Milk"}
    assert responses.calls[0].request.headers["Prefer"] == "return=representation"


@responses.activate
def test_get_user_returns_identity() -> None:
    responses.add(responses.GET, f"{BASE_URL}/auth/v1/user", json={"id": "u9", "email": "z@b.co"}, status=200)

    user = _service().get_user("t")

    assert user.id == "u9"
    assert responses.calls[0].request.headers["Authorization"] == "Bearer t"


def test_authorize_url_points_to_provider() -> None:
    url = _service().authorize_url("google", "http://localhost:3000/")

    assert url == (
        f"{BASE_URL}/auth/v1/authorize?provider=google&redirect_to=http%3A%2F%2Flocalhost%3A3000%2F"
    )
