from __future__ import annotations

import base64
import json
from datetime import datetime, timedelta, timezone

from inventory_desk.session.models import Session
from inventory_desk.session.tokens import decode_claims, validate_token


def _jwt_with(payload: dict) -> str:
    header = base64.urlsafe_b64encode(json.dumps({"alg": "none", "typ": "JWT"}).encode()).decode().rstrip("=")
    body = base64.urlsafe_b64encode(json.dumps(payload).encode()).decode().rstrip("=")
    return f"{header}.{body}.sig"


def test_missing_and_corrupt_tokens() -> None:
    assert validate_token(None).reason == "missing_token"
    assert validate_token("not-a-jwt").reason == "corrupt_token"
    assert validate_token("a.%%%.c").reason == "corrupt_token"


def test_expired_token_is_invalid() -> None:
    now = datetime.now(tz=timezone.utc)
    result = validate_token(_jwt_with({"exp": int((now - timedelta(minutes=1)).timestamp())}), now)

    assert result.valid is False
    assert result.reason == "expired_token"


def test_live_token_reports_expiry() -> None:
    now = datetime.now(tz=timezone.utc)
    exp = int((now + timedelta(minutes=30)).timestamp())

    result = validate_token(_jwt_with({"exp": exp, "sub": "u1"}), now)

    assert result.valid is True
    assert result.expires_at == datetime.fromtimestamp(exp, tz=timezone.utc)


def test_decode_claims_reads_payload() -> None:
    assert decode_claims(_jwt_with({"sub": "u1"})) == {"sub": "u1"}


def test_session_expiry_treats_naive_as_utc() -> None:
    now = datetime.now(tz=timezone.utc)
    session = Session(
        user_id="u1",
        access_token="t",
        expires_at=(now - timedelta(seconds=1)).replace(tzinfo=None),
    )

    assert session.is_expired(now) is True
    assert Session(user_id="u1", access_token="t").is_expired(now) is False
