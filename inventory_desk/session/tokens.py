from __future__ import annotations

import base64
import json
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any


@dataclass(frozen=True)
class TokenValidation:
    valid: bool
    reason: str | None = None
    expires_at: datetime | None = None


def decode_claims(token: str | None) -> dict[str, Any] | None:
    """Unverified JWT payload; the backend remains the authority on signatures."""
    if not token:
        return None
    parts = token.split(".")
    if len(parts) != 3:
        return None

    payload_part = parts[1]
    padded = payload_part + ("=" * (-len(payload_part) % 4))
    try:
        decoded = base64.urlsafe_b64decode(padded.encode("utf-8")).decode("utf-8")
        payload = json.loads(decoded)
    except (ValueError, UnicodeDecodeError):
        return None
    return payload if isinstance(payload, dict) else None


def validate_token(token: str | None, now_utc: datetime | None = None) -> TokenValidation:
    if not token:
        return TokenValidation(valid=False, reason="missing_token")

    payload = decode_claims(token)
    if payload is None:
        return TokenValidation(valid=False, reason="corrupt_token")

    exp = payload.get("exp")
    if exp is None:
        return TokenValidation(valid=True)

    if not isinstance(exp, (int, float)):
        return TokenValidation(valid=False, reason="corrupt_token")

    expires_at = datetime.fromtimestamp(float(exp), tz=timezone.utc)
    now = now_utc or datetime.now(tz=timezone.utc)
    if expires_at <= now:
        return TokenValidation(valid=False, reason="expired_token", expires_at=expires_at)

    return TokenValidation(valid=True, expires_at=expires_at)
