from __future__ import annotations

from typing import Any, Mapping

from inventory_desk.data.service import PolicyDenied, ServiceError

POLICY_CODES = {"42501"}


def _first_text(payload: Mapping[str, Any], *keys: str) -> str | None:
    for key in keys:
        value = payload.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def map_error(status_code: int, payload: Mapping[str, Any] | None) -> ServiceError:
    payload = payload or {}
    code = _first_text(payload, "error_code", "code", "error")
    if code is None and isinstance(payload.get("code"), int):
        code = f"HTTP_{payload['code']}"
    code = code or "HTTP_ERROR"
    message = _first_text(payload, "message", "msg", "error_description") or "Request failed"
    details = payload.get("details") or payload.get("hint")

    mapped: type[ServiceError] = ServiceError
    if code in POLICY_CODES or status_code == 403:
        mapped = PolicyDenied
    return mapped(code=code, message=message, details=details, status_code=status_code)
