from __future__ import annotations

from typing import Any

from inventory_desk.core.errors import AuthError, ClientValidationError, DeskError, ReadError, WriteError


def build_error_payload(error: Exception) -> dict[str, Any]:
    if isinstance(error, DeskError):
        category = _classify(error)
        payload: dict[str, Any] = {
            "category": category,
            "code": error.code,
            "message": error.message,
            "status_code": error.status_code,
            "action": _suggest_action(category),
        }
        if isinstance(error, ClientValidationError):
            payload["field_errors"] = dict(error.field_errors)
        return payload
    return {
        "category": "internal",
        "code": "INTERNAL_ERROR",
        "message": str(error),
        "status_code": None,
        "action": "Report the problem",
    }


def _classify(error: DeskError) -> str:
    if error.code == "NETWORK_ERROR":
        return "network"
    if isinstance(error, ClientValidationError) or error.code == "VALIDATION_ERROR":
        return "validation"
    if error.code == "PERMISSION_DENIED" or error.status_code == 403:
        return "permission"
    if isinstance(error, AuthError) or error.status_code == 401:
        return "auth"
    if isinstance(error, (ReadError, WriteError)) and error.status_code and error.status_code >= 500:
        return "internal"
    return "api"


def _suggest_action(category: str) -> str:
    if category in {"network", "internal"}:
        return "Retry"
    if category == "auth":
        return "Sign in again"
    if category == "validation":
        return "Fix the form"
    if category == "permission":
        return "Ask an admin for access"
    return "Retry or report the problem"
