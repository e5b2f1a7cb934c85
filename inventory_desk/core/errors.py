from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class DeskError(Exception):
    code: str
    message: str
    details: Any = None
    status_code: int | None = None

    def __str__(self) -> str:
        status = f"[{self.status_code}] " if self.status_code else ""
        return f"{status}{self.code}: {self.message}"


class AuthError(DeskError):
    """Bad credentials, expired session or OAuth failure."""


class ReadError(DeskError):
    """Query failure: network or policy denial."""


class WriteError(DeskError):
    """Insert failure: validation, policy denial or network."""


@dataclass
class ClientValidationError(WriteError):
    field_errors: dict[str, str] = field(default_factory=dict)

    def __str__(self) -> str:
        joined = "; ".join(f"{key}: {value}" for key, value in self.field_errors.items())
        return f"{self.code}: {joined or self.message}"


class ConfigError(ValueError):
    pass


def validation_error(field_errors: dict[str, str]) -> ClientValidationError:
    return ClientValidationError(
        code="VALIDATION_ERROR",
        message="Fix the highlighted fields before submitting.",
        details=dict(field_errors),
        field_errors=dict(field_errors),
    )


def session_required() -> AuthError:
    return AuthError(code="SESSION_REQUIRED", message="Sign in to continue.", status_code=401)
