from __future__ import annotations

from inventory_desk.core.errors import DeskError
from inventory_desk.data.service import PolicyDenied, ServiceError, TransportError

NETWORK_MESSAGE = "Network error while contacting the backend. Try again."
POLICY_MESSAGE = "You do not have access to this data."


def translate(exc: ServiceError, error_cls: type[DeskError]) -> DeskError:
    """Turn a backend failure into the client taxonomy (AuthError, ReadError, WriteError)."""
    if isinstance(exc, TransportError):
        return error_cls(code="NETWORK_ERROR", message=NETWORK_MESSAGE, details=exc.details, status_code=None)
    if isinstance(exc, PolicyDenied):
        return error_cls(code="PERMISSION_DENIED", message=POLICY_MESSAGE, details=exc.message, status_code=exc.status_code)
    return error_cls(code=exc.code, message=exc.message, details=exc.details, status_code=exc.status_code or None)
