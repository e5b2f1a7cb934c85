from __future__ import annotations

from inventory_desk.data.error_mapper import map_error
from inventory_desk.data.service import PolicyDenied, ServiceError


def test_row_level_security_code_maps_to_policy_denied() -> None:
    error = map_error(401, {"code": "42501", "message": "new row violates row-level security policy"})

    assert isinstance(error, PolicyDenied)
    assert error.code == "42501"
    assert error.status_code == 401


def test_forbidden_status_maps_to_policy_denied() -> None:
    error = map_error(403, {"message": "forbidden"})

    assert isinstance(error, PolicyDenied)
    assert error.code == "HTTP_ERROR"


def test_auth_payload_uses_error_code_and_msg() -> None:
    error = map_error(400, {"error_code": "invalid_credentials", "msg": "Invalid login credentials"})

    assert type(error) is ServiceError
    assert error.code == "invalid_credentials"
    assert error.message == "Invalid login credentials"


def test_oauth_style_payload_uses_error_description() -> None:
    error = map_error(400, {"error": "invalid_grant", "error_description": "Refresh token not found"})

    assert error.code == "invalid_grant"
    assert error.message == "Refresh token not found"


def test_expired_jwt_is_not_a_policy_denial() -> None:
    error = map_error(401, {"code": "PGRST301", "message": "JWT expired"})

    assert not isinstance(error, PolicyDenied)
    assert error.code == "PGRST301"


def test_empty_payload_falls_back_to_generic_error() -> None:
    error = map_error(500, None)

    assert error.code == "HTTP_ERROR"
    assert error.message == "Request failed"
    assert error.status_code == 500
