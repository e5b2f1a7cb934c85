from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from typing import Any
from urllib.parse import urljoin

import requests

from inventory_desk.core.logging import get_logger, log_json
from inventory_desk.data.error_mapper import map_error
from inventory_desk.data.service import ServiceError, TransportError

logger = get_logger(__name__)


@dataclass
class LastOperation:
    method: str
    path: str
    duration_ms: int
    status_code: int
    result: str


@dataclass
class HttpClient:
    base_url: str
    api_key: str
    timeout_seconds: float = 10.0
    verify_ssl: bool = True
    session: requests.Session | None = None
    last_operation: LastOperation | None = None

    def __post_init__(self) -> None:
        if self.session is None:
            self.session = requests.Session()

    def _build_url(self, path: str) -> str:
        base = self.base_url.rstrip("/") + "/"
        return urljoin(base, path.lstrip("/"))

    def request(
        self,
        method: str,
        path: str,
        *,
        access_token: str | None = None,
        headers: dict[str, str] | None = None,
        json_body: dict[str, Any] | list[Any] | None = None,
        params: dict[str, Any] | list[tuple[str, Any]] | None = None,
    ) -> dict[str, Any] | list[Any] | None:
        if self.session is None:
            raise RuntimeError("HTTP session not initialized")
        request_headers = {"Accept": "application/json", "apikey": self.api_key}
        if access_token:
            request_headers["Authorization"] = f"Bearer {access_token}"
        if headers:
            request_headers.update(headers)

        normalized_method = method.upper()
        started = time.monotonic()
        try:
            response = self.session.request(
                method=normalized_method,
                url=self._build_url(path),
                headers=request_headers,
                json=json_body,
                params=params,
                timeout=self.timeout_seconds,
                verify=self.verify_ssl,
            )
        except requests.RequestException as exc:
            self._record(normalized_method, path, started, 0, "network_error")
            raise TransportError(
                code="NETWORK_ERROR",
                message="Network error while calling the backend",
                details={"type": type(exc).__name__},
                status_code=0,
            ) from exc

        if response.ok:
            self._record(normalized_method, path, started, response.status_code, "success")
            if not response.content:
                return None
            try:
                return response.json()
            except ValueError as exc:
                raise ServiceError(
                    code="INVALID_RESPONSE",
                    message="Backend answered with a body that is not JSON",
                    details={"content_type": response.headers.get("Content-Type")},
                    status_code=response.status_code,
                ) from exc

        try:
            payload = response.json()
        except json.JSONDecodeError:
            payload = {"message": response.text}
        self._record(normalized_method, path, started, response.status_code, "error")
        raise map_error(response.status_code, payload if isinstance(payload, dict) else {"message": str(payload)})

    def _record(self, method: str, path: str, started: float, status_code: int, result: str) -> None:
        self.last_operation = LastOperation(
            method=method,
            path=path,
            duration_ms=int((time.monotonic() - started) * 1000),
            status_code=status_code,
            result=result,
        )
        log_json(
            logger,
            {
                "module": "http",
                "method": method,
                "path": path,
                "status_code": status_code,
                "duration_ms": self.last_operation.duration_ms,
                "outcome": result,
            },
            level=logging.DEBUG,
        )
