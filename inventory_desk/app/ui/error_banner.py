from __future__ import annotations

from inventory_desk.app.error_presenter import build_error_payload


class ErrorBanner:
    @staticmethod
    def show(error: Exception | str) -> None:
        if isinstance(error, str):
            print(f"[ERROR] code=UI_VALIDATION message={error}")
            return
        payload = build_error_payload(error)
        print(
            "[ERROR] "
            f"code={payload['code']} "
            f"message={payload['message']} "
            f"action={payload['action']}"
        )
        for field, message in payload.get("field_errors", {}).items():
            print(f"  - {field}: {message}")
