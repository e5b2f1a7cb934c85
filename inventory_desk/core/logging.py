from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

_SENSITIVE_KEYS = {"password", "access_token", "refresh_token", "token", "apikey", "api_key"}


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format="%(message)s")


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def log_json(logger: logging.Logger, payload: dict[str, Any], level: int = logging.INFO) -> None:
    clean = {key: value for key, value in payload.items() if key.lower() not in _SENSITIVE_KEYS}
    logger.log(level, json.dumps(clean, ensure_ascii=False, default=str))


def log_action(
    logger: logging.Logger,
    module: str,
    action: str,
    user_id: str | None,
    outcome: str,
    level: int = logging.INFO,
    **extra: Any,
) -> None:
    log_json(
        logger,
        {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": logging.getLevelName(level),
            "module": module,
            "action": action,
            "user_id": user_id,
            "outcome": outcome,
            **extra,
        },
        level=level,
    )
