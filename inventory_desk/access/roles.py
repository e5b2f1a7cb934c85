from __future__ import annotations

import logging
from enum import Enum

from inventory_desk.core.logging import get_logger, log_action
from inventory_desk.data.service import DataService, Filter, ServiceError
from inventory_desk.session.models import Session
from inventory_desk.session.store import SessionStore

logger = get_logger(__name__)

ROLE_TABLE = "user_roles"


class Role(str, Enum):
    ADMIN = "admin"


class RoleResolver:
    """Answers role membership from the role-assignment table.

    Every answer is fail-closed: a missing row, a missing session or any
    backend error yields ``False``. Nothing is cached; each caller asks
    again when it loads.
    """

    def __init__(self, service: DataService, sessions: SessionStore) -> None:
        self.service = service
        self.sessions = sessions

    def has_role(self, user_id: str, role: Role | str) -> bool:
        role_name = role.value if isinstance(role, Role) else str(role)
        session = self.sessions.get_current_session()
        if session is None or not user_id:
            return False
        try:
            rows = self.service.query(
                ROLE_TABLE,
                access_token=session.access_token,
                filters=[Filter("user_id", user_id), Filter("role", role_name)],
                limit=1,
            )
        except ServiceError as exc:
            log_action(
                logger,
                "roles",
                "has_role",
                user_id,
                "error",
                level=logging.WARNING,
                role=role_name,
                code=exc.code,
            )
            return False
        granted = any(row.get("user_id") == user_id and row.get("role") == role_name for row in rows)
        log_action(logger, "roles", "has_role", user_id, "granted" if granted else "denied", role=role_name)
        return granted

    def authorize(self, session: Session | None, required_role: Role | str) -> bool:
        if session is None:
            return False
        return self.has_role(session.user_id, required_role)
