from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_data_dir
from pydantic import ValidationError

from inventory_desk.session.models import Session


@dataclass
class AuthStore:
    app_name: str = "inventory-desk"
    filename: str = "session.json"
    path_override: Path | None = None

    def _path(self) -> Path:
        if self.path_override is not None:
            self.path_override.parent.mkdir(parents=True, exist_ok=True)
            return self.path_override
        base = Path(user_data_dir(self.app_name, appauthor=False))
        base.mkdir(parents=True, exist_ok=True)
        return base / self.filename

    def save(self, session: Session) -> None:
        path = self._path()
        path.write_text(session.model_dump_json(indent=2), encoding="utf-8")
        try:
            path.chmod(0o600)
        except OSError:
            pass

    def load(self) -> Session | None:
        path = self._path()
        if not path.exists():
            return None
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError):
            self.clear()
            return None
        try:
            return Session.model_validate(data)
        except ValidationError:
            self.clear()
            return None

    def clear(self) -> None:
        path = self._path()
        if path.exists():
            path.unlink()


class MemoryAuthStore:
    """Keeps the session in process only; nothing survives a restart."""

    def __init__(self) -> None:
        self._session: Session | None = None

    def save(self, session: Session) -> None:
        self._session = session

    def load(self) -> Session | None:
        return self._session

    def clear(self) -> None:
        self._session = None
