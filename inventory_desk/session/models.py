from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel


class AuthUser(BaseModel):
    id: str
    email: str | None = None


class Session(BaseModel):
    user_id: str
    email: str | None = None
    access_token: str
    refresh_token: str | None = None
    expires_at: datetime | None = None

    def is_expired(self, now: datetime | None = None) -> bool:
        if self.expires_at is None:
            return False
        current = now or datetime.now(tz=timezone.utc)
        expires_at = self.expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        return expires_at <= current
