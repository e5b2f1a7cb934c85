import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from inventory_desk.data.service import ServiceError

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


class TokenIssuer:
    def __init__(self, secret_key: str, algorithm: str = "HS256", expire_minutes: int = 60) -> None:
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes
        self._revoked: set[str] = set()

    def issue(self, user_id: str, email: str, now: datetime | None = None) -> tuple[str, datetime]:
        issued_at = now or datetime.now(timezone.utc)
        expires_at = issued_at + timedelta(minutes=self.expire_minutes)
        claims = {
            "sub": user_id,
            "email": email,
            "role": "authenticated",
            "jti": uuid.uuid4().hex,
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
        token = jwt.encode(claims, self.secret_key, algorithm=self.algorithm)
        return token, datetime.fromtimestamp(claims["exp"], tz=timezone.utc)

    def decode(self, token: str | None) -> dict[str, Any]:
        if not token:
            raise ServiceError(code="invalid_jwt", message="Missing bearer token", status_code=401)
        try:
            claims = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except ExpiredSignatureError as exc:
            raise ServiceError(code="PGRST301", message="JWT expired", status_code=401) from exc
        except JWTError as exc:
            raise ServiceError(code="invalid_jwt", message="Invalid JWT", status_code=401) from exc
        if claims.get("jti") in self._revoked:
            raise ServiceError(code="session_not_found", message="Session has been signed out", status_code=401)
        return claims

    def revoke(self, token: str) -> None:
        claims = self.decode(token)
        self._revoked.add(str(claims["jti"]))
