from __future__ import annotations

import operator
import re
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, StatementError
from sqlalchemy.orm import sessionmaker

from inventory_desk.core.config import Settings
from inventory_desk.data.local.db import create_db_engine, create_session_factory
from inventory_desk.data.local.models import AuthUserRecord, TABLES
from inventory_desk.data.local.policies import ADMIN_ROLE, POLICIES, Caller
from inventory_desk.data.local.repos import AuthUserRepository, UserRoleRepository
from inventory_desk.data.local.security import TokenIssuer, get_password_hash, verify_password
from inventory_desk.data.service import Filter, Order, PolicyDenied, ServiceError
from inventory_desk.session.models import AuthUser, Session

EMAIL_REGEX = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MIN_PASSWORD_LENGTH = 6
TIMESTAMP_COLUMNS = {"food_conditions": "inspection_date"}

_OPERATORS: dict[str, Callable[[Any, Any], Any]] = {
    "eq": operator.eq,
    "neq": operator.ne,
    "gt": operator.gt,
    "gte": operator.ge,
    "lt": operator.lt,
    "lte": operator.le,
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def serialize_row(row: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {}
    for column in row.__table__.columns:
        value = getattr(row, column.key)
        if isinstance(value, datetime):
            value = value.replace(tzinfo=timezone.utc).isoformat()
        payload[column.key] = value
    return payload


class LocalDataService:
    """Embedded stand-in for the hosted backend: auth, tables and row policies over SQLAlchemy."""

    def __init__(
        self,
        session_factory: sessionmaker,
        tokens: TokenIssuer,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.session_factory = session_factory
        self.tokens = tokens
        self._clock = clock
        self._last_stamp: datetime | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "LocalDataService":
        engine = create_db_engine(settings.DATABASE_URL)
        tokens = TokenIssuer(
            secret_key=settings.SECRET_KEY,
            algorithm=settings.ALGORITHM,
            expire_minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES,
        )
        return cls(create_session_factory(engine), tokens)

    # ── auth ──────────────────────────────────────────────
    def sign_up(self, email: str, password: str) -> AuthUser:
        normalized_email = (email or "").strip().lower()
        if not EMAIL_REGEX.match(normalized_email):
            raise ServiceError(code="email_address_invalid", message="Unable to validate email address: invalid format", status_code=400)
        if len(password or "") < MIN_PASSWORD_LENGTH:
            raise ServiceError(
                code="weak_password",
                message=f"Password should be at least {MIN_PASSWORD_LENGTH} characters.",
                status_code=422,
            )
        with self.session_factory() as db:
            repo = AuthUserRepository(db)
            if repo.get_by_email(normalized_email):
                raise ServiceError(code="user_already_exists", message="User already registered", status_code=422)
            user = repo.create(AuthUserRecord(email=normalized_email, hashed_password=get_password_hash(password)))
            return AuthUser(id=user.id, email=user.email)

    def sign_in_with_password(self, email: str, password: str) -> Session:
        with self.session_factory() as db:
            user = AuthUserRepository(db).get_by_email(email or "")
            if user is None or not verify_password(password or "", user.hashed_password):
                raise ServiceError(code="invalid_credentials", message="Invalid login credentials", status_code=400)
            token, expires_at = self.tokens.issue(user.id, user.email)
            return Session(user_id=user.id, email=user.email, access_token=token, expires_at=expires_at)

    def sign_out(self, access_token: str) -> None:
        self.tokens.revoke(access_token)

    def get_user(self, access_token: str) -> AuthUser:
        claims = self.tokens.decode(access_token)
        return AuthUser(id=str(claims["sub"]), email=claims.get("email"))

    def authorize_url(self, provider: str, redirect_to: str) -> str:
        raise ServiceError(
            code="validation_failed",
            message="Unsupported provider: provider is not enabled",
            details={"provider": provider},
            status_code=400,
        )

    # ── data ──────────────────────────────────────────────
    def query(
        self,
        table: str,
        *,
        access_token: str | None,
        filters: list[Filter] | None = None,
        order: Order | None = None,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        model = self._model(table)
        with self.session_factory() as db:
            caller = self._caller(db, access_token)
            stmt = select(model)
            predicate = POLICIES[table].read(caller)
            if predicate is not None:
                stmt = stmt.where(predicate)
            for item in filters or []:
                compare = _OPERATORS.get(item.op)
                if compare is None:
                    raise ServiceError(code="PGRST100", message=f"Unsupported operator: {item.op}", status_code=400)
                stmt = stmt.where(compare(self._column(model, item.column), item.value))
            if order is not None:
                column = self._column(model, order.column)
                stmt = stmt.order_by(column.asc() if order.ascending else column.desc())
            if limit is not None:
                stmt = stmt.limit(limit)
            try:
                rows = db.execute(stmt).scalars().all()
            except StatementError as exc:
                raise ServiceError(code="22P02", message=str(exc.orig), status_code=400) from exc
            return [serialize_row(row) for row in rows]

    def insert(self, table: str, fields: dict[str, Any], *, access_token: str | None) -> dict[str, Any]:
        model = self._model(table)
        known = {column.key for column in model.__table__.columns}
        unknown = sorted(set(fields) - known)
        if unknown:
            raise ServiceError(
                code="PGRST204",
                message=f"Could not find the '{unknown[0]}' column of '{table}'",
                status_code=400,
            )
        with self.session_factory() as db:
            caller = self._caller(db, access_token)
            if not POLICIES[table].insert(db, caller, fields):
                raise PolicyDenied(
                    code="42501",
                    message=f'new row violates row-level security policy for table "{table}"',
                    status_code=403,
                )
            values = dict(fields)
            stamp_column = TIMESTAMP_COLUMNS.get(table, "created_at")
            if stamp_column in known and values.get(stamp_column) is None:
                values[stamp_column] = self._next_timestamp()
            row = model(**values)
            db.add(row)
            try:
                db.commit()
            except (IntegrityError, StatementError) as exc:
                db.rollback()
                raise ServiceError(code="23502", message=str(exc.orig), status_code=400) from exc
            db.refresh(row)
            return serialize_row(row)

    # ── helpers ───────────────────────────────────────────
    def _caller(self, db, access_token: str | None) -> Caller:
        claims = self.tokens.decode(access_token)
        user_id = str(claims["sub"])
        if AuthUserRepository(db).get_by_id(user_id) is None:
            raise ServiceError(code="user_not_found", message="User from sub claim in JWT does not exist", status_code=401)
        return Caller(user_id=user_id, is_admin=UserRoleRepository(db).has_role(user_id, ADMIN_ROLE))

    @staticmethod
    def _model(table: str):
        model = TABLES.get(table)
        if model is None or table not in POLICIES:
            raise ServiceError(code="42P01", message=f'relation "public.{table}" does not exist', status_code=404)
        return model

    @staticmethod
    def _column(model, name: str):
        column = model.__table__.columns.get(name)
        if column is None:
            raise ServiceError(code="42703", message=f"column {model.__tablename__}.{name} does not exist", status_code=400)
        return column

    def _next_timestamp(self) -> datetime:
        now = self._clock()
        if self._last_stamp is not None and now <= self._last_stamp:
            now = self._last_stamp + timedelta(microseconds=1)
        self._last_stamp = now
        return now
