from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pydantic import ValidationError

from inventory_desk.access.roles import Role, RoleResolver
from inventory_desk.core.errors import ReadError, WriteError, validation_error
from inventory_desk.core.logging import get_logger, log_action
from inventory_desk.data.errors import translate
from inventory_desk.data.service import DataService, Filter, Order, ServiceError
from inventory_desk.resources import forms
from inventory_desk.resources.loading import Failed, Loaded, StateListener, load
from inventory_desk.resources.models import (
    FoodConditionRecord,
    Invoice,
    Product,
    Record,
    RejectedItem,
    ReturnItem,
)
from inventory_desk.session.store import SessionStore

logger = get_logger(__name__)

R = TypeVar("R", bound=Record)


@dataclass(frozen=True)
class ResourceSpec:
    key: str
    table: str
    model: type[Record]
    owner_column: str
    validator: Callable[[dict[str, Any]], forms.FormResult]
    order_column: str = "created_at"
    create_role: Role | None = None


PRODUCTS = ResourceSpec("products", "products", Product, "owner_id", forms.validate_product)
INVOICES = ResourceSpec("invoices", "invoices", Invoice, "user_id", forms.validate_invoice)
RETURNS = ResourceSpec("returns", "returns", ReturnItem, "user_id", forms.validate_return)
FOOD_CONDITIONS = ResourceSpec(
    "food_condition",
    "food_conditions",
    FoodConditionRecord,
    "inspector_id",
    forms.validate_food_condition,
    order_column="inspection_date",
    create_role=Role.ADMIN,
)
REJECTED_ITEMS = ResourceSpec(
    "rejected",
    "rejected_items",
    RejectedItem,
    "reported_by",
    forms.validate_rejected_item,
    create_role=Role.ADMIN,
)

ALL_SPECS = (PRODUCTS, INVOICES, RETURNS, FOOD_CONDITIONS, REJECTED_ITEMS)


class ResourceCollection(Generic[R]):
    """List and create one record type, always as the signed-in user."""

    def __init__(self, spec: ResourceSpec, service: DataService, sessions: SessionStore, roles: RoleResolver) -> None:
        self.spec = spec
        self.service = service
        self.sessions = sessions
        self.roles = roles

    def list(self, filters: list[Filter] | None = None) -> list[R]:
        session = self.sessions.require_session()
        try:
            rows = self.service.query(
                self.spec.table,
                access_token=session.access_token,
                filters=filters,
                order=Order(self.spec.order_column, ascending=False),
            )
        except ServiceError as exc:
            log_action(logger, self.spec.key, "list", session.user_id, "error", code=exc.code)
            raise translate(exc, ReadError) from exc
        try:
            records = [self.spec.model.model_validate(row) for row in rows]
        except ValidationError as exc:
            raise ReadError(code="INVALID_ROW", message=f"Unexpected {self.spec.table} row shape", details=str(exc)) from exc
        log_action(logger, self.spec.key, "list", session.user_id, "success", count=len(records))
        return records

    def load(self, on_state: StateListener | None = None) -> Loaded[list[R]] | Failed:
        return load(self.list, on_state)

    def can_create(self) -> bool:
        session = self.sessions.get_current_session()
        if session is None:
            return False
        if self.spec.create_role is None:
            return True
        return self.roles.authorize(session, self.spec.create_role)

    def create(self, fields: dict[str, Any]) -> R:
        session = self.sessions.require_session()
        form = self.spec.validator(fields)
        if not form.is_valid:
            raise validation_error(form.field_errors)
        if self.spec.create_role is not None and not self.roles.authorize(session, self.spec.create_role):
            log_action(logger, self.spec.key, "create", session.user_id, "denied")
            raise WriteError(
                code="PERMISSION_DENIED",
                message=f"The {self.spec.create_role.value} role is required to add {self.spec.table}.",
                status_code=403,
            )

        payload = {**form.values, self.spec.owner_column: session.user_id}
        try:
            row = self.service.insert(self.spec.table, payload, access_token=session.access_token)
        except ServiceError as exc:
            log_action(logger, self.spec.key, "create", session.user_id, "error", code=exc.code)
            raise translate(exc, WriteError) from exc
        try:
            record = self.spec.model.model_validate(row)
        except ValidationError as exc:
            raise WriteError(code="INVALID_ROW", message=f"Unexpected {self.spec.table} row shape", details=str(exc)) from exc
        log_action(logger, self.spec.key, "create", session.user_id, "success", record_id=record.id)
        return record


def build_collections(service: DataService, sessions: SessionStore, roles: RoleResolver) -> dict[str, ResourceCollection]:
    return {spec.key: ResourceCollection(spec, service, sessions, roles) for spec in ALL_SPECS}
