"""Row-level policies for the embedded backend.

Read policies return a SQL predicate narrowing the visible rows (``None``
means every row is visible). Insert policies decide whether a new row may
be written by the caller. They mirror the policies configured on the
hosted backend so that the client behaves the same against either one.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session as DbSession
from sqlalchemy.sql.elements import ColumnElement

from inventory_desk.data.local.models import ChatMessage, RejectedItem, TABLES

ADMIN_ROLE = "admin"


@dataclass(frozen=True)
class Caller:
    user_id: str
    is_admin: bool = False


ReadRule = Callable[[Caller], "ColumnElement[bool] | None"]
InsertRule = Callable[[DbSession, Caller, dict[str, Any]], bool]


@dataclass(frozen=True)
class TablePolicy:
    read: ReadRule
    insert: InsertRule


def _owner_policy(table: str, column: str) -> TablePolicy:
    model = TABLES[table]
    return TablePolicy(
        read=lambda caller: getattr(model, column) == caller.user_id,
        insert=lambda db, caller, fields: fields.get(column) == caller.user_id,
    )


def _rejected_items_read(caller: Caller):
    if caller.is_admin:
        return None
    return RejectedItem.seller_id == caller.user_id


def _chat_read(caller: Caller):
    if caller.is_admin:
        return None
    seller_items = select(RejectedItem.id).where(RejectedItem.seller_id == caller.user_id)
    return ChatMessage.rejected_item_id.in_(seller_items)


def _chat_insert(db: DbSession, caller: Caller, fields: dict[str, Any]) -> bool:
    if fields.get("sender_id") != caller.user_id:
        return False
    if caller.is_admin:
        return True
    parent = db.get(RejectedItem, fields.get("rejected_item_id"))
    return parent is not None and parent.seller_id == caller.user_id


POLICIES: dict[str, TablePolicy] = {
    "products": _owner_policy("products", "owner_id"),
    "invoices": _owner_policy("invoices", "user_id"),
    "returns": _owner_policy("returns", "user_id"),
    "food_conditions": TablePolicy(
        read=lambda caller: None,
        insert=lambda db, caller, fields: caller.is_admin and fields.get("inspector_id") == caller.user_id,
    ),
    "rejected_items": TablePolicy(
        read=_rejected_items_read,
        insert=lambda db, caller, fields: caller.is_admin and fields.get("reported_by") == caller.user_id,
    ),
    "chat_messages": TablePolicy(read=_chat_read, insert=_chat_insert),
    "user_roles": TablePolicy(
        read=lambda caller: TABLES["user_roles"].user_id == caller.user_id,
        insert=lambda db, caller, fields: False,
    ),
}
