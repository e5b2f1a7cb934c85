from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any

from inventory_desk.resources.models import InvoiceStatus, RejectedStatus, ReturnStatus

MAX_TEXT = 255
MAX_MESSAGE = 2000
_TRUE_VALUES = {"1", "true", "t", "yes", "y", "on"}
_FALSE_VALUES = {"0", "false", "f", "no", "n", "off"}


@dataclass
class FormResult:
    values: dict[str, Any]
    field_errors: dict[str, str]

    @property
    def first_invalid_field(self) -> str | None:
        return next(iter(self.field_errors), None)

    @property
    def is_valid(self) -> bool:
        return len(self.field_errors) == 0


def _text(value: Any) -> str:
    return "" if value is None else str(value).strip()


def _required_text(values: dict[str, Any], key: str, label: str, errors: dict[str, str], max_length: int = MAX_TEXT) -> str:
    text = _text(values.get(key))
    if not text:
        errors[key] = f"{label} is required."
    elif len(text) > max_length:
        errors[key] = f"{label} cannot exceed {max_length} characters."
    return text


def _optional_text(values: dict[str, Any], key: str) -> str | None:
    return _text(values.get(key)) or None


def _number(
    values: dict[str, Any],
    key: str,
    label: str,
    errors: dict[str, str],
    *,
    default: float | int | None,
    minimum: float,
    integer: bool = False,
) -> float | int | None:
    raw = values.get(key)
    if raw is None or _text(raw) == "":
        if default is None:
            errors[key] = f"{label} is required."
        return default
    try:
        number = int(_text(raw)) if integer else float(_text(raw))
    except ValueError:
        errors[key] = f"{label} must be a {'whole number' if integer else 'number'}."
        return None
    if not math.isfinite(number):
        errors[key] = f"{label} must be a finite number."
        return None
    if number < minimum:
        errors[key] = f"{label} must be at least {minimum:g}."
    return number


def _choice(values: dict[str, Any], key: str, label: str, enum: type[Enum], default: Enum, errors: dict[str, str]) -> str:
    text = _text(values.get(key)).lower() or default.value
    allowed = [member.value for member in enum]
    if text not in allowed:
        errors[key] = f"{label} must be one of: {', '.join(allowed)}."
    return text


def parse_bool(value: Any, default: bool = True) -> bool | None:
    if isinstance(value, bool):
        return value
    text = _text(value).lower()
    if not text:
        return default
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    return None


def validate_product(values: dict[str, Any]) -> FormResult:
    errors: dict[str, str] = {}
    cleaned = {
        "name": _required_text(values, "name", "Product name", errors),
        "description": _optional_text(values, "description"),
        "price": _number(values, "price", "Price", errors, default=0.0, minimum=0),
        "stock": _number(values, "stock", "Stock", errors, default=0, minimum=0, integer=True),
    }
    return FormResult(values=cleaned, field_errors=errors)


def validate_invoice(values: dict[str, Any]) -> FormResult:
    errors: dict[str, str] = {}
    cleaned = {
        "invoice_number": _required_text(values, "invoice_number", "Invoice number", errors, max_length=100),
        "total_amount": _number(values, "total_amount", "Total amount", errors, default=None, minimum=0),
        "status": _choice(values, "status", "Status", InvoiceStatus, InvoiceStatus.PENDING, errors),
    }
    return FormResult(values=cleaned, field_errors=errors)


def validate_return(values: dict[str, Any]) -> FormResult:
    errors: dict[str, str] = {}
    cleaned = {
        "product_name": _required_text(values, "product_name", "Product name", errors),
        "quantity": _number(values, "quantity", "Quantity", errors, default=1, minimum=1, integer=True),
        "reason": _required_text(values, "reason", "Reason", errors, max_length=MAX_MESSAGE),
        "status": _choice(values, "status", "Status", ReturnStatus, ReturnStatus.PENDING, errors),
    }
    return FormResult(values=cleaned, field_errors=errors)


def validate_food_condition(values: dict[str, Any]) -> FormResult:
    errors: dict[str, str] = {}
    fit = parse_bool(values.get("fit_for_processing"), default=True)
    if fit is None:
        errors["fit_for_processing"] = "Fit for processing must be yes or no."
    cleaned = {
        "product_name": _required_text(values, "product_name", "Product name", errors),
        "condition": _required_text(values, "condition", "Condition", errors),
        "fit_for_processing": bool(fit),
        "notes": _optional_text(values, "notes"),
    }
    return FormResult(values=cleaned, field_errors=errors)


def validate_rejected_item(values: dict[str, Any]) -> FormResult:
    errors: dict[str, str] = {}
    cleaned = {
        "product_name": _required_text(values, "product_name", "Product name", errors),
        "seller_id": _required_text(values, "seller_id", "Seller", errors, max_length=36),
        "reason": _required_text(values, "reason", "Reason", errors, max_length=MAX_MESSAGE),
        "quantity": _number(values, "quantity", "Quantity", errors, default=1, minimum=1, integer=True),
        "status": _choice(values, "status", "Status", RejectedStatus, RejectedStatus.REJECTED, errors),
    }
    return FormResult(values=cleaned, field_errors=errors)


def validate_chat_message(body: str | None) -> FormResult:
    errors: dict[str, str] = {}
    message = _required_text({"message": body}, "message", "Message", errors, max_length=MAX_MESSAGE)
    return FormResult(values={"message": message}, field_errors=errors)
