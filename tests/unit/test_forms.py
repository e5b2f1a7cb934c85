from __future__ import annotations

from inventory_desk.resources.forms import (
    MAX_MESSAGE,
    parse_bool,
    validate_chat_message,
    validate_food_condition,
    validate_invoice,
    validate_product,
    validate_rejected_item,
    validate_return,
)


def test_product_requires_name_and_defaults_numbers() -> None:
    result = validate_product({"name": "  ", "price": "", "stock": ""})

    assert result.is_valid is False
    assert result.first_invalid_field == "name"
    assert result.values["price"] == 0.0
    assert result.values["stock"] == 0


def test_product_rejects_negative_price_and_fractional_stock() -> None:
    result = validate_product({"name": "Rice", "price": "-1", "stock": "2.5"})

    assert set(result.field_errors) == {"price", "stock"}


def test_invoice_requires_total_and_known_status() -> None:
    result = validate_invoice({"invoice_number": "INV-1", "status": "lost"})

    assert "total_amount" in result.field_errors
    assert "status" in result.field_errors


def test_invoice_status_defaults_to_pending() -> None:
    result = validate_invoice({"invoice_number": "INV-1", "total_amount": "12.5"})

    assert result.is_valid
    assert result.values == {"invoice_number": "INV-1", "total_amount": 12.5, "status": "pending"}


def test_return_needs_reason_and_positive_quantity() -> None:
    result = validate_return({"product_name": "Milk", "quantity": "0", "reason": ""})

    assert set(result.field_errors) == {"quantity", "reason"}


def test_food_condition_parses_yes_no() -> None:
    ok = validate_food_condition({"product_name": "Apples", "condition": "Fresh", "fit_for_processing": "no"})
    bad = validate_food_condition({"product_name": "Apples", "condition": "Fresh", "fit_for_processing": "maybe"})

    assert ok.values["fit_for_processing"] is False
    assert "fit_for_processing" in bad.field_errors


def test_rejected_item_requires_seller() -> None:
    result = validate_rejected_item({"product_name": "Eggs", "reason": "Cracked"})

    assert result.field_errors == {"seller_id": "Seller is required."}
    assert result.values["status"] == "rejected"


def test_chat_message_is_trimmed_and_bounded() -> None:
    assert validate_chat_message("  hello  ").values == {"message": "hello"}
    assert validate_chat_message("   ").is_valid is False
    assert validate_chat_message(None).is_valid is False
    assert validate_chat_message("x" * (MAX_MESSAGE + 1)).is_valid is False


def test_parse_bool_defaults_on_empty() -> None:
    assert parse_bool("") is True
    assert parse_bool("", default=False) is False
    assert parse_bool("Yes") is True
    assert parse_bool(False) is False


def test_non_finite_numbers_are_rejected() -> None:
    for raw in ("nan", "inf", "-inf", "NaN"):
        result = validate_product({"name": "Rice", "price": raw, "stock": "1"})

        assert result.is_valid is False
        assert result.field_errors["price"] == "Price must be a finite number."


def test_non_finite_total_is_rejected() -> None:
    result = validate_invoice({"invoice_number": "INV-2", "total_amount": "infinity"})

    assert "total_amount" in result.field_errors
