from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from inventory_desk.core.errors import DeskError
from inventory_desk.app.ui.error_banner import ErrorBanner
from inventory_desk.app.ui.table_printer import print_table
from inventory_desk.resources.collection import ResourceCollection
from inventory_desk.resources.loading import Failed, Loading, LoadState, StateListener
from inventory_desk.resources.models import Record


@dataclass(frozen=True)
class FieldPrompt:
    key: str
    label: str
    hint: str = ""

    def ask(self) -> str:
        suffix = f" ({self.hint})" if self.hint else ""
        return input(f"{self.label}{suffix}: ")


def records_to_rows(records: list[Record]) -> list[dict[str, Any]]:
    return [{**record.model_dump(), "timestamp": record.timestamp} for record in records]


def announce(label: str) -> StateListener:
    """Console feedback for each step of a load."""

    def show(state: LoadState) -> None:
        if isinstance(state, Loading):
            print(f"[loading] loading {label}...")
        elif isinstance(state, Failed):
            ErrorBanner.show(state.error)
        else:
            print(f"[ready] {label}: {len(state.data)}")

    return show


class ResourceView:
    def __init__(
        self,
        collection: ResourceCollection,
        title: str,
        noun: str,
        columns: list[tuple[str, str]],
        prompts: list[FieldPrompt],
    ) -> None:
        self.collection = collection
        self.title = title
        self.noun = noun
        self.columns = columns
        self.prompts = prompts

    def render(self) -> bool:
        state = self.collection.load(announce(self.title.lower()))
        if isinstance(state, Failed):
            return False
        print_table(self.title, records_to_rows(state.data), self.columns)

        if not self.collection.can_create():
            return True
        if input(f"Add {self.noun}? [y/N]: ").strip().lower() != "y":
            return True
        self.create_from_prompts()
        return True

    def create_from_prompts(self) -> Record | None:
        fields = {prompt.key: prompt.ask() for prompt in self.prompts}
        try:
            record = self.collection.create(fields)
        except DeskError as error:
            ErrorBanner.show(error)
            return None
        print(f"[success] {self.noun.capitalize()} saved.")
        state = self.collection.load(announce(self.title.lower()))
        if not isinstance(state, Failed):
            print_table(self.title, records_to_rows(state.data), self.columns)
        return record


def product_view(collection: ResourceCollection) -> ResourceView:
    return ResourceView(
        collection,
        "Products",
        "product",
        [("name", "Name"), ("price", "Price"), ("stock", "Stock"), ("description", "Description"), ("timestamp", "Created")],
        [
            FieldPrompt("name", "Product name"),
            FieldPrompt("description", "Description", "optional"),
            FieldPrompt("price", "Price", "default 0"),
            FieldPrompt("stock", "Stock", "default 0"),
        ],
    )


def invoice_view(collection: ResourceCollection) -> ResourceView:
    return ResourceView(
        collection,
        "Invoices",
        "invoice",
        [("invoice_number", "Invoice"), ("total_amount", "Total"), ("status", "Status"), ("timestamp", "Created")],
        [
            FieldPrompt("invoice_number", "Invoice number"),
            FieldPrompt("total_amount", "Total amount"),
            FieldPrompt("status", "Status", "pending/paid/cancelled"),
        ],
    )


def returns_view(collection: ResourceCollection) -> ResourceView:
    return ResourceView(
        collection,
        "Returns",
        "return",
        [("product_name", "Product"), ("quantity", "Qty"), ("reason", "Reason"), ("status", "Status"), ("timestamp", "Created")],
        [
            FieldPrompt("product_name", "Product name"),
            FieldPrompt("quantity", "Quantity", "default 1"),
            FieldPrompt("reason", "Reason"),
        ],
    )


def food_condition_view(collection: ResourceCollection) -> ResourceView:
    return ResourceView(
        collection,
        "Food Condition",
        "inspection",
        [
            ("product_name", "Product"),
            ("condition", "Condition"),
            ("fit_for_processing", "Fit"),
            ("notes", "Notes"),
            ("timestamp", "Inspected"),
        ],
        [
            FieldPrompt("product_name", "Product name"),
            FieldPrompt("condition", "Condition", "e.g. Fresh, Slightly damaged, Expired"),
            FieldPrompt("fit_for_processing", "Fit for processing", "yes/no"),
            FieldPrompt("notes", "Notes", "optional"),
        ],
    )
