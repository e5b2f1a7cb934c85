from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel


class InvoiceStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    CANCELLED = "cancelled"


class ReturnStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class RejectedStatus(str, Enum):
    REJECTED = "rejected"
    DISPUTED = "disputed"
    RESOLVED = "resolved"


class Record(BaseModel):
    id: str

    @property
    def timestamp(self) -> datetime:
        """Creation time used for ordering and display."""
        return self.created_at


class Product(Record):
    name: str
    description: str | None = None
    price: float = 0
    stock: int = 0
    owner_id: str | None = None
    created_at: datetime


class Invoice(Record):
    invoice_number: str
    total_amount: float = 0
    status: str = InvoiceStatus.PENDING.value
    user_id: str | None = None
    created_at: datetime


class ReturnItem(Record):
    product_name: str
    quantity: int = 1
    reason: str
    status: str = ReturnStatus.PENDING.value
    user_id: str | None = None
    created_at: datetime


class FoodConditionRecord(Record):
    product_name: str
    condition: str
    fit_for_processing: bool = True
    notes: str | None = None
    inspector_id: str | None = None
    inspection_date: datetime

    @property
    def timestamp(self) -> datetime:
        return self.inspection_date


class RejectedItem(Record):
    product_name: str
    seller_id: str
    reason: str
    quantity: int = 1
    status: str = RejectedStatus.REJECTED.value
    reported_by: str | None = None
    created_at: datetime


class ChatMessage(Record):
    rejected_item_id: str
    sender_id: str
    message: str
    created_at: datetime
