from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

ORDER_STATUSES = ("placed", "out_for_delivery", "delivered")
PAYMENT_STATUSES = ("pending", "paid", "failed")
PAYMENT_METHODS = ("whatsapp_order", "online", "cash_on_delivery")

PLACED_NOTE = "Order placed via WhatsApp"


@dataclass(frozen=True)
class SelectedOption:
    name: str
    price_adjustment: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "price_adjustment": self.price_adjustment}


@dataclass(frozen=True)
class OrderItem:
    product_name: str
    quantity: int
    unit_price: int
    selected_option: Optional[SelectedOption] = None

    @property
    def total_price(self) -> int:
        return self.unit_price * self.quantity

    @property
    def display_name(self) -> str:
        if self.selected_option and self.selected_option.name:
            return f"{self.product_name} ({self.selected_option.name})"
        return self.product_name

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "product_name": self.product_name,
            "quantity": self.quantity,
            "unit_price": self.unit_price,
            "total_price": self.total_price,
        }
        if self.selected_option:
            data["selected_option"] = self.selected_option.to_dict()
        return data


@dataclass(frozen=True)
class DeliveryAddress:
    full_address: str
    area: str = ""
    city: str = ""
    pincode: str = ""
    landmark: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "full_address": self.full_address,
            "area": self.area,
            "city": self.city,
            "pincode": self.pincode,
        }
        if self.landmark:
            data["landmark"] = self.landmark
        return data

    def as_text(self) -> str:
        if self.landmark:
            return f"{self.full_address}\nLandmark: {self.landmark}"
        return self.full_address


@dataclass(frozen=True)
class Customer:
    name: str
    phone: str


@dataclass
class StatusHistoryEntry:
    status: str
    timestamp: str
    notes: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"status": self.status, "timestamp": self.timestamp}
        if self.notes is not None:
            data["notes"] = self.notes
        return data


def utc_now_iso(now: Optional[datetime] = None) -> str:
    """UTC timestamp with millisecond precision and a ``Z`` suffix."""
    moment = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


@dataclass
class Order:
    order_id: str
    uuid: str
    customer: Customer
    items: List[OrderItem]
    delivery_date: str
    delivery_address: DeliveryAddress
    status: str = "placed"
    payment_status: str = "pending"
    payment_method: str = "whatsapp_order"
    status_history: List[StatusHistoryEntry] = field(default_factory=list)

    @property
    def total_amount(self) -> int:
        return sum(item.total_price for item in self.items)

    @classmethod
    def place(
        cls,
        order_id: str,
        uuid: str,
        customer: Customer,
        items: List[OrderItem],
        delivery_date: str,
        delivery_address: DeliveryAddress,
    ) -> "Order":
        return cls(
            order_id=order_id,
            uuid=uuid,
            customer=customer,
            items=list(items),
            delivery_date=delivery_date,
            delivery_address=delivery_address,
            status_history=[StatusHistoryEntry("placed", utc_now_iso(), PLACED_NOTE)],
        )
