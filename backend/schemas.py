from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from cart import Cart
from orders import Customer, DeliveryAddress, OrderItem, SelectedOption


class SelectedOptionIn(BaseModel):
    name: str
    price_adjustment: int = 0

    def to_domain(self) -> SelectedOption:
        return SelectedOption(name=self.name, price_adjustment=self.price_adjustment)


class OrderItemIn(BaseModel):
    product_name: str
    quantity: int = Field(..., ge=1)
    price: int = Field(
        ..., ge=0, description="Unit price with the option adjustment already applied"
    )
    selected_option: Optional[SelectedOptionIn] = None

    @property
    def base_price(self) -> int:
        adjustment = self.selected_option.price_adjustment if self.selected_option else 0
        return self.price - adjustment

    def add_to(self, cart: Cart) -> OrderItem:
        option = self.selected_option.to_domain() if self.selected_option else None
        return cart.add(self.product_name, self.base_price, self.quantity, option)

    def to_domain(self) -> OrderItem:
        return OrderItem(
            product_name=self.product_name,
            quantity=self.quantity,
            unit_price=self.price,
            selected_option=self.selected_option.to_domain() if self.selected_option else None,
        )


class DeliveryAddressIn(BaseModel):
    full_address: str
    area: str = ""
    city: str = ""
    pincode: str = ""
    landmark: Optional[str] = None

    def to_domain(self) -> DeliveryAddress:
        return DeliveryAddress(
            full_address=self.full_address,
            area=self.area,
            city=self.city,
            pincode=self.pincode,
            landmark=self.landmark or None,
        )


class CheckoutRequest(BaseModel):
    customer_name: str = Field(..., description="Name shown on the order")
    customer_phone: str = Field(..., description="Phone number as captured at login")
    items: List[OrderItemIn] = Field(default_factory=list)
    delivery_address: Optional[DeliveryAddressIn] = None
    delivery_date: Optional[str] = Field(default=None, description="ISO date, tomorrow or later")

    def customer(self) -> Customer:
        return Customer(name=self.customer_name, phone=self.customer_phone)


class CheckoutResponse(BaseModel):
    order_id: str
    uuid: str
    total_amount: int
    business_whatsapp_link: str
    customer_whatsapp_link: str
    notification: str
    notification_error: Optional[str] = None


class WebhookRequest(BaseModel):
    action: str = Field(..., description="order_placed or order_status_update")
    order_id: Optional[str] = None
    uuid: Optional[str] = None
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    order_items: List[OrderItemIn] = Field(default_factory=list)
    delivery_date: Optional[str] = None
    delivery_address: Optional[DeliveryAddressIn] = None
    new_status: Optional[str] = None


class WebhookResponse(BaseModel):
    success: bool
    message: Optional[str] = None
    data: Optional[Any] = None
    error: Optional[str] = None
    warning: Optional[str] = None


class WhatsAppRequest(BaseModel):
    type: str = Field(
        ...,
        description="order_confirmation, business_notification, text_message or template_message",
    )
    to: Optional[str] = None
    text: Optional[str] = None
    template_name: Optional[str] = None
    language_code: str = "en_US"
    order_id: Optional[str] = None
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    business_phone: Optional[str] = None
    order_items: List[OrderItemIn] = Field(default_factory=list)
    delivery_date: Optional[str] = None
    delivery_address: Optional[str] = None


class WhatsAppResponse(BaseModel):
    success: bool
    data: Optional[Dict[str, Any]] = None


class OrderStatusUpdateRequest(BaseModel):
    status: str = Field(..., description="placed, out_for_delivery or delivered")
    notes: Optional[str] = None


class OrderStatusUpdateResponse(BaseModel):
    order_id: str
    status: str
    status_history: List[Dict[str, Any]]
    notified: bool


class PaymentStatusUpdateRequest(BaseModel):
    payment_status: str = Field(..., description="pending, paid or failed")


class OrderResponse(BaseModel):
    order_status: Optional[Dict[str, Any]]
    finance_record: Optional[Dict[str, Any]]


class AddressCreate(BaseModel):
    full_address: str
    area: str = ""
    city: str = ""
    pincode: str = ""
    landmark: Optional[str] = None


class AddressResponse(BaseModel):
    id: str
    user_id: str
    full_address: str
    area: str
    city: str
    pincode: str
    landmark: Optional[str]
    is_default: bool


class AddressListResponse(BaseModel):
    items: List[AddressResponse]


class NotificationWorkerStatusResponse(BaseModel):
    running: bool
    queued: int
    sent: int
    failed: int
    last_run_at: Optional[datetime]
    last_success_at: Optional[datetime]
    last_error: Optional[str]


class BookingLinksResponse(BaseModel):
    customer_phone: str
    display_phone: str
    direct_booking_url: str
    customer_whatsapp_link: str
    business_whatsapp_link: Optional[str]
