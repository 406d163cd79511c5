import re
from typing import Dict, Iterable, Optional
from urllib.parse import quote

from orders import Order, OrderItem
from .messages import (
    BOOKING_INVITE,
    BUSINESS_BOOKING_INVITE,
    BUSINESS_NOTIFICATION,
    CUSTOMER_CONFIRMATION,
    ITEM_LINE,
)

WHATSAPP_BASE_URL = "https://wa.me"
DEFAULT_BUSINESS_NAME = "KrumbKraft"
DEFAULT_CURRENCY = "₹"

# Characters encodeURIComponent leaves untouched besides letters and digits.
_URI_COMPONENT_SAFE = "-_.!~*'()"
_NON_DIGITS = re.compile(r"\D")


def clean_phone_number(phone: str) -> str:
    cleaned = _NON_DIGITS.sub("", phone or "")
    if cleaned.startswith("91") and len(cleaned) == 12:
        return cleaned[2:]
    if cleaned.startswith("1") and len(cleaned) == 11:
        return cleaned[1:]
    return cleaned


def format_phone_number(phone: str) -> str:
    cleaned = clean_phone_number(phone)
    if len(cleaned) == 10:
        return f"({cleaned[:3]}) {cleaned[3:6]}-{cleaned[6:]}"
    return phone


def encode_uri_component(text: str) -> str:
    return quote(text, safe=_URI_COMPONENT_SAFE)


def build_whatsapp_link(phone: str, message: Optional[str] = None) -> str:
    cleaned = clean_phone_number(phone)
    if not message:
        return f"{WHATSAPP_BASE_URL}/{cleaned}"
    return f"{WHATSAPP_BASE_URL}/{cleaned}?text={encode_uri_component(message)}"


def format_item_line(item: OrderItem, currency: str = DEFAULT_CURRENCY) -> str:
    return ITEM_LINE.format(
        quantity=item.quantity,
        name=item.display_name,
        currency=currency,
        line_total=item.total_price,
    )


def format_item_lines(items: Iterable[OrderItem], currency: str = DEFAULT_CURRENCY) -> str:
    return "\n".join(format_item_line(item, currency) for item in items)


def _common_fields(order: Order, business_name: str, currency: str) -> Dict[str, object]:
    return {
        "business_name": business_name,
        "customer_name": order.customer.name or "Customer",
        "order_id": order.order_id,
        "delivery_date": order.delivery_date,
        "items": format_item_lines(order.items, currency),
        "currency": currency,
        "total_amount": order.total_amount,
        "delivery_address": order.delivery_address.as_text(),
    }


def render_customer_message(
    order: Order,
    business_name: str = DEFAULT_BUSINESS_NAME,
    currency: str = DEFAULT_CURRENCY,
) -> str:
    return CUSTOMER_CONFIRMATION.format(**_common_fields(order, business_name, currency))


def render_business_message(
    order: Order,
    business_name: str = DEFAULT_BUSINESS_NAME,
    currency: str = DEFAULT_CURRENCY,
) -> str:
    return BUSINESS_NOTIFICATION.format(
        customer_phone=clean_phone_number(order.customer.phone),
        **_common_fields(order, business_name, currency),
    )


def customer_booking_url(customer_phone: str, base_url: str) -> str:
    return f"{base_url}/redirect?phone={customer_phone}"


def build_booking_link(
    customer_phone: str, base_url: str, message: Optional[str] = None
) -> str:
    booking_url = customer_booking_url(customer_phone, base_url)
    return build_whatsapp_link(
        customer_phone, message or BOOKING_INVITE.format(booking_url=booking_url)
    )


def build_business_booking_link(
    customer_phone: str,
    base_url: str,
    business_phone: Optional[str],
    message: Optional[str] = None,
    business_name: str = DEFAULT_BUSINESS_NAME,
) -> str:
    if not business_phone:
        raise ValueError("Business phone number is required")
    booking_url = customer_booking_url(customer_phone, base_url)
    text = message or BUSINESS_BOOKING_INVITE.format(
        business_name=business_name, booking_url=booking_url
    )
    return build_whatsapp_link(business_phone, text)


def create_booking_links(
    customer_phone: str,
    base_url: str,
    business_phone: Optional[str] = None,
    business_name: str = DEFAULT_BUSINESS_NAME,
) -> Dict[str, Optional[str]]:
    return {
        "direct_booking_url": customer_booking_url(customer_phone, base_url),
        "customer_whatsapp_link": build_booking_link(customer_phone, base_url),
        "business_whatsapp_link": (
            build_business_booking_link(
                customer_phone, base_url, business_phone, business_name=business_name
            )
            if business_phone
            else None
        ),
    }
