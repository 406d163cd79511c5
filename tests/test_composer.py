import pytest

from orders import Customer, DeliveryAddress, Order, OrderItem
from services.notifications.composer import (
    build_business_booking_link,
    build_whatsapp_link,
    clean_phone_number,
    create_booking_links,
    format_item_lines,
    format_phone_number,
    render_business_message,
    render_customer_message,
)


@pytest.fixture()
def order(customer, scenario_items, address):
    return Order.place(
        "KrumbAA07", "uuid-7", customer, scenario_items, "2026-10-21", address
    )


def test_scenario_item_lines_and_total(order):
    message = render_customer_message(order)

    assert "2x Sourdough Bread (Large) - ₹300" in message
    assert "1x Chocolate Cookies - ₹80" in message
    assert "*Total Amount:* ₹380" in message


def test_customer_message_contents(order):
    message = render_customer_message(order)

    assert message.startswith("*KrumbKraft Order Confirmation*")
    assert "Hi Asha," in message
    assert "*Order ID:* KrumbAA07" in message
    assert "*Delivery Date:* 2026-10-21" in message
    assert "12 Baker Street, Flat 3\nLandmark: Near the park" in message


def test_business_message_uses_cleaned_phone(order):
    message = render_business_message(order)

    assert message.startswith("*KrumbKraft New Order*")
    assert "*Phone:* 9876543210" in message
    assert "*Customer:* Asha" in message
    assert "Needs Confirmation" in message


def test_rendering_is_pure(order):
    assert render_customer_message(order) == render_customer_message(order)
    assert render_business_message(order) == render_business_message(order)


def test_missing_optional_fields_are_omitted():
    order = Order(
        order_id="KrumbAA02",
        uuid="uuid-2",
        customer=Customer(name="Ravi", phone="9876543210"),
        items=[OrderItem(product_name="Baguette", quantity=3, unit_price=60)],
        delivery_date="2026-10-22",
        delivery_address=DeliveryAddress(full_address="4 Hill Road"),
    )

    for message in (render_customer_message(order), render_business_message(order)):
        assert "None" not in message
        assert "Landmark" not in message
        assert "3x Baguette - ₹180" in message
        assert "()" not in message


def test_currency_and_business_name_are_configurable(order):
    message = render_customer_message(order, business_name="Krumb", currency="Rs")

    assert "2x Sourdough Bread (Large) - Rs300" in message
    assert "Thank you for choosing Krumb!" in message


def test_format_item_lines_joins_with_newlines(scenario_items):
    assert format_item_lines(scenario_items) == (
        "2x Sourdough Bread (Large) - ₹300\n1x Chocolate Cookies - ₹80"
    )


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("+91 98765 43210", "9876543210"),
        ("919876543210", "9876543210"),
        ("+1 (415) 555-0100", "4155550100"),
        ("98765-43210", "9876543210"),
        ("91234", "91234"),
    ],
)
def test_clean_phone_number(raw, expected):
    assert clean_phone_number(raw) == expected


def test_format_phone_number():
    assert format_phone_number("+91 98765 43210") == "(987) 654-3210"
    assert format_phone_number("12345") == "12345"


def test_whatsapp_link_strips_country_code():
    assert build_whatsapp_link("+91 98765 43210", "hi") == "https://wa.me/9876543210?text=hi"


def test_whatsapp_link_encodes_like_uri_component():
    link = build_whatsapp_link("9876543210", "Order #1: *2x* Bread & jam\n₹300 (paid!)")

    assert link == (
        "https://wa.me/9876543210?text="
        "Order%20%231%3A%20*2x*%20Bread%20%26%20jam%0A%E2%82%B9300%20(paid!)"
    )


def test_whatsapp_link_without_message():
    assert build_whatsapp_link("9876543210") == "https://wa.me/9876543210"


def test_booking_links():
    links = create_booking_links("9876543210", "https://krumb.example", "9876500000")

    assert links["direct_booking_url"] == "https://krumb.example/redirect?phone=9876543210"
    assert links["customer_whatsapp_link"].startswith("https://wa.me/9876543210?text=Hi!")
    assert links["business_whatsapp_link"].startswith("https://wa.me/9876500000?text=Hello!")
    assert create_booking_links("9876543210", "https://krumb.example")["business_whatsapp_link"] is None


def test_business_booking_link_requires_business_phone():
    with pytest.raises(ValueError):
        build_business_booking_link("9876543210", "https://krumb.example", "")
