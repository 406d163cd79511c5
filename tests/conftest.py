import os

import pytest

os.environ.setdefault("SUPABASE_URL", "https://krumbkraft-test.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-service-role-key")
os.environ.setdefault("N8N_WEBHOOK_URL", "https://hooks.test/webhook/primary")
os.environ.setdefault("N8N_TEST_WEBHOOK_URL", "https://hooks.test/webhook-test/primary")
os.environ.setdefault("BUSINESS_WHATSAPP", "9876500000")
os.environ.setdefault("APP_URL", "https://krumb.example")

from cart import Cart  # noqa: E402
from fakes import FakeDispatcher, FakeDocumentStore  # noqa: E402
from orders import Customer, DeliveryAddress, OrderItem, SelectedOption  # noqa: E402
from services.notifications.dispatcher import BusinessInfo  # noqa: E402


@pytest.fixture()
def store():
    return FakeDocumentStore()


@pytest.fixture()
def dispatcher():
    return FakeDispatcher()


@pytest.fixture()
def business():
    return BusinessInfo(name="KrumbKraft", phone="", whatsapp_phone="9876500000", currency="₹")


@pytest.fixture()
def customer():
    return Customer(name="Asha", phone="+91 98765 43210")


@pytest.fixture()
def address():
    return DeliveryAddress(
        full_address="12 Baker Street, Flat 3",
        area="Bandra",
        city="Mumbai",
        pincode="400050",
        landmark="Near the park",
    )


@pytest.fixture()
def scenario_items():
    return [
        OrderItem(
            product_name="Sourdough Bread",
            quantity=2,
            unit_price=150,
            selected_option=SelectedOption(name="Large", price_adjustment=50),
        ),
        OrderItem(product_name="Chocolate Cookies", quantity=1, unit_price=80),
    ]


@pytest.fixture()
def cart(scenario_items):
    return Cart(scenario_items)
