import asyncio

import pytest

from errors import OrderNotFoundError, PersistenceError, ValidationError
from orders import Order
from repositories.document_store import FINANCE_RECORDS_COLLECTION, ORDER_STATUS_COLLECTION
from services.order_persistence import (
    build_finance_record,
    build_order_status_record,
    get_order,
    save_order,
    update_order_status,
    update_payment_status,
)


@pytest.fixture()
def order(customer, scenario_items, address):
    return Order.place(
        order_id="KrumbAA07",
        uuid="0b5c3f7e-1111-4e2a-9a55-4f5b6c7d8e9f",
        customer=customer,
        items=scenario_items,
        delivery_date="2026-10-21",
        delivery_address=address,
    )


def test_order_status_record_is_seeded_with_placed_entry(order):
    record = build_order_status_record(order)

    assert record["status"] == "placed"
    assert record["delivery_address"] == "12 Baker Street, Flat 3"
    assert record["total_amount"] == 380
    assert record["customer_phone"] == "+91 98765 43210"
    assert len(record["status_history"]) == 1
    assert record["status_history"][0]["status"] == "placed"
    assert record["status_history"][0]["notes"] == "Order placed via WhatsApp"


def test_finance_record_line_totals_and_optional_fields(order):
    record = build_finance_record(order)

    bread, cookies = record["items"]
    assert bread["total_price"] == bread["unit_price"] * bread["quantity"] == 300
    assert bread["selected_option"] == {"name": "Large", "price_adjustment": 50}
    assert "selected_option" not in cookies
    assert record["total_amount"] == sum(item["total_price"] for item in record["items"])
    assert record["payment_status"] == "pending"
    assert record["order_status"] == "placed"
    assert record["payment_method"] == "whatsapp_order"


def test_finance_record_omits_missing_landmark(customer, scenario_items):
    from orders import DeliveryAddress

    order = Order.place(
        "KrumbAA01", "uuid-1", customer, scenario_items, "2026-10-21",
        DeliveryAddress(full_address="1 Main Road", area="A", city="B", pincode="1"),
    )

    assert "landmark" not in build_finance_record(order)["delivery_address"]


def test_save_order_writes_both_records_under_shared_uuid(store, order):
    asyncio.run(save_order(store, order))

    status_doc = store.collections[ORDER_STATUS_COLLECTION]["KrumbAA07"]
    finance_doc = store.collections[FINANCE_RECORDS_COLLECTION]["KrumbAA07"]
    assert status_doc["uuid"] == finance_doc["uuid"] == order.uuid


def test_finance_failure_is_a_persistence_error_even_after_status_write(store, order):
    store.fail(FINANCE_RECORDS_COLLECTION, "set")

    with pytest.raises(PersistenceError) as excinfo:
        asyncio.run(save_order(store, order))

    assert excinfo.value.order_id == "KrumbAA07"
    assert "KrumbAA07" in store.collections[ORDER_STATUS_COLLECTION]


def test_status_update_appends_history_and_mirrors_finance(store, order):
    asyncio.run(save_order(store, order))

    record = asyncio.run(
        update_order_status(store, "KrumbAA07", "out_for_delivery", notes="Rider assigned")
    )

    assert record["status"] == "out_for_delivery"
    statuses = [entry["status"] for entry in record["status_history"]]
    assert statuses == ["placed", "out_for_delivery"]
    stored = store.collections[ORDER_STATUS_COLLECTION]["KrumbAA07"]
    assert stored["status_history"][-1]["notes"] == "Rider assigned"
    assert store.collections[FINANCE_RECORDS_COLLECTION]["KrumbAA07"]["order_status"] == "out_for_delivery"


def test_status_update_does_not_create_missing_finance_record(store, order):
    store.seed(ORDER_STATUS_COLLECTION, "KrumbAA07", build_order_status_record(order))

    asyncio.run(update_order_status(store, "KrumbAA07", "delivered"))

    assert store.collections[ORDER_STATUS_COLLECTION]["KrumbAA07"]["status"] == "delivered"
    assert "KrumbAA07" not in store.collections[FINANCE_RECORDS_COLLECTION]


def test_status_update_rejects_unknown_status(store, order):
    asyncio.run(save_order(store, order))

    with pytest.raises(ValidationError):
        asyncio.run(update_order_status(store, "KrumbAA07", "lost"))


def test_status_update_for_missing_order(store):
    with pytest.raises(OrderNotFoundError):
        asyncio.run(update_order_status(store, "KrumbAA99", "delivered"))


def test_payment_status_update(store, order):
    asyncio.run(save_order(store, order))

    asyncio.run(update_payment_status(store, "KrumbAA07", "paid"))

    finance_doc = store.collections[FINANCE_RECORDS_COLLECTION]["KrumbAA07"]
    assert finance_doc["payment_status"] == "paid"
    assert finance_doc["items"]


def test_get_order_returns_both_views(store, order):
    asyncio.run(save_order(store, order))

    records = asyncio.run(get_order(store, "KrumbAA07"))

    assert records["order_status"]["order_id"] == "KrumbAA07"
    assert records["finance_record"]["total_amount"] == 380
    with pytest.raises(OrderNotFoundError):
        asyncio.run(get_order(store, "KrumbAA08"))
