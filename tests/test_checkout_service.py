import asyncio

import pytest

from cart import Cart
from errors import DispatchError, PersistenceError, ValidationError
from fakes import TODAY, FakeDispatcher
from repositories.document_store import FINANCE_RECORDS_COLLECTION, ORDER_STATUS_COLLECTION
from services.checkout_service import CheckoutService, validate_checkout
from services.notification_worker import NotificationWorker


def _service(store, dispatcher, business, **kwargs):
    return CheckoutService(store, dispatcher, business, today=lambda: TODAY, **kwargs)


def test_successful_checkout(store, dispatcher, business, customer, cart, address):
    service = _service(store, dispatcher, business)

    result = asyncio.run(service.place_order(customer, cart, address, "2026-10-20"))

    assert result.order_id == "KrumbAA01"
    assert result.total_amount == 380
    assert result.notification == "sent"
    assert cart.is_empty
    assert result.business_whatsapp_link.startswith("https://wa.me/9876500000?text=")
    assert result.customer_whatsapp_link.startswith("https://wa.me/9876543210?text=")
    assert "KrumbAA01" in store.collections[ORDER_STATUS_COLLECTION]
    finance = store.collections[FINANCE_RECORDS_COLLECTION]["KrumbAA01"]
    assert finance["uuid"] == result.uuid
    assert dispatcher.payloads[0].order_id == "KrumbAA01"


def test_consecutive_checkouts_get_sequential_ids(store, dispatcher, business, customer, address, scenario_items):
    service = _service(store, dispatcher, business)

    first = asyncio.run(service.place_order(customer, Cart(scenario_items), address, "2026-10-20"))
    second = asyncio.run(service.place_order(customer, Cart(scenario_items), address, "2026-10-20"))

    assert (first.order_id, second.order_id) == ("KrumbAA01", "KrumbAA02")


def test_delivery_date_is_stored_in_iso_form(store, dispatcher, business, customer, cart, address):
    service = _service(store, dispatcher, business)

    result = asyncio.run(service.place_order(customer, cart, address, "20261020"))

    record = store.collections[ORDER_STATUS_COLLECTION][result.order_id]
    assert record["delivery_date"] == "2026-10-20"
    assert store.collections[FINANCE_RECORDS_COLLECTION][result.order_id]["delivery_date"] == "2026-10-20"
    payload = dispatcher.payloads[0]
    assert payload.delivery_date == "2026-10-20"
    assert "*Delivery Date:* 2026-10-20" in payload.customer_message


def test_same_day_delivery_is_rejected_before_any_write(store, dispatcher, business, customer, cart, address):
    service = _service(store, dispatcher, business)

    with pytest.raises(ValidationError):
        asyncio.run(service.place_order(customer, cart, address, TODAY.isoformat()))

    assert store.calls == []
    assert dispatcher.payloads == []
    assert not cart.is_empty


@pytest.mark.parametrize("delivery_date", [None, "", "tomorrow", "2026-10-18"])
def test_bad_delivery_dates(cart, address, delivery_date):
    with pytest.raises(ValidationError):
        validate_checkout(cart, address, delivery_date, TODAY)


def test_empty_cart_and_missing_address(cart, address):
    with pytest.raises(ValidationError):
        validate_checkout(Cart(), address, "2026-10-20", TODAY)
    with pytest.raises(ValidationError):
        validate_checkout(cart, None, "2026-10-20", TODAY)


def test_finance_write_failure_fails_checkout(store, dispatcher, business, customer, cart, address):
    store.fail(FINANCE_RECORDS_COLLECTION, "set")
    service = _service(store, dispatcher, business)

    with pytest.raises(PersistenceError):
        asyncio.run(service.place_order(customer, cart, address, "2026-10-20"))

    assert not cart.is_empty
    assert dispatcher.payloads == []


def test_notification_failure_never_fails_the_order(store, business, customer, cart, address):
    dispatcher = FakeDispatcher(error=DispatchError("both endpoints down"))
    service = _service(store, dispatcher, business)

    result = asyncio.run(service.place_order(customer, cart, address, "2026-10-20"))

    assert result.notification == "failed"
    assert "both endpoints down" in result.notification_error
    assert result.business_whatsapp_link.startswith("https://wa.me/")
    assert result.customer_whatsapp_link.startswith("https://wa.me/")
    assert cart.is_empty
    assert "KrumbAA01" in store.collections[FINANCE_RECORDS_COLLECTION]


def test_numbering_failure_still_completes(store, dispatcher, business, customer, cart, address):
    store.fail(ORDER_STATUS_COLLECTION, "all")
    service = _service(store, dispatcher, business)

    result = asyncio.run(service.place_order(customer, cart, address, "2026-10-20"))

    assert result.order_id.startswith("KrumbAA")
    assert result.order_id in store.collections[ORDER_STATUS_COLLECTION]


def test_background_notification_is_queued(store, dispatcher, business, customer, cart, address):
    async def scenario():
        worker = NotificationWorker(dispatcher)
        service = _service(
            store, dispatcher, business, worker=worker, notify_in_background=True
        )
        result = await service.place_order(customer, cart, address, "2026-10-20")
        return result, worker.get_status()

    result, status = asyncio.run(scenario())

    assert result.notification == "queued"
    assert status["queued"] == 1
    assert dispatcher.payloads == []


def test_fallback_business_link_carries_business_message(store, dispatcher, business, customer, cart, address):
    service = _service(store, dispatcher, business)

    result = asyncio.run(service.place_order(customer, cart, address, "2026-10-20"))

    assert "New%20Order" in result.business_whatsapp_link
    assert "Order%20Confirmation" in result.customer_whatsapp_link
