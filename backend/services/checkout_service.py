import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Callable, Optional, Tuple
from uuid import uuid4

from cart import Cart
from errors import PersistenceError, ValidationError
from orders import Customer, DeliveryAddress, Order
from repositories.document_store import DocumentStore
from services.notification_worker import NotificationWorker
from services.notifications.composer import build_whatsapp_link
from services.notifications.dispatcher import (
    BusinessInfo,
    NotificationPayload,
    WebhookDispatcher,
    build_order_placed_payload,
)
from services.order_numbering import next_order_number
from services.order_persistence import save_order

logger = logging.getLogger("krumbkraft")

NOTIFICATION_SENT = "sent"
NOTIFICATION_QUEUED = "queued"
NOTIFICATION_FAILED = "failed"


@dataclass
class CheckoutResult:
    order_id: str
    uuid: str
    total_amount: int
    business_whatsapp_link: str
    customer_whatsapp_link: str
    notification: str
    notification_error: Optional[str] = None


def earliest_delivery_date(today: date) -> date:
    return today + timedelta(days=1)


def validate_checkout(
    cart: Cart,
    delivery_address: Optional[DeliveryAddress],
    delivery_date: Optional[str],
    today: date,
) -> date:
    if cart.is_empty:
        raise ValidationError("Your cart is empty")
    if delivery_address is None or not delivery_address.full_address.strip():
        raise ValidationError("Please select a delivery address")
    if not delivery_date:
        raise ValidationError("Please choose a delivery date")
    try:
        parsed = date.fromisoformat(delivery_date)
    except ValueError as exc:
        raise ValidationError(f"Invalid delivery date: {delivery_date}") from exc
    if parsed < earliest_delivery_date(today):
        raise ValidationError("Orders must be placed at least one day in advance")
    return parsed


class CheckoutService:
    def __init__(
        self,
        store: DocumentStore,
        dispatcher: WebhookDispatcher,
        business: BusinessInfo,
        worker: Optional[NotificationWorker] = None,
        notify_in_background: bool = False,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.store = store
        self.dispatcher = dispatcher
        self.business = business
        self.worker = worker
        self.notify_in_background = notify_in_background
        self._today = today

    async def _persist(
        self, customer: Customer, cart: Cart, delivery_address: DeliveryAddress, delivery_date: str
    ) -> Order:
        try:
            order_id = await next_order_number(self.store)
            order = Order.place(
                order_id=order_id,
                uuid=str(uuid4()),
                customer=customer,
                items=cart.items,
                delivery_date=delivery_date,
                delivery_address=delivery_address,
            )
            await save_order(self.store, order)
        except PersistenceError:
            raise
        except Exception as exc:
            raise PersistenceError("Error processing order. Please try again.") from exc
        return order

    async def _notify(self, payload: NotificationPayload) -> Tuple[str, Optional[str]]:
        if self.notify_in_background and self.worker is not None:
            self.worker.enqueue(payload)
            return NOTIFICATION_QUEUED, None
        try:
            result = await self.dispatcher.dispatch(payload)
        except Exception as exc:
            logger.warning("Webhook failed (order %s still successful): %s", payload.order_id, exc)
            return NOTIFICATION_FAILED, str(exc)
        logger.info("Order %s webhook delivered via %s", payload.order_id, result.endpoint)
        return NOTIFICATION_SENT, None

    async def place_order(
        self,
        customer: Customer,
        cart: Cart,
        delivery_address: Optional[DeliveryAddress],
        delivery_date: Optional[str],
    ) -> CheckoutResult:
        parsed_date = validate_checkout(cart, delivery_address, delivery_date, self._today())
        order = await self._persist(customer, cart, delivery_address, parsed_date.isoformat())

        payload = build_order_placed_payload(order, self.business)
        notification, notification_error = await self._notify(payload)

        result = CheckoutResult(
            order_id=order.order_id,
            uuid=order.uuid,
            total_amount=order.total_amount,
            business_whatsapp_link=build_whatsapp_link(
                self.business.whatsapp_phone, payload.business_message
            ),
            customer_whatsapp_link=build_whatsapp_link(
                customer.phone, payload.customer_message
            ),
            notification=notification,
            notification_error=notification_error,
        )
        cart.clear()
        logger.info("Checkout completed for order %s", order.order_id)
        return result
