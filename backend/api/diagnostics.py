import logging
import time
from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException, status

from dependencies import get_business, get_dispatcher
from errors import DispatchError
from orders import Customer, DeliveryAddress, Order, OrderItem, SelectedOption
from services.notifications.dispatcher import (
    BusinessInfo,
    WebhookDispatcher,
    build_order_placed_payload,
)

logger = logging.getLogger("krumbkraft")

router = APIRouter(prefix="/api/test-webhook", tags=["webhook"])


def build_test_order() -> Order:
    stamp = int(time.time() * 1000)
    return Order(
        order_id=f"TEST-{stamp}",
        uuid=f"test-uuid-{stamp}",
        customer=Customer(name="Test Customer", phone="919876543210"),
        items=[
            OrderItem(
                product_name="Sourdough Bread",
                quantity=2,
                unit_price=150,
                selected_option=SelectedOption(name="Large", price_adjustment=50),
            ),
            OrderItem(product_name="Chocolate Cookies", quantity=1, unit_price=80),
        ],
        delivery_date="2025-08-21",
        delivery_address=DeliveryAddress(
            full_address="123 Test Street, Test Apartment 4B",
            area="Test Area",
            city="Mumbai",
            pincode="400001",
            landmark="Near Test Mall",
        ),
    )


@router.get("")
async def trigger_test_webhook(
    dispatcher: WebhookDispatcher = Depends(get_dispatcher),
    business: BusinessInfo = Depends(get_business),
) -> dict:
    order = build_test_order()
    logger.info("Testing webhook with order %s", order.order_id)
    try:
        result = await dispatcher.dispatch(build_order_placed_payload(order, business))
    except DispatchError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Test webhook failed: {exc}",
        ) from exc
    return {
        "success": True,
        "message": "Test webhook triggered successfully",
        "data": asdict(result),
        "order_id": order.order_id,
        "total_amount": order.total_amount,
    }
