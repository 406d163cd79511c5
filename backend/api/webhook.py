import logging
from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException, status

from dependencies import get_business, get_dispatcher
from errors import DispatchError, ValidationError
from orders import Customer, DeliveryAddress, Order
from schemas import WebhookRequest, WebhookResponse
from services.notifications.dispatcher import (
    BusinessInfo,
    NotificationPayload,
    WebhookDispatcher,
    build_order_placed_payload,
    build_status_update_payload,
)

logger = logging.getLogger("krumbkraft")

router = APIRouter(prefix="/api/webhook", tags=["webhook"])


def _order_from_request(payload: WebhookRequest) -> Order:
    if not payload.order_id:
        raise ValidationError("order_id is required")
    address = (
        payload.delivery_address.to_domain()
        if payload.delivery_address
        else DeliveryAddress(full_address="")
    )
    return Order(
        order_id=payload.order_id,
        uuid=payload.uuid or "",
        customer=Customer(
            name=payload.customer_name or "Customer",
            phone=payload.customer_phone or "",
        ),
        items=[item.to_domain() for item in payload.order_items],
        delivery_date=payload.delivery_date or "",
        delivery_address=address,
    )


def _build_payload(payload: WebhookRequest, business: BusinessInfo) -> NotificationPayload:
    if payload.action == "order_placed":
        return build_order_placed_payload(_order_from_request(payload), business)
    if payload.action == "order_status_update":
        if not payload.order_id or not payload.new_status:
            raise ValidationError("order_id and new_status are required")
        return build_status_update_payload(
            payload.order_id,
            payload.new_status,
            payload.customer_phone or "",
            payload.customer_name or "",
            business,
        )
    raise ValidationError("Invalid webhook action")


@router.post("", response_model=WebhookResponse)
async def trigger_webhook(
    payload: WebhookRequest,
    dispatcher: WebhookDispatcher = Depends(get_dispatcher),
    business: BusinessInfo = Depends(get_business),
) -> WebhookResponse:
    try:
        notification = _build_payload(payload, business)
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    try:
        result = await dispatcher.dispatch(notification)
    except DispatchError as exc:
        logger.error("Webhook trigger error: %s", exc)
        return WebhookResponse(
            success=False,
            error=str(exc),
            warning="Order was placed successfully but notification webhook failed",
        )
    return WebhookResponse(
        success=True,
        message="Webhook triggered successfully",
        data=asdict(result),
    )
