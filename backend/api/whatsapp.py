import logging

from fastapi import APIRouter, Depends, HTTPException, status

from dependencies import get_whatsapp_client
from errors import WhatsAppApiError
from orders import Customer, DeliveryAddress, Order
from schemas import WhatsAppRequest, WhatsAppResponse
from services.whatsapp_api_service import WhatsAppApiClient

logger = logging.getLogger("krumbkraft")

router = APIRouter(prefix="/api/whatsapp", tags=["whatsapp"])


def _order_from_request(payload: WhatsAppRequest) -> Order:
    return Order(
        order_id=payload.order_id or "",
        uuid="",
        customer=Customer(
            name=payload.customer_name or "Customer",
            phone=payload.customer_phone or "",
        ),
        items=[item.to_domain() for item in payload.order_items],
        delivery_date=payload.delivery_date or "",
        delivery_address=DeliveryAddress(full_address=payload.delivery_address or ""),
    )


def _require(value, name: str) -> str:
    if not value:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=f"{name} is required"
        )
    return value


@router.post("", response_model=WhatsAppResponse)
async def send_whatsapp_message(
    payload: WhatsAppRequest,
    client: WhatsAppApiClient = Depends(get_whatsapp_client),
) -> WhatsAppResponse:
    try:
        if payload.type == "order_confirmation":
            _require(payload.customer_phone, "customer_phone")
            result = await client.send_order_confirmation(_order_from_request(payload))
        elif payload.type == "business_notification":
            business_phone = _require(payload.business_phone, "business_phone")
            result = await client.send_order_notification_to_business(
                business_phone, _order_from_request(payload)
            )
        elif payload.type == "text_message":
            result = await client.send_text_message(
                _require(payload.to, "to"), _require(payload.text, "text")
            )
        elif payload.type == "template_message":
            result = await client.send_template_message(
                _require(payload.to, "to"),
                _require(payload.template_name, "template_name"),
                payload.language_code,
            )
        else:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid message type"
            )
    except WhatsAppApiError as exc:
        logger.error("WhatsApp API error: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)
        ) from exc
    return WhatsAppResponse(success=True, data=result)
