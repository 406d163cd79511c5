from fastapi import APIRouter, Depends, HTTPException, status

from cart import Cart
from dependencies import get_checkout_service
from errors import PersistenceError, ValidationError
from schemas import CheckoutRequest, CheckoutResponse
from services.checkout_service import CheckoutService

router = APIRouter(prefix="/api/checkout", tags=["checkout"])


@router.post("", response_model=CheckoutResponse, status_code=status.HTTP_201_CREATED)
async def place_order(
    payload: CheckoutRequest,
    service: CheckoutService = Depends(get_checkout_service),
) -> CheckoutResponse:
    cart = Cart()
    for item in payload.items:
        item.add_to(cart)
    address = payload.delivery_address.to_domain() if payload.delivery_address else None
    try:
        result = await service.place_order(
            payload.customer(), cart, address, payload.delivery_date
        )
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except PersistenceError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Error processing order. Please try again.",
        ) from exc
    return CheckoutResponse(
        order_id=result.order_id,
        uuid=result.uuid,
        total_amount=result.total_amount,
        business_whatsapp_link=result.business_whatsapp_link,
        customer_whatsapp_link=result.customer_whatsapp_link,
        notification=result.notification,
        notification_error=result.notification_error,
    )
