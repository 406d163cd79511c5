from fastapi import APIRouter, Depends, HTTPException, status

from dependencies import get_business, get_dispatcher, get_store
from errors import OrderNotFoundError, PersistenceError, ValidationError
from repositories.document_store import DocumentStore
from schemas import (
    OrderResponse,
    OrderStatusUpdateRequest,
    OrderStatusUpdateResponse,
    PaymentStatusUpdateRequest,
)
from services.notifications.dispatcher import BusinessInfo, WebhookDispatcher
from services.order_persistence import get_order, update_payment_status
from services.order_status_service import change_order_status

router = APIRouter(prefix="/api/orders", tags=["orders"])


def _to_http_error(exc: Exception) -> HTTPException:
    if isinstance(exc, OrderNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, ValidationError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc))


@router.get("/{order_id}", response_model=OrderResponse)
async def read_order(
    order_id: str,
    store: DocumentStore = Depends(get_store),
) -> OrderResponse:
    try:
        records = await get_order(store, order_id)
    except OrderNotFoundError as exc:
        raise _to_http_error(exc) from exc
    return OrderResponse(**records)


@router.patch("/{order_id}/status", response_model=OrderStatusUpdateResponse)
async def update_status(
    order_id: str,
    payload: OrderStatusUpdateRequest,
    store: DocumentStore = Depends(get_store),
    dispatcher: WebhookDispatcher = Depends(get_dispatcher),
    business: BusinessInfo = Depends(get_business),
) -> OrderStatusUpdateResponse:
    try:
        result = await change_order_status(
            store, dispatcher, business, order_id, payload.status, payload.notes
        )
    except (OrderNotFoundError, ValidationError, PersistenceError) as exc:
        raise _to_http_error(exc) from exc
    record = result["record"]
    return OrderStatusUpdateResponse(
        order_id=order_id,
        status=record["status"],
        status_history=record["status_history"],
        notified=result["notified"],
    )


@router.patch("/{order_id}/payment", status_code=status.HTTP_204_NO_CONTENT)
async def update_payment(
    order_id: str,
    payload: PaymentStatusUpdateRequest,
    store: DocumentStore = Depends(get_store),
) -> None:
    try:
        await update_payment_status(store, order_id, payload.payment_status)
    except (OrderNotFoundError, ValidationError, PersistenceError) as exc:
        raise _to_http_error(exc) from exc
