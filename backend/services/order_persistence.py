import asyncio
import logging
from typing import Any, Dict, Optional

from errors import OrderNotFoundError, PersistenceError, ValidationError
from orders import ORDER_STATUSES, PAYMENT_STATUSES, Order, utc_now_iso
from repositories.document_store import DocumentStore
from repositories.order_repository import (
    fetch_finance_record,
    fetch_order_status,
    save_finance_record,
    save_order_status,
    update_finance_fields,
    update_order_status_fields,
)

logger = logging.getLogger("krumbkraft")


def build_order_status_record(order: Order) -> Dict[str, Any]:
    return {
        "uuid": order.uuid,
        "order_id": order.order_id,
        "customer_name": order.customer.name,
        "customer_phone": order.customer.phone,
        "status": order.status,
        "delivery_date": order.delivery_date,
        "delivery_address": order.delivery_address.full_address,
        "total_amount": order.total_amount,
        "status_history": [entry.to_dict() for entry in order.status_history],
    }


def build_finance_record(order: Order) -> Dict[str, Any]:
    return {
        "uuid": order.uuid,
        "order_id": order.order_id,
        "customer_name": order.customer.name,
        "customer_phone": order.customer.phone,
        "items": [item.to_dict() for item in order.items],
        "total_amount": order.total_amount,
        "delivery_address": order.delivery_address.to_dict(),
        "delivery_date": order.delivery_date,
        "payment_status": order.payment_status,
        "order_status": order.status,
        "payment_method": order.payment_method,
    }


async def save_order(store: DocumentStore, order: Order) -> None:
    results = await asyncio.gather(
        asyncio.to_thread(
            save_order_status, store, order.order_id, build_order_status_record(order)
        ),
        asyncio.to_thread(
            save_finance_record, store, order.order_id, build_finance_record(order)
        ),
        return_exceptions=True,
    )
    failures = [result for result in results if isinstance(result, BaseException)]
    if failures:
        for failure in failures:
            logger.error("Saving order %s failed: %s", order.order_id, failure)
        raise PersistenceError(
            f"Failed to save order {order.order_id}", order_id=order.order_id
        ) from failures[0]
    logger.info("Order %s saved with uuid %s", order.order_id, order.uuid)


async def get_order(store: DocumentStore, order_id: str) -> Dict[str, Any]:
    status_record, finance_record = await asyncio.gather(
        asyncio.to_thread(fetch_order_status, store, order_id),
        asyncio.to_thread(fetch_finance_record, store, order_id),
    )
    if status_record is None and finance_record is None:
        raise OrderNotFoundError(order_id)
    return {"order_status": status_record, "finance_record": finance_record}


async def update_order_status(
    store: DocumentStore,
    order_id: str,
    status: str,
    notes: Optional[str] = None,
) -> Dict[str, Any]:
    if status not in ORDER_STATUSES:
        raise ValidationError(f"Unknown order status: {status}")
    record = await asyncio.to_thread(fetch_order_status, store, order_id)
    if record is None:
        raise OrderNotFoundError(order_id)

    entry: Dict[str, Any] = {"status": status, "timestamp": utc_now_iso()}
    if notes is not None:
        entry["notes"] = notes
    history = list(record.get("status_history") or [])
    history.append(entry)

    try:
        await asyncio.gather(
            asyncio.to_thread(
                update_order_status_fields,
                store,
                order_id,
                status=status,
                status_history=history,
            ),
            asyncio.to_thread(update_finance_fields, store, order_id, order_status=status),
        )
    except Exception as exc:
        raise PersistenceError(
            f"Failed to update status of order {order_id}", order_id=order_id
        ) from exc
    logger.info("Order %s moved to %s", order_id, status)
    return {**record, "status": status, "status_history": history}


async def update_payment_status(store: DocumentStore, order_id: str, payment_status: str) -> None:
    if payment_status not in PAYMENT_STATUSES:
        raise ValidationError(f"Unknown payment status: {payment_status}")
    record = await asyncio.to_thread(fetch_finance_record, store, order_id)
    if record is None:
        raise OrderNotFoundError(order_id)
    try:
        await asyncio.to_thread(
            update_finance_fields, store, order_id, payment_status=payment_status
        )
    except Exception as exc:
        raise PersistenceError(
            f"Failed to update payment of order {order_id}", order_id=order_id
        ) from exc
    logger.info("Order %s payment marked %s", order_id, payment_status)
