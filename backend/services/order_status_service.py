import logging
from typing import Any, Dict, Optional

from repositories.document_store import DocumentStore
from services.notifications.dispatcher import (
    STATUS_UPDATE_EVENTS,
    BusinessInfo,
    WebhookDispatcher,
    build_status_update_payload,
)
from services.order_persistence import update_order_status

logger = logging.getLogger("krumbkraft")


async def change_order_status(
    store: DocumentStore,
    dispatcher: WebhookDispatcher,
    business: BusinessInfo,
    order_id: str,
    status: str,
    notes: Optional[str] = None,
) -> Dict[str, Any]:
    record = await update_order_status(store, order_id, status, notes)
    notified = False
    if status in STATUS_UPDATE_EVENTS:
        payload = build_status_update_payload(
            order_id,
            status,
            record.get("customer_phone") or "",
            record.get("customer_name") or "",
            business,
        )
        try:
            await dispatcher.dispatch(payload)
            notified = True
        except Exception as exc:
            logger.warning("Status webhook for %s failed: %s", order_id, exc)
    return {"record": record, "notified": notified}
