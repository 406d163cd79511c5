from typing import Any, Dict, List, Optional

from repositories.document_store import (
    FINANCE_RECORDS_COLLECTION,
    ORDER_STATUS_COLLECTION,
    DocumentStore,
)


def fetch_order_ids(store: DocumentStore) -> List[str]:
    rows = store.all(ORDER_STATUS_COLLECTION, columns="order_id")
    return [str(row.get("order_id") or "") for row in rows]


def fetch_order_status(store: DocumentStore, order_id: str) -> Optional[Dict[str, Any]]:
    return store.get(ORDER_STATUS_COLLECTION, order_id)


def fetch_finance_record(store: DocumentStore, order_id: str) -> Optional[Dict[str, Any]]:
    return store.get(FINANCE_RECORDS_COLLECTION, order_id)


def save_order_status(
    store: DocumentStore, order_id: str, record: Dict[str, Any]
) -> Dict[str, Any]:
    return store.set(ORDER_STATUS_COLLECTION, order_id, record)


def save_finance_record(
    store: DocumentStore, order_id: str, record: Dict[str, Any]
) -> Dict[str, Any]:
    return store.set(FINANCE_RECORDS_COLLECTION, order_id, record)


def update_order_status_fields(store: DocumentStore, order_id: str, **fields: Any) -> None:
    payload = {key: value for key, value in fields.items() if value is not None}
    if not payload:
        return
    store.update(ORDER_STATUS_COLLECTION, order_id, payload)


def update_finance_fields(store: DocumentStore, order_id: str, **fields: Any) -> None:
    payload = {key: value for key, value in fields.items() if value is not None}
    if not payload:
        return
    store.update(FINANCE_RECORDS_COLLECTION, order_id, payload)
