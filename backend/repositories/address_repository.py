from typing import Any, Dict, List

from repositories.document_store import ADDRESS_COLLECTION, DocumentStore


def fetch_user_addresses(store: DocumentStore, user_id: str) -> List[Dict[str, Any]]:
    return store.query(ADDRESS_COLLECTION, user_id=user_id)


def insert_address(store: DocumentStore, record: Dict[str, Any]) -> Dict[str, Any]:
    key = store.add(ADDRESS_COLLECTION, record)
    return {**record, "id": key}
