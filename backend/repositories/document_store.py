from typing import Any, Dict, List, Optional
from uuid import uuid4

from supabase import Client

ORDER_STATUS_COLLECTION = "order_status"
FINANCE_RECORDS_COLLECTION = "finance_records"
ADDRESS_COLLECTION = "addresses"

PAGE_SIZE = 1000


class DocumentStore:
    """Key-value document access on top of Supabase tables.

    Every collection is a table with a text primary key ``id``. Setting with
    ``merge=True`` upserts only the supplied columns, so fields not present in
    ``data`` keep their stored values.
    """

    def __init__(self, client: Client) -> None:
        self._client = client

    def get(self, collection: str, key: str) -> Optional[Dict[str, Any]]:
        response = (
            self._client.table(collection)
            .select("*")
            .eq("id", key)
            .limit(1)
            .execute()
        )
        items = response.data or []
        return items[0] if items else None

    def set(
        self, collection: str, key: str, data: Dict[str, Any], merge: bool = True
    ) -> Dict[str, Any]:
        record = {**data, "id": key}
        table = self._client.table(collection)
        if merge:
            response = table.upsert(record, on_conflict="id").execute()
        else:
            table.delete().eq("id", key).execute()
            response = table.insert(record).execute()
        rows = response.data or []
        if not rows:
            raise RuntimeError(f"Failed to store {collection}/{key}")
        return rows[0]

    def add(self, collection: str, data: Dict[str, Any]) -> str:
        key = uuid4().hex
        response = self._client.table(collection).insert({**data, "id": key}).execute()
        if not response.data:
            raise RuntimeError(f"Failed to add document to {collection}")
        return key

    def query(self, collection: str, **equals: Any) -> List[Dict[str, Any]]:
        request = self._client.table(collection).select("*")
        for column, value in equals.items():
            request = request.eq(column, value)
        response = request.execute()
        return response.data or []

    def update(self, collection: str, key: str, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Update columns of an existing document; returns None when no row matched."""
        response = self._client.table(collection).update(data).eq("id", key).execute()
        rows = response.data or []
        return rows[0] if rows else None

    def all(
        self, collection: str, columns: str = "*", page_size: int = PAGE_SIZE
    ) -> List[Dict[str, Any]]:
        # PostgREST caps every response, so read in id order until a short page.
        rows: List[Dict[str, Any]] = []
        offset = 0
        while True:
            response = (
                self._client.table(collection)
                .select(columns)
                .order("id")
                .range(offset, offset + page_size - 1)
                .execute()
            )
            batch = response.data or []
            rows.extend(batch)
            if len(batch) < page_size:
                return rows
            offset += page_size

    def delete(self, collection: str, key: str) -> bool:
        response = self._client.table(collection).delete().eq("id", key).execute()
        return bool(response.data)
