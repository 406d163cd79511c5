import asyncio
from typing import Any, Dict, List

from errors import ValidationError
from repositories.address_repository import fetch_user_addresses, insert_address
from repositories.document_store import DocumentStore
from schemas import AddressCreate, AddressResponse


def _format_row(row: Dict[str, Any]) -> AddressResponse:
    return AddressResponse(
        id=row["id"],
        user_id=row["user_id"],
        full_address=row["full_address"],
        area=row.get("area") or "",
        city=row.get("city") or "",
        pincode=row.get("pincode") or "",
        landmark=row.get("landmark") or None,
        is_default=bool(row.get("is_default")),
    )


async def list_addresses(store: DocumentStore, user_id: str) -> List[AddressResponse]:
    rows = await asyncio.to_thread(fetch_user_addresses, store, user_id)
    return [_format_row(row) for row in rows]


async def create_address(
    store: DocumentStore, user_id: str, payload: AddressCreate
) -> AddressResponse:
    if not payload.full_address.strip():
        raise ValidationError("Full address is required")
    existing = await asyncio.to_thread(fetch_user_addresses, store, user_id)
    record = {
        "user_id": user_id,
        "full_address": payload.full_address,
        "area": payload.area,
        "city": payload.city,
        "pincode": payload.pincode,
        "is_default": not existing,
    }
    if payload.landmark:
        record["landmark"] = payload.landmark
    row = await asyncio.to_thread(insert_address, store, record)
    return _format_row(row)
