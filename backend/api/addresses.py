from fastapi import APIRouter, Depends, HTTPException, Query, status

from dependencies import get_store
from errors import ValidationError
from repositories.document_store import DocumentStore
from schemas import AddressCreate, AddressListResponse, AddressResponse
from services import address_service

router = APIRouter(prefix="/api/addresses", tags=["addresses"])


@router.get("", response_model=AddressListResponse)
async def list_addresses(
    user_id: str = Query(..., description="Customer phone number"),
    store: DocumentStore = Depends(get_store),
) -> AddressListResponse:
    items = await address_service.list_addresses(store, user_id)
    return AddressListResponse(items=items)


@router.post("", response_model=AddressResponse, status_code=status.HTTP_201_CREATED)
async def create_address(
    payload: AddressCreate,
    user_id: str = Query(..., description="Customer phone number"),
    store: DocumentStore = Depends(get_store),
) -> AddressResponse:
    try:
        return await address_service.create_address(store, user_id, payload)
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
