from fastapi import APIRouter, Depends, Query

from config import settings
from dependencies import get_business
from schemas import BookingLinksResponse
from services.notifications.composer import create_booking_links, format_phone_number
from services.notifications.dispatcher import BusinessInfo

router = APIRouter(prefix="/api/booking-links", tags=["booking"])


@router.get("", response_model=BookingLinksResponse)
async def get_booking_links(
    customer_phone: str = Query(..., min_length=1),
    business: BusinessInfo = Depends(get_business),
) -> BookingLinksResponse:
    links = create_booking_links(
        customer_phone,
        settings.app_url,
        business.whatsapp_phone or None,
        business_name=business.name,
    )
    return BookingLinksResponse(
        customer_phone=customer_phone,
        display_phone=format_phone_number(customer_phone),
        **links,
    )
