from .addresses import router as addresses_router
from .booking import router as booking_router
from .checkout import router as checkout_router
from .diagnostics import router as diagnostics_router
from .notifications import router as notifications_router
from .orders import router as orders_router
from .webhook import router as webhook_router
from .whatsapp import router as whatsapp_router

__all__ = [
    "addresses_router",
    "booking_router",
    "checkout_router",
    "diagnostics_router",
    "notifications_router",
    "orders_router",
    "webhook_router",
    "whatsapp_router",
]
