import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api import (
    addresses_router,
    booking_router,
    checkout_router,
    diagnostics_router,
    notifications_router,
    orders_router,
    webhook_router,
    whatsapp_router,
)
from config import settings
from dependencies import get_notification_worker

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

logging.basicConfig(level=settings.log_level.upper(), format=LOG_FORMAT)
logger = logging.getLogger("krumbkraft")

app = FastAPI(title="KrumbKraft Ordering API")

if settings.allowed_origins == ["*"]:
    allow_origins = ["*"]
else:
    allow_origins = settings.allowed_origins

app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(checkout_router)
app.include_router(orders_router)
app.include_router(addresses_router)
app.include_router(webhook_router)
app.include_router(diagnostics_router)
app.include_router(whatsapp_router)
app.include_router(notifications_router)
app.include_router(booking_router)


@app.on_event("startup")
async def _on_startup() -> None:
    if settings.notify_in_background:
        await get_notification_worker().start()
    if not settings.n8n_webhook_url:
        logger.warning("N8N_WEBHOOK_URL is not set; order notifications will fall back to WhatsApp links.")
    if allow_origins == ["*"]:
        logger.warning(
            "CORS is set to allow all origins with credentials; set ALLOWED_ORIGINS to explicit values for local dev."
        )


@app.on_event("shutdown")
async def _on_shutdown() -> None:
    await get_notification_worker().stop()
