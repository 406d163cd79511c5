from functools import lru_cache

from fastapi import Depends

from config import settings
from repositories.document_store import DocumentStore
from services.checkout_service import CheckoutService
from services.notification_worker import NotificationWorker
from services.notifications.dispatcher import BusinessInfo, WebhookConfig, WebhookDispatcher
from services.whatsapp_api_service import WhatsAppApiClient
from supabase_client import get_supabase


def webhook_config_from_settings() -> WebhookConfig:
    return WebhookConfig(
        primary_url=settings.n8n_webhook_url,
        secondary_url=settings.n8n_test_webhook_url or None,
        timeout_seconds=settings.webhook_timeout_ms / 1000,
        retry_attempts=settings.webhook_retry_attempts,
        api_key=settings.n8n_api_key or None,
    )


def get_business() -> BusinessInfo:
    return BusinessInfo(
        name=settings.business_name,
        phone=settings.business_phone,
        whatsapp_phone=settings.business_whatsapp,
        currency=settings.currency_symbol,
    )


@lru_cache(maxsize=1)
def get_store() -> DocumentStore:
    return DocumentStore(get_supabase())


@lru_cache(maxsize=1)
def get_dispatcher() -> WebhookDispatcher:
    return WebhookDispatcher(webhook_config_from_settings())


@lru_cache(maxsize=1)
def get_notification_worker() -> NotificationWorker:
    return NotificationWorker(get_dispatcher())


def get_whatsapp_client() -> WhatsAppApiClient:
    return WhatsAppApiClient(
        phone_number_id=settings.whatsapp_phone_number_id,
        access_token=settings.whatsapp_access_token,
        api_version=settings.whatsapp_api_version,
        business_name=settings.business_name,
        currency=settings.currency_symbol,
    )


def get_checkout_service(
    store: DocumentStore = Depends(get_store),
    dispatcher: WebhookDispatcher = Depends(get_dispatcher),
    worker: NotificationWorker = Depends(get_notification_worker),
    business: BusinessInfo = Depends(get_business),
) -> CheckoutService:
    return CheckoutService(
        store,
        dispatcher,
        business,
        worker=worker,
        notify_in_background=settings.notify_in_background,
    )
