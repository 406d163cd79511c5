import asyncio
import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple

import httpx

from errors import DispatchError, ValidationError
from orders import Order, utc_now_iso
from .composer import (
    DEFAULT_BUSINESS_NAME,
    DEFAULT_CURRENCY,
    clean_phone_number,
    render_business_message,
    render_customer_message,
)

logger = logging.getLogger("krumbkraft")

USER_AGENT = "KrumbKraft-App/1.0"
SOURCE = "krumbkraft-app"
STATUS_UPDATE_EVENTS = ("confirmed", "out_for_delivery", "delivered", "cancelled")


@dataclass(frozen=True)
class WebhookConfig:
    primary_url: str
    secondary_url: Optional[str] = None
    timeout_seconds: float = 10.0
    retry_attempts: int = 3
    api_key: Optional[str] = None


@dataclass(frozen=True)
class BusinessInfo:
    name: str = DEFAULT_BUSINESS_NAME
    phone: str = ""
    whatsapp_phone: str = ""
    currency: str = DEFAULT_CURRENCY


@dataclass
class NotificationPayload:
    event_type: str
    order_id: str
    uuid: str
    customer_name: str
    customer_phone: str
    items: List[Dict[str, Any]]
    total_amount: int
    delivery_date: str
    delivery_address: Dict[str, Any]
    order_status: str
    business: BusinessInfo
    customer_message: str = ""
    business_message: str = ""
    created_at: str = field(default_factory=utc_now_iso)
    notifications: Dict[str, bool] = field(
        default_factory=lambda: {
            "send_customer_confirmation": True,
            "send_business_notification": True,
            "send_whatsapp": True,
            "send_email": False,
            "send_sms": False,
        }
    )


@dataclass
class DispatchResult:
    endpoint: str
    url: str
    attempts: int
    status_code: int
    body: Any


def build_order_placed_payload(order: Order, business: BusinessInfo) -> NotificationPayload:
    return NotificationPayload(
        event_type="order_placed",
        order_id=order.order_id,
        uuid=order.uuid,
        customer_name=order.customer.name,
        customer_phone=clean_phone_number(order.customer.phone),
        items=[item.to_dict() for item in order.items],
        total_amount=order.total_amount,
        delivery_date=order.delivery_date,
        delivery_address=order.delivery_address.to_dict(),
        order_status="placed",
        business=business,
        customer_message=render_customer_message(order, business.name, business.currency),
        business_message=render_business_message(order, business.name, business.currency),
    )


def build_status_update_payload(
    order_id: str,
    new_status: str,
    customer_phone: str,
    customer_name: str,
    business: BusinessInfo,
) -> NotificationPayload:
    if new_status not in STATUS_UPDATE_EVENTS:
        raise ValidationError(f"Unsupported status update: {new_status}")
    return NotificationPayload(
        event_type=f"order_{new_status}",
        order_id=order_id,
        uuid="",
        customer_name=customer_name,
        customer_phone=clean_phone_number(customer_phone),
        items=[],
        total_amount=0,
        delivery_date="",
        delivery_address={"full_address": "", "area": "", "city": "", "pincode": ""},
        order_status=new_status,
        business=business,
        notifications={
            "send_customer_confirmation": True,
            "send_business_notification": False,
            "send_whatsapp": True,
            "send_email": False,
            "send_sms": False,
        },
    )


def _compact_json(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def build_query_params(
    payload: NotificationPayload, now: Optional[datetime] = None
) -> List[Tuple[str, str]]:
    timestamp = utc_now_iso(now)
    return [
        ("event_type", payload.event_type),
        ("order_id", payload.order_id),
        ("customer_name", payload.customer_name),
        ("customer_phone", clean_phone_number(payload.customer_phone)),
        ("total_amount", str(payload.total_amount)),
        ("delivery_date", payload.delivery_date),
        ("order_status", payload.order_status),
        ("uuid", payload.uuid),
        ("timestamp", timestamp),
        ("source", SOURCE),
        ("items", _compact_json(payload.items)),
        ("delivery_address", _compact_json(payload.delivery_address)),
        ("customer_confirmation_message", payload.customer_message),
        ("business_notification_message", payload.business_message),
    ]


def _parse_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return {"success": True}


class WebhookDispatcher:
    def __init__(
        self,
        config: WebhookConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self.config = config
        self._transport = transport
        self._sleep = sleep

    @property
    def attempts_per_endpoint(self) -> int:
        return max(1, self.config.retry_attempts)

    def _headers(self) -> Dict[str, str]:
        headers = {"User-Agent": USER_AGENT}
        if self.config.api_key:
            headers["X-API-Key"] = self.config.api_key
        return headers

    async def _send_with_retry(
        self, endpoint: str, url: str, params: List[Tuple[str, str]]
    ) -> DispatchResult:
        attempts = self.attempts_per_endpoint
        last_error: Optional[Exception] = None
        async with httpx.AsyncClient(
            timeout=self.config.timeout_seconds,
            transport=self._transport,
            follow_redirects=True,
        ) as client:
            for attempt in range(1, attempts + 1):
                logger.info("Sending webhook GET to %s (attempt %s)", url, attempt)
                try:
                    response = await client.get(url, params=params, headers=self._headers())
                    response.raise_for_status()
                except httpx.HTTPError as exc:
                    last_error = exc
                    logger.warning("Webhook attempt %s to %s failed: %s", attempt, url, exc)
                    if attempt < attempts:
                        delay = 2 ** attempt
                        logger.info("Retrying webhook in %ss", delay)
                        await self._sleep(delay)
                    continue
                body = _parse_body(response)
                logger.info("Webhook sent to %s endpoint", endpoint)
                return DispatchResult(
                    endpoint=endpoint,
                    url=url,
                    attempts=attempt,
                    status_code=response.status_code,
                    body=body,
                )
        raise DispatchError(f"Webhook to {url} failed after {attempts} attempts", last_error)

    async def dispatch(self, payload: NotificationPayload) -> DispatchResult:
        if not self.config.primary_url:
            logger.warning("Webhook URL not configured; skipping %s", payload.event_type)
            raise DispatchError("Webhook URL not configured")

        params = build_query_params(payload)
        try:
            return await self._send_with_retry("primary", self.config.primary_url, params)
        except DispatchError as primary_error:
            if not self.config.secondary_url:
                raise
            logger.warning(
                "Primary webhook failed, trying secondary endpoint: %s", primary_error
            )

        try:
            return await self._send_with_retry("secondary", self.config.secondary_url, params)
        except DispatchError as secondary_error:
            raise DispatchError(
                "Webhook failed on primary and secondary endpoints",
                secondary_error.last_error,
            ) from secondary_error
