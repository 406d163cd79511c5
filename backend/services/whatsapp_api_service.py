import logging
import re
from typing import Any, Dict, Optional

import httpx

from errors import WhatsAppApiError
from orders import Order
from services.notifications.composer import (
    DEFAULT_BUSINESS_NAME,
    DEFAULT_CURRENCY,
    render_business_message,
    render_customer_message,
)

logger = logging.getLogger("krumbkraft")

GRAPH_API_URL = "https://graph.facebook.com"
REQUEST_TIMEOUT_SECONDS = 10


def to_whatsapp_recipient(phone: str) -> str:
    digits = re.sub(r"\D", "", phone or "")
    return digits if digits.startswith("91") else f"91{digits}"


class WhatsAppApiClient:
    def __init__(
        self,
        phone_number_id: str,
        access_token: str,
        api_version: str = "v22.0",
        business_name: str = DEFAULT_BUSINESS_NAME,
        currency: str = DEFAULT_CURRENCY,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.phone_number_id = phone_number_id
        self.access_token = access_token
        self.api_version = api_version
        self.business_name = business_name
        self.currency = currency
        self._transport = transport

    @property
    def api_url(self) -> str:
        return f"{GRAPH_API_URL}/{self.api_version}/{self.phone_number_id}/messages"

    async def send_message(self, message: Dict[str, Any]) -> Dict[str, Any]:
        headers = {
            "Authorization": f"Bearer {self.access_token}",
            "Content-Type": "application/json",
        }
        async with httpx.AsyncClient(
            timeout=REQUEST_TIMEOUT_SECONDS, transport=self._transport
        ) as client:
            response = await client.post(self.api_url, json=message, headers=headers)
        if not response.is_success:
            logger.error("WhatsApp API rejected message: %s", response.text)
            raise WhatsAppApiError(response.status_code, response.text)
        return response.json()

    async def send_text_message(self, to: str, text: str) -> Dict[str, Any]:
        return await self.send_message(
            {
                "messaging_product": "whatsapp",
                "to": to,
                "type": "text",
                "text": {"body": text},
            }
        )

    async def send_template_message(
        self, to: str, template_name: str, language_code: str = "en_US"
    ) -> Dict[str, Any]:
        return await self.send_message(
            {
                "messaging_product": "whatsapp",
                "to": to,
                "type": "template",
                "template": {"name": template_name, "language": {"code": language_code}},
            }
        )

    async def send_order_confirmation(self, order: Order) -> Dict[str, Any]:
        text = render_customer_message(order, self.business_name, self.currency)
        return await self.send_text_message(to_whatsapp_recipient(order.customer.phone), text)

    async def send_order_notification_to_business(
        self, business_phone: str, order: Order
    ) -> Dict[str, Any]:
        text = render_business_message(order, self.business_name, self.currency)
        return await self.send_text_message(to_whatsapp_recipient(business_phone), text)
