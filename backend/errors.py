from typing import Optional


class CheckoutError(Exception):
    """Base class for failures surfaced by the ordering pipeline."""


class ValidationError(CheckoutError):
    """Input rejected before anything is written."""


class PersistenceError(CheckoutError):
    """One of the order record writes failed."""

    def __init__(self, message: str, order_id: Optional[str] = None) -> None:
        super().__init__(message)
        self.order_id = order_id


class NumberingFallbackUsed(CheckoutError):
    """The order-number scan failed and a random identifier must be used."""


class OrderNotFoundError(CheckoutError):
    def __init__(self, order_id: str) -> None:
        super().__init__(f"Order {order_id} not found")
        self.order_id = order_id


class DispatchError(CheckoutError):
    """Every configured webhook endpoint failed."""

    def __init__(self, message: str, last_error: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.last_error = last_error


class WhatsAppApiError(Exception):
    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(f"WhatsApp API error: {status_code} - {body}")
        self.status_code = status_code
        self.body = body
