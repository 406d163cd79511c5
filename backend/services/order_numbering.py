import asyncio
import logging
import random
import re
import time
from typing import Iterable

from errors import NumberingFallbackUsed
from repositories.document_store import DocumentStore
from repositories.order_repository import fetch_order_ids

logger = logging.getLogger("krumbkraft")

ORDER_PREFIX = "Krumb"
# The letter pair never rolls over; ids past 99 simply grow a third digit.
ORDER_LETTERS = "AA"
ORDER_ID_PATTERN = re.compile(r"^Krumb([A-Z]{2})(\d+)$")


def format_order_id(number: int) -> str:
    return f"{ORDER_PREFIX}{ORDER_LETTERS}{number:02d}"


def max_order_number(order_ids: Iterable[str]) -> int:
    highest = 0
    for order_id in order_ids:
        match = ORDER_ID_PATTERN.match(order_id or "")
        if not match:
            continue
        highest = max(highest, int(match.group(2)))
    return highest


def fallback_order_id() -> str:
    rng = random.Random(time.time_ns())
    return format_order_id(rng.randrange(100))


def _scan_max_order_number(store: DocumentStore) -> int:
    try:
        order_ids = fetch_order_ids(store)
    except Exception as exc:
        raise NumberingFallbackUsed(f"Unable to read existing orders: {exc}") from exc
    return max_order_number(order_ids)


async def next_order_number(store: DocumentStore) -> str:
    try:
        highest = await asyncio.to_thread(_scan_max_order_number, store)
    except NumberingFallbackUsed as exc:
        order_id = fallback_order_id()
        logger.warning("Order numbering fell back to %s: %s", order_id, exc)
        return order_id
    return format_order_id(highest + 1)
