import asyncio
import contextlib
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from services.notifications.dispatcher import NotificationPayload, WebhookDispatcher

logger = logging.getLogger("krumbkraft")


class NotificationWorker:
    def __init__(self, dispatcher: WebhookDispatcher) -> None:
        self.dispatcher = dispatcher
        self._queue: "asyncio.Queue[NotificationPayload]" = asyncio.Queue()
        self._task: Optional[asyncio.Task] = None
        self._sent = 0
        self._failed = 0
        self._last_run_at: Optional[datetime] = None
        self._last_success_at: Optional[datetime] = None
        self._last_error: Optional[str] = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        if self.is_running:
            return
        self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        if not self._task:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None

    def enqueue(self, payload: NotificationPayload) -> None:
        self._queue.put_nowait(payload)

    async def process_one(self, payload: NotificationPayload) -> bool:
        self._last_run_at = datetime.now(timezone.utc)
        try:
            result = await self.dispatcher.dispatch(payload)
        except Exception as exc:
            self._failed += 1
            self._last_error = str(exc)
            logger.warning(
                "Notification for %s failed (order still placed): %s", payload.order_id, exc
            )
            return False
        self._sent += 1
        self._last_success_at = datetime.now(timezone.utc)
        self._last_error = None
        logger.info(
            "Notification for %s delivered via %s endpoint", payload.order_id, result.endpoint
        )
        return True

    async def _run(self) -> None:
        while True:
            payload = await self._queue.get()
            try:
                await self.process_one(payload)
            except Exception as exc:  # pragma: no cover - background guard
                logger.exception("Notification worker cycle failed: %s", exc)
            finally:
                self._queue.task_done()

    async def drain(self) -> None:
        await self._queue.join()

    def get_status(self) -> Dict[str, Any]:
        return {
            "running": self.is_running,
            "queued": self._queue.qsize(),
            "sent": self._sent,
            "failed": self._failed,
            "last_run_at": self._last_run_at,
            "last_success_at": self._last_success_at,
            "last_error": self._last_error,
        }
