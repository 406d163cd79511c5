from fastapi import APIRouter, Depends

from dependencies import get_notification_worker
from schemas import NotificationWorkerStatusResponse
from services.notification_worker import NotificationWorker

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


@router.get("/status", response_model=NotificationWorkerStatusResponse)
async def get_status(
    worker: NotificationWorker = Depends(get_notification_worker),
) -> NotificationWorkerStatusResponse:
    return NotificationWorkerStatusResponse(**worker.get_status())
