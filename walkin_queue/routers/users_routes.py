# walkin_queue/routers/users_routes.py

from fastapi import APIRouter, Depends

from walkin_queue.admission import AdmissionService
from walkin_queue.deps import get_admission_service, get_queue_service
from walkin_queue.errors import ValidationError
from walkin_queue.queue_service import QueueService
from walkin_queue.schemas import (
    JoinQueueRequest,
    JoinQueueResponse,
    MessageResponse,
    QueueStatusResponse,
    normalize_mobile,
)

router = APIRouter(
    prefix="/users",
    tags=["queue"],
)


def _mobile_param(mobile: str) -> str:
    try:
        return normalize_mobile(mobile)
    except ValueError as exc:
        raise ValidationError(str(exc))


@router.post("/join-queue", response_model=JoinQueueResponse, status_code=201)
def join_queue(
    payload: JoinQueueRequest,
    admission: AdmissionService = Depends(get_admission_service),
):
    result = admission.join_queue(payload.name, payload.mobile, payload.service_id)
    return JoinQueueResponse(
        queue_number=result.queue_number,
        estimated_wait_time=result.estimated_wait_time,
    )


@router.get("/queue-status/{mobile}", response_model=QueueStatusResponse)
def queue_status(
    mobile: str,
    queue: QueueService = Depends(get_queue_service),
):
    return queue.get_status(_mobile_param(mobile))


@router.put("/cancel-queue/{mobile}", response_model=MessageResponse)
def cancel_queue(
    mobile: str,
    queue: QueueService = Depends(get_queue_service),
):
    queue.cancel(_mobile_param(mobile))
    return {"message": "Queue cancelled successfully"}
