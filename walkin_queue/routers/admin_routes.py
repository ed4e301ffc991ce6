# walkin_queue/routers/admin_routes.py

from typing import List, Optional

from fastapi import APIRouter, Body, Depends, Query

from walkin_queue.deps import get_queue_service, get_style_catalog, require_admin
from walkin_queue.queue_service import QueueService
from walkin_queue.schemas import (
    DailyLimitPublic,
    DailyLimitResponse,
    DailyLimitUpdate,
    HaircutStyleCreate,
    HaircutStylePublic,
    HaircutStyleUpdate,
    PurgeRequest,
    PurgeResponse,
    QueueEntryPublic,
    QueueStats,
    RecordsPage,
    RecordsPeriod,
    StatusUpdate,
    StatusUpdateResponse,
)
from walkin_queue.styles import StyleCatalog

router = APIRouter(
    prefix="/admin",
    tags=["admin"],
    dependencies=[Depends(require_admin)],
)


@router.get("/queue", response_model=List[QueueEntryPublic])
def list_queue(
    status: Optional[str] = "all",
    queue: QueueService = Depends(get_queue_service),
):
    return queue.list_entries(status)


@router.put("/queue/{entry_id}/status", response_model=StatusUpdateResponse)
def update_queue_status(
    entry_id: int,
    update: StatusUpdate,
    queue: QueueService = Depends(get_queue_service),
):
    entry = queue.update_status(entry_id, update.status)
    return {"message": "Queue status updated successfully", "queue": entry}


@router.get("/stats", response_model=QueueStats)
def stats(queue: QueueService = Depends(get_queue_service)):
    return queue.stats()


@router.get("/records", response_model=RecordsPage)
def records(
    period: RecordsPeriod = RecordsPeriod.today,
    status: Optional[str] = "all",
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    queue: QueueService = Depends(get_queue_service),
):
    return queue.records(period, status, page, limit)


@router.delete("/records", response_model=PurgeResponse)
def delete_records(
    payload: Optional[PurgeRequest] = Body(default=None),
    queue: QueueService = Depends(get_queue_service),
):
    days = payload.days if payload is not None else None
    days = queue.default_retention_days if days is None else days
    deleted = queue.purge(days)
    return {"message": f"Deleted {deleted} records older than {days} days", "deleted": deleted}


@router.put("/daily-limit", response_model=DailyLimitResponse)
def update_daily_limit(
    payload: DailyLimitUpdate,
    queue: QueueService = Depends(get_queue_service),
):
    limit = queue.set_daily_limit(payload.max_customers)
    return DailyLimitResponse(
        message="Daily limit updated successfully",
        daily_limit=DailyLimitPublic.model_validate(limit),
    )


@router.get("/haircut-styles", response_model=List[HaircutStylePublic])
def list_haircut_styles(
    trending: bool = False,
    catalog: StyleCatalog = Depends(get_style_catalog),
):
    return catalog.list_styles(trending_only=trending)


@router.post("/haircut-styles", response_model=HaircutStylePublic, status_code=201)
def create_haircut_style(
    payload: HaircutStyleCreate,
    catalog: StyleCatalog = Depends(get_style_catalog),
):
    return catalog.create(payload)


@router.put("/haircut-styles/{style_id}", response_model=HaircutStylePublic)
def update_haircut_style(
    style_id: int,
    payload: HaircutStyleUpdate,
    catalog: StyleCatalog = Depends(get_style_catalog),
):
    return catalog.update(style_id, payload)
