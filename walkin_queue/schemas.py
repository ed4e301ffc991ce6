# walkin_queue/schemas.py

import re
from datetime import datetime, date as Date
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class QueueStatus(str, Enum):
    waiting = "waiting"
    in_progress = "in-progress"
    completed = "completed"
    cancelled = "cancelled"


ACTIVE_STATUSES = (QueueStatus.waiting.value, QueueStatus.in_progress.value)


class UserRole(str, Enum):
    admin = "admin"


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class Principal(BaseModel):
    """Authenticated caller, built once from a verified token."""

    version: int = 1
    username: str
    role: UserRole


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def normalize_mobile(value: str) -> str:
    cleaned = re.sub(r"[\s\-().]+", "", value or "")
    if cleaned.startswith("00"):
        cleaned = "+" + cleaned[2:]
    digits = cleaned[1:] if cleaned.startswith("+") else cleaned
    if not digits.isdigit() or not (7 <= len(digits) <= 15):
        raise ValueError("mobile must be a phone number of 7 to 15 digits")
    return cleaned


class JoinQueueRequest(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    mobile: str
    service_id: int = Field(ge=1)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value

    @field_validator("mobile")
    @classmethod
    def check_mobile(cls, value: str) -> str:
        return normalize_mobile(value)


class JoinQueueResponse(CamelModel):
    message: str = "Successfully joined the queue"
    queue_number: int
    estimated_wait_time: int


class ServicePublic(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    price: float
    duration: int


class CustomerPublic(CamelModel):
    id: int
    name: str
    mobile: str


class QueueStatusResponse(CamelModel):
    queue_number: int
    status: QueueStatus
    position: int
    estimated_wait: int
    service: ServicePublic


class MessageResponse(BaseModel):
    message: str


class QueueEntryPublic(CamelModel):
    id: int
    queue_number: int
    service_date: Date
    status: QueueStatus
    estimated_wait_time: int
    check_in_time: datetime
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    customer: CustomerPublic
    service: ServicePublic


class StatusUpdate(BaseModel):
    status: QueueStatus


class StatusUpdateResponse(BaseModel):
    message: str
    queue: QueueEntryPublic


class DailyLimitPublic(CamelModel):
    date: Date
    max_customers: int
    current_count: int


class DailyLimitUpdate(CamelModel):
    max_customers: int = Field(ge=1)


class DailyLimitResponse(CamelModel):
    message: str
    daily_limit: DailyLimitPublic


class QueueStats(CamelModel):
    waiting: int
    in_progress: int
    completed: int
    cancelled: int
    total: int
    max_customers: Optional[int] = None
    current_count: int = 0


class RecordsPeriod(str, Enum):
    today = "today"
    week = "week"
    month = "month"
    all = "all"


class RecordsPage(CamelModel):
    records: List[QueueEntryPublic]
    total_pages: int
    current_page: int
    total: int


class PurgeRequest(BaseModel):
    days: Optional[int] = Field(default=None, ge=0)


class PurgeResponse(BaseModel):
    message: str
    deleted: int


class HaircutStyleCreate(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    image: Optional[str] = None
    is_trending: bool = False


class HaircutStyleUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    image: Optional[str] = None
    is_trending: Optional[bool] = None


class HaircutStylePublic(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    image: Optional[str] = None
    is_trending: bool
    created_at: datetime
