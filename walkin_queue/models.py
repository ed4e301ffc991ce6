# walkin_queue/models.py

from typing import Optional
from datetime import datetime, date as Date

from sqlalchemy import DateTime, UniqueConstraint
from sqlmodel import SQLModel, Field, Relationship


class Customer(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    mobile: str = Field(index=True)  # lookup key, not unique in storage


class Service(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    description: Optional[str] = None
    price: float = Field(ge=0)
    duration: int = Field(ge=1)  # minutes


class DailyLimit(SQLModel, table=True):
    date: Date = Field(primary_key=True)  # day-key in the reference timezone
    max_customers: int = Field(ge=1)
    current_count: int = Field(default=0, ge=0)


class QueueEntry(SQLModel, table=True):
    __table_args__ = (
        UniqueConstraint("service_date", "queue_number", name="uq_queue_number_per_day"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)

    customer_id: int = Field(foreign_key="customer.id", index=True)
    service_id: int = Field(foreign_key="service.id")
    service_date: Date = Field(index=True)
    queue_number: int
    status: str = Field(default="waiting", index=True)
    estimated_wait_time: int = 0  # minutes, fixed at check-in
    # UTC, always timezone-aware
    check_in_time: datetime = Field(sa_type=DateTime(timezone=True), index=True)
    start_time: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))
    end_time: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))

    customer: Optional[Customer] = Relationship()
    service: Optional[Service] = Relationship()


class User(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(index=True, unique=True)
    password_hash: str
    role: str  # admin


class HaircutStyle(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    description: Optional[str] = None
    image: Optional[str] = None  # URL
    is_trending: bool = Field(default=False, index=True)
    created_at: datetime = Field(sa_type=DateTime(timezone=True))
