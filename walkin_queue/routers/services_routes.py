# walkin_queue/routers/services_routes.py

from typing import List

from fastapi import APIRouter, Depends
from sqlmodel import Session, select

from walkin_queue.db import get_session
from walkin_queue.models import Service
from walkin_queue.schemas import ServicePublic

router = APIRouter(
    prefix="/services",
    tags=["services"],
)


@router.get("", response_model=List[ServicePublic])
def list_services(session: Session = Depends(get_session)):
    return session.exec(select(Service).order_by(Service.name)).all()
