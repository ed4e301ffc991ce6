# walkin_queue/styles.py

import logging
from typing import List

from sqlmodel import Session, select

from .clock import Clock
from .errors import StyleNotFound
from .models import HaircutStyle
from .schemas import HaircutStyleCreate, HaircutStyleUpdate

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "is_trending")


class StyleCatalog:
    """Haircut styles the shop showcases, newest first."""

    def __init__(self, session: Session, clock: Clock):
        self.session = session
        self.clock = clock

    def list_styles(self, trending_only: bool = False) -> List[HaircutStyle]:
        stmt = select(HaircutStyle)
        if trending_only:
            stmt = stmt.where(HaircutStyle.is_trending == True)  # noqa: E712
        stmt = stmt.order_by(HaircutStyle.created_at.desc(), HaircutStyle.id.desc())
        return list(self.session.exec(stmt).all())

    def create(self, payload: HaircutStyleCreate) -> HaircutStyle:
        style = HaircutStyle(**payload.model_dump(), created_at=self.clock.utcnow())
        self.session.add(style)
        self.session.commit()
        self.session.refresh(style)
        logger.info("Added haircut style %s (%d)", style.name, style.id)
        return style

    def update(self, style_id: int, payload: HaircutStyleUpdate) -> HaircutStyle:
        style = self.session.get(HaircutStyle, style_id)
        if style is None:
            raise StyleNotFound()

        # fields left out of the request keep their stored value
        for field, value in payload.model_dump(exclude_unset=True).items():
            if value is None and field in REQUIRED_FIELDS:
                continue
            setattr(style, field, value)
        self.session.add(style)
        self.session.commit()
        self.session.refresh(style)
        return style
