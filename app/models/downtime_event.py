import uuid
from datetime import datetime

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.db.session import Base
from app.db.wall_clock import WallClockDateTime
from app.models.common import TimestampMixin, UUIDMixin
from app.models.machine import Machine
from app.models.pdt_category import PdtCategory
from app.models.production_plan import ProductionPlan
from app.models.updt_category import UpdtCategory

DOWNTIME_PLANNED = "PDT"
DOWNTIME_UNPLANNED = "UPDT"

class DowntimeEvent(Base, UUIDMixin, TimestampMixin):
    __tablename__ = "downtime_events"
    plan_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), ForeignKey("production_plans.id"), index=True, nullable=False)
    kind: Mapped[str] = mapped_column(String(10), nullable=False)  # PDT|UPDT
    pdt_category_id: Mapped[uuid.UUID | None] = mapped_column(UUID(as_uuid=True), ForeignKey("pdt_categories.id"), nullable=True)
    updt_category_id: Mapped[uuid.UUID | None] = mapped_column(UUID(as_uuid=True), ForeignKey("updt_categories.id"), nullable=True)
    machine_id: Mapped[uuid.UUID | None] = mapped_column(UUID(as_uuid=True), ForeignKey("machines.id"), nullable=True)
    started_at: Mapped[datetime] = mapped_column(WallClockDateTime, nullable=False)
    duration_sec: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    # Time a planned stop ran past its category's default duration; counted as unplanned loss.
    over_pdt_duration_sec: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    plan: Mapped[ProductionPlan] = relationship()
    pdt_category: Mapped[PdtCategory | None] = relationship()
    updt_category: Mapped[UpdtCategory | None] = relationship()
    machine: Mapped[Machine | None] = relationship()
