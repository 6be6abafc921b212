import uuid
from datetime import datetime

from sqlalchemy import Float, ForeignKey, Integer, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.db.session import Base
from app.db.wall_clock import WallClockDateTime
from app.models.common import TimestampMixin, UUIDMixin
from app.models.line import Line
from app.models.part import Part
from app.models.shift import Shift
from app.models.user import User

PLAN_STATUSES = ("OPEN", "RUNNING", "CLOSED", "CANCELED")

class ProductionPlan(Base, UUIDMixin, TimestampMixin):
    __tablename__ = "production_plans"
    work_order_no: Mapped[str] = mapped_column(String(50), index=True, nullable=False)
    plan_date: Mapped[datetime] = mapped_column(WallClockDateTime, index=True, nullable=False)
    line_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), ForeignKey("lines.id"), index=True, nullable=False)
    shift_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), ForeignKey("shifts.id"), index=True, nullable=False)
    part_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), ForeignKey("parts.id"), index=True, nullable=False)
    cycle_time_sec: Mapped[float] = mapped_column(Float, nullable=False)
    planned_qty: Mapped[int] = mapped_column(Integer, nullable=False)
    actual_qty: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    ng_qty: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    sequence: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    status: Mapped[str] = mapped_column(String(20), default="OPEN", nullable=False, index=True)
    started_at: Mapped[datetime | None] = mapped_column(WallClockDateTime, nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(WallClockDateTime, nullable=True)
    created_by_id: Mapped[uuid.UUID | None] = mapped_column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=True)

    line: Mapped[Line] = relationship()
    shift: Mapped[Shift] = relationship()
    part: Mapped[Part] = relationship()
    created_by: Mapped[User | None] = relationship()
