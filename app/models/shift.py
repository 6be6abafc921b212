import uuid
from datetime import time

from sqlalchemy import ForeignKey, Integer, Time
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.db.session import Base
from app.models.common import SoftDeleteMixin, TimestampMixin, UUIDMixin
from app.models.line import Line

class Shift(Base, UUIDMixin, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "shifts"
    line_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), ForeignKey("lines.id"), index=True, nullable=False)
    number: Mapped[int] = mapped_column(Integer, nullable=False)
    # Time-of-day columns hold wall-clock values already and are not shifted.
    work_start: Mapped[time] = mapped_column(Time, nullable=False)
    work_end: Mapped[time] = mapped_column(Time, nullable=False)
    break1_start: Mapped[time | None] = mapped_column(Time, nullable=True)
    break1_end: Mapped[time | None] = mapped_column(Time, nullable=True)
    break2_start: Mapped[time | None] = mapped_column(Time, nullable=True)
    break2_end: Mapped[time | None] = mapped_column(Time, nullable=True)
    break3_start: Mapped[time | None] = mapped_column(Time, nullable=True)
    break3_end: Mapped[time | None] = mapped_column(Time, nullable=True)
    loading_time_in_sec: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    line: Mapped[Line] = relationship()
