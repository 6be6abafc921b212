import uuid

from sqlalchemy import Float, ForeignKey, Integer, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.db.session import Base
from app.models.common import SoftDeleteMixin, TimestampMixin, UUIDMixin
from app.models.line import Line

class Part(Base, UUIDMixin, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "parts"
    sku: Mapped[str | None] = mapped_column(String(100), nullable=True)
    part_no: Mapped[str] = mapped_column(String(100), index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    line_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), ForeignKey("lines.id"), index=True, nullable=False)
    qty_per_lot: Mapped[int | None] = mapped_column(Integer, nullable=True)
    cycle_time_sec: Mapped[float | None] = mapped_column(Float, nullable=True)

    line: Mapped[Line] = relationship()
