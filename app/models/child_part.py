import uuid

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.db.session import Base
from app.models.common import SoftDeleteMixin, TimestampMixin, UUIDMixin
from app.models.part import Part

class ChildPart(Base, UUIDMixin, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "child_parts"
    child_part_no: Mapped[str] = mapped_column(String(100), index=True, nullable=False)
    child_part_name: Mapped[str] = mapped_column(String(200), nullable=False)
    part_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), ForeignKey("parts.id"), index=True, nullable=False)
    qty_lot_supply: Mapped[int | None] = mapped_column(Integer, nullable=True)

    part: Mapped[Part] = relationship()
