import uuid

from sqlalchemy import Boolean, ForeignKey, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.db.session import Base
from app.models.common import SoftDeleteMixin, TimestampMixin, UUIDMixin
from app.models.plant import Plant

class Line(Base, UUIDMixin, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "lines"
    name: Mapped[str] = mapped_column(String(200), unique=True, nullable=False)
    plant_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), ForeignKey("plants.id"), index=True, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    plant: Mapped[Plant] = relationship()
