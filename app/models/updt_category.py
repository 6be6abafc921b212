import uuid

from sqlalchemy import ForeignKey, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.db.session import Base
from app.models.common import SoftDeleteMixin, TimestampMixin, UUIDMixin
from app.models.line import Line

class UpdtCategory(Base, UUIDMixin, TimestampMixin, SoftDeleteMixin):
    """Unplanned downtime category, defined per line and department."""
    __tablename__ = "updt_categories"
    department: Mapped[str] = mapped_column(String(100), nullable=False)
    line_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), ForeignKey("lines.id"), index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)

    line: Mapped[Line] = relationship()
