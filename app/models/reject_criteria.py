import uuid

from sqlalchemy import ForeignKey, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.db.session import Base
from app.models.common import SoftDeleteMixin, TimestampMixin, UUIDMixin
from app.models.line import Line

REJECT_CATEGORIES = ("NG Setting", "NG Regular")

class RejectCriteria(Base, UUIDMixin, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "reject_criteria"
    line_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), ForeignKey("lines.id"), index=True, nullable=False)
    category: Mapped[str] = mapped_column(String(50), nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)

    line: Mapped[Line] = relationship()
