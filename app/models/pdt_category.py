from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from app.db.session import Base
from app.models.common import SoftDeleteMixin, TimestampMixin, UUIDMixin

class PdtCategory(Base, UUIDMixin, TimestampMixin, SoftDeleteMixin):
    """Planned downtime category."""
    __tablename__ = "pdt_categories"
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    default_duration_min: Mapped[int] = mapped_column(Integer, nullable=False)
