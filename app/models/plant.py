from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column
from app.db.session import Base
from app.models.common import SoftDeleteMixin, TimestampMixin, UUIDMixin

class Plant(Base, UUIDMixin, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "plants"
    name: Mapped[str] = mapped_column(String(200), unique=True, nullable=False)
    subplant: Mapped[str] = mapped_column(String(200), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
