import uuid
from datetime import datetime

from sqlalchemy import Boolean, ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from app.db.session import Base
from app.db.wall_clock import WallClockDateTime
from app.models.common import TimestampMixin, UUIDMixin

NOTIFICATION_TYPES = ("INFO", "SUCCESS", "WARNING", "ERROR", "SYSTEM")


class Notification(Base, UUIDMixin, TimestampMixin):
    __tablename__ = "notifications"

    # NULL recipient means a broadcast visible to every user.
    user_id: Mapped[uuid.UUID | None] = mapped_column(UUID(as_uuid=True), ForeignKey("users.id"), index=True, nullable=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(String(20), default="INFO", nullable=False)
    category: Mapped[str | None] = mapped_column(String(50), index=True, nullable=True)
    is_read: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)
    read_at: Mapped[datetime | None] = mapped_column(WallClockDateTime, nullable=True)
