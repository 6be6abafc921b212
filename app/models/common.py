import uuid
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID
from app.db.wall_clock import WallClockDateTime, utcnow

class UUIDMixin:
    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(WallClockDateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(WallClockDateTime, default=utcnow, onupdate=utcnow, nullable=False)

class SoftDeleteMixin:
    deleted_at: Mapped[datetime | None] = mapped_column(WallClockDateTime, nullable=True, index=True)
