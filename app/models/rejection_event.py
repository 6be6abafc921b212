import uuid
from datetime import datetime

from sqlalchemy import ForeignKey, Integer
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.db.session import Base
from app.db.wall_clock import WallClockDateTime
from app.models.common import TimestampMixin, UUIDMixin
from app.models.production_plan import ProductionPlan
from app.models.reject_criteria import RejectCriteria

class RejectionEvent(Base, UUIDMixin, TimestampMixin):
    __tablename__ = "rejection_events"
    plan_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), ForeignKey("production_plans.id"), index=True, nullable=False)
    reject_criteria_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), ForeignKey("reject_criteria.id"), index=True, nullable=False)
    qty: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    occurred_at: Mapped[datetime] = mapped_column(WallClockDateTime, index=True, nullable=False)

    plan: Mapped[ProductionPlan] = relationship()
    reject_criteria: Mapped[RejectCriteria] = relationship()
