import uuid

from sqlalchemy import Float, ForeignKey
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.db.session import Base
from app.models.common import TimestampMixin, UUIDMixin
from app.models.production_plan import ProductionPlan

class OeeRecord(Base, UUIDMixin, TimestampMixin):
    __tablename__ = "oee_records"
    plan_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), ForeignKey("production_plans.id"), unique=True, nullable=False)
    availability: Mapped[float] = mapped_column(Float, nullable=False)
    performance: Mapped[float] = mapped_column(Float, nullable=False)
    quality: Mapped[float] = mapped_column(Float, nullable=False)
    oee: Mapped[float] = mapped_column(Float, nullable=False)

    plan: Mapped[ProductionPlan] = relationship()
