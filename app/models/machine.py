import uuid

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.db.session import Base
from app.models.common import SoftDeleteMixin, TimestampMixin, UUIDMixin
from app.models.line import Line
from app.models.machine_type import MachineType

class Machine(Base, UUIDMixin, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "machines"
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    line_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), ForeignKey("lines.id"), index=True, nullable=False)
    machine_type_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), ForeignKey("machine_types.id"), index=True, nullable=False)
    sequence: Mapped[int] = mapped_column(Integer, default=1, nullable=False)

    line: Mapped[Line] = relationship()
    machine_type: Mapped[MachineType] = relationship()
