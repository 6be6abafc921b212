import uuid

from sqlalchemy import ForeignKey
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.db.session import Base
from app.models.common import SoftDeleteMixin, TimestampMixin, UUIDMixin
from app.models.machine_type import MachineType
from app.models.parameter import Parameter

class MachineTypeParameter(Base, UUIDMixin, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "machine_type_parameters"
    machine_type_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), ForeignKey("machine_types.id"), index=True, nullable=False)
    parameter_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), ForeignKey("parameters.id"), index=True, nullable=False)

    machine_type: Mapped[MachineType] = relationship()
    parameter: Mapped[Parameter] = relationship()
