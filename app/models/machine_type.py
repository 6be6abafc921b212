from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from app.db.session import Base
from app.models.common import TimestampMixin, UUIDMixin

STATUS_ACTIVE = 1
STATUS_DELETED = 0

class MachineType(Base, UUIDMixin, TimestampMixin):
    __tablename__ = "machine_types"
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    code: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    status: Mapped[int] = mapped_column(Integer, default=STATUS_ACTIVE, nullable=False, index=True)  # 1 active, 0 deleted
