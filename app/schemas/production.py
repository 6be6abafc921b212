from datetime import date, datetime
from typing import Literal, Optional
from uuid import UUID

from pydantic import Field

from app.schemas.master_data import ScopedByLineQuery
from app.schemas.query import WireModel

PlanStatus = Literal["OPEN", "RUNNING", "CLOSED", "CANCELED"]


class ProductionPlanQuery(ScopedByLineQuery):
    shift_id: Optional[UUID] = None
    part_id: Optional[UUID] = None
    status: Optional[PlanStatus] = None
    plan_date: Optional[date] = None


class ProductionPlanCreate(WireModel):
    work_order_no: str = Field(min_length=1, max_length=50)
    plan_date: date
    line_id: UUID
    shift_id: UUID
    part_id: UUID
    cycle_time_sec: float = Field(ge=0.01)
    planned_qty: int = Field(ge=1)
    sequence: Optional[int] = Field(default=None, ge=1)
    status: PlanStatus = "OPEN"
    created_by_id: Optional[UUID] = None


class ProductionPlanUpdate(WireModel):
    work_order_no: Optional[str] = Field(default=None, min_length=1, max_length=50)
    plan_date: Optional[date] = None
    line_id: Optional[UUID] = None
    shift_id: Optional[UUID] = None
    part_id: Optional[UUID] = None
    cycle_time_sec: Optional[float] = Field(default=None, ge=0.01)
    planned_qty: Optional[int] = Field(default=None, ge=1)
    actual_qty: Optional[int] = Field(default=None, ge=0)
    ng_qty: Optional[int] = Field(default=None, ge=0)
    sequence: Optional[int] = Field(default=None, ge=1)
    status: Optional[PlanStatus] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None


class OeeIngest(WireModel):
    work_order_no: str = Field(min_length=1)
    availability: float = Field(ge=0, le=100)
    performance: float = Field(ge=0, le=100)
    quality: float = Field(ge=0, le=100)
