from datetime import time
from typing import Literal, Optional
from uuid import UUID

from pydantic import Field, field_validator, model_validator

from app.schemas.query import ListQuery, WireModel

UserRole = Literal["ADMIN", "MANAGER", "USER", "OPERATOR", "FOREMAN", "DIRECTOR"]
RejectCategory = Literal["NG Setting", "NG Regular"]


class ScopedByLineQuery(ListQuery):
    plant_id: Optional[UUID] = None
    line_id: Optional[UUID] = None


class PlantCreate(WireModel):
    name: str = Field(min_length=1, max_length=200)
    subplant: str = Field(min_length=1, max_length=200)
    is_active: bool = True


class PlantUpdate(WireModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    subplant: Optional[str] = Field(default=None, min_length=1, max_length=200)
    is_active: Optional[bool] = None


class LineQuery(ListQuery):
    plant_id: Optional[UUID] = None


class LineCreate(WireModel):
    name: str = Field(min_length=1, max_length=200)
    plant_id: UUID
    is_active: bool = True


class LineUpdate(WireModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    plant_id: Optional[UUID] = None
    is_active: Optional[bool] = None


class MachineTypeCreate(WireModel):
    name: str = Field(min_length=1, max_length=200)
    code: str = Field(min_length=1, max_length=50, pattern=r"^[A-Z0-9_-]+$")


class MachineTypeUpdate(WireModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    code: Optional[str] = Field(default=None, min_length=1, max_length=50, pattern=r"^[A-Z0-9_-]+$")


class ParameterCreate(WireModel):
    name: str = Field(min_length=1, max_length=200)
    unit: str = Field(min_length=1, max_length=50)
    opc_tag_name: str = Field(min_length=1, max_length=200)


class ParameterUpdate(WireModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    unit: Optional[str] = Field(default=None, min_length=1, max_length=50)
    opc_tag_name: Optional[str] = Field(default=None, min_length=1, max_length=200)


class MachineTypeParameterQuery(ListQuery):
    machine_type_id: Optional[UUID] = None
    parameter_id: Optional[UUID] = None


class MachineTypeParameterCreate(WireModel):
    machine_type_id: UUID
    parameter_id: UUID


class MachineTypeParameterUpdate(WireModel):
    machine_type_id: Optional[UUID] = None
    parameter_id: Optional[UUID] = None


class MachineQuery(ScopedByLineQuery):
    machine_type_id: Optional[UUID] = None


class MachineCreate(WireModel):
    name: str = Field(min_length=1, max_length=200)
    line_id: UUID
    machine_type_id: UUID
    # Omitted sequence means "next free position on the line".
    sequence: Optional[int] = Field(default=None, ge=1)


class MachineUpdate(WireModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    line_id: Optional[UUID] = None
    machine_type_id: Optional[UUID] = None
    sequence: Optional[int] = Field(default=None, ge=1)


class PartCreate(WireModel):
    sku: Optional[str] = Field(default=None, max_length=100)
    part_no: str = Field(min_length=1, max_length=100)
    name: str = Field(min_length=1, max_length=200)
    line_id: UUID
    qty_per_lot: Optional[int] = Field(default=None, gt=0)
    cycle_time_sec: Optional[float] = Field(default=None, gt=0)


class PartUpdate(WireModel):
    sku: Optional[str] = Field(default=None, max_length=100)
    part_no: Optional[str] = Field(default=None, min_length=1, max_length=100)
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    line_id: Optional[UUID] = None
    qty_per_lot: Optional[int] = Field(default=None, gt=0)
    cycle_time_sec: Optional[float] = Field(default=None, gt=0)


class ChildPartQuery(ScopedByLineQuery):
    part_id: Optional[UUID] = None


class ChildPartCreate(WireModel):
    child_part_no: str = Field(min_length=1, max_length=100)
    child_part_name: str = Field(min_length=1, max_length=200)
    part_id: UUID
    qty_lot_supply: Optional[int] = Field(default=None, gt=0)


class ChildPartUpdate(WireModel):
    child_part_no: Optional[str] = Field(default=None, min_length=1, max_length=100)
    child_part_name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    part_id: Optional[UUID] = None
    qty_lot_supply: Optional[int] = Field(default=None, gt=0)


_BREAK_PAIRS = (("break1_start", "break1_end"), ("break2_start", "break2_end"), ("break3_start", "break3_end"))


class ShiftCreate(WireModel):
    line_id: UUID
    number: int = Field(ge=1)
    work_start: time
    work_end: time
    break1_start: Optional[time] = None
    break1_end: Optional[time] = None
    break2_start: Optional[time] = None
    break2_end: Optional[time] = None
    break3_start: Optional[time] = None
    break3_end: Optional[time] = None

    @model_validator(mode="after")
    def breaks_come_in_pairs(self):
        for start_field, end_field in _BREAK_PAIRS:
            if (getattr(self, start_field) is None) != (getattr(self, end_field) is None):
                raise ValueError(f"{start_field} and {end_field} must be given together")
        return self


class ShiftUpdate(WireModel):
    line_id: Optional[UUID] = None
    number: Optional[int] = Field(default=None, ge=1)
    work_start: Optional[time] = None
    work_end: Optional[time] = None
    break1_start: Optional[time] = None
    break1_end: Optional[time] = None
    break2_start: Optional[time] = None
    break2_end: Optional[time] = None
    break3_start: Optional[time] = None
    break3_end: Optional[time] = None


class PdtCategoryCreate(WireModel):
    name: str = Field(min_length=1, max_length=100)
    default_duration_min: int = Field(ge=1, le=1440)


class PdtCategoryUpdate(WireModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    default_duration_min: Optional[int] = Field(default=None, ge=1, le=1440)


class UpdtCategoryQuery(ScopedByLineQuery):
    department: Optional[str] = None


class UpdtCategoryCreate(WireModel):
    department: str = Field(min_length=1, max_length=100)
    line_id: UUID
    name: str = Field(min_length=1, max_length=100)


class UpdtCategoryUpdate(WireModel):
    department: Optional[str] = Field(default=None, min_length=1, max_length=100)
    line_id: Optional[UUID] = None
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)


class RejectCriteriaQuery(ScopedByLineQuery):
    category: Optional[RejectCategory] = None


class RejectCriteriaCreate(WireModel):
    line_id: UUID
    category: RejectCategory
    name: str = Field(min_length=1, max_length=100)


class RejectCriteriaUpdate(WireModel):
    line_id: Optional[UUID] = None
    category: Optional[RejectCategory] = None
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)


class UserQuery(ListQuery):
    role: Optional[UserRole] = None


class UserCreate(WireModel):
    name: str = Field(min_length=2, max_length=200)
    npk: str = Field(min_length=6, max_length=50)
    password: str = Field(min_length=5)
    role: UserRole = "USER"
    is_active: bool = True

    @field_validator("npk")
    @classmethod
    def strip_npk(cls, value: str) -> str:
        return value.strip()


class UserUpdate(WireModel):
    name: Optional[str] = Field(default=None, min_length=2, max_length=200)
    npk: Optional[str] = Field(default=None, min_length=6, max_length=50)
    password: Optional[str] = Field(default=None, min_length=5)
    role: Optional[UserRole] = None
    is_active: Optional[bool] = None


class UserPerLineCreate(WireModel):
    user_id: UUID
    user_uid: str = Field(min_length=6, max_length=100)
    line_id: UUID
    is_active: bool = True


class UserPerLineUpdate(WireModel):
    user_id: Optional[UUID] = None
    user_uid: Optional[str] = Field(default=None, min_length=6, max_length=100)
    line_id: Optional[UUID] = None
    is_active: Optional[bool] = None
