from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from app.models.line import Line
from app.models.machine import Machine
from app.models.machine_type import STATUS_ACTIVE, MachineType
from app.repositories.base import Listing, fetch_page
from app.schemas.master_data import MachineQuery
from app.services.filtering import ColumnRef

LISTING = Listing(
    model=Machine,
    filter_columns={
        "name": ColumnRef("name"),
        "sequence": ColumnRef("sequence"),
        "lineName": ColumnRef("name", ("line",)),
        "plantName": ColumnRef("name", ("line", "plant")),
        "machineTypeName": ColumnRef("name", ("machine_type",)),
        "machineTypeCode": ColumnRef("code", ("machine_type",)),
        "createdAt": ColumnRef("created_at"),
        "updatedAt": ColumnRef("updated_at"),
    },
    default_sort=[
        (ColumnRef("sequence"), "asc"),
        (ColumnRef("name", ("line", "plant")), "asc"),
        (ColumnRef("name", ("line",)), "asc"),
    ],
    visibility=[
        Machine.deleted_at.is_(None),
        Machine.machine_type.has(MachineType.status == STATUS_ACTIVE),
    ],
    options=[joinedload(Machine.line).joinedload(Line.plant), joinedload(Machine.machine_type)],
)


def get_all(db: Session, params: MachineQuery):
    scopes = []
    if params.line_id:
        scopes.append(Machine.line_id == params.line_id)
    if params.plant_id:
        scopes.append(Machine.line.has(Line.plant_id == params.plant_id))
    if params.machine_type_id:
        scopes.append(Machine.machine_type_id == params.machine_type_id)
    return fetch_page(db, LISTING, params, scopes)


def next_sequence(db: Session, line_id) -> int:
    current = (
        db.query(func.max(Machine.sequence))
        .filter(Machine.line_id == line_id, Machine.deleted_at.is_(None))
        .scalar()
    )
    return int(current or 0) + 1
