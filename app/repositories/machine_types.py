from sqlalchemy.orm import Session

from app.models.machine_type import STATUS_ACTIVE, STATUS_DELETED, MachineType
from app.repositories.base import Listing, exists, fetch_page
from app.schemas.query import ListQuery
from app.services.filtering import ColumnRef

LISTING = Listing(
    model=MachineType,
    filter_columns={
        "name": ColumnRef("name"),
        "code": ColumnRef("code"),
        "createdAt": ColumnRef("created_at"),
        "updatedAt": ColumnRef("updated_at"),
    },
    default_sort=[(ColumnRef("created_at"), "desc")],
    visibility=[MachineType.status == STATUS_ACTIVE],
)


def get_all(db: Session, params: ListQuery):
    return fetch_page(db, LISTING, params)


def get_active(db: Session, machine_type_id):
    return db.query(MachineType).filter(MachineType.id == machine_type_id, MachineType.status == STATUS_ACTIVE).first()


def code_taken(db: Session, code: str, exclude_id=None) -> bool:
    return exists(db, MachineType, MachineType.code == code, exclude_id=exclude_id)


def retire(db: Session, machine_type: MachineType) -> MachineType:
    machine_type.status = STATUS_DELETED
    db.add(machine_type)
    db.commit()
    return machine_type
