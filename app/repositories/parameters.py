from sqlalchemy.orm import Session

from app.models.machine_type import STATUS_ACTIVE, STATUS_DELETED
from app.models.parameter import Parameter
from app.repositories.base import Listing, fetch_page
from app.schemas.query import ListQuery
from app.services.filtering import ColumnRef

LISTING = Listing(
    model=Parameter,
    filter_columns={
        "name": ColumnRef("name"),
        "unit": ColumnRef("unit"),
        "opcTagName": ColumnRef("opc_tag_name"),
        "createdAt": ColumnRef("created_at"),
        "updatedAt": ColumnRef("updated_at"),
    },
    default_sort=[(ColumnRef("created_at"), "desc")],
    visibility=[Parameter.status == STATUS_ACTIVE],
)


def get_all(db: Session, params: ListQuery):
    return fetch_page(db, LISTING, params)


def get_active(db: Session, parameter_id):
    return db.query(Parameter).filter(Parameter.id == parameter_id, Parameter.status == STATUS_ACTIVE).first()


def retire(db: Session, parameter: Parameter) -> Parameter:
    parameter.status = STATUS_DELETED
    db.add(parameter)
    db.commit()
    return parameter
