from sqlalchemy.orm import Session, joinedload

from app.models.machine_type import STATUS_ACTIVE, MachineType
from app.models.machine_type_parameter import MachineTypeParameter
from app.models.parameter import Parameter
from app.repositories.base import Listing, exists, fetch_page
from app.schemas.master_data import MachineTypeParameterQuery
from app.services.filtering import ColumnRef

LISTING = Listing(
    model=MachineTypeParameter,
    filter_columns={
        "machineTypeName": ColumnRef("name", ("machine_type",)),
        "machineTypeCode": ColumnRef("code", ("machine_type",)),
        "parameterName": ColumnRef("name", ("parameter",)),
        "unit": ColumnRef("unit", ("parameter",)),
        "opcTagName": ColumnRef("opc_tag_name", ("parameter",)),
        "createdAt": ColumnRef("created_at"),
    },
    default_sort=[(ColumnRef("created_at"), "desc")],
    visibility=[
        MachineTypeParameter.deleted_at.is_(None),
        MachineTypeParameter.machine_type.has(MachineType.status == STATUS_ACTIVE),
        MachineTypeParameter.parameter.has(Parameter.status == STATUS_ACTIVE),
    ],
    options=[joinedload(MachineTypeParameter.machine_type), joinedload(MachineTypeParameter.parameter)],
)


def get_all(db: Session, params: MachineTypeParameterQuery):
    scopes = []
    if params.machine_type_id:
        scopes.append(MachineTypeParameter.machine_type_id == params.machine_type_id)
    if params.parameter_id:
        scopes.append(MachineTypeParameter.parameter_id == params.parameter_id)
    return fetch_page(db, LISTING, params, scopes)


def pair_taken(db: Session, machine_type_id, parameter_id, exclude_id=None) -> bool:
    return exists(
        db,
        MachineTypeParameter,
        MachineTypeParameter.machine_type_id == machine_type_id,
        MachineTypeParameter.parameter_id == parameter_id,
        exclude_id=exclude_id,
    )
