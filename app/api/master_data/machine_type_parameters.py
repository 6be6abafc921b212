from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.common import changes_of, iso, live_or_404, page_payload
from app.core.deps import ROLE_ADMIN, require_role
from app.db.session import get_db
from app.models.machine_type_parameter import MachineTypeParameter
from app.repositories import machine_type_parameters as link_repo
from app.repositories import machine_types as machine_type_repo
from app.repositories import parameters as parameter_repo
from app.repositories.base import add_row, apply_changes, soft_delete
from app.schemas.master_data import (
    MachineTypeParameterCreate,
    MachineTypeParameterQuery,
    MachineTypeParameterUpdate,
)
from app.services.results import storage_errors

router = APIRouter()

DUPLICATE_LINK = "This parameter is already assigned to the machine type"


def serialize_link(row: MachineTypeParameter) -> dict:
    return {
        "id": str(row.id),
        "machineTypeId": str(row.machine_type_id),
        "machineTypeName": row.machine_type.name if row.machine_type else None,
        "machineTypeCode": row.machine_type.code if row.machine_type else None,
        "parameterId": str(row.parameter_id),
        "parameterName": row.parameter.name if row.parameter else None,
        "unit": row.parameter.unit if row.parameter else None,
        "opcTagName": row.parameter.opc_tag_name if row.parameter else None,
        "createdAt": iso(row.created_at),
        "updatedAt": iso(row.updated_at),
    }


def _check_refs(db: Session, machine_type_id, parameter_id) -> None:
    if machine_type_id is not None and machine_type_repo.get_active(db, machine_type_id) is None:
        raise HTTPException(status_code=404, detail="Machine type not found")
    if parameter_id is not None and parameter_repo.get_active(db, parameter_id) is None:
        raise HTTPException(status_code=404, detail="Parameter not found")


@router.post("/query")
def query_links(params: MachineTypeParameterQuery, db: Session = Depends(get_db), admin=Depends(require_role(ROLE_ADMIN))):
    with storage_errors(db, "Failed to fetch machine type parameters"):
        result = link_repo.get_all(db, params)
    return page_payload(result, serialize_link)


@router.get("/{id}")
def get_link(id: str, db: Session = Depends(get_db), admin=Depends(require_role(ROLE_ADMIN))):
    with storage_errors(db, "Failed to fetch machine type parameter"):
        row = live_or_404(db, MachineTypeParameter, id, "Machine type parameter")
    return {"success": True, "machineTypeParameter": serialize_link(row)}


@router.post("", status_code=201)
def create_link(
    payload: MachineTypeParameterCreate,
    db: Session = Depends(get_db),
    admin=Depends(require_role(ROLE_ADMIN)),
):
    with storage_errors(db, "Failed to create machine type parameter"):
        _check_refs(db, payload.machine_type_id, payload.parameter_id)
        if link_repo.pair_taken(db, payload.machine_type_id, payload.parameter_id):
            raise HTTPException(status_code=409, detail=DUPLICATE_LINK)
        row = add_row(db, MachineTypeParameter(**payload.model_dump()))
    return {
        "success": True,
        "message": "Machine type parameter created successfully",
        "machineTypeParameter": serialize_link(row),
    }


@router.patch("/{id}")
def update_link(
    id: str,
    payload: MachineTypeParameterUpdate,
    db: Session = Depends(get_db),
    admin=Depends(require_role(ROLE_ADMIN)),
):
    with storage_errors(db, "Failed to update machine type parameter"):
        row = live_or_404(db, MachineTypeParameter, id, "Machine type parameter")
        changes = changes_of(payload)
        _check_refs(db, changes.get("machine_type_id"), changes.get("parameter_id"))
        machine_type_id = changes.get("machine_type_id", row.machine_type_id)
        parameter_id = changes.get("parameter_id", row.parameter_id)
        if link_repo.pair_taken(db, machine_type_id, parameter_id, exclude_id=row.id):
            raise HTTPException(status_code=409, detail=DUPLICATE_LINK)
        row = apply_changes(db, row, changes)
    return {
        "success": True,
        "message": "Machine type parameter updated successfully",
        "machineTypeParameter": serialize_link(row),
    }


@router.delete("/{id}")
def delete_link(id: str, db: Session = Depends(get_db), admin=Depends(require_role(ROLE_ADMIN))):
    with storage_errors(db, "Failed to delete machine type parameter"):
        soft_delete(db, live_or_404(db, MachineTypeParameter, id, "Machine type parameter"))
    return {"success": True, "message": "Machine type parameter deleted successfully"}
