from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.common import changes_of, iso, page_payload, uuid_or_400
from app.core.deps import ROLE_ADMIN, require_role
from app.db.session import get_db
from app.models.machine_type import MachineType
from app.repositories import machine_types as machine_type_repo
from app.repositories.base import add_row, apply_changes
from app.schemas.master_data import MachineTypeCreate, MachineTypeUpdate
from app.schemas.query import ListQuery
from app.services.results import storage_errors

router = APIRouter()


def serialize_machine_type(row: MachineType) -> dict:
    return {
        "id": str(row.id),
        "name": row.name,
        "code": row.code,
        "status": row.status,
        "createdAt": iso(row.created_at),
        "updatedAt": iso(row.updated_at),
    }


def _active_or_404(db: Session, id: str) -> MachineType:
    row = machine_type_repo.get_active(db, uuid_or_400(id))
    if row is None:
        raise HTTPException(status_code=404, detail="Machine type not found")
    return row


@router.post("/query")
def query_machine_types(params: ListQuery, db: Session = Depends(get_db), admin=Depends(require_role(ROLE_ADMIN))):
    with storage_errors(db, "Failed to fetch machine types"):
        result = machine_type_repo.get_all(db, params)
    return page_payload(result, serialize_machine_type)


@router.get("/{id}")
def get_machine_type(id: str, db: Session = Depends(get_db), admin=Depends(require_role(ROLE_ADMIN))):
    with storage_errors(db, "Failed to fetch machine type"):
        row = _active_or_404(db, id)
    return {"success": True, "machineType": serialize_machine_type(row)}


@router.post("", status_code=201)
def create_machine_type(payload: MachineTypeCreate, db: Session = Depends(get_db), admin=Depends(require_role(ROLE_ADMIN))):
    with storage_errors(db, "Failed to create machine type"):
        if machine_type_repo.code_taken(db, payload.code):
            raise HTTPException(status_code=409, detail="Machine type code already exists")
        row = add_row(db, MachineType(**payload.model_dump()))
    return {"success": True, "message": "Machine type created successfully", "machineType": serialize_machine_type(row)}


@router.patch("/{id}")
def update_machine_type(
    id: str,
    payload: MachineTypeUpdate,
    db: Session = Depends(get_db),
    admin=Depends(require_role(ROLE_ADMIN)),
):
    with storage_errors(db, "Failed to update machine type"):
        row = _active_or_404(db, id)
        changes = changes_of(payload)
        if "code" in changes and machine_type_repo.code_taken(db, changes["code"], exclude_id=row.id):
            raise HTTPException(status_code=409, detail="Machine type code already exists")
        row = apply_changes(db, row, changes)
    return {"success": True, "message": "Machine type updated successfully", "machineType": serialize_machine_type(row)}


@router.delete("/{id}")
def delete_machine_type(id: str, db: Session = Depends(get_db), admin=Depends(require_role(ROLE_ADMIN))):
    with storage_errors(db, "Failed to delete machine type"):
        machine_type_repo.retire(db, _active_or_404(db, id))
    return {"success": True, "message": "Machine type deleted successfully"}
