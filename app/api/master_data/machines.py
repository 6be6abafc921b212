from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.api.common import changes_of, iso, live_or_404, page_payload
from app.core.deps import ROLE_ADMIN, require_role
from app.db.session import get_db
from app.models.line import Line
from app.models.machine import Machine
from app.repositories import machine_types as machine_type_repo
from app.repositories import machines as machine_repo
from app.repositories.base import add_row, apply_changes, soft_delete
from app.schemas.master_data import MachineCreate, MachineQuery, MachineUpdate
from app.services.results import storage_errors

router = APIRouter()


def serialize_machine(row: Machine) -> dict:
    line = row.line
    return {
        "id": str(row.id),
        "name": row.name,
        "sequence": row.sequence,
        "lineId": str(row.line_id),
        "lineName": line.name if line else None,
        "plantId": str(line.plant_id) if line else None,
        "plantName": line.plant.name if line and line.plant else None,
        "machineTypeId": str(row.machine_type_id),
        "machineTypeName": row.machine_type.name if row.machine_type else None,
        "machineTypeCode": row.machine_type.code if row.machine_type else None,
        "createdAt": iso(row.created_at),
        "updatedAt": iso(row.updated_at),
    }


def _machine_type_or_404(db: Session, machine_type_id):
    if machine_type_repo.get_active(db, machine_type_id) is None:
        raise HTTPException(status_code=404, detail="Machine type not found")


@router.post("/query")
def query_machines(params: MachineQuery, db: Session = Depends(get_db), admin=Depends(require_role(ROLE_ADMIN))):
    with storage_errors(db, "Failed to fetch machines"):
        result = machine_repo.get_all(db, params)
    return page_payload(result, serialize_machine)


@router.get("/next-sequence")
def next_machine_sequence(line_id: str = Query(alias="lineId"), db: Session = Depends(get_db), admin=Depends(require_role(ROLE_ADMIN))):
    with storage_errors(db, "Failed to compute next sequence"):
        line = live_or_404(db, Line, line_id, "Line")
        sequence = machine_repo.next_sequence(db, line.id)
    return {"success": True, "sequence": sequence}


@router.get("/{id}")
def get_machine(id: str, db: Session = Depends(get_db), admin=Depends(require_role(ROLE_ADMIN))):
    with storage_errors(db, "Failed to fetch machine"):
        row = live_or_404(db, Machine, id, "Machine")
    return {"success": True, "machine": serialize_machine(row)}


@router.post("", status_code=201)
def create_machine(payload: MachineCreate, db: Session = Depends(get_db), admin=Depends(require_role(ROLE_ADMIN))):
    with storage_errors(db, "Failed to create machine"):
        live_or_404(db, Line, payload.line_id, "Line")
        _machine_type_or_404(db, payload.machine_type_id)
        data = payload.model_dump()
        if data["sequence"] is None:
            data["sequence"] = machine_repo.next_sequence(db, payload.line_id)
        row = add_row(db, Machine(**data))
    return {"success": True, "message": "Machine created successfully", "machine": serialize_machine(row)}


@router.patch("/{id}")
def update_machine(id: str, payload: MachineUpdate, db: Session = Depends(get_db), admin=Depends(require_role(ROLE_ADMIN))):
    with storage_errors(db, "Failed to update machine"):
        row = live_or_404(db, Machine, id, "Machine")
        changes = changes_of(payload)
        if "line_id" in changes:
            live_or_404(db, Line, changes["line_id"], "Line")
        if "machine_type_id" in changes:
            _machine_type_or_404(db, changes["machine_type_id"])
        row = apply_changes(db, row, changes)
    return {"success": True, "message": "Machine updated successfully", "machine": serialize_machine(row)}


@router.delete("/{id}")
def delete_machine(id: str, db: Session = Depends(get_db), admin=Depends(require_role(ROLE_ADMIN))):
    with storage_errors(db, "Failed to delete machine"):
        soft_delete(db, live_or_404(db, Machine, id, "Machine"))
    return {"success": True, "message": "Machine deleted successfully"}
