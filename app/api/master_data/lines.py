from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.common import changes_of, iso, live_or_404, page_payload
from app.core.deps import ROLE_ADMIN, require_role
from app.db.session import get_db
from app.models.line import Line
from app.models.plant import Plant
from app.repositories import lines as line_repo
from app.repositories.base import add_row, apply_changes, soft_delete
from app.schemas.master_data import LineCreate, LineQuery, LineUpdate
from app.services.results import storage_errors

router = APIRouter()


def serialize_line(row: Line) -> dict:
    return {
        "id": str(row.id),
        "name": row.name,
        "plantId": str(row.plant_id),
        "plantName": row.plant.name if row.plant else None,
        "subplant": row.plant.subplant if row.plant else None,
        "isActive": bool(row.is_active),
        "createdAt": iso(row.created_at),
        "updatedAt": iso(row.updated_at),
    }


@router.post("/query")
def query_lines(params: LineQuery, db: Session = Depends(get_db), admin=Depends(require_role(ROLE_ADMIN))):
    with storage_errors(db, "Failed to fetch lines"):
        result = line_repo.get_all(db, params)
    return page_payload(result, serialize_line)


@router.get("/{id}")
def get_line(id: str, db: Session = Depends(get_db), admin=Depends(require_role(ROLE_ADMIN))):
    with storage_errors(db, "Failed to fetch line"):
        row = live_or_404(db, Line, id, "Line")
    return {"success": True, "line": serialize_line(row)}


@router.post("", status_code=201)
def create_line(payload: LineCreate, db: Session = Depends(get_db), admin=Depends(require_role(ROLE_ADMIN))):
    with storage_errors(db, "Failed to create line"):
        live_or_404(db, Plant, payload.plant_id, "Plant")
        if line_repo.name_taken(db, payload.name):
            raise HTTPException(status_code=409, detail="Line name already exists")
        row = add_row(db, Line(**payload.model_dump()))
    return {"success": True, "message": "Line created successfully", "line": serialize_line(row)}


@router.patch("/{id}")
def update_line(id: str, payload: LineUpdate, db: Session = Depends(get_db), admin=Depends(require_role(ROLE_ADMIN))):
    with storage_errors(db, "Failed to update line"):
        row = live_or_404(db, Line, id, "Line")
        changes = changes_of(payload)
        if "plant_id" in changes:
            live_or_404(db, Plant, changes["plant_id"], "Plant")
        if "name" in changes and line_repo.name_taken(db, changes["name"], exclude_id=row.id):
            raise HTTPException(status_code=409, detail="Line name already exists")
        row = apply_changes(db, row, changes)
    return {"success": True, "message": "Line updated successfully", "line": serialize_line(row)}


@router.post("/{id}/toggle-active")
def toggle_line(id: str, db: Session = Depends(get_db), admin=Depends(require_role(ROLE_ADMIN))):
    with storage_errors(db, "Failed to update line"):
        row = live_or_404(db, Line, id, "Line")
        row = apply_changes(db, row, {"is_active": not row.is_active})
    state = "activated" if row.is_active else "deactivated"
    return {"success": True, "message": f"Line {state} successfully", "line": serialize_line(row)}


@router.delete("/{id}")
def delete_line(id: str, db: Session = Depends(get_db), admin=Depends(require_role(ROLE_ADMIN))):
    with storage_errors(db, "Failed to delete line"):
        row = live_or_404(db, Line, id, "Line")
        if line_repo.has_live_dependents(db, row.id):
            raise HTTPException(status_code=409, detail="Line still has machines or parts")
        soft_delete(db, row)
    return {"success": True, "message": "Line deleted successfully"}
