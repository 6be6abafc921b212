from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.common import changes_of, iso, live_or_404, page_payload
from app.core.deps import ROLE_ADMIN, require_role
from app.db.session import get_db
from app.models.line import Line
from app.models.plant import Plant
from app.repositories import plants as plant_repo
from app.repositories.base import add_row, apply_changes, exists, soft_delete
from app.schemas.master_data import PlantCreate, PlantUpdate
from app.schemas.query import ListQuery
from app.services.results import storage_errors

router = APIRouter()


def serialize_plant(row: Plant) -> dict:
    return {
        "id": str(row.id),
        "name": row.name,
        "subplant": row.subplant,
        "isActive": bool(row.is_active),
        "createdAt": iso(row.created_at),
        "updatedAt": iso(row.updated_at),
    }


@router.post("/query")
def query_plants(params: ListQuery, db: Session = Depends(get_db), admin=Depends(require_role(ROLE_ADMIN))):
    with storage_errors(db, "Failed to fetch plants"):
        result = plant_repo.get_all(db, params)
    return page_payload(result, serialize_plant)


@router.get("/{id}")
def get_plant(id: str, db: Session = Depends(get_db), admin=Depends(require_role(ROLE_ADMIN))):
    with storage_errors(db, "Failed to fetch plant"):
        row = live_or_404(db, Plant, id, "Plant")
    return {"success": True, "plant": serialize_plant(row)}


@router.post("", status_code=201)
def create_plant(payload: PlantCreate, db: Session = Depends(get_db), admin=Depends(require_role(ROLE_ADMIN))):
    with storage_errors(db, "Failed to create plant"):
        if plant_repo.name_taken(db, payload.name):
            raise HTTPException(status_code=409, detail="Plant name already exists")
        row = add_row(db, Plant(**payload.model_dump()))
    return {"success": True, "message": "Plant created successfully", "plant": serialize_plant(row)}


@router.patch("/{id}")
def update_plant(id: str, payload: PlantUpdate, db: Session = Depends(get_db), admin=Depends(require_role(ROLE_ADMIN))):
    with storage_errors(db, "Failed to update plant"):
        row = live_or_404(db, Plant, id, "Plant")
        changes = changes_of(payload)
        if "name" in changes and plant_repo.name_taken(db, changes["name"], exclude_id=row.id):
            raise HTTPException(status_code=409, detail="Plant name already exists")
        row = apply_changes(db, row, changes)
    return {"success": True, "message": "Plant updated successfully", "plant": serialize_plant(row)}


@router.post("/{id}/toggle-active")
def toggle_plant(id: str, db: Session = Depends(get_db), admin=Depends(require_role(ROLE_ADMIN))):
    with storage_errors(db, "Failed to update plant"):
        row = live_or_404(db, Plant, id, "Plant")
        row = apply_changes(db, row, {"is_active": not row.is_active})
    state = "activated" if row.is_active else "deactivated"
    return {"success": True, "message": f"Plant {state} successfully", "plant": serialize_plant(row)}


@router.delete("/{id}")
def delete_plant(id: str, db: Session = Depends(get_db), admin=Depends(require_role(ROLE_ADMIN))):
    with storage_errors(db, "Failed to delete plant"):
        row = live_or_404(db, Plant, id, "Plant")
        if exists(db, Line, Line.plant_id == row.id):
            raise HTTPException(status_code=409, detail="Plant still has lines")
        soft_delete(db, row)
    return {"success": True, "message": "Plant deleted successfully"}
