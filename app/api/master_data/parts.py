from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.common import changes_of, iso, live_or_404, page_payload
from app.core.deps import ROLE_ADMIN, require_role
from app.db.session import get_db
from app.models.line import Line
from app.models.part import Part
from app.repositories import parts as part_repo
from app.repositories.base import add_row, apply_changes, soft_delete
from app.schemas.master_data import PartCreate, PartUpdate, ScopedByLineQuery
from app.services.results import storage_errors

router = APIRouter()

DUPLICATE_PART = "Part number already exists on this line"
_NULLABLE = ("sku", "qty_per_lot", "cycle_time_sec")


def serialize_part(row: Part) -> dict:
    line = row.line
    return {
        "id": str(row.id),
        "sku": row.sku,
        "partNo": row.part_no,
        "name": row.name,
        "lineId": str(row.line_id),
        "lineName": line.name if line else None,
        "plantName": line.plant.name if line and line.plant else None,
        "qtyPerLot": row.qty_per_lot,
        "cycleTimeSec": row.cycle_time_sec,
        "createdAt": iso(row.created_at),
        "updatedAt": iso(row.updated_at),
    }


@router.post("/query")
def query_parts(params: ScopedByLineQuery, db: Session = Depends(get_db), admin=Depends(require_role(ROLE_ADMIN))):
    with storage_errors(db, "Failed to fetch parts"):
        result = part_repo.get_all(db, params)
    return page_payload(result, serialize_part)


@router.get("/{id}")
def get_part(id: str, db: Session = Depends(get_db), admin=Depends(require_role(ROLE_ADMIN))):
    with storage_errors(db, "Failed to fetch part"):
        row = live_or_404(db, Part, id, "Part")
    return {"success": True, "part": serialize_part(row)}


@router.post("", status_code=201)
def create_part(payload: PartCreate, db: Session = Depends(get_db), admin=Depends(require_role(ROLE_ADMIN))):
    with storage_errors(db, "Failed to create part"):
        live_or_404(db, Line, payload.line_id, "Line")
        if part_repo.part_no_taken(db, payload.part_no, payload.line_id):
            raise HTTPException(status_code=409, detail=DUPLICATE_PART)
        row = add_row(db, Part(**payload.model_dump()))
    return {"success": True, "message": "Part created successfully", "part": serialize_part(row)}


@router.patch("/{id}")
def update_part(id: str, payload: PartUpdate, db: Session = Depends(get_db), admin=Depends(require_role(ROLE_ADMIN))):
    with storage_errors(db, "Failed to update part"):
        row = live_or_404(db, Part, id, "Part")
        changes = changes_of(payload, nullable=_NULLABLE)
        if "line_id" in changes:
            live_or_404(db, Line, changes["line_id"], "Line")
        if {"part_no", "line_id"} & changes.keys():
            part_no = changes.get("part_no", row.part_no)
            line_id = changes.get("line_id", row.line_id)
            if part_repo.part_no_taken(db, part_no, line_id, exclude_id=row.id):
                raise HTTPException(status_code=409, detail=DUPLICATE_PART)
        row = apply_changes(db, row, changes)
    return {"success": True, "message": "Part updated successfully", "part": serialize_part(row)}


@router.delete("/{id}")
def delete_part(id: str, db: Session = Depends(get_db), admin=Depends(require_role(ROLE_ADMIN))):
    with storage_errors(db, "Failed to delete part"):
        soft_delete(db, live_or_404(db, Part, id, "Part"))
    return {"success": True, "message": "Part deleted successfully"}
