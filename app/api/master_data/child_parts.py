from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.common import changes_of, iso, live_or_404, page_payload
from app.core.deps import ROLE_ADMIN, require_role
from app.db.session import get_db
from app.models.child_part import ChildPart
from app.models.part import Part
from app.repositories import child_parts as child_part_repo
from app.repositories.base import add_row, apply_changes, soft_delete
from app.schemas.master_data import ChildPartCreate, ChildPartQuery, ChildPartUpdate
from app.services.results import storage_errors

router = APIRouter()

DUPLICATE_CHILD_PART = "Child part number already exists for this part"


def serialize_child_part(row: ChildPart) -> dict:
    part = row.part
    return {
        "id": str(row.id),
        "childPartNo": row.child_part_no,
        "childPartName": row.child_part_name,
        "qtyLotSupply": row.qty_lot_supply,
        "partId": str(row.part_id),
        "partNo": part.part_no if part else None,
        "partName": part.name if part else None,
        "lineName": part.line.name if part and part.line else None,
        "createdAt": iso(row.created_at),
        "updatedAt": iso(row.updated_at),
    }


@router.post("/query")
def query_child_parts(params: ChildPartQuery, db: Session = Depends(get_db), admin=Depends(require_role(ROLE_ADMIN))):
    with storage_errors(db, "Failed to fetch child parts"):
        result = child_part_repo.get_all(db, params)
    return page_payload(result, serialize_child_part)


@router.get("/{id}")
def get_child_part(id: str, db: Session = Depends(get_db), admin=Depends(require_role(ROLE_ADMIN))):
    with storage_errors(db, "Failed to fetch child part"):
        row = live_or_404(db, ChildPart, id, "Child part")
    return {"success": True, "childPart": serialize_child_part(row)}


@router.post("", status_code=201)
def create_child_part(payload: ChildPartCreate, db: Session = Depends(get_db), admin=Depends(require_role(ROLE_ADMIN))):
    with storage_errors(db, "Failed to create child part"):
        live_or_404(db, Part, payload.part_id, "Part")
        if child_part_repo.child_part_no_taken(db, payload.child_part_no, payload.part_id):
            raise HTTPException(status_code=409, detail=DUPLICATE_CHILD_PART)
        row = add_row(db, ChildPart(**payload.model_dump()))
    return {"success": True, "message": "Child part created successfully", "childPart": serialize_child_part(row)}


@router.patch("/{id}")
def update_child_part(
    id: str,
    payload: ChildPartUpdate,
    db: Session = Depends(get_db),
    admin=Depends(require_role(ROLE_ADMIN)),
):
    with storage_errors(db, "Failed to update child part"):
        row = live_or_404(db, ChildPart, id, "Child part")
        changes = changes_of(payload, nullable=("qty_lot_supply",))
        if "part_id" in changes:
            live_or_404(db, Part, changes["part_id"], "Part")
        if {"child_part_no", "part_id"} & changes.keys():
            child_part_no = changes.get("child_part_no", row.child_part_no)
            part_id = changes.get("part_id", row.part_id)
            if child_part_repo.child_part_no_taken(db, child_part_no, part_id, exclude_id=row.id):
                raise HTTPException(status_code=409, detail=DUPLICATE_CHILD_PART)
        row = apply_changes(db, row, changes)
    return {"success": True, "message": "Child part updated successfully", "childPart": serialize_child_part(row)}


@router.delete("/{id}")
def delete_child_part(id: str, db: Session = Depends(get_db), admin=Depends(require_role(ROLE_ADMIN))):
    with storage_errors(db, "Failed to delete child part"):
        soft_delete(db, live_or_404(db, ChildPart, id, "Child part"))
    return {"success": True, "message": "Child part deleted successfully"}
