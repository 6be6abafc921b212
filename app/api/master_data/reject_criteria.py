from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.common import changes_of, iso, live_or_404, page_payload
from app.core.deps import ROLE_ADMIN, require_role
from app.db.session import get_db
from app.models.line import Line
from app.models.reject_criteria import RejectCriteria
from app.repositories import reject_criteria as criteria_repo
from app.repositories.base import add_row, apply_changes, soft_delete
from app.schemas.master_data import RejectCriteriaCreate, RejectCriteriaQuery, RejectCriteriaUpdate
from app.services.results import storage_errors

router = APIRouter()

DUPLICATE_CRITERIA = "Reject criteria already exists for this line and category"


def serialize_reject_criteria(row: RejectCriteria) -> dict:
    return {
        "id": str(row.id),
        "category": row.category,
        "name": row.name,
        "lineId": str(row.line_id),
        "lineName": row.line.name if row.line else None,
        "createdAt": iso(row.created_at),
        "updatedAt": iso(row.updated_at),
    }


@router.post("/query")
def query_reject_criteria(params: RejectCriteriaQuery, db: Session = Depends(get_db), admin=Depends(require_role(ROLE_ADMIN))):
    with storage_errors(db, "Failed to fetch reject criteria"):
        result = criteria_repo.get_all(db, params)
    return page_payload(result, serialize_reject_criteria)


@router.get("/{id}")
def get_reject_criteria(id: str, db: Session = Depends(get_db), admin=Depends(require_role(ROLE_ADMIN))):
    with storage_errors(db, "Failed to fetch reject criteria"):
        row = live_or_404(db, RejectCriteria, id, "Reject criteria")
    return {"success": True, "rejectCriteria": serialize_reject_criteria(row)}


@router.post("", status_code=201)
def create_reject_criteria(
    payload: RejectCriteriaCreate,
    db: Session = Depends(get_db),
    admin=Depends(require_role(ROLE_ADMIN)),
):
    with storage_errors(db, "Failed to create reject criteria"):
        live_or_404(db, Line, payload.line_id, "Line")
        if criteria_repo.name_taken(db, payload.line_id, payload.category, payload.name):
            raise HTTPException(status_code=409, detail=DUPLICATE_CRITERIA)
        row = add_row(db, RejectCriteria(**payload.model_dump()))
    return {
        "success": True,
        "message": "Reject criteria created successfully",
        "rejectCriteria": serialize_reject_criteria(row),
    }


@router.patch("/{id}")
def update_reject_criteria(
    id: str,
    payload: RejectCriteriaUpdate,
    db: Session = Depends(get_db),
    admin=Depends(require_role(ROLE_ADMIN)),
):
    with storage_errors(db, "Failed to update reject criteria"):
        row = live_or_404(db, RejectCriteria, id, "Reject criteria")
        changes = changes_of(payload)
        if "line_id" in changes:
            live_or_404(db, Line, changes["line_id"], "Line")
        line_id = changes.get("line_id", row.line_id)
        category = changes.get("category", row.category)
        name = changes.get("name", row.name)
        if criteria_repo.name_taken(db, line_id, category, name, exclude_id=row.id):
            raise HTTPException(status_code=409, detail=DUPLICATE_CRITERIA)
        row = apply_changes(db, row, changes)
    return {
        "success": True,
        "message": "Reject criteria updated successfully",
        "rejectCriteria": serialize_reject_criteria(row),
    }


@router.delete("/{id}")
def delete_reject_criteria(id: str, db: Session = Depends(get_db), admin=Depends(require_role(ROLE_ADMIN))):
    with storage_errors(db, "Failed to delete reject criteria"):
        soft_delete(db, live_or_404(db, RejectCriteria, id, "Reject criteria"))
    return {"success": True, "message": "Reject criteria deleted successfully"}
