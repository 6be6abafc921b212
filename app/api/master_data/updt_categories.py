from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.common import changes_of, iso, live_or_404, page_payload
from app.core.deps import ROLE_ADMIN, require_role
from app.db.session import get_db
from app.models.line import Line
from app.models.updt_category import UpdtCategory
from app.repositories import updt_categories as updt_repo
from app.repositories.base import add_row, apply_changes, soft_delete
from app.schemas.master_data import UpdtCategoryCreate, UpdtCategoryQuery, UpdtCategoryUpdate
from app.services.results import storage_errors

router = APIRouter()

DUPLICATE_UPDT = "UPDT category already exists for this line and department"


def serialize_updt_category(row: UpdtCategory) -> dict:
    return {
        "id": str(row.id),
        "department": row.department,
        "name": row.name,
        "lineId": str(row.line_id),
        "lineName": row.line.name if row.line else None,
        "createdAt": iso(row.created_at),
        "updatedAt": iso(row.updated_at),
    }


@router.post("/query")
def query_updt_categories(params: UpdtCategoryQuery, db: Session = Depends(get_db), admin=Depends(require_role(ROLE_ADMIN))):
    with storage_errors(db, "Failed to fetch UPDT categories"):
        result = updt_repo.get_all(db, params)
    return page_payload(result, serialize_updt_category)


@router.get("/{id}")
def get_updt_category(id: str, db: Session = Depends(get_db), admin=Depends(require_role(ROLE_ADMIN))):
    with storage_errors(db, "Failed to fetch UPDT category"):
        row = live_or_404(db, UpdtCategory, id, "UPDT category")
    return {"success": True, "updtCategory": serialize_updt_category(row)}


@router.post("", status_code=201)
def create_updt_category(
    payload: UpdtCategoryCreate,
    db: Session = Depends(get_db),
    admin=Depends(require_role(ROLE_ADMIN)),
):
    with storage_errors(db, "Failed to create UPDT category"):
        live_or_404(db, Line, payload.line_id, "Line")
        if updt_repo.name_taken(db, payload.line_id, payload.department, payload.name):
            raise HTTPException(status_code=409, detail=DUPLICATE_UPDT)
        row = add_row(db, UpdtCategory(**payload.model_dump()))
    return {
        "success": True,
        "message": "UPDT category created successfully",
        "updtCategory": serialize_updt_category(row),
    }


@router.patch("/{id}")
def update_updt_category(
    id: str,
    payload: UpdtCategoryUpdate,
    db: Session = Depends(get_db),
    admin=Depends(require_role(ROLE_ADMIN)),
):
    with storage_errors(db, "Failed to update UPDT category"):
        row = live_or_404(db, UpdtCategory, id, "UPDT category")
        changes = changes_of(payload)
        if "line_id" in changes:
            live_or_404(db, Line, changes["line_id"], "Line")
        line_id = changes.get("line_id", row.line_id)
        department = changes.get("department", row.department)
        name = changes.get("name", row.name)
        if updt_repo.name_taken(db, line_id, department, name, exclude_id=row.id):
            raise HTTPException(status_code=409, detail=DUPLICATE_UPDT)
        row = apply_changes(db, row, changes)
    return {
        "success": True,
        "message": "UPDT category updated successfully",
        "updtCategory": serialize_updt_category(row),
    }


@router.delete("/{id}")
def delete_updt_category(id: str, db: Session = Depends(get_db), admin=Depends(require_role(ROLE_ADMIN))):
    with storage_errors(db, "Failed to delete UPDT category"):
        soft_delete(db, live_or_404(db, UpdtCategory, id, "UPDT category"))
    return {"success": True, "message": "UPDT category deleted successfully"}
