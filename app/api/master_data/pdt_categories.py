from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.common import changes_of, iso, live_or_404, page_payload
from app.core.deps import ROLE_ADMIN, require_role
from app.db.session import get_db
from app.models.pdt_category import PdtCategory
from app.repositories import pdt_categories as pdt_repo
from app.repositories.base import add_row, apply_changes, soft_delete
from app.schemas.master_data import PdtCategoryCreate, PdtCategoryUpdate
from app.schemas.query import ListQuery
from app.services.results import storage_errors

router = APIRouter()


def serialize_pdt_category(row: PdtCategory) -> dict:
    return {
        "id": str(row.id),
        "name": row.name,
        "defaultDurationMin": row.default_duration_min,
        "createdAt": iso(row.created_at),
        "updatedAt": iso(row.updated_at),
    }


@router.post("/query")
def query_pdt_categories(params: ListQuery, db: Session = Depends(get_db), admin=Depends(require_role(ROLE_ADMIN))):
    with storage_errors(db, "Failed to fetch PDT categories"):
        result = pdt_repo.get_all(db, params)
    return page_payload(result, serialize_pdt_category)


@router.get("/{id}")
def get_pdt_category(id: str, db: Session = Depends(get_db), admin=Depends(require_role(ROLE_ADMIN))):
    with storage_errors(db, "Failed to fetch PDT category"):
        row = live_or_404(db, PdtCategory, id, "PDT category")
    return {"success": True, "pdtCategory": serialize_pdt_category(row)}


@router.post("", status_code=201)
def create_pdt_category(payload: PdtCategoryCreate, db: Session = Depends(get_db), admin=Depends(require_role(ROLE_ADMIN))):
    with storage_errors(db, "Failed to create PDT category"):
        if pdt_repo.name_taken(db, payload.name):
            raise HTTPException(status_code=409, detail="PDT category name already exists")
        row = add_row(db, PdtCategory(**payload.model_dump()))
    return {"success": True, "message": "PDT category created successfully", "pdtCategory": serialize_pdt_category(row)}


@router.patch("/{id}")
def update_pdt_category(
    id: str,
    payload: PdtCategoryUpdate,
    db: Session = Depends(get_db),
    admin=Depends(require_role(ROLE_ADMIN)),
):
    with storage_errors(db, "Failed to update PDT category"):
        row = live_or_404(db, PdtCategory, id, "PDT category")
        changes = changes_of(payload)
        if "name" in changes and pdt_repo.name_taken(db, changes["name"], exclude_id=row.id):
            raise HTTPException(status_code=409, detail="PDT category name already exists")
        row = apply_changes(db, row, changes)
    return {"success": True, "message": "PDT category updated successfully", "pdtCategory": serialize_pdt_category(row)}


@router.delete("/{id}")
def delete_pdt_category(id: str, db: Session = Depends(get_db), admin=Depends(require_role(ROLE_ADMIN))):
    with storage_errors(db, "Failed to delete PDT category"):
        soft_delete(db, live_or_404(db, PdtCategory, id, "PDT category"))
    return {"success": True, "message": "PDT category deleted successfully"}
