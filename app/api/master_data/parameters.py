from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.common import changes_of, iso, page_payload, uuid_or_400
from app.core.deps import ROLE_ADMIN, require_role
from app.db.session import get_db
from app.models.parameter import Parameter
from app.repositories import parameters as parameter_repo
from app.repositories.base import add_row, apply_changes
from app.schemas.master_data import ParameterCreate, ParameterUpdate
from app.schemas.query import ListQuery
from app.services.results import storage_errors

router = APIRouter()


def serialize_parameter(row: Parameter) -> dict:
    return {
        "id": str(row.id),
        "name": row.name,
        "unit": row.unit,
        "opcTagName": row.opc_tag_name,
        "status": row.status,
        "createdAt": iso(row.created_at),
        "updatedAt": iso(row.updated_at),
    }


def _active_or_404(db: Session, id: str) -> Parameter:
    row = parameter_repo.get_active(db, uuid_or_400(id))
    if row is None:
        raise HTTPException(status_code=404, detail="Parameter not found")
    return row


@router.post("/query")
def query_parameters(params: ListQuery, db: Session = Depends(get_db), admin=Depends(require_role(ROLE_ADMIN))):
    with storage_errors(db, "Failed to fetch parameters"):
        result = parameter_repo.get_all(db, params)
    return page_payload(result, serialize_parameter)


@router.get("/{id}")
def get_parameter(id: str, db: Session = Depends(get_db), admin=Depends(require_role(ROLE_ADMIN))):
    with storage_errors(db, "Failed to fetch parameter"):
        row = _active_or_404(db, id)
    return {"success": True, "parameter": serialize_parameter(row)}


@router.post("", status_code=201)
def create_parameter(payload: ParameterCreate, db: Session = Depends(get_db), admin=Depends(require_role(ROLE_ADMIN))):
    with storage_errors(db, "Failed to create parameter"):
        row = add_row(db, Parameter(**payload.model_dump()))
    return {"success": True, "message": "Parameter created successfully", "parameter": serialize_parameter(row)}


@router.patch("/{id}")
def update_parameter(
    id: str,
    payload: ParameterUpdate,
    db: Session = Depends(get_db),
    admin=Depends(require_role(ROLE_ADMIN)),
):
    with storage_errors(db, "Failed to update parameter"):
        row = apply_changes(db, _active_or_404(db, id), changes_of(payload))
    return {"success": True, "message": "Parameter updated successfully", "parameter": serialize_parameter(row)}


@router.delete("/{id}")
def delete_parameter(id: str, db: Session = Depends(get_db), admin=Depends(require_role(ROLE_ADMIN))):
    with storage_errors(db, "Failed to delete parameter"):
        parameter_repo.retire(db, _active_or_404(db, id))
    return {"success": True, "message": "Parameter deleted successfully"}
