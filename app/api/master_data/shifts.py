from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.common import changes_of, iso, live_or_404, page_payload
from app.core.deps import ROLE_ADMIN, require_role
from app.db.session import get_db
from app.models.line import Line
from app.models.shift import Shift
from app.repositories import shifts as shift_repo
from app.repositories.base import add_row, apply_changes, soft_delete
from app.schemas.master_data import ScopedByLineQuery, ShiftCreate, ShiftUpdate
from app.services.results import storage_errors
from app.services.shift_schedule import format_hhmm, shift_loading_time

router = APIRouter()

DUPLICATE_SHIFT = "Shift number already exists on this line"
_BREAK_FIELDS = ("break1_start", "break1_end", "break2_start", "break2_end", "break3_start", "break3_end")


def serialize_shift(row: Shift) -> dict:
    return {
        "id": str(row.id),
        "lineId": str(row.line_id),
        "lineName": row.line.name if row.line else None,
        "number": row.number,
        "workStart": format_hhmm(row.work_start),
        "workEnd": format_hhmm(row.work_end),
        "break1Start": format_hhmm(row.break1_start),
        "break1End": format_hhmm(row.break1_end),
        "break2Start": format_hhmm(row.break2_start),
        "break2End": format_hhmm(row.break2_end),
        "break3Start": format_hhmm(row.break3_start),
        "break3End": format_hhmm(row.break3_end),
        "loadingTimeInSec": row.loading_time_in_sec,
        "createdAt": iso(row.created_at),
        "updatedAt": iso(row.updated_at),
    }


@router.post("/query")
def query_shifts(params: ScopedByLineQuery, db: Session = Depends(get_db), admin=Depends(require_role(ROLE_ADMIN))):
    with storage_errors(db, "Failed to fetch shifts"):
        result = shift_repo.get_all(db, params)
    return page_payload(result, serialize_shift)


@router.get("/{id}")
def get_shift(id: str, db: Session = Depends(get_db), admin=Depends(require_role(ROLE_ADMIN))):
    with storage_errors(db, "Failed to fetch shift"):
        row = live_or_404(db, Shift, id, "Shift")
    return {"success": True, "shift": serialize_shift(row)}


@router.post("", status_code=201)
def create_shift(payload: ShiftCreate, db: Session = Depends(get_db), admin=Depends(require_role(ROLE_ADMIN))):
    with storage_errors(db, "Failed to create shift"):
        live_or_404(db, Line, payload.line_id, "Line")
        if shift_repo.number_taken(db, payload.line_id, payload.number):
            raise HTTPException(status_code=409, detail=DUPLICATE_SHIFT)
        row = Shift(**payload.model_dump())
        row.loading_time_in_sec = shift_loading_time(row)
        row = add_row(db, row)
    return {"success": True, "message": "Shift created successfully", "shift": serialize_shift(row)}


@router.patch("/{id}")
def update_shift(id: str, payload: ShiftUpdate, db: Session = Depends(get_db), admin=Depends(require_role(ROLE_ADMIN))):
    with storage_errors(db, "Failed to update shift"):
        row = live_or_404(db, Shift, id, "Shift")
        changes = changes_of(payload, nullable=_BREAK_FIELDS)
        if "line_id" in changes:
            live_or_404(db, Line, changes["line_id"], "Line")
        if {"line_id", "number"} & changes.keys():
            line_id = changes.get("line_id", row.line_id)
            number = changes.get("number", row.number)
            if shift_repo.number_taken(db, line_id, number, exclude_id=row.id):
                raise HTTPException(status_code=409, detail=DUPLICATE_SHIFT)
        for key, value in changes.items():
            setattr(row, key, value)
        row = apply_changes(db, row, {"loading_time_in_sec": shift_loading_time(row)})
    return {"success": True, "message": "Shift updated successfully", "shift": serialize_shift(row)}


@router.delete("/{id}")
def delete_shift(id: str, db: Session = Depends(get_db), admin=Depends(require_role(ROLE_ADMIN))):
    with storage_errors(db, "Failed to delete shift"):
        soft_delete(db, live_or_404(db, Shift, id, "Shift"))
    return {"success": True, "message": "Shift deleted successfully"}
