from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.common import changes_of, iso, live_or_404, page_payload
from app.core.deps import ROLE_ADMIN, require_role
from app.db.session import get_db
from app.models.line import Line
from app.models.user import User
from app.models.user_per_line import UserPerLine
from app.repositories import user_per_lines as assignment_repo
from app.repositories.base import add_row, apply_changes, soft_delete
from app.schemas.master_data import ScopedByLineQuery, UserPerLineCreate, UserPerLineUpdate
from app.services.results import storage_errors

router = APIRouter()

DUPLICATE_ASSIGNMENT = "User is already assigned to this line"
DUPLICATE_UID = "Card UID is already in use"


def serialize_assignment(row: UserPerLine) -> dict:
    user = row.user
    return {
        "id": str(row.id),
        "userId": str(row.user_id),
        "userName": user.name if user else None,
        "npk": user.npk if user else None,
        "role": user.role if user else None,
        "userUid": row.user_uid,
        "lineId": str(row.line_id),
        "lineName": row.line.name if row.line else None,
        "isActive": bool(row.is_active),
        "createdAt": iso(row.created_at),
        "updatedAt": iso(row.updated_at),
    }


def _check_conflicts(db: Session, user_id, line_id, user_uid, exclude_id=None) -> None:
    if assignment_repo.assignment_taken(db, user_id, line_id, exclude_id=exclude_id):
        raise HTTPException(status_code=409, detail=DUPLICATE_ASSIGNMENT)
    if assignment_repo.uid_taken(db, user_uid, exclude_id=exclude_id):
        raise HTTPException(status_code=409, detail=DUPLICATE_UID)


@router.post("/query")
def query_assignments(params: ScopedByLineQuery, db: Session = Depends(get_db), admin=Depends(require_role(ROLE_ADMIN))):
    with storage_errors(db, "Failed to fetch user line assignments"):
        result = assignment_repo.get_all(db, params)
    return page_payload(result, serialize_assignment)


@router.get("/{id}")
def get_assignment(id: str, db: Session = Depends(get_db), admin=Depends(require_role(ROLE_ADMIN))):
    with storage_errors(db, "Failed to fetch user line assignment"):
        row = live_or_404(db, UserPerLine, id, "User line assignment")
    return {"success": True, "userPerLine": serialize_assignment(row)}


@router.post("", status_code=201)
def create_assignment(payload: UserPerLineCreate, db: Session = Depends(get_db), admin=Depends(require_role(ROLE_ADMIN))):
    with storage_errors(db, "Failed to create user line assignment"):
        live_or_404(db, User, payload.user_id, "User")
        live_or_404(db, Line, payload.line_id, "Line")
        user_uid = payload.user_uid.strip()
        _check_conflicts(db, payload.user_id, payload.line_id, user_uid)
        row = add_row(
            db,
            UserPerLine(user_id=payload.user_id, line_id=payload.line_id, user_uid=user_uid, is_active=payload.is_active),
        )
    return {"success": True, "message": "User assigned to line successfully", "userPerLine": serialize_assignment(row)}


@router.patch("/{id}")
def update_assignment(
    id: str,
    payload: UserPerLineUpdate,
    db: Session = Depends(get_db),
    admin=Depends(require_role(ROLE_ADMIN)),
):
    with storage_errors(db, "Failed to update user line assignment"):
        row = live_or_404(db, UserPerLine, id, "User line assignment")
        changes = changes_of(payload)
        if "user_id" in changes:
            live_or_404(db, User, changes["user_id"], "User")
        if "line_id" in changes:
            live_or_404(db, Line, changes["line_id"], "Line")
        if "user_uid" in changes:
            changes["user_uid"] = changes["user_uid"].strip()
        if {"user_id", "line_id", "user_uid"} & changes.keys():
            _check_conflicts(
                db,
                changes.get("user_id", row.user_id),
                changes.get("line_id", row.line_id),
                changes.get("user_uid", row.user_uid),
                exclude_id=row.id,
            )
        row = apply_changes(db, row, changes)
    return {"success": True, "message": "User line assignment updated successfully", "userPerLine": serialize_assignment(row)}


@router.post("/{id}/toggle-active")
def toggle_assignment(id: str, db: Session = Depends(get_db), admin=Depends(require_role(ROLE_ADMIN))):
    with storage_errors(db, "Failed to update user line assignment"):
        row = live_or_404(db, UserPerLine, id, "User line assignment")
        row = apply_changes(db, row, {"is_active": not row.is_active})
    state = "activated" if row.is_active else "deactivated"
    return {"success": True, "message": f"User line assignment {state} successfully", "userPerLine": serialize_assignment(row)}


@router.delete("/{id}")
def delete_assignment(id: str, db: Session = Depends(get_db), admin=Depends(require_role(ROLE_ADMIN))):
    with storage_errors(db, "Failed to delete user line assignment"):
        soft_delete(db, live_or_404(db, UserPerLine, id, "User line assignment"))
    return {"success": True, "message": "User line assignment deleted successfully"}
