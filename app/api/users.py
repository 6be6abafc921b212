from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.common import actor_uuid, changes_of, iso, live_or_404, page_payload
from app.core.deps import ROLE_ADMIN, require_role
from app.core.security import hash_password
from app.db.session import get_db
from app.models.user import User
from app.repositories import users as user_repo
from app.repositories.base import apply_changes, soft_delete
from app.schemas.master_data import UserCreate, UserQuery, UserUpdate
from app.services.notifications import notify_user_created, notify_user_status_changed
from app.services.results import storage_errors

router = APIRouter()

DUPLICATE_NPK = "NPK already registered"


def serialize_user(row: User) -> dict:
    return {
        "id": str(row.id),
        "name": row.name,
        "npk": row.npk,
        "role": row.role,
        "isActive": bool(row.is_active),
        "lastLoginAt": iso(row.last_login_at),
        "createdAt": iso(row.created_at),
        "updatedAt": iso(row.updated_at),
    }


@router.post("/query")
def query_users(params: UserQuery, db: Session = Depends(get_db), admin=Depends(require_role(ROLE_ADMIN))):
    with storage_errors(db, "Failed to fetch users"):
        result = user_repo.get_all(db, params)
    return page_payload(result, serialize_user)


@router.get("/{id}")
def get_user(id: str, db: Session = Depends(get_db), admin=Depends(require_role(ROLE_ADMIN))):
    with storage_errors(db, "Failed to fetch user"):
        row = live_or_404(db, User, id, "User")
    return {"success": True, "user": serialize_user(row)}


@router.post("", status_code=201)
def create_user(payload: UserCreate, db: Session = Depends(get_db), admin=Depends(require_role(ROLE_ADMIN))):
    with storage_errors(db, "Failed to create user"):
        if user_repo.npk_taken(db, payload.npk):
            raise HTTPException(status_code=409, detail=DUPLICATE_NPK)
        row = User(
            name=payload.name.strip(),
            npk=payload.npk,
            password_hash=hash_password(payload.password),
            role=payload.role,
            is_active=payload.is_active,
        )
        db.add(row)
        db.flush()
        notify_user_created(db, row, admin_user_id=actor_uuid(admin))
        db.commit()
        db.refresh(row)
    return {"success": True, "message": "User created successfully", "user": serialize_user(row)}


@router.patch("/{id}")
def update_user(id: str, payload: UserUpdate, db: Session = Depends(get_db), admin=Depends(require_role(ROLE_ADMIN))):
    with storage_errors(db, "Failed to update user"):
        row = live_or_404(db, User, id, "User")
        changes = changes_of(payload)
        if "npk" in changes:
            changes["npk"] = changes["npk"].strip()
            if user_repo.npk_taken(db, changes["npk"], exclude_id=row.id):
                raise HTTPException(status_code=409, detail=DUPLICATE_NPK)
        password = changes.pop("password", None)
        if password:
            changes["password_hash"] = hash_password(password)
        row = apply_changes(db, row, changes)
    return {"success": True, "message": "User updated successfully", "user": serialize_user(row)}


@router.post("/{id}/toggle-active")
def toggle_user(id: str, db: Session = Depends(get_db), admin=Depends(require_role(ROLE_ADMIN))):
    with storage_errors(db, "Failed to update user"):
        row = live_or_404(db, User, id, "User")
        if row.id == actor_uuid(admin):
            raise HTTPException(status_code=400, detail="You cannot deactivate your own account")
        row.is_active = not row.is_active
        notify_user_status_changed(db, row, admin_user_id=actor_uuid(admin))
        db.add(row)
        db.commit()
        db.refresh(row)
    state = "activated" if row.is_active else "deactivated"
    return {"success": True, "message": f"User {state} successfully", "user": serialize_user(row)}


@router.delete("/{id}")
def delete_user(id: str, db: Session = Depends(get_db), admin=Depends(require_role(ROLE_ADMIN))):
    with storage_errors(db, "Failed to delete user"):
        row = live_or_404(db, User, id, "User")
        if row.id == actor_uuid(admin):
            raise HTTPException(status_code=400, detail="You cannot delete your own account")
        soft_delete(db, row)
    return {"success": True, "message": "User deleted successfully"}
