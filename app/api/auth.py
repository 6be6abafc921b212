from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.common import actor_uuid, iso
from app.core.config import settings
from app.core.deps import get_current_user
from app.core.security import create_jwt, user_claims, verify_password
from app.db.session import get_db
from app.db.wall_clock import utcnow
from app.models.user import User
from app.repositories import users as user_repo
from app.repositories.base import get_live
from app.schemas.auth import LoginIn
from app.services.results import storage_errors
from app.services.user_bootstrap import ensure_bootstrap_admin_for_login, normalize_npk

router = APIRouter()


def _profile(user: User) -> dict:
    return {
        "id": str(user.id),
        "name": user.name,
        "npk": user.npk,
        "role": user.role,
        "isActive": bool(user.is_active),
        "lastLoginAt": iso(user.last_login_at),
    }


@router.post("/login")
def login(payload: LoginIn, db: Session = Depends(get_db)):
    npk = normalize_npk(payload.npk)
    with storage_errors(db, "Failed to sign in"):
        user = ensure_bootstrap_admin_for_login(db, npk, payload.password)
        if user is None:
            user = user_repo.get_by_npk(db, npk)
        if not user or not verify_password(payload.password, user.password_hash):
            raise HTTPException(status_code=401, detail="Invalid NPK or password")
        if not user.is_active:
            raise HTTPException(status_code=403, detail="User is inactive")
        user.last_login_at = utcnow()
        db.add(user)
        db.commit()
        db.refresh(user)

    token = create_jwt(user_claims(user), settings.JWT_SECRET, timedelta(days=settings.JWT_TTL_DAYS))
    return {"success": True, "message": "Login successful", "token": token, "user": _profile(user)}


@router.get("/verify")
def verify(user: dict = Depends(get_current_user)):
    return {
        "success": True,
        "user": {key: user.get(key) for key in ("userId", "npk", "role", "isActive")},
    }


@router.get("/profile")
def profile(user: dict = Depends(get_current_user), db: Session = Depends(get_db)):
    with storage_errors(db, "Failed to fetch profile"):
        row = get_live(db, User, actor_uuid(user))
    if row is None:
        raise HTTPException(status_code=404, detail="User not found")
    return {"success": True, "user": _profile(row)}


@router.get("/session")
def session_status(user: dict = Depends(get_current_user), db: Session = Depends(get_db)):
    with storage_errors(db, "Failed to validate session"):
        row = get_live(db, User, actor_uuid(user))
    return {"valid": bool(row is not None and row.is_active)}
