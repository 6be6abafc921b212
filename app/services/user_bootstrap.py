from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.security import hash_password, verify_password
from app.models.user import User

logger = logging.getLogger("app.auth")


def normalize_npk(raw: str | None) -> str:
    return str(raw or "").strip()


def get_user_by_npk_any_state(db: Session, npk: str) -> User | None:
    normalized = normalize_npk(npk)
    if not normalized:
        return None
    return db.query(User).filter(User.npk == normalized).first()


def ensure_bootstrap_admin_for_login(db: Session, npk: str, password: str) -> User | None:
    """Create or repair the bootstrap ADMIN when its configured credentials are used."""
    if not settings.ADMIN_BOOTSTRAP_ENABLED:
        return None

    normalized_npk = normalize_npk(npk)
    bootstrap_npk = normalize_npk(settings.ADMIN_BOOTSTRAP_NPK)
    if not bootstrap_npk or normalized_npk != bootstrap_npk:
        return None
    if str(password or "") != str(settings.ADMIN_BOOTSTRAP_PASSWORD or ""):
        return None

    user = get_user_by_npk_any_state(db, bootstrap_npk)
    if user is None:
        user = User(
            role="ADMIN",
            name=str(settings.ADMIN_BOOTSTRAP_NAME or "System Administrator"),
            npk=bootstrap_npk,
            password_hash=hash_password(str(settings.ADMIN_BOOTSTRAP_PASSWORD or "")),
            is_active=True,
        )
        db.add(user)
        logger.info("bootstrap admin created npk=%s", bootstrap_npk)
    else:
        user.role = "ADMIN"
        user.is_active = True
        user.deleted_at = None
        if not str(user.name or "").strip():
            user.name = str(settings.ADMIN_BOOTSTRAP_NAME or "System Administrator")
        if not verify_password(str(settings.ADMIN_BOOTSTRAP_PASSWORD or ""), user.password_hash):
            user.password_hash = hash_password(str(settings.ADMIN_BOOTSTRAP_PASSWORD or ""))
        db.add(user)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        return get_user_by_npk_any_state(db, bootstrap_npk)
    db.refresh(user)
    return user
