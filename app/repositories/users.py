from sqlalchemy.orm import Session

from app.models.user import User
from app.repositories.base import Listing, exists, fetch_page
from app.schemas.master_data import UserQuery
from app.services.filtering import ColumnRef

LISTING = Listing(
    model=User,
    filter_columns={
        "name": ColumnRef("name"),
        "npk": ColumnRef("npk"),
        "role": ColumnRef("role"),
        "isActive": ColumnRef("is_active"),
        "lastLoginAt": ColumnRef("last_login_at"),
        "createdAt": ColumnRef("created_at"),
        "updatedAt": ColumnRef("updated_at"),
    },
    default_sort=[(ColumnRef("created_at"), "desc")],
    visibility=[User.deleted_at.is_(None)],
)


def get_all(db: Session, params: UserQuery):
    scopes = []
    if params.role:
        scopes.append(User.role == params.role)
    return fetch_page(db, LISTING, params, scopes)


def get_by_npk(db: Session, npk: str):
    return db.query(User).filter(User.npk == npk.strip(), User.deleted_at.is_(None)).first()


def npk_taken(db: Session, npk: str, exclude_id=None) -> bool:
    return exists(db, User, User.npk == npk.strip(), exclude_id=exclude_id, live_only=False)
