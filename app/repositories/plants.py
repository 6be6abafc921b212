from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.plant import Plant
from app.repositories.base import Listing, exists, fetch_page
from app.schemas.query import ListQuery
from app.services.filtering import ColumnRef

LISTING = Listing(
    model=Plant,
    filter_columns={
        "name": ColumnRef("name"),
        "subplant": ColumnRef("subplant"),
        "isActive": ColumnRef("is_active"),
        "createdAt": ColumnRef("created_at"),
        "updatedAt": ColumnRef("updated_at"),
    },
    default_sort=[(ColumnRef("created_at"), "desc")],
    visibility=[Plant.deleted_at.is_(None)],
)


def get_all(db: Session, params: ListQuery):
    return fetch_page(db, LISTING, params)


def name_taken(db: Session, name: str, exclude_id=None) -> bool:
    # The unique index covers soft-deleted rows too.
    return exists(db, Plant, func.lower(Plant.name) == name.strip().lower(), exclude_id=exclude_id, live_only=False)
