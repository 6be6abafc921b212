from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.pdt_category import PdtCategory
from app.repositories.base import Listing, exists, fetch_page
from app.schemas.query import ListQuery
from app.services.filtering import ColumnRef

LISTING = Listing(
    model=PdtCategory,
    filter_columns={
        "name": ColumnRef("name"),
        "defaultDurationMin": ColumnRef("default_duration_min"),
        "createdAt": ColumnRef("created_at"),
    },
    default_sort=[(ColumnRef("name"), "asc")],
    visibility=[PdtCategory.deleted_at.is_(None)],
)


def get_all(db: Session, params: ListQuery):
    return fetch_page(db, LISTING, params)


def name_taken(db: Session, name: str, exclude_id=None) -> bool:
    return exists(db, PdtCategory, func.lower(PdtCategory.name) == name.strip().lower(), exclude_id=exclude_id)
