from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from app.models.line import Line
from app.models.reject_criteria import RejectCriteria
from app.repositories.base import Listing, exists, fetch_page
from app.schemas.master_data import RejectCriteriaQuery
from app.services.filtering import ColumnRef

LISTING = Listing(
    model=RejectCriteria,
    filter_columns={
        "category": ColumnRef("category"),
        "name": ColumnRef("name"),
        "lineName": ColumnRef("name", ("line",)),
        "createdAt": ColumnRef("created_at"),
    },
    default_sort=[(ColumnRef("category"), "asc")],
    visibility=[RejectCriteria.deleted_at.is_(None)],
    options=[joinedload(RejectCriteria.line)],
)


def get_all(db: Session, params: RejectCriteriaQuery):
    scopes = []
    if params.line_id:
        scopes.append(RejectCriteria.line_id == params.line_id)
    elif params.plant_id:
        scopes.append(RejectCriteria.line.has(Line.plant_id == params.plant_id))
    if params.category:
        scopes.append(RejectCriteria.category == params.category)
    return fetch_page(db, LISTING, params, scopes)


def name_taken(db: Session, line_id, category: str, name: str, exclude_id=None) -> bool:
    return exists(
        db,
        RejectCriteria,
        RejectCriteria.line_id == line_id,
        RejectCriteria.category == category,
        func.lower(RejectCriteria.name) == name.strip().lower(),
        exclude_id=exclude_id,
    )
