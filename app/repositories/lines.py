from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from app.models.line import Line
from app.models.machine import Machine
from app.models.part import Part
from app.repositories.base import Listing, exists, fetch_page
from app.schemas.master_data import LineQuery
from app.services.filtering import ColumnRef

LISTING = Listing(
    model=Line,
    filter_columns={
        "name": ColumnRef("name"),
        "plantName": ColumnRef("name", ("plant",)),
        "subplant": ColumnRef("subplant", ("plant",)),
        "isActive": ColumnRef("is_active"),
        "createdAt": ColumnRef("created_at"),
        "updatedAt": ColumnRef("updated_at"),
    },
    default_sort=[(ColumnRef("created_at"), "desc")],
    visibility=[Line.deleted_at.is_(None)],
    options=[joinedload(Line.plant)],
)


def get_all(db: Session, params: LineQuery):
    scopes = []
    if params.plant_id:
        scopes.append(Line.plant_id == params.plant_id)
    return fetch_page(db, LISTING, params, scopes)


def name_taken(db: Session, name: str, exclude_id=None) -> bool:
    return exists(db, Line, func.lower(Line.name) == name.strip().lower(), exclude_id=exclude_id, live_only=False)


def has_live_dependents(db: Session, line_id) -> bool:
    return exists(db, Machine, Machine.line_id == line_id) or exists(db, Part, Part.line_id == line_id)


def active_lines(db: Session):
    return (
        db.query(Line)
        .filter(Line.deleted_at.is_(None), Line.is_active.is_(True))
        .order_by(Line.name.asc())
        .all()
    )
