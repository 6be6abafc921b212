from sqlalchemy.orm import Session, joinedload

from app.models.line import Line
from app.models.shift import Shift
from app.repositories.base import Listing, exists, fetch_page
from app.schemas.master_data import ScopedByLineQuery
from app.services.filtering import ColumnRef

LISTING = Listing(
    model=Shift,
    filter_columns={
        "number": ColumnRef("number"),
        "loadingTimeInSec": ColumnRef("loading_time_in_sec"),
        "lineName": ColumnRef("name", ("line",)),
        "plantName": ColumnRef("name", ("line", "plant")),
        "createdAt": ColumnRef("created_at"),
    },
    default_sort=[(ColumnRef("number"), "asc")],
    visibility=[Shift.deleted_at.is_(None)],
    options=[joinedload(Shift.line)],
)


def get_all(db: Session, params: ScopedByLineQuery):
    scopes = []
    if params.line_id:
        scopes.append(Shift.line_id == params.line_id)
    elif params.plant_id:
        scopes.append(Shift.line.has(Line.plant_id == params.plant_id))
    return fetch_page(db, LISTING, params, scopes)


def number_taken(db: Session, line_id, number: int, exclude_id=None) -> bool:
    return exists(db, Shift, Shift.line_id == line_id, Shift.number == number, exclude_id=exclude_id)


def shifts_for_line(db: Session, line_id):
    return (
        db.query(Shift)
        .filter(Shift.line_id == line_id, Shift.deleted_at.is_(None))
        .order_by(Shift.number.asc())
        .all()
    )
