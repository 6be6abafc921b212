from sqlalchemy.orm import Session, joinedload

from app.models.line import Line
from app.models.part import Part
from app.repositories.base import Listing, exists, fetch_page
from app.schemas.master_data import ScopedByLineQuery
from app.services.filtering import ColumnRef

LISTING = Listing(
    model=Part,
    filter_columns={
        "sku": ColumnRef("sku"),
        "partNo": ColumnRef("part_no"),
        "name": ColumnRef("name"),
        "qtyPerLot": ColumnRef("qty_per_lot"),
        "cycleTimeSec": ColumnRef("cycle_time_sec"),
        "lineName": ColumnRef("name", ("line",)),
        "plantName": ColumnRef("name", ("line", "plant")),
        "createdAt": ColumnRef("created_at"),
        "updatedAt": ColumnRef("updated_at"),
    },
    default_sort=[(ColumnRef("part_no"), "asc")],
    visibility=[Part.deleted_at.is_(None)],
    options=[joinedload(Part.line).joinedload(Line.plant)],
)


def get_all(db: Session, params: ScopedByLineQuery):
    scopes = []
    if params.line_id:
        scopes.append(Part.line_id == params.line_id)
    if params.plant_id:
        scopes.append(Part.line.has(Line.plant_id == params.plant_id))
    return fetch_page(db, LISTING, params, scopes)


def part_no_taken(db: Session, part_no: str, line_id, exclude_id=None) -> bool:
    return exists(db, Part, Part.part_no == part_no, Part.line_id == line_id, exclude_id=exclude_id)
