from sqlalchemy.orm import Session, joinedload

from app.models.child_part import ChildPart
from app.models.line import Line
from app.models.part import Part
from app.repositories.base import Listing, exists, fetch_page
from app.schemas.master_data import ChildPartQuery
from app.services.filtering import ColumnRef

LISTING = Listing(
    model=ChildPart,
    filter_columns={
        "childPartNo": ColumnRef("child_part_no"),
        "childPartName": ColumnRef("child_part_name"),
        "qtyLotSupply": ColumnRef("qty_lot_supply"),
        "partNo": ColumnRef("part_no", ("part",)),
        "partName": ColumnRef("name", ("part",)),
        "lineName": ColumnRef("name", ("part", "line")),
        "createdAt": ColumnRef("created_at"),
        "updatedAt": ColumnRef("updated_at"),
    },
    default_sort=[(ColumnRef("child_part_no"), "asc")],
    visibility=[
        ChildPart.deleted_at.is_(None),
        ChildPart.part.has(Part.deleted_at.is_(None)),
    ],
    options=[joinedload(ChildPart.part).joinedload(Part.line)],
)


def get_all(db: Session, params: ChildPartQuery):
    scopes = []
    if params.part_id:
        scopes.append(ChildPart.part_id == params.part_id)
    if params.line_id:
        scopes.append(ChildPart.part.has(Part.line_id == params.line_id))
    if params.plant_id:
        scopes.append(ChildPart.part.has(Part.line.has(Line.plant_id == params.plant_id)))
    return fetch_page(db, LISTING, params, scopes)


def child_part_no_taken(db: Session, child_part_no: str, part_id, exclude_id=None) -> bool:
    return exists(
        db, ChildPart, ChildPart.child_part_no == child_part_no, ChildPart.part_id == part_id, exclude_id=exclude_id
    )
