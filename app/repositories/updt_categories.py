from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from app.models.line import Line
from app.models.updt_category import UpdtCategory
from app.repositories.base import Listing, exists, fetch_page
from app.schemas.master_data import UpdtCategoryQuery
from app.services.filtering import ColumnRef

LISTING = Listing(
    model=UpdtCategory,
    filter_columns={
        "department": ColumnRef("department"),
        "name": ColumnRef("name"),
        "lineName": ColumnRef("name", ("line",)),
        "createdAt": ColumnRef("created_at"),
    },
    default_sort=[(ColumnRef("department"), "asc")],
    visibility=[UpdtCategory.deleted_at.is_(None)],
    options=[joinedload(UpdtCategory.line)],
)


def get_all(db: Session, params: UpdtCategoryQuery):
    scopes = []
    if params.line_id:
        scopes.append(UpdtCategory.line_id == params.line_id)
    elif params.plant_id:
        scopes.append(UpdtCategory.line.has(Line.plant_id == params.plant_id))
    if params.department:
        scopes.append(UpdtCategory.department == params.department)
    return fetch_page(db, LISTING, params, scopes)


def name_taken(db: Session, line_id, department: str, name: str, exclude_id=None) -> bool:
    return exists(
        db,
        UpdtCategory,
        UpdtCategory.line_id == line_id,
        UpdtCategory.department == department,
        func.lower(UpdtCategory.name) == name.strip().lower(),
        exclude_id=exclude_id,
    )
