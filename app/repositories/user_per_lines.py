from sqlalchemy.orm import Session, joinedload

from app.models.line import Line
from app.models.user import User
from app.models.user_per_line import UserPerLine
from app.repositories.base import Listing, exists, fetch_page
from app.schemas.master_data import ScopedByLineQuery
from app.services.filtering import ColumnRef

LISTING = Listing(
    model=UserPerLine,
    filter_columns={
        "userUid": ColumnRef("user_uid"),
        "isActive": ColumnRef("is_active"),
        "userName": ColumnRef("name", ("user",)),
        "npk": ColumnRef("npk", ("user",)),
        "role": ColumnRef("role", ("user",)),
        "lineName": ColumnRef("name", ("line",)),
        "createdAt": ColumnRef("created_at"),
    },
    default_sort=[(ColumnRef("created_at"), "desc")],
    visibility=[
        UserPerLine.deleted_at.is_(None),
        UserPerLine.user.has(User.deleted_at.is_(None)),
    ],
    options=[joinedload(UserPerLine.user), joinedload(UserPerLine.line)],
)


def get_all(db: Session, params: ScopedByLineQuery):
    scopes = []
    if params.line_id:
        scopes.append(UserPerLine.line_id == params.line_id)
    if params.plant_id:
        scopes.append(UserPerLine.line.has(Line.plant_id == params.plant_id))
    return fetch_page(db, LISTING, params, scopes)


def assignment_taken(db: Session, user_id, line_id, exclude_id=None) -> bool:
    return exists(db, UserPerLine, UserPerLine.user_id == user_id, UserPerLine.line_id == line_id, exclude_id=exclude_id)


def uid_taken(db: Session, user_uid: str, exclude_id=None) -> bool:
    return exists(db, UserPerLine, UserPerLine.user_uid == user_uid, exclude_id=exclude_id)
