from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.models.notification import Notification
from app.repositories.base import Listing, fetch_page
from app.schemas.query import ListQuery
from app.services.filtering import ColumnRef

LISTING = Listing(
    model=Notification,
    filter_columns={
        "title": ColumnRef("title"),
        "message": ColumnRef("message"),
        "type": ColumnRef("type"),
        "category": ColumnRef("category"),
        "isRead": ColumnRef("is_read"),
        "createdAt": ColumnRef("created_at"),
    },
    default_sort=[(ColumnRef("is_read"), "asc"), (ColumnRef("created_at"), "desc")],
)


def visible_to(user_id):
    return or_(Notification.user_id == user_id, Notification.user_id.is_(None))


def get_all(db: Session, params: ListQuery, user_id, unread_only: bool = False):
    scopes = [visible_to(user_id)]
    if unread_only:
        scopes.append(Notification.is_read.is_(False))
    return fetch_page(db, LISTING, params, scopes)


def unread_count(db: Session, user_id) -> int:
    return db.query(Notification).filter(visible_to(user_id), Notification.is_read.is_(False)).count()


def get_visible(db: Session, notification_id, user_id):
    return db.query(Notification).filter(Notification.id == notification_id, visible_to(user_id)).first()
