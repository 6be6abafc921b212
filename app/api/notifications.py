from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.api.common import actor_uuid, uuid_or_400
from app.core.deps import get_current_user
from app.db.session import get_db
from app.repositories import notifications as notification_repo
from app.schemas.query import ListQuery
from app.services.notifications import mark_all_read, mark_read, serialize_notification
from app.services.results import storage_errors

router = APIRouter()


@router.get("")
def list_notifications(
    unread_only: bool = Query(default=False, alias="unreadOnly"),
    limit: int = Query(default=50, ge=1, le=200),
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
):
    actor_id = actor_uuid(user)
    with storage_errors(db, "Failed to fetch notifications"):
        result = notification_repo.get_all(db, ListQuery(page=1, limit=limit), actor_id, unread_only=unread_only)
        unread_total = notification_repo.unread_count(db, actor_id)
    return {
        "success": True,
        "rows": [serialize_notification(row) for row in result.rows],
        "total": result.pagination.total,
        "unreadCount": unread_total,
    }


@router.post("/{id}/read")
def read_notification(id: str, db: Session = Depends(get_db), user: dict = Depends(get_current_user)):
    actor_id = actor_uuid(user)
    notification_id = uuid_or_400(id)
    with storage_errors(db, "Failed to update notification"):
        row = notification_repo.get_visible(db, notification_id, actor_id)
        if row is None:
            raise HTTPException(status_code=404, detail="Notification not found")
        row = mark_read(db, row)
    return {"success": True, "notification": serialize_notification(row)}


@router.post("/read-all")
def read_all_notifications(db: Session = Depends(get_db), user: dict = Depends(get_current_user)):
    with storage_errors(db, "Failed to update notifications"):
        changed = mark_all_read(db, actor_uuid(user))
    return {"success": True, "updated": changed}
