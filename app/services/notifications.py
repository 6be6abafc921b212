from __future__ import annotations

import logging
import uuid
from typing import Any

from sqlalchemy.orm import Session

from app.core.config import settings
from app.db.wall_clock import utcnow
from app.models.notification import Notification
from app.repositories import notifications as notification_repo

logger = logging.getLogger("app.notifications")

TYPE_INFO = "INFO"
TYPE_SUCCESS = "SUCCESS"
TYPE_WARNING = "WARNING"
TYPE_ERROR = "ERROR"

CATEGORY_SYSTEM = "SYSTEM"
CATEGORY_SECURITY = "SECURITY"
CATEGORY_REPORTS = "REPORTS"


def _as_uuid_or_none(value: Any) -> uuid.UUID | None:
    if value is None or isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        return None


def create_notification(
    db: Session,
    *,
    title: str,
    message: str,
    type: str = TYPE_INFO,
    category: str | None = CATEGORY_SYSTEM,
    user_id: Any = None,
) -> Notification:
    """Queue a notification on the session; the caller's commit persists it.

    ``user_id=None`` broadcasts to every user.
    """
    row = Notification(
        title=str(title).strip(),
        message=str(message).strip(),
        type=type,
        category=category,
        user_id=_as_uuid_or_none(user_id),
        is_read=False,
        read_at=None,
    )
    db.add(row)
    logger.info("notification queued title=%r recipient=%s", row.title, row.user_id or "broadcast")
    return row


def notify_plan_created(db: Session, plan, user_id=None) -> None:
    create_notification(
        db,
        title="Production Plan Created",
        message=f'Work Order {plan.work_order_no} for part "{plan.part.name}" has been created and scheduled.',
        type=TYPE_SUCCESS,
        user_id=user_id,
    )


def notify_plan_status_change(db: Session, plan, old_status: str) -> list[str]:
    """Emit the notifications for a status transition; returns their titles."""
    new_status = plan.status
    if new_status == old_status:
        return []
    titles: list[str] = []
    line_name = plan.line.name
    if old_status == "OPEN" and new_status == "RUNNING":
        create_notification(
            db,
            title="Production Started",
            message=f"Production for Work Order {plan.work_order_no} ({plan.part.name}) has started on line {line_name}.",
        )
        titles.append("Production Started")
    if new_status == "CLOSED":
        achievement = plan.actual_qty / plan.planned_qty * 100 if plan.planned_qty else 0.0
        create_notification(
            db,
            title="Production Completed",
            message=(
                f"Work Order {plan.work_order_no} on {line_name} completed. "
                f"Produced: {plan.actual_qty}/{plan.planned_qty} units ({achievement:.1f}%)."
            ),
            type=TYPE_SUCCESS,
        )
        titles.append("Production Completed")
        if achievement >= 100:
            create_notification(
                db,
                title="Target Achieved",
                message=f"{line_name} achieved {achievement:.1f}% for {plan.work_order_no}. Great work!",
                type=TYPE_SUCCESS,
            )
            titles.append("Target Achieved")
        elif achievement < settings.TARGET_MISSED_BELOW:
            create_notification(
                db,
                title="Target Not Met",
                message=f"{line_name} achieved {achievement:.1f}% for {plan.work_order_no} (target: 100%). Review required.",
                type=TYPE_WARNING,
            )
            titles.append("Target Not Met")
        if plan.ng_qty > 0:
            reject_rate = plan.ng_qty / (plan.actual_qty + plan.ng_qty) * 100
            if reject_rate > settings.REJECT_RATE_THRESHOLD:
                create_notification(
                    db,
                    title="High Reject Rate Alert",
                    message=(
                        f"Reject rate for {plan.work_order_no} on {line_name} is {reject_rate:.1f}% "
                        f"(threshold: {settings.REJECT_RATE_THRESHOLD:g}%). Quality check required."
                    ),
                    type=TYPE_ERROR,
                )
                titles.append("High Reject Rate Alert")
    if new_status == "CANCELED":
        create_notification(
            db,
            title="Production Canceled",
            message=f"Work Order {plan.work_order_no} has been canceled.",
            type=TYPE_WARNING,
        )
        titles.append("Production Canceled")
    return titles


def notify_low_oee(db: Session, line_name: str, oee: float) -> None:
    create_notification(
        db,
        title="Low OEE Alert",
        message=(
            f"OEE for {line_name} dropped to {oee:.1f}% "
            f"(threshold: {settings.OEE_LOW_THRESHOLD:g}%). Performance review needed."
        ),
        type=TYPE_WARNING,
        category=CATEGORY_REPORTS,
    )


def notify_user_created(db: Session, user, admin_user_id=None) -> None:
    create_notification(
        db,
        title="New User Created",
        message=f'User "{user.name}" ({user.npk}) has been added to the system.',
        category=CATEGORY_SECURITY,
        user_id=admin_user_id,
    )


def notify_user_status_changed(db: Session, user, admin_user_id=None) -> None:
    state = "activated" if user.is_active else "deactivated"
    create_notification(
        db,
        title="User Status Changed",
        message=f'User "{user.name}" has been {state}.',
        category=CATEGORY_SECURITY,
        user_id=admin_user_id,
    )


def mark_read(db: Session, notification: Notification) -> Notification:
    if not notification.is_read:
        notification.is_read = True
        notification.read_at = utcnow()
        db.add(notification)
        db.commit()
        db.refresh(notification)
    return notification


def mark_all_read(db: Session, user_id) -> int:
    now = utcnow()
    rows = (
        db.query(Notification)
        .filter(notification_repo.visible_to(user_id), Notification.is_read.is_(False))
        .all()
    )
    for row in rows:
        row.is_read = True
        row.read_at = now
    db.commit()
    return len(rows)


def serialize_notification(row: Notification) -> dict[str, Any]:
    return {
        "id": str(row.id),
        "userId": str(row.user_id) if row.user_id else None,
        "title": row.title,
        "message": row.message,
        "type": row.type,
        "category": row.category,
        "isRead": bool(row.is_read),
        "readAt": row.read_at.isoformat() if row.read_at else None,
        "createdAt": row.created_at.isoformat() if row.created_at else None,
    }
