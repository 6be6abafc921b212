from __future__ import annotations

import logging
from typing import Any

from fastapi import HTTPException
from sqlalchemy.orm import Session

from app.db.wall_clock import local_date, local_midnight, utcnow
from app.models.line import Line
from app.models.part import Part
from app.models.production_plan import ProductionPlan
from app.models.shift import Shift
from app.repositories import production_plans as plan_repo
from app.repositories.base import get_live
from app.schemas.production import ProductionPlanCreate, ProductionPlanUpdate
from app.services.notifications import notify_plan_created, notify_plan_status_change

logger = logging.getLogger("app.production")

DUPLICATE_WORK_ORDER = "A production plan with this work order number already exists for the selected date, line, and shift"
DUPLICATE_SEQUENCE = "A production plan with this sequence number already exists for the selected date, line, and shift"
_LOCKED_STATUSES = {"RUNNING", "CLOSED"}


def _require(db: Session, model, entity_id, label: str):
    row = get_live(db, model, entity_id)
    if row is None:
        raise HTTPException(status_code=404, detail=f"{label} not found")
    return row


def _check_slot(db: Session, *, work_order_no: str, day, line_id, shift_id, sequence: int, exclude_id=None) -> None:
    if plan_repo.work_order_taken(db, work_order_no, day, line_id, shift_id, exclude_id=exclude_id):
        raise HTTPException(status_code=409, detail=DUPLICATE_WORK_ORDER)
    if plan_repo.sequence_taken(db, day, line_id, shift_id, sequence, exclude_id=exclude_id):
        raise HTTPException(status_code=409, detail=DUPLICATE_SEQUENCE)


def create_plan(db: Session, payload: ProductionPlanCreate, actor_user_id=None) -> ProductionPlan:
    _require(db, Line, payload.line_id, "Line")
    _require(db, Shift, payload.shift_id, "Shift")
    _require(db, Part, payload.part_id, "Part")

    work_order_no = payload.work_order_no.strip()
    sequence = payload.sequence or plan_repo.next_sequence(db, payload.plan_date, payload.line_id, payload.shift_id)
    _check_slot(
        db,
        work_order_no=work_order_no,
        day=payload.plan_date,
        line_id=payload.line_id,
        shift_id=payload.shift_id,
        sequence=sequence,
    )

    plan = ProductionPlan(
        work_order_no=work_order_no,
        plan_date=local_midnight(payload.plan_date),
        line_id=payload.line_id,
        shift_id=payload.shift_id,
        part_id=payload.part_id,
        cycle_time_sec=payload.cycle_time_sec,
        planned_qty=payload.planned_qty,
        sequence=sequence,
        status=payload.status,
        created_by_id=payload.created_by_id or actor_user_id,
    )
    if plan.status == "RUNNING":
        plan.started_at = utcnow()
    db.add(plan)
    db.flush()
    notify_plan_created(db, plan, user_id=actor_user_id)
    db.commit()
    db.refresh(plan)
    logger.info("production plan created work_order=%s sequence=%s", plan.work_order_no, plan.sequence)
    return plan


def update_plan(db: Session, plan: ProductionPlan, payload: ProductionPlanUpdate) -> tuple[ProductionPlan, list[str]]:
    changes: dict[str, Any] = payload.model_dump(exclude_unset=True)
    for key in ("line_id", "shift_id", "part_id", "work_order_no", "plan_date", "status"):
        if key in changes and changes[key] is None:
            changes.pop(key)
    if "line_id" in changes:
        _require(db, Line, changes["line_id"], "Line")
    if "shift_id" in changes:
        _require(db, Shift, changes["shift_id"], "Shift")
    if "part_id" in changes:
        _require(db, Part, changes["part_id"], "Part")
    if "work_order_no" in changes:
        changes["work_order_no"] = changes["work_order_no"].strip()

    slot_keys = {"work_order_no", "plan_date", "line_id", "shift_id", "sequence"}
    if slot_keys & changes.keys():
        _check_slot(
            db,
            work_order_no=changes.get("work_order_no", plan.work_order_no),
            day=changes.get("plan_date") or local_date(plan.plan_date),
            line_id=changes.get("line_id", plan.line_id),
            shift_id=changes.get("shift_id", plan.shift_id),
            sequence=changes.get("sequence") or plan.sequence,
            exclude_id=plan.id,
        )
    if "plan_date" in changes:
        changes["plan_date"] = local_midnight(changes["plan_date"])

    old_status = plan.status
    for key, value in changes.items():
        setattr(plan, key, value)
    if plan.status != old_status:
        if plan.status == "RUNNING" and plan.started_at is None:
            plan.started_at = utcnow()
        if plan.status == "CLOSED" and plan.completed_at is None:
            plan.completed_at = utcnow()

    db.add(plan)
    db.flush()
    titles = notify_plan_status_change(db, plan, old_status)
    db.commit()
    db.refresh(plan)
    if titles:
        logger.info("production plan %s %s -> %s notified=%s", plan.work_order_no, old_status, plan.status, titles)
    return plan, titles


def delete_plan(db: Session, plan: ProductionPlan) -> None:
    if plan.status in _LOCKED_STATUSES:
        raise HTTPException(status_code=400, detail=f"Cannot delete a {plan.status.lower()} production plan")
    db.delete(plan)
    db.commit()


def _iso(value) -> str | None:
    return value.isoformat() if value is not None else None


def serialize_plan(plan: ProductionPlan) -> dict[str, Any]:
    return {
        "id": str(plan.id),
        "workOrderNo": plan.work_order_no,
        "planDate": _iso(plan.plan_date),
        "planDay": local_date(plan.plan_date).isoformat() if plan.plan_date else None,
        "lineId": str(plan.line_id),
        "lineName": plan.line.name if plan.line else None,
        "shiftId": str(plan.shift_id),
        "shiftNumber": plan.shift.number if plan.shift else None,
        "partId": str(plan.part_id),
        "partNo": plan.part.part_no if plan.part else None,
        "partName": plan.part.name if plan.part else None,
        "cycleTimeSec": plan.cycle_time_sec,
        "plannedQty": plan.planned_qty,
        "actualQty": plan.actual_qty,
        "ngQty": plan.ng_qty,
        "sequence": plan.sequence,
        "status": plan.status,
        "startedAt": _iso(plan.started_at),
        "completedAt": _iso(plan.completed_at),
        "createdById": str(plan.created_by_id) if plan.created_by_id else None,
        "createdByName": plan.created_by.name if plan.created_by else None,
        "createdAt": _iso(plan.created_at),
        "updatedAt": _iso(plan.updated_at),
    }
