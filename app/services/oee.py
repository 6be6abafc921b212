from __future__ import annotations

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from app.core.config import settings
from app.models.oee_record import OeeRecord
from app.repositories import production_plans as plan_repo
from app.schemas.production import OeeIngest
from app.services.notifications import notify_low_oee

logger = logging.getLogger("app.oee")


def compute_oee(availability: float, performance: float, quality: float) -> float:
    """Percent OEE from three percent factors."""
    return availability * performance * quality / 10000


def _plan_or_404(db: Session, work_order_no: str):
    plan = plan_repo.get_by_work_order(db, work_order_no)
    if plan is None:
        raise HTTPException(status_code=404, detail=f"Production plan {work_order_no} not found")
    return plan


def record_oee(db: Session, payload: OeeIngest) -> OeeRecord:
    plan = _plan_or_404(db, payload.work_order_no)
    oee = compute_oee(payload.availability, payload.performance, payload.quality)

    record = db.query(OeeRecord).filter(OeeRecord.plan_id == plan.id).first()
    if record is None:
        record = OeeRecord(plan_id=plan.id)
    record.availability = payload.availability
    record.performance = payload.performance
    record.quality = payload.quality
    record.oee = oee
    db.add(record)

    if oee < settings.OEE_LOW_THRESHOLD:
        notify_low_oee(db, plan.line.name, oee)
        logger.warning("low OEE work_order=%s oee=%.1f", plan.work_order_no, oee)
    db.commit()
    db.refresh(record)
    return record


def current_oee(db: Session, work_order_no: str) -> OeeRecord | None:
    plan = _plan_or_404(db, work_order_no)
    return db.query(OeeRecord).filter(OeeRecord.plan_id == plan.id).first()


def serialize_oee(record: OeeRecord | None) -> dict | None:
    if record is None:
        return None
    return {
        "availability": float(record.availability),
        "performance": float(record.performance),
        "quality": float(record.quality),
        "oee": float(record.oee),
    }
