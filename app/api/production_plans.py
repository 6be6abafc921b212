from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.api.common import actor_uuid, page_payload, uuid_or_400
from app.core.deps import PLAN_EDITOR_ROLES, get_current_user, require_role
from app.db.session import get_db
from app.models.production_plan import ProductionPlan
from app.repositories import production_plans as plan_repo
from app.schemas.production import ProductionPlanCreate, ProductionPlanQuery, ProductionPlanUpdate
from app.services.production_plans import create_plan, delete_plan, serialize_plan, update_plan
from app.services.results import storage_errors

router = APIRouter()


def _plan_or_404(db: Session, raw_id: str) -> ProductionPlan:
    plan = plan_repo.get_by_id(db, uuid_or_400(raw_id))
    if plan is None:
        raise HTTPException(status_code=404, detail="Production plan not found")
    return plan


@router.post("/query")
def query_plans(params: ProductionPlanQuery, db: Session = Depends(get_db), user: dict = Depends(get_current_user)):
    with storage_errors(db, "Failed to fetch production plans"):
        result = plan_repo.get_all(db, params)
    return page_payload(result, serialize_plan)


@router.get("/next-work-order")
def next_work_order(
    plan_date: date = Query(alias="planDate"),
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
):
    with storage_errors(db, "Failed to generate work order number"):
        work_order_no = plan_repo.next_work_order(db, plan_date)
    return {"success": True, "workOrderNo": work_order_no}


@router.get("/next-sequence")
def next_sequence(
    plan_date: date = Query(alias="planDate"),
    line_id: str = Query(alias="lineId"),
    shift_id: str = Query(alias="shiftId"),
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
):
    line_uuid = uuid_or_400(line_id, "lineId")
    shift_uuid = uuid_or_400(shift_id, "shiftId")
    with storage_errors(db, "Failed to compute next sequence"):
        sequence = plan_repo.next_sequence(db, plan_date, line_uuid, shift_uuid)
    return {"success": True, "sequence": sequence}


@router.get("/{id}")
def get_plan(id: str, db: Session = Depends(get_db), user: dict = Depends(get_current_user)):
    with storage_errors(db, "Failed to fetch production plan"):
        plan = _plan_or_404(db, id)
    return {"success": True, "productionPlan": serialize_plan(plan)}


@router.post("", status_code=201)
def create_production_plan(
    payload: ProductionPlanCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(*PLAN_EDITOR_ROLES)),
):
    with storage_errors(db, "Failed to create production plan"):
        plan = create_plan(db, payload, actor_user_id=actor_uuid(user))
    return {
        "success": True,
        "message": "Production plan created successfully",
        "productionPlan": serialize_plan(plan),
    }


@router.patch("/{id}")
def update_production_plan(
    id: str,
    payload: ProductionPlanUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(*PLAN_EDITOR_ROLES)),
):
    with storage_errors(db, "Failed to update production plan"):
        plan, notified = update_plan(db, _plan_or_404(db, id), payload)
    return {
        "success": True,
        "message": "Production plan updated successfully",
        "productionPlan": serialize_plan(plan),
        "notifications": notified,
    }


@router.delete("/{id}")
def delete_production_plan(
    id: str,
    db: Session = Depends(get_db),
    user: dict = Depends(require_role(*PLAN_EDITOR_ROLES)),
):
    with storage_errors(db, "Failed to delete production plan"):
        delete_plan(db, _plan_or_404(db, id))
    return {"success": True, "message": "Production plan deleted successfully"}
