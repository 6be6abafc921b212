from datetime import date

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from app.db.wall_clock import local_day_bounds
from app.models.line import Line
from app.models.production_plan import ProductionPlan
from app.repositories.base import Listing, exists, fetch_page
from app.schemas.production import ProductionPlanQuery
from app.services.filtering import ColumnRef

LISTING = Listing(
    model=ProductionPlan,
    filter_columns={
        "workOrderNo": ColumnRef("work_order_no"),
        "planDate": ColumnRef("plan_date"),
        "status": ColumnRef("status"),
        "sequence": ColumnRef("sequence"),
        "cycleTimeSec": ColumnRef("cycle_time_sec"),
        "plannedQty": ColumnRef("planned_qty"),
        "actualQty": ColumnRef("actual_qty"),
        "ngQty": ColumnRef("ng_qty"),
        "startedAt": ColumnRef("started_at"),
        "completedAt": ColumnRef("completed_at"),
        "lineName": ColumnRef("name", ("line",)),
        "shiftNumber": ColumnRef("number", ("shift",)),
        "partNo": ColumnRef("part_no", ("part",)),
        "partName": ColumnRef("name", ("part",)),
        "createdByName": ColumnRef("name", ("created_by",)),
        "createdAt": ColumnRef("created_at"),
    },
    default_sort=[(ColumnRef("plan_date"), "desc")],
    options=[
        joinedload(ProductionPlan.line),
        joinedload(ProductionPlan.shift),
        joinedload(ProductionPlan.part),
        joinedload(ProductionPlan.created_by),
    ],
)


def _on_day(day: date):
    start, end = local_day_bounds(day)
    return [ProductionPlan.plan_date >= start, ProductionPlan.plan_date < end]


def get_all(db: Session, params: ProductionPlanQuery):
    scopes = []
    if params.line_id:
        scopes.append(ProductionPlan.line_id == params.line_id)
    elif params.plant_id:
        scopes.append(ProductionPlan.line.has(Line.plant_id == params.plant_id))
    if params.shift_id:
        scopes.append(ProductionPlan.shift_id == params.shift_id)
    if params.part_id:
        scopes.append(ProductionPlan.part_id == params.part_id)
    if params.status:
        scopes.append(ProductionPlan.status == params.status)
    if params.plan_date:
        scopes.extend(_on_day(params.plan_date))
    return fetch_page(db, LISTING, params, scopes)


def get_by_id(db: Session, plan_id):
    return db.query(ProductionPlan).filter(ProductionPlan.id == plan_id).first()


def get_by_work_order(db: Session, work_order_no: str):
    return (
        db.query(ProductionPlan)
        .filter(ProductionPlan.work_order_no == work_order_no.strip())
        .order_by(ProductionPlan.plan_date.desc())
        .first()
    )


def work_order_taken(db: Session, work_order_no: str, day: date, line_id, shift_id, exclude_id=None) -> bool:
    return exists(
        db,
        ProductionPlan,
        ProductionPlan.work_order_no == work_order_no,
        ProductionPlan.line_id == line_id,
        ProductionPlan.shift_id == shift_id,
        *_on_day(day),
        exclude_id=exclude_id,
    )


def sequence_taken(db: Session, day: date, line_id, shift_id, sequence: int, exclude_id=None) -> bool:
    return exists(
        db,
        ProductionPlan,
        ProductionPlan.sequence == sequence,
        ProductionPlan.line_id == line_id,
        ProductionPlan.shift_id == shift_id,
        *_on_day(day),
        exclude_id=exclude_id,
    )


def next_sequence(db: Session, day: date, line_id, shift_id) -> int:
    current = (
        db.query(func.max(ProductionPlan.sequence))
        .filter(ProductionPlan.line_id == line_id, ProductionPlan.shift_id == shift_id, *_on_day(day))
        .scalar()
    )
    return int(current or 0) + 1


def work_order_prefix(day: date) -> str:
    return f"WO-{day:%y%m%d}"


def next_work_order(db: Session, day: date) -> str:
    prefix = work_order_prefix(day)
    numbers = db.query(ProductionPlan.work_order_no).filter(ProductionPlan.work_order_no.startswith(prefix)).all()
    highest = 0
    for (work_order_no,) in numbers:
        suffix = work_order_no[len(prefix):]
        if len(suffix) == 4 and suffix.isdigit():
            highest = max(highest, int(suffix))
    return f"{prefix}{highest + 1:04d}"
