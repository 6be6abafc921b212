"""Report data for the OEE, loss-time and rejection screens.

Each report returns ``tableData`` (one row per record) and ``chartData``
(one row per wall-clock day with a ``shift<N>`` key per shift number).
Days are bucketed on the plan date, in the configured wall-clock zone.
"""
from __future__ import annotations

import calendar
from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session, joinedload

from app.db.wall_clock import local_date, local_midnight, utcnow
from app.models.downtime_event import DOWNTIME_PLANNED, DOWNTIME_UNPLANNED, DowntimeEvent
from app.models.line import Line
from app.models.oee_record import OeeRecord
from app.models.production_plan import ProductionPlan
from app.models.rejection_event import RejectionEvent

SMALL_STOP_SEC = 300


@dataclass(frozen=True)
class ReportFilter:
    start_date: date | None = None
    end_date: date | None = None
    plant_id: UUID | None = None
    line_id: UUID | None = None
    shift_id: UUID | None = None

    def window(self) -> tuple[datetime, datetime]:
        """Half-open UTC range; defaults to the current wall-clock month."""
        today = local_date(utcnow())
        start = self.start_date or today.replace(day=1)
        end = self.end_date or today.replace(day=calendar.monthrange(today.year, today.month)[1])
        return local_midnight(start), local_midnight(end) + timedelta(days=1)

    def plan_conditions(self) -> list:
        conditions = []
        if self.line_id:
            conditions.append(ProductionPlan.line_id == self.line_id)
        elif self.plant_id:
            conditions.append(ProductionPlan.line.has(Line.plant_id == self.plant_id))
        if self.shift_id:
            conditions.append(ProductionPlan.shift_id == self.shift_id)
        return conditions


def _plan_options(via=None):
    def load(attr):
        return joinedload(via).joinedload(attr) if via is not None else joinedload(attr)

    return [load(ProductionPlan.line).joinedload(Line.plant), load(ProductionPlan.shift), load(ProductionPlan.part)]


def _day_key(plan: ProductionPlan) -> str:
    return local_date(plan.plan_date).isoformat()


def _plan_columns(plan: ProductionPlan) -> dict[str, Any]:
    return {
        "workOrderNo": plan.work_order_no,
        "plantName": plan.line.plant.name if plan.line and plan.line.plant else "N/A",
        "lineName": plan.line.name if plan.line else None,
        "shiftNumber": plan.shift.number if plan.shift else None,
        "partNo": plan.part.part_no if plan.part else None,
        "partName": plan.part.name if plan.part else None,
    }


def _chart_rows(buckets: dict[str, dict[int, float]]) -> list[dict[str, Any]]:
    rows = []
    for day, per_shift in buckets.items():
        entry: dict[str, Any] = {"date": day}
        for number in sorted(per_shift):
            entry[f"shift{number}"] = per_shift[number]
        rows.append(entry)
    return rows


def oee_report(db: Session, flt: ReportFilter) -> dict[str, Any]:
    start, end = flt.window()
    records = (
        db.query(OeeRecord)
        .join(OeeRecord.plan)
        .filter(ProductionPlan.plan_date >= start, ProductionPlan.plan_date < end, *flt.plan_conditions())
        .options(*_plan_options(OeeRecord.plan))
        .order_by(ProductionPlan.plan_date.asc(), OeeRecord.id.asc())
        .all()
    )

    sums: dict[str, dict[int, list[float]]] = defaultdict(lambda: defaultdict(lambda: [0.0, 0]))
    table = []
    for record in records:
        plan = record.plan
        bucket = sums[_day_key(plan)][plan.shift.number]
        bucket[0] += float(record.oee)
        bucket[1] += 1
        table.append(
            {
                "id": str(record.id),
                "date": _day_key(plan),
                **_plan_columns(plan),
                "availability": float(record.availability),
                "performance": float(record.performance),
                "quality": float(record.quality),
                "oee": float(record.oee),
            }
        )

    averages = {
        day: {number: round(total / count, 1) for number, (total, count) in per_shift.items()}
        for day, per_shift in sums.items()
    }
    return {"chartData": _chart_rows(averages), "tableData": table}


def _minutes(seconds: float) -> int:
    return int(round(seconds / 60))


def loss_time_report(db: Session, flt: ReportFilter) -> dict[str, Any]:
    start, end = flt.window()
    plans = (
        db.query(ProductionPlan)
        .filter(ProductionPlan.plan_date >= start, ProductionPlan.plan_date < end, *flt.plan_conditions())
        .options(*_plan_options())
        .order_by(ProductionPlan.plan_date.asc(), ProductionPlan.sequence.asc())
        .all()
    )
    events_by_plan: dict[Any, list[DowntimeEvent]] = defaultdict(list)
    if plans:
        events = db.query(DowntimeEvent).filter(DowntimeEvent.plan_id.in_([plan.id for plan in plans])).all()
        for event in events:
            events_by_plan[event.plan_id].append(event)

    chart: dict[str, dict[int, float]] = defaultdict(lambda: defaultdict(int))
    table = []
    for plan in plans:
        events = events_by_plan.get(plan.id, [])
        pdt_sec = sum(e.duration_sec for e in events if e.kind == DOWNTIME_PLANNED)
        updt_events_sec = sum(e.duration_sec for e in events if e.kind == DOWNTIME_UNPLANNED)
        over_pdt_sec = sum(e.over_pdt_duration_sec or 0 for e in events if e.kind == DOWNTIME_PLANNED)
        updt_sec = updt_events_sec + over_pdt_sec
        small_stops = sum(1 for e in events if e.kind == DOWNTIME_UNPLANNED and e.duration_sec < SMALL_STOP_SEC)

        loading_sec = plan.shift.loading_time_in_sec if plan.shift else 0
        plan_working_sec = max(0, loading_sec - pdt_sec)
        actual_working_sec = max(0, plan_working_sec - updt_sec)

        chart[_day_key(plan)][plan.shift.number] += _minutes(updt_events_sec)
        table.append(
            {
                "id": str(plan.id),
                "date": _day_key(plan),
                **_plan_columns(plan),
                "planWorkingMin": _minutes(plan_working_sec),
                "actualWorkingMin": _minutes(actual_working_sec),
                "pdtMin": _minutes(pdt_sec),
                "updtMin": _minutes(updt_sec),
                "overPdtMin": _minutes(over_pdt_sec),
                "smallStopFreq": small_stops,
                "lossTimeMin": _minutes(updt_sec),
            }
        )
    return {"chartData": _chart_rows(chart), "tableData": table}


def rejection_report(db: Session, flt: ReportFilter) -> dict[str, Any]:
    start, end = flt.window()
    events = (
        db.query(RejectionEvent)
        .join(RejectionEvent.plan)
        .filter(RejectionEvent.occurred_at >= start, RejectionEvent.occurred_at < end, *flt.plan_conditions())
        .options(
            joinedload(RejectionEvent.reject_criteria),
            *_plan_options(RejectionEvent.plan),
        )
        .order_by(RejectionEvent.occurred_at.asc(), RejectionEvent.id.asc())
        .all()
    )

    chart: dict[str, dict[int, float]] = defaultdict(lambda: defaultdict(int))
    table = []
    for event in events:
        plan = event.plan
        chart[_day_key(plan)][plan.shift.number] += event.qty
        criteria = event.reject_criteria
        table.append(
            {
                "id": str(event.id),
                "date": event.occurred_at.isoformat(),
                **_plan_columns(plan),
                "qty": event.qty,
                "category": criteria.category if criteria else None,
                "criteria": criteria.name if criteria else "N/A",
            }
        )
    return {"chartData": _chart_rows(chart), "tableData": table}
