from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.api.common import uuid_or_400
from app.core.deps import get_current_user
from app.db.session import get_db
from app.repositories import lines as line_repo
from app.repositories import shifts as shift_repo
from app.services.reports import ReportFilter, loss_time_report, oee_report, rejection_report
from app.services.results import storage_errors
from app.services.shift_schedule import format_hhmm

router = APIRouter()


def _optional_uuid(raw: str | None, field_name: str):
    if raw is None or not str(raw).strip():
        return None
    return uuid_or_400(raw, field_name)


def report_filter(
    start_date: date | None = Query(default=None, alias="startDate"),
    end_date: date | None = Query(default=None, alias="endDate"),
    plant_id: str | None = Query(default=None, alias="plantId"),
    line_id: str | None = Query(default=None, alias="lineId"),
    shift_id: str | None = Query(default=None, alias="shiftId"),
) -> ReportFilter:
    if start_date and end_date and end_date < start_date:
        raise HTTPException(status_code=400, detail="endDate must not be before startDate")
    return ReportFilter(
        start_date=start_date,
        end_date=end_date,
        plant_id=_optional_uuid(plant_id, "plantId"),
        line_id=_optional_uuid(line_id, "lineId"),
        shift_id=_optional_uuid(shift_id, "shiftId"),
    )


@router.get("/oee")
def get_oee_report(
    flt: ReportFilter = Depends(report_filter),
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
):
    with storage_errors(db, "Failed to build OEE report"):
        data = oee_report(db, flt)
    return {"success": True, **data}


@router.get("/loss-time")
def get_loss_time_report(
    flt: ReportFilter = Depends(report_filter),
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
):
    with storage_errors(db, "Failed to build loss time report"):
        data = loss_time_report(db, flt)
    return {"success": True, **data}


@router.get("/rejections")
def get_rejection_report(
    flt: ReportFilter = Depends(report_filter),
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
):
    with storage_errors(db, "Failed to build rejection report"):
        data = rejection_report(db, flt)
    return {"success": True, **data}


@router.get("/lookups/lines")
def lookup_lines(db: Session = Depends(get_db), user: dict = Depends(get_current_user)):
    with storage_errors(db, "Failed to fetch lines"):
        rows = line_repo.active_lines(db)
    return {"success": True, "data": [{"id": str(row.id), "name": row.name} for row in rows]}


@router.get("/lookups/shifts")
def lookup_shifts(
    line_id: str = Query(alias="lineId"),
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
):
    line_uuid = uuid_or_400(line_id, "lineId")
    with storage_errors(db, "Failed to fetch shifts"):
        rows = shift_repo.shifts_for_line(db, line_uuid)
    return {
        "success": True,
        "data": [
            {
                "id": str(row.id),
                "number": row.number,
                "workStart": format_hhmm(row.work_start),
                "workEnd": format_hhmm(row.work_end),
            }
            for row in rows
        ],
    }
