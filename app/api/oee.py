from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.deps import get_current_user
from app.db.session import get_db
from app.schemas.production import OeeIngest
from app.services.oee import current_oee, record_oee, serialize_oee
from app.services.results import storage_errors

router = APIRouter()


@router.post("")
def ingest_oee(payload: OeeIngest, db: Session = Depends(get_db), user: dict = Depends(get_current_user)):
    with storage_errors(db, "Failed to save OEE data"):
        record = record_oee(db, payload)
    return {"success": True, "message": "OEE data saved successfully", "data": serialize_oee(record)}


@router.get("")
def get_oee(
    work_order_no: str = Query(alias="workOrderNo", min_length=1),
    db: Session = Depends(get_db),
    user: dict = Depends(get_current_user),
):
    with storage_errors(db, "Failed to fetch OEE data"):
        record = current_oee(db, work_order_no)
    return {"success": True, "data": serialize_oee(record)}
