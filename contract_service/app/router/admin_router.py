# contract_service/app/router/admin_router.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.core.database import get_db
from shared.core.schemas import ExportResult, NotificationResult
from shared.utils.clock import Clock, IdGenerator, get_clock, get_id_generator
from ..crud.scheduler import scheduler_service

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.post("/export-all-excel", response_model=ExportResult)
def export_all_excel(db: Session = Depends(get_db)):
    return scheduler_service.run_daily_backup(db)


@router.post("/check-notifications", response_model=NotificationResult)
def check_notifications(
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    ids: IdGenerator = Depends(get_id_generator),
):
    return scheduler_service.run_contract_notifications(db, clock, ids)
