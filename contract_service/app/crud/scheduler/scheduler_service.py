import logging

from sqlalchemy.orm import Session

from shared.core.database import SessionLocal
from shared.core.schemas import ExportResult, NotificationResult
from shared.utils.clock import Clock, IdGenerator, system_clock, uuid_generator
from ..common.export_crud import export_all_contracts
from ..notifications.contract_notification_service import ContractNotificationService

logger = logging.getLogger(__name__)


def run_daily_backup(db: Session) -> ExportResult:
    """Excel backup of every contract, archived ones included."""
    try:
        return export_all_contracts(db)
    except Exception:
        logger.exception("Daily Excel backup failed")
        raise


def run_contract_notifications(db: Session, clock: Clock = system_clock,
                               ids: IdGenerator = uuid_generator) -> NotificationResult:
    try:
        return ContractNotificationService(clock, ids).check_full_contracts(db)
    except Exception:
        logger.exception("Contract notification run failed")
        raise


def run_scheduled_jobs():
    """Entry point for an external cron: one session for both daily jobs."""
    db = SessionLocal()
    try:
        backup = run_daily_backup(db)
        notifications = run_contract_notifications(db)
        logger.info("Scheduled jobs done: %d backup(s), %d notification(s)",
                    backup.count, notifications.sent)
        return backup, notifications
    finally:
        db.close()


def main() -> int:
    """`contract-ledger-jobs` console script."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s]: %(message)s",
    )
    run_scheduled_jobs()
    return 0
