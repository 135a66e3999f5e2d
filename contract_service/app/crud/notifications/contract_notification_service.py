import logging
from datetime import timedelta
from typing import List, Optional

from sqlalchemy.orm import Session

from shared.core.config import settings
from shared.core.database import transaction
from shared.core.schemas import NotificationResult
from shared.helpers.email_helper import EmailHelper
from shared.utils.clock import Clock, IdGenerator
from ...enum.contract_enum import ContractStatus, NotificationType
from ...models.contracts import Contract
from ...models.notification_logs import NotificationLog

logger = logging.getLogger(__name__)


class ContractNotificationService:
    """Emails an alert for every active contract whose hour budget is used up."""

    subject = "[gestion] contrat plein"

    def __init__(self, clock: Clock, ids: IdGenerator,
                 email_helper: Optional[EmailHelper] = None,
                 recipients: Optional[List[str]] = None,
                 cooldown_hours: Optional[int] = None):
        self.clock = clock
        self.ids = ids
        self.email_helper = email_helper or EmailHelper()
        self.recipients = recipients if recipients is not None else settings.notify_recipients
        self.cooldown = timedelta(
            hours=cooldown_hours if cooldown_hours is not None else settings.NOTIFY_COOLDOWN_HOURS)

    def full_contracts(self, db: Session) -> List[Contract]:
        return (
            db.query(Contract)
            .filter(
                Contract.status == ContractStatus.active.value,
                Contract.is_archived == False,
                Contract.used_hours >= Contract.total_hours,
            )
            .order_by(Contract.created_date.asc())
            .all()
        )

    def _recently_notified(self, db: Session, contract_id: str) -> bool:
        since = self.clock.now() - self.cooldown
        return (
            db.query(NotificationLog.id)
            .filter(
                NotificationLog.contract_id == contract_id,
                NotificationLog.notification_type == NotificationType.contract_full.value,
                NotificationLog.created_at >= since,
            )
            .first()
            is not None
        )

    def _message(self, contract: dict) -> str:
        return (f"Le contrat {contract['total_hours']}h de {contract['client_name']} "
                f"débuté le {contract['created_date']} est expiré")

    def _pending(self, db: Session) -> List[dict]:
        """Full contracts outside the cooldown, as plain values."""
        pending = []
        for contract in self.full_contracts(db):
            if self._recently_notified(db, contract.id):
                logger.info(
                    f"Notification already sent for contract {contract.id} recently")
                continue
            pending.append({
                "id": contract.id,
                "client_name": contract.client_name,
                "total_hours": f"{contract.total_hours:g}",
                "used_hours": f"{contract.used_hours:g}",
                "created_date": contract.created_date.strftime("%d/%m/%Y"),
            })
        return pending

    def check_full_contracts(self, db: Session) -> NotificationResult:
        if not settings.NOTIFY_CONTRACT_FULL:
            logger.info("contract_full notifications disabled")
            return NotificationResult(sent=0)
        if not self.recipients or not self.email_helper.is_configured:
            logger.info("Notifications not configured, nothing sent")
            return NotificationResult(sent=0)

        pending = self._pending(db)
        # no read transaction may stay open across SMTP I/O
        db.rollback()

        notified = []
        for contract in pending:
            context = {key: value for key, value in contract.items() if key != "id"}
            sent = self.email_helper.send_email(
                template_code=NotificationType.contract_full.value,
                recipients=self.recipients,
                subject=self.subject,
                context=context,
            )
            if not sent:
                logger.error(
                    f"Error sending notification for contract {contract['id']}")
                continue

            with transaction(db):
                db.add(NotificationLog(
                    id=self.ids.new_id(),
                    contract_id=contract["id"],
                    notification_type=NotificationType.contract_full.value,
                    email_to=", ".join(self.recipients),
                    subject=self.subject,
                    content=self._message(contract),
                    created_at=self.clock.now(),
                ))
            notified.append(contract["id"])

        logger.info("%d contract_full notification(s) sent", len(notified))
        return NotificationResult(sent=len(notified), contract_ids=notified)
