# contract_service/app/crud/interventions_crud.py
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from shared.core.database import transaction
from shared.core.exceptions import NotFoundError, ValidationError
from shared.utils.app_status_code import AppStatusCode
from shared.utils.clock import Clock, IdGenerator

from ..models.contracts import Contract
from ..models.interventions import Intervention
from ..schemas.interventions_schemas import InterventionCreate, InterventionUpdate
from . import hours_ledger

logger = logging.getLogger(__name__)


def get_intervention_or_404(db: Session, intervention_id: str) -> Intervention:
    intervention = db.get(Intervention, intervention_id)
    if not intervention:
        raise NotFoundError(f"Intervention {intervention_id} not found")
    return intervention


def get_technicians(db: Session) -> List[str]:
    rows = (
        db.query(Intervention.technician)
        .distinct()
        .order_by(Intervention.technician.asc())
        .all()
    )
    return [row.technician for row in rows]


# -------- Add Intervention --------
def add_intervention(db: Session, data: InterventionCreate, clock: Clock, ids: IdGenerator) -> Intervention:
    with transaction(db):
        if not db.get(Contract, data.contract_id):
            raise NotFoundError(f"Contract {data.contract_id} not found")

        intervention = Intervention(
            id=ids.new_id(),
            contract_id=data.contract_id,
            date=data.date,
            description=data.description,
            hours_used=data.hours_used,
            technician=data.technician,
            is_billable=data.is_billable,
            location=data.location,
            created_at=clock.now(),
        )
        db.add(intervention)

        if intervention.is_billable:
            hours_ledger.apply_hours_delta(
                db, data.contract_id, data.hours_used)
            hours_ledger.sync_overage_to_renewal_quote(
                db, data.contract_id, ids)

        logger.info("Intervention %s added to contract %s (%.2fh, billable=%s)",
                    intervention.id, data.contract_id, data.hours_used, data.is_billable)
    return intervention


# -------- Update Intervention --------
def update_intervention(db: Session, intervention_id: str, data: InterventionUpdate, ids: IdGenerator) -> bool:
    with transaction(db):
        intervention = get_intervention_or_404(db, intervention_id)
        if data.contract_id and data.contract_id != intervention.contract_id:
            raise ValidationError(
                "Interventions cannot be moved to another contract", AppStatusCode.INVALID_INPUT)

        # prior state must be read before the row is rewritten
        old_hours = intervention.hours_used
        was_billable = intervention.is_billable

        intervention.date = data.date
        intervention.description = data.description
        intervention.hours_used = data.hours_used
        intervention.technician = data.technician
        intervention.is_billable = data.is_billable
        intervention.location = data.location

        delta = hours_ledger.billable_delta(
            old_hours, was_billable, data.hours_used, data.is_billable)
        if delta != 0:
            hours_ledger.apply_hours_delta(
                db, intervention.contract_id, delta)
            hours_ledger.sync_overage_to_renewal_quote(
                db, intervention.contract_id, ids)
    return True


# -------- Delete Intervention --------
def delete_intervention(db: Session, intervention_id: str, ids: IdGenerator,
                        contract_id: Optional[str] = None) -> bool:
    with transaction(db):
        intervention = get_intervention_or_404(db, intervention_id)
        if contract_id and contract_id != intervention.contract_id:
            raise NotFoundError(
                f"Intervention {intervention_id} not found on contract {contract_id}")

        owner_id = intervention.contract_id
        if intervention.is_billable:
            hours_ledger.apply_hours_delta(
                db, owner_id, -intervention.hours_used)

        db.delete(intervention)

        if intervention.is_billable:
            hours_ledger.sync_overage_to_renewal_quote(db, owner_id, ids)
    logger.info("Intervention %s deleted from contract %s",
                intervention_id, owner_id)
    return True
