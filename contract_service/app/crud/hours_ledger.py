"""
Hour accounting shared by the contract and intervention operations.

A contract's used_hours always equals the sum of hours_used over its
billable interventions. Callers run these helpers inside one
`transaction(db)`; changes are applied as in-database increments so two
writers never overwrite each other's hours.
"""
import logging
from typing import Iterable, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session
from sqlalchemy.orm.util import identity_key

from shared.utils.clock import IdGenerator
from ..enum.contract_enum import (
    CARRY_OVER_SUFFIX,
    CARRY_OVER_TECHNICIAN,
    DEFAULT_CARRY_OVER_DESCRIPTION,
)
from ..models.contracts import Contract
from ..models.interventions import Intervention

logger = logging.getLogger(__name__)


def billable_delta(old_hours: float, was_billable: bool, new_hours: float, now_billable: bool) -> float:
    """Change in used_hours when an intervention moves from the old to the new state."""
    if was_billable and now_billable:
        return new_hours - old_hours
    if was_billable:
        return -old_hours
    if now_billable:
        return new_hours
    return 0.0


def _expire_cached_hours(db: Session, contract_id: str) -> None:
    cached = db.identity_map.get(identity_key(Contract, contract_id))
    if cached is not None:
        db.expire(cached, ["used_hours"])


def apply_hours_delta(db: Session, contract_id: str, delta: float) -> bool:
    """used_hours += delta, evaluated by the database. False if the contract is gone."""
    if delta == 0:
        return True

    db.flush()
    updated = (
        db.query(Contract)
        .filter(Contract.id == contract_id)
        .update({Contract.used_hours: Contract.used_hours + delta}, synchronize_session=False)
    )
    _expire_cached_hours(db, contract_id)

    if updated:
        logger.info("Contract %s used_hours adjusted by %+.2f",
                    contract_id, delta)
    return bool(updated)


def billable_hours_total(db: Session, contract_id: str) -> float:
    db.flush()
    total = (
        db.query(func.coalesce(func.sum(Intervention.hours_used), 0.0))
        .filter(Intervention.contract_id == contract_id, Intervention.is_billable == True)
        .scalar()
    )
    return float(total or 0.0)


def recalculate_used_hours(db: Session, contract_id: str) -> float:
    """Reset used_hours from the interventions table."""
    total = billable_hours_total(db, contract_id)
    db.query(Contract).filter(Contract.id == contract_id).update(
        {Contract.used_hours: total}, synchronize_session=False)
    _expire_cached_hours(db, contract_id)
    return total


def next_contract_number(db: Session) -> int:
    db.flush()
    current = db.query(func.max(Contract.contract_number)).scalar()
    return (current or 0) + 1


def carry_over_description(description: Optional[str]) -> str:
    return f"{description or DEFAULT_CARRY_OVER_DESCRIPTION} {CARRY_OVER_SUFFIX}"


def last_billable_description(interventions: Iterable[Intervention]) -> str:
    """Description of the most recent billable intervention."""
    billable = [i for i in interventions if i.is_billable]
    if not billable:
        return DEFAULT_CARRY_OVER_DESCRIPTION
    # stable: equal dates keep their existing order
    latest = sorted(billable, key=lambda i: i.date, reverse=True)[0]
    return latest.description


def roll_over_overage(
    db: Session,
    old_contract: Contract,
    new_contract: Contract,
    ids: IdGenerator,
) -> float:
    """
    Carry the old contract's overage into the (freshly created) new contract
    as a single billable intervention. Returns the hours carried (0 if none).
    """
    overage = (old_contract.used_hours or 0) - old_contract.total_hours
    if overage <= 0:
        return 0.0

    description = last_billable_description(old_contract.interventions)
    db.add(Intervention(
        id=ids.new_id(),
        contract_id=new_contract.id,
        date=new_contract.created_date,
        description=carry_over_description(description),
        hours_used=overage,
        technician=CARRY_OVER_TECHNICIAN,
        is_billable=True,
        location=None,
        created_at=new_contract.created_date,
    ))
    # the new contract started at 0, this is a set, not an increment
    new_contract.used_hours = overage

    logger.info("Carried %.2fh of overage from contract %s to %s",
                overage, old_contract.id, new_contract.id)
    return overage


def overage_breakdown(interventions: List[Intervention], total_hours: float) -> List[tuple]:
    """
    Walk billable interventions in date order and return (intervention,
    hours beyond the budget) for every one that crosses or lies past it.
    """
    cumulative = 0.0
    result = []
    for intervention in sorted(interventions, key=lambda i: i.date):
        if not intervention.is_billable:
            continue
        before = cumulative
        cumulative += intervention.hours_used
        if cumulative > total_hours:
            if before >= total_hours:
                result.append((intervention, intervention.hours_used))
            else:
                result.append((intervention, cumulative - total_hours))
    return result


def sync_overage_to_renewal_quote(db: Session, contract_id: str, ids: IdGenerator) -> Optional[float]:
    """
    Rebuild the carry-over interventions of the contract's pending renewal
    quote from its current overage. No-op when there is no linked quote.
    """
    contract = db.get(Contract, contract_id)
    if contract is None or not contract.renewal_quote_id:
        return None

    db.flush()
    interventions = (
        db.query(Intervention)
        .filter(Intervention.contract_id == contract.id, Intervention.is_billable == True)
        .all()
    )
    breakdown = overage_breakdown(interventions, contract.total_hours)

    quote_id = contract.renewal_quote_id
    (
        db.query(Intervention)
        .filter(
            Intervention.contract_id == quote_id,
            Intervention.technician == CARRY_OVER_TECHNICIAN,
            Intervention.description.like(f"%{CARRY_OVER_SUFFIX}%"),
        )
        .delete(synchronize_session="fetch")
    )

    for source, hours in breakdown:
        db.add(Intervention(
            id=ids.new_id(),
            contract_id=quote_id,
            date=source.date,
            description=carry_over_description(source.description),
            hours_used=hours,
            technician=CARRY_OVER_TECHNICIAN,
            is_billable=True,
            location=source.location,
            created_at=source.created_at,
        ))

    total = recalculate_used_hours(db, quote_id)
    logger.info("Renewal quote %s resynced: %d carry-over line(s), %.2fh used",
                quote_id, len(breakdown), total)
    return total
