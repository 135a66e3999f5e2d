# contract_service/app/crud/contracts_crud.py
import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from shared.core.database import transaction
from shared.core.exceptions import NotFoundError, ValidationError
from shared.utils.app_status_code import AppStatusCode
from shared.utils.clock import Clock, IdGenerator

from ..enum.contract_enum import ContractStatus, ContractType
from ..models.clients import Client
from ..models.contracts import Contract
from ..models.interventions import Intervention
from ..schemas.contracts_schemas import (
    ContractCreate,
    ContractOverviewResponse,
    ContractRename,
)
from . import hours_ledger

logger = logging.getLogger(__name__)


# ----------------- Lookups -----------------
def get_contract_or_404(db: Session, contract_id: str) -> Contract:
    contract = db.get(Contract, contract_id)
    if not contract:
        raise NotFoundError(f"Contract {contract_id} not found")
    return contract


def get_contracts(db: Session, include_archived: bool = False) -> List[Contract]:
    query = db.query(Contract).options(selectinload(Contract.interventions))
    if not include_archived:
        query = query.filter(Contract.is_archived == False)
    return query.order_by(Contract.created_date.desc()).all()


def get_contract(db: Session, contract_id: str) -> Contract:
    return get_contract_or_404(db, contract_id)


def get_contract_by_number(db: Session, contract_number: int) -> Contract:
    contract = (
        db.query(Contract)
        .filter(Contract.contract_number == contract_number)
        .first()
    )
    if not contract:
        raise NotFoundError(f"Contract number {contract_number} not found")
    return contract


def get_contracts_overview(db: Session) -> ContractOverviewResponse:
    active_filters = [Contract.is_archived == False]

    active_contracts = db.query(func.count(Contract.id)).filter(
        *active_filters, Contract.contract_type == ContractType.signed.value).scalar()
    archived_contracts = db.query(func.count(Contract.id)).filter(
        Contract.is_archived == True).scalar()
    quotes = db.query(func.count(Contract.id)).filter(
        *active_filters, Contract.contract_type == ContractType.quote.value).scalar()
    in_overage = db.query(func.count(Contract.id)).filter(
        *active_filters, Contract.used_hours > Contract.total_hours).scalar()
    total_hours, used_hours = db.query(
        func.coalesce(func.sum(Contract.total_hours), 0.0),
        func.coalesce(func.sum(Contract.used_hours), 0.0),
    ).filter(*active_filters).one()

    return ContractOverviewResponse(
        active_contracts=active_contracts or 0,
        archived_contracts=archived_contracts or 0,
        quotes=quotes or 0,
        contracts_in_overage=in_overage or 0,
        total_hours=round(float(total_hours), 2),
        used_hours=round(float(used_hours), 2),
    )


# ----------------- Create -----------------
def _resolve_client(db: Session, contract: ContractCreate, now: datetime, ids: IdGenerator) -> Client:
    """Explicit client_id wins; otherwise find the client by name or create it."""
    if contract.client_id:
        client = db.get(Client, contract.client_id)
        if not client:
            raise NotFoundError(
                f"Client {contract.client_id} not found")
        return client

    name = contract.client_name.strip()
    client = db.query(Client).filter(Client.name == name).first()
    if client:
        return client

    client = Client(id=ids.new_id(), name=name,
                    created_at=now, updated_at=now)
    db.add(client)
    logger.info("Client '%s' created for new contract", name)
    return client


def create_contract(db: Session, contract: ContractCreate, clock: Clock, ids: IdGenerator) -> Contract:
    with transaction(db):
        now = clock.now()
        client = _resolve_client(db, contract, now, ids)

        created_date = contract.created_date or now
        if contract.contract_type == ContractType.signed:
            signed_date = contract.signed_date or created_date
        else:
            signed_date = contract.signed_date

        db_contract = Contract(
            id=ids.new_id(),
            contract_number=hours_ledger.next_contract_number(db),
            client_name=(contract.client_name or client.name).strip(),
            client_id=client.id,
            total_hours=contract.total_hours,
            used_hours=0.0,
            created_date=created_date,
            status=ContractStatus.active.value,
            is_archived=False,
            contract_type=contract.contract_type.value,
            signed_date=signed_date,
            internal_notes=contract.internal_notes,
        )
        db.add(db_contract)
        db.flush()
        logger.info("Contract #%s created for '%s' (%.2fh, %s)",
                    db_contract.contract_number, db_contract.client_name,
                    db_contract.total_hours, db_contract.contract_type)
    return db_contract


# ----------------- Archive -----------------
def archive_contract(db: Session, contract_id: str, clock: Clock) -> bool:
    with transaction(db):
        contract = db.get(Contract, contract_id)
        if not contract:
            logger.warning("Archive requested for unknown contract %s", contract_id)
            return False
        # re-archiving keeps the original archived_at
        if not contract.is_archived:
            contract.is_archived = True
            contract.archived_at = clock.now()
    return True


def unarchive_contract(db: Session, contract_id: str) -> bool:
    with transaction(db):
        contract = db.get(Contract, contract_id)
        if not contract:
            logger.warning("Unarchive requested for unknown contract %s", contract_id)
            return False
        contract.is_archived = False
        contract.archived_at = None
    return True


# ----------------- Sign -----------------
def _detach_renewed_contract(db: Session, quote: Contract) -> Optional[Contract]:
    """Break the quote -> renewed contract pairing on both sides; returns the contract."""
    if not quote.linked_contract_id:
        return None
    linked = db.get(Contract, quote.linked_contract_id)
    if linked and linked.renewal_quote_id == quote.id:
        linked.renewal_quote_id = None
    quote.linked_contract_id = None
    return linked


def sign_contract(db: Session, contract_id: str, clock: Clock) -> datetime:
    with transaction(db):
        contract = get_contract_or_404(db, contract_id)
        signed_date = clock.now()

        # signing a renewal quote retires the contract it renews
        linked = _detach_renewed_contract(db, contract)
        if linked and not linked.is_archived:
            linked.is_archived = True
            linked.archived_at = signed_date

        contract.contract_type = ContractType.signed.value
        contract.signed_date = signed_date
    logger.info("Contract %s signed", contract_id)
    return signed_date


# ----------------- Rename -----------------
def rename_contract(db: Session, contract_id: str, data: ContractRename) -> bool:
    with transaction(db):
        contract = get_contract_or_404(db, contract_id)
        contract.client_name = data.client_name.strip()
        if data.created_date is not None:
            contract.created_date = data.created_date
    return True


# ----------------- Renew -----------------
def _successor(db: Session, old: Contract, total_hours: float, now: datetime, ids: IdGenerator,
               contract_type: ContractType) -> Contract:
    successor = Contract(
        id=ids.new_id(),
        contract_number=hours_ledger.next_contract_number(db),
        client_name=old.client_name,
        client_id=old.client_id,
        total_hours=total_hours,
        used_hours=0.0,
        created_date=now,
        status=ContractStatus.active.value,
        is_archived=False,
        contract_type=contract_type.value,
        signed_date=now if contract_type == ContractType.signed else None,
    )
    db.add(successor)
    return successor


def renew_contract(db: Session, contract_id: str, total_hours: float, clock: Clock, ids: IdGenerator) -> Contract:
    """
    Archive the contract and open a signed successor for the same client,
    carrying any overage forward. All-or-nothing.
    """
    with transaction(db):
        old = get_contract_or_404(db, contract_id)
        now = clock.now()

        old.is_archived = True
        old.archived_at = now
        # renewing a renewal quote frees the contract it was meant to renew
        _detach_renewed_contract(db, old)

        new_contract = _successor(
            db, old, total_hours, now, ids, ContractType.signed)
        hours_ledger.roll_over_overage(db, old, new_contract, ids)

        # a pending renewal quote is superseded by the renewal itself
        if old.renewal_quote_id:
            quote = db.get(Contract, old.renewal_quote_id)
            if quote and quote.linked_contract_id == old.id:
                quote.linked_contract_id = None
            old.renewal_quote_id = None

        db.flush()
        logger.info("Contract %s renewed as %s (#%s)", old.id,
                    new_contract.id, new_contract.contract_number)
    return new_contract


def create_renewal_quote(db: Session, contract_id: str, total_hours: float, clock: Clock, ids: IdGenerator) -> Contract:
    """Open a quote that will renew the contract once signed."""
    with transaction(db):
        old = get_contract_or_404(db, contract_id)
        if old.contract_type == ContractType.quote.value:
            raise ValidationError(
                "A quote cannot be renewed", AppStatusCode.INVALID_INPUT)
        if old.renewal_quote_id and db.get(Contract, old.renewal_quote_id):
            raise ValidationError(
                "Contract already has a pending renewal quote", AppStatusCode.DUPLICATE_ADD_ERROR)

        now = clock.now()
        quote = _successor(db, old, total_hours, now, ids, ContractType.quote)
        quote.linked_contract_id = old.id
        hours_ledger.roll_over_overage(db, old, quote, ids)
        old.renewal_quote_id = quote.id

        db.flush()
        logger.info("Renewal quote %s created for contract %s",
                    quote.id, old.id)
    return quote


# ----------------- Delete quote -----------------
def delete_quote(db: Session, contract_id: str) -> bool:
    with transaction(db):
        contract = get_contract_or_404(db, contract_id)
        if contract.contract_type != ContractType.quote.value:
            raise ValidationError(
                "Only quotes can be deleted", AppStatusCode.UNAUTHORIZED_ACTION)

        _detach_renewed_contract(db, contract)

        db.query(Intervention).filter(
            Intervention.contract_id == contract.id).delete(synchronize_session="fetch")
        db.delete(contract)
    logger.info("Quote %s deleted", contract_id)
    return True


# ----------------- Invariant check -----------------
def recalculate_contract_hours(db: Session, contract_id: str) -> float:
    with transaction(db):
        get_contract_or_404(db, contract_id)
        total = hours_ledger.recalculate_used_hours(db, contract_id)
    return total
