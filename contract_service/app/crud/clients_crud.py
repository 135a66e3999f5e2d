# contract_service/app/crud/clients_crud.py
import logging
from typing import List

from sqlalchemy import case, func
from sqlalchemy.orm import Session, selectinload

from shared.core.database import transaction
from shared.core.exceptions import NotFoundError
from shared.core.schemas import Lookup
from shared.utils.clock import Clock, IdGenerator

from ..models.clients import ContactPerson, Client
from ..models.contracts import Contract
from ..models.interventions import Intervention
from ..schemas.clients_schemas import ClientCreate, ClientOut, ClientUpdate

logger = logging.getLogger(__name__)


def _contract_counts(db: Session, client_ids: List[str]) -> dict:
    if not client_ids:
        return {}
    rows = (
        db.query(
            Contract.client_id,
            func.sum(case((Contract.is_archived == False, 1), else_=0)).label("active"),
            func.sum(case((Contract.is_archived == True, 1), else_=0)).label("archived"),
        )
        .filter(Contract.client_id.in_(client_ids))
        .group_by(Contract.client_id)
        .all()
    )
    return {row.client_id: (row.active or 0, row.archived or 0) for row in rows}


def _to_out(client: Client, counts: dict) -> ClientOut:
    active, archived = counts.get(client.id, (0, 0))
    out = ClientOut.model_validate(client)
    out.active_contracts_count = active
    out.archived_contracts_count = archived
    return out


def get_clients(db: Session) -> List[ClientOut]:
    clients = (
        db.query(Client)
        .options(selectinload(Client.contacts))
        .order_by(Client.name.asc())
        .all()
    )
    counts = _contract_counts(db, [c.id for c in clients])
    return [_to_out(client, counts) for client in clients]


def get_client(db: Session, client_id: str) -> ClientOut:
    client = db.get(Client, client_id)
    if not client:
        raise NotFoundError(f"Client {client_id} not found")
    return _to_out(client, _contract_counts(db, [client.id]))


def get_client_by_name(db: Session, name: str) -> ClientOut:
    client = db.query(Client).filter(Client.name == name).first()
    if not client:
        raise NotFoundError(f"Client '{name}' not found")
    return _to_out(client, _contract_counts(db, [client.id]))


def clients_lookup(db: Session) -> List[Lookup]:
    rows = db.query(Client.id, Client.name).order_by(Client.name.asc()).all()
    return [Lookup(id=row.id, name=row.name) for row in rows]


def _replace_contacts(client: Client, data: ClientCreate, clock: Clock, ids: IdGenerator):
    now = clock.now()
    client.contacts = [
        ContactPerson(
            id=ids.new_id(),
            name=contact.name,
            email=contact.email,
            phone=contact.phone,
            created_at=now,
        )
        for contact in data.contacts
    ]


def create_client(db: Session, data: ClientCreate, clock: Clock, ids: IdGenerator) -> Client:
    with transaction(db):
        now = clock.now()
        client = Client(
            id=ids.new_id(),
            name=data.name.strip(),
            address=data.address,
            phone_standard=data.phone_standard,
            internal_notes=data.internal_notes,
            created_at=now,
            updated_at=now,
        )
        _replace_contacts(client, data, clock, ids)
        db.add(client)
    logger.info("Client '%s' created", client.name)
    return client


def update_client(db: Session, client_id: str, data: ClientUpdate, clock: Clock, ids: IdGenerator) -> bool:
    """Rewrite the client; contacts are replaced wholesale and contracts follow a rename."""
    with transaction(db):
        client = db.get(Client, client_id)
        if not client:
            raise NotFoundError(f"Client {client_id} not found")

        new_name = data.name.strip()
        if new_name != client.name:
            renamed = (
                db.query(Contract)
                .filter(Contract.client_id == client.id)
                .update({Contract.client_name: new_name}, synchronize_session="fetch")
            )
            logger.info("Client '%s' renamed to '%s' (%d contract(s) updated)",
                        client.name, new_name, renamed)

        client.name = new_name
        client.address = data.address
        client.phone_standard = data.phone_standard
        client.internal_notes = data.internal_notes
        client.updated_at = clock.now()
        _replace_contacts(client, data, clock, ids)
    return True


def delete_client(db: Session, client_id: str) -> int:
    """Delete the client with its contracts and their interventions. Returns the contract count."""
    with transaction(db):
        client = db.get(Client, client_id)
        if not client:
            raise NotFoundError(f"Client {client_id} not found")

        contract_ids = [
            row.id for row in db.query(Contract.id).filter(Contract.client_id == client.id)
        ]
        if contract_ids:
            db.query(Intervention).filter(
                Intervention.contract_id.in_(contract_ids)).delete(synchronize_session="fetch")
            db.query(Contract).filter(
                Contract.id.in_(contract_ids)).delete(synchronize_session="fetch")

        db.delete(client)
    logger.info("Client %s deleted with %d contract(s)",
                client_id, len(contract_ids))
    return len(contract_ids)
