# contract_service/app/router/clients_router.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.core.database import get_db
from shared.core.schemas import Lookup, SuccessResponse
from shared.utils.clock import Clock, IdGenerator, get_clock, get_id_generator
from ..crud import clients_crud as crud
from ..crud import interventions_crud
from ..schemas.clients_schemas import (
    ClientCreate,
    ClientCreated,
    ClientDeleted,
    ClientOut,
    ClientUpdate,
)

router = APIRouter(prefix="/api", tags=["clients"])


@router.get("/clients", response_model=List[ClientOut])
def get_clients(db: Session = Depends(get_db)):
    return crud.get_clients(db)


# must be declared before /clients/{client_id}
@router.get("/clients/by-name/{name}", response_model=ClientOut)
def get_client_by_name(name: str, db: Session = Depends(get_db)):
    return crud.get_client_by_name(db, name)


@router.get("/clients/{client_id}", response_model=ClientOut)
def get_client(client_id: str, db: Session = Depends(get_db)):
    return crud.get_client(db, client_id)


@router.post("/clients", response_model=ClientCreated)
def create_client(
    data: ClientCreate,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    ids: IdGenerator = Depends(get_id_generator),
):
    client = crud.create_client(db, data, clock, ids)
    return ClientCreated(id=client.id, name=client.name)


@router.patch("/clients/{client_id}", response_model=SuccessResponse)
def update_client(
    client_id: str,
    data: ClientUpdate,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    ids: IdGenerator = Depends(get_id_generator),
):
    crud.update_client(db, client_id, data, clock, ids)
    return SuccessResponse()


@router.delete("/clients/{client_id}", response_model=ClientDeleted)
def delete_client(client_id: str, db: Session = Depends(get_db)):
    count = crud.delete_client(db, client_id)
    return ClientDeleted(deleted_contracts_count=count)


# ----------lookups-------------
@router.get("/clients-list", response_model=List[Lookup])
def clients_lookup(db: Session = Depends(get_db)):
    return crud.clients_lookup(db)


@router.get("/technicians-list", response_model=List[str])
def technicians_lookup(db: Session = Depends(get_db)):
    return interventions_crud.get_technicians(db)
