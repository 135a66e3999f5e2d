# contract_service/app/router/contracts_router.py
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from shared.core.database import get_db
from shared.core.schemas import SuccessResponse
from shared.utils.clock import Clock, IdGenerator, get_clock, get_id_generator
from ..crud import contracts_crud as crud
from ..schemas.contracts_schemas import (
    ContractCreate,
    ContractCreated,
    ContractOut,
    ContractOverviewResponse,
    ContractRename,
    RenewRequest,
    RenewResponse,
    RenewalQuoteResponse,
    SignResponse,
)

router = APIRouter(prefix="/api/contracts", tags=["contracts"])


# ---------------- List all contracts ----------------
@router.get("", response_model=List[ContractOut])
def get_contracts(
    include_archived: bool = Query(False, alias="includeArchived"),
    db: Session = Depends(get_db),
):
    return crud.get_contracts(db, include_archived)


# -----overview----
@router.get("/overview", response_model=ContractOverviewResponse)
def overview(db: Session = Depends(get_db)):
    return crud.get_contracts_overview(db)


@router.get("/by-number/{contract_number}", response_model=ContractOut)
def get_contract_by_number(contract_number: int, db: Session = Depends(get_db)):
    return crud.get_contract_by_number(db, contract_number)


@router.get("/{contract_id}", response_model=ContractOut)
def get_contract(contract_id: str, db: Session = Depends(get_db)):
    return crud.get_contract(db, contract_id)


# --------- Create Contract ---------
@router.post("", response_model=ContractCreated)
def create_contract(
    contract: ContractCreate,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    ids: IdGenerator = Depends(get_id_generator),
):
    return crud.create_contract(db, contract, clock, ids)


# --------- Lifecycle ---------
@router.patch("/{contract_id}/archive", response_model=SuccessResponse)
def archive_contract(
    contract_id: str,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    crud.archive_contract(db, contract_id, clock)
    return SuccessResponse()


@router.patch("/{contract_id}/unarchive", response_model=SuccessResponse)
def unarchive_contract(contract_id: str, db: Session = Depends(get_db)):
    crud.unarchive_contract(db, contract_id)
    return SuccessResponse()


@router.patch("/{contract_id}/sign", response_model=SignResponse)
def sign_contract(
    contract_id: str,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    signed_date = crud.sign_contract(db, contract_id, clock)
    return SignResponse(signed_date=signed_date)


@router.patch("/{contract_id}/client-name", response_model=SuccessResponse)
def rename_contract(
    contract_id: str,
    data: ContractRename,
    db: Session = Depends(get_db),
):
    crud.rename_contract(db, contract_id, data)
    return SuccessResponse()


@router.post("/{contract_id}/renew", response_model=RenewResponse)
def renew_contract(
    contract_id: str,
    data: RenewRequest,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    ids: IdGenerator = Depends(get_id_generator),
):
    contract = crud.renew_contract(db, contract_id, data.total_hours, clock, ids)
    return RenewResponse(
        id=contract.id,
        client_name=contract.client_name,
        total_hours=contract.total_hours,
        created_date=contract.created_date,
    )


@router.post("/{contract_id}/renewal-quote", response_model=RenewalQuoteResponse)
def create_renewal_quote(
    contract_id: str,
    data: RenewRequest,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    ids: IdGenerator = Depends(get_id_generator),
):
    quote = crud.create_renewal_quote(db, contract_id, data.total_hours, clock, ids)
    return RenewalQuoteResponse(
        quote_id=quote.id,
        client_name=quote.client_name,
        total_hours=quote.total_hours,
        created_date=quote.created_date,
    )


@router.post("/{contract_id}/recalculate-hours")
def recalculate_hours(contract_id: str, db: Session = Depends(get_db)):
    return {"id": contract_id, "usedHours": crud.recalculate_contract_hours(db, contract_id)}


@router.delete("/{contract_id}", response_model=SuccessResponse)
def delete_quote(contract_id: str, db: Session = Depends(get_db)):
    crud.delete_quote(db, contract_id)
    return SuccessResponse()
