# contract_service/app/router/interventions_router.py
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from shared.core.database import get_db
from shared.core.schemas import SuccessResponse
from shared.utils.clock import Clock, IdGenerator, get_clock, get_id_generator
from ..crud import interventions_crud as crud
from ..schemas.interventions_schemas import (
    InterventionCreate,
    InterventionCreated,
    InterventionOut,
    InterventionUpdate,
)

router = APIRouter(prefix="/api/interventions", tags=["interventions"])


@router.get("/{intervention_id}", response_model=InterventionOut)
def get_intervention(intervention_id: str, db: Session = Depends(get_db)):
    return crud.get_intervention_or_404(db, intervention_id)


@router.post("", response_model=InterventionCreated)
def add_intervention(
    data: InterventionCreate,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    ids: IdGenerator = Depends(get_id_generator),
):
    intervention = crud.add_intervention(db, data, clock, ids)
    return InterventionCreated(id=intervention.id)


@router.put("/{intervention_id}", response_model=SuccessResponse)
def update_intervention(
    intervention_id: str,
    data: InterventionUpdate,
    db: Session = Depends(get_db),
    ids: IdGenerator = Depends(get_id_generator),
):
    crud.update_intervention(db, intervention_id, data, ids)
    return SuccessResponse()


@router.delete("/{intervention_id}", response_model=SuccessResponse)
def delete_intervention(
    intervention_id: str,
    contract_id: Optional[str] = Query(None, alias="contractId"),
    db: Session = Depends(get_db),
    ids: IdGenerator = Depends(get_id_generator),
):
    crud.delete_intervention(db, intervention_id, ids, contract_id)
    return SuccessResponse()
