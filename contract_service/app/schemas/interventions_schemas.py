from datetime import datetime
from typing import Optional

from pydantic import Field

from shared.core.schemas import CamelModel


class InterventionBase(CamelModel):
    date: datetime
    description: str = Field(min_length=1)
    hours_used: float = Field(ge=0)
    technician: str = Field(min_length=1)
    location: Optional[str] = None


class InterventionCreate(InterventionBase):
    contract_id: str
    is_billable: bool = True


class InterventionUpdate(InterventionBase):
    # full replace: billable flag must be sent explicitly
    is_billable: bool
    contract_id: Optional[str] = None


class InterventionOut(InterventionBase):
    id: str
    contract_id: str
    is_billable: bool
    created_at: Optional[datetime] = None


class InterventionCreated(CamelModel):
    id: str
