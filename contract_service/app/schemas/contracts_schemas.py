from datetime import datetime
from typing import List, Optional

from pydantic import Field, model_validator

from shared.core.schemas import CamelModel
from ..enum.contract_enum import ContractType
from .interventions_schemas import InterventionOut


# -------------------- Create --------------------
class ContractCreate(CamelModel):
    client_name: Optional[str] = None
    client_id: Optional[str] = None
    total_hours: float = Field(ge=0)
    contract_type: ContractType = ContractType.signed
    internal_notes: Optional[str] = None
    # historical imports may set these explicitly
    created_date: Optional[datetime] = None
    signed_date: Optional[datetime] = None

    @model_validator(mode="after")
    def require_client(self):
        if not (self.client_name and self.client_name.strip()) and not self.client_id:
            raise ValueError("clientName or clientId is required")
        return self


class ContractCreated(CamelModel):
    id: str
    contract_number: Optional[int] = None
    client_name: str
    total_hours: float
    created_date: datetime
    contract_type: ContractType
    signed_date: Optional[datetime] = None


# -------------------- Output --------------------
class ContractOut(CamelModel):
    id: str
    contract_number: Optional[int] = None
    client_name: str
    client_id: Optional[str] = None
    total_hours: float
    used_hours: float
    created_date: datetime
    status: str
    is_archived: bool
    archived_at: Optional[datetime] = None
    contract_type: ContractType
    signed_date: Optional[datetime] = None
    internal_notes: Optional[str] = None
    renewal_quote_id: Optional[str] = None
    linked_contract_id: Optional[str] = None
    interventions: List[InterventionOut] = []


class ContractOverviewResponse(CamelModel):
    active_contracts: int
    archived_contracts: int
    quotes: int
    contracts_in_overage: int
    total_hours: float
    used_hours: float


# -------------------- Lifecycle --------------------
class ContractRename(CamelModel):
    client_name: str = Field(min_length=1)
    created_date: Optional[datetime] = None


class SignResponse(CamelModel):
    success: bool = True
    signed_date: datetime


class RenewRequest(CamelModel):
    total_hours: float = Field(ge=0)


class RenewResponse(CamelModel):
    id: str
    client_name: str
    total_hours: float
    created_date: datetime


class RenewalQuoteResponse(CamelModel):
    quote_id: str
    client_name: str
    total_hours: float
    created_date: datetime
