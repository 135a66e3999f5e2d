from datetime import datetime
from typing import List, Optional

from pydantic import Field

from shared.core.schemas import CamelModel


class ContactIn(CamelModel):
    name: str = Field(min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = None


class ContactOut(ContactIn):
    id: str
    created_at: Optional[datetime] = None


class ClientBase(CamelModel):
    name: str = Field(min_length=1)
    address: Optional[str] = None
    phone_standard: Optional[str] = None
    internal_notes: Optional[str] = None


class ClientCreate(ClientBase):
    contacts: List[ContactIn] = []


class ClientUpdate(ClientCreate):
    pass


class ClientOut(ClientBase):
    id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    active_contracts_count: int = 0
    archived_contracts_count: int = 0
    contacts: List[ContactOut] = []


class ClientCreated(CamelModel):
    id: str
    name: str


class ClientDeleted(CamelModel):
    success: bool = True
    deleted_contracts_count: int
