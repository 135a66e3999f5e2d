from datetime import datetime
from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel
from typing import Generic, List, Optional, TypeVar, Union
from uuid import UUID

from shared.utils.clock import utc_naive

# Shared properties
T = TypeVar("T")


class CamelModel(BaseModel):
    """snake_case in python, camelCase on the wire (both accepted on input)."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    @field_validator("*", mode="after")
    @classmethod
    def _naive_utc(cls, value):
        if isinstance(value, datetime):
            return utc_naive(value)
        return value


class Lookup(BaseModel):
    id: Union[str, UUID]  # accepts both UUID and str
    name: str

    model_config = ConfigDict(from_attributes=True)


class SuccessResponse(CamelModel):
    success: bool = True


class JsonOutResult(BaseModel, Generic[T]):
    data: Optional[T] = None
    status: str
    status_code: str
    message: str


class ExportResult(CamelModel):
    success: bool = True
    count: int
    path: str


class NotificationResult(CamelModel):
    sent: int
    contract_ids: List[str] = []
