from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from shared.core.database import Base
from ..enum.contract_enum import ContractStatus, ContractType


class Contract(Base):
    __tablename__ = "contracts"

    id = Column(String(36), primary_key=True)
    contract_number = Column(Integer, unique=True, index=True)
    client_name = Column(String(200), nullable=False)
    client_id = Column(String(36), ForeignKey(
        "clients.id", ondelete="SET NULL"))
    total_hours = Column(Float, nullable=False)
    # sum of billable interventions.hours_used, maintained by the hours ledger only
    used_hours = Column(Float, nullable=False, default=0)
    created_date = Column(DateTime, nullable=False)
    status = Column(String(16), nullable=False,
                    default=ContractStatus.active.value)
    is_archived = Column(Boolean, nullable=False, default=False)
    archived_at = Column(DateTime)
    contract_type = Column(String(16), nullable=False,
                           default=ContractType.signed.value)
    signed_date = Column(DateTime)
    internal_notes = Column(Text)
    # renewal quote pairing: contract -> pending quote, quote -> contract it renews
    renewal_quote_id = Column(String(36))
    linked_contract_id = Column(String(36))

    client = relationship("Client", back_populates="contracts")
    interventions = relationship(
        "Intervention", back_populates="contract", cascade="all, delete-orphan",
        passive_deletes=True, order_by="Intervention.date")
