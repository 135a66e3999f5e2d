from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from shared.core.database import Base


class Intervention(Base):
    __tablename__ = "interventions"

    id = Column(String(36), primary_key=True)
    contract_id = Column(String(36), ForeignKey(
        "contracts.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(DateTime, nullable=False)
    description = Column(Text, nullable=False)
    hours_used = Column(Float, nullable=False)
    technician = Column(String(120), nullable=False)
    is_billable = Column(Boolean, nullable=False, default=True)
    location = Column(String(200))
    created_at = Column(DateTime)

    contract = relationship("Contract", back_populates="interventions")
