from sqlalchemy import Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from shared.core.database import Base


class Client(Base):
    __tablename__ = "clients"

    id = Column(String(36), primary_key=True)
    name = Column(String(200), nullable=False, index=True)
    address = Column(Text)
    phone_standard = Column(String(64))
    internal_notes = Column(Text)
    created_at = Column(DateTime)
    updated_at = Column(DateTime)

    contacts = relationship(
        "ContactPerson", back_populates="client", cascade="all, delete-orphan",
        order_by="ContactPerson.name")
    contracts = relationship("Contract", back_populates="client")


class ContactPerson(Base):
    __tablename__ = "contact_persons"

    id = Column(String(36), primary_key=True)
    client_id = Column(String(36), ForeignKey(
        "clients.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(200), nullable=False)
    email = Column(String(200))
    phone = Column(String(64))
    created_at = Column(DateTime)

    client = relationship("Client", back_populates="contacts")
