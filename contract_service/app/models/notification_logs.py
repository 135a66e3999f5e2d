from sqlalchemy import Column, DateTime, ForeignKey, String, Text

from shared.core.database import Base


class NotificationLog(Base):
    __tablename__ = "notification_logs"

    id = Column(String(36), primary_key=True)
    contract_id = Column(String(36), ForeignKey(
        "contracts.id", ondelete="CASCADE"), nullable=False, index=True)
    notification_type = Column(String(32), nullable=False)
    email_to = Column(Text)
    subject = Column(String(200))
    content = Column(Text)
    created_at = Column(DateTime, nullable=False)
