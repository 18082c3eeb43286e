from sqlalchemy import JSON, Column, Text
from chefportal.database import Base


class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(Text, primary_key=True)
    action = Column(Text, nullable=False)
    entity_type = Column(Text, nullable=False)
    entity_id = Column(Text)
    user_id = Column(Text)
    admin_email = Column(Text)
    description = Column(Text)
    severity = Column(Text, nullable=False, default="info")
    # "metadata" is reserved on declarative classes
    details = Column("metadata", JSON)
    created_at = Column(Text, nullable=False)
