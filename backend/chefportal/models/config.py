from sqlalchemy import Column, Text
from chefportal.database import Base


class PortalConfig(Base):
    __tablename__ = "portal_config"

    key = Column(Text, primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)
