from sqlalchemy import Column, Float, Integer, Text
from chefportal.database import Base


class AuthThrottle(Base):
    __tablename__ = "auth_throttle"

    key = Column(Text, primary_key=True)
    failed_attempts = Column(Integer, nullable=False, default=0)
    last_failed_at = Column(Float, nullable=False)
