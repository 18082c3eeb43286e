from sqlalchemy import Boolean, Column, Text
from chefportal.database import Base


class OtpSession(Base):
    __tablename__ = "otp_sessions"

    id = Column(Text, primary_key=True)
    email = Column(Text, nullable=False)
    code_hash = Column(Text, nullable=False)
    expires_at = Column(Text, nullable=False)
    verified = Column(Boolean, nullable=False, default=False)
    created_at = Column(Text, nullable=False)
