from sqlalchemy import Boolean, Column, Text
from sqlalchemy.orm import relationship
from chefportal.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Text, primary_key=True)
    email = Column(Text, unique=True)
    uid = Column(Text, unique=True)
    display_name = Column(Text)
    first_name = Column(Text)
    last_name = Column(Text)
    phone = Column(Text)
    docket_completed = Column(Boolean, nullable=False, default=False)
    archived = Column(Boolean, nullable=False, default=False)
    archived_at = Column(Text)
    archived_reason = Column(Text)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)

    docket = relationship("Docket", back_populates="user", uselist=False, cascade="all, delete-orphan")
    contract = relationship("Contract", back_populates="user", uselist=False, cascade="all, delete-orphan")
    work_permit = relationship("WorkPermit", back_populates="user", uselist=False, cascade="all, delete-orphan")
