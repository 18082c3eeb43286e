from sqlalchemy import Boolean, Column, ForeignKey, Text
from sqlalchemy.orm import relationship
from chefportal.database import Base


class Contract(Base):
    __tablename__ = "contracts"

    id = Column(Text, primary_key=True)
    user_id = Column(Text, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)
    company_contract_original_url = Column(Text)
    company_contract_signed_url = Column(Text)
    company_contract_status = Column(Text, nullable=False, default="not-started")
    company_contract_signature_valid = Column(Boolean, nullable=True)
    job_offer_original_url = Column(Text)
    job_offer_signed_url = Column(Text)
    job_offer_status = Column(Text, nullable=False, default="not-started")
    job_offer_signature_valid = Column(Boolean, nullable=True)
    notes = Column(Text)
    created_at = Column(Text, nullable=False)
    last_updated = Column(Text, nullable=False)

    user = relationship("User", back_populates="contract")
