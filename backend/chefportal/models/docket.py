from sqlalchemy import JSON, Column, ForeignKey, Text
from sqlalchemy.orm import relationship
from chefportal.database import Base


class Docket(Base):
    __tablename__ = "dockets"

    id = Column(Text, primary_key=True)
    user_id = Column(Text, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)
    passport_front_url = Column(Text)
    passport_last_url = Column(Text)
    passport_visa_urls = Column(JSON, nullable=False, default=list)
    passport_photo_url = Column(Text)
    resume_url = Column(Text)
    education_files = Column(JSON, nullable=False, default=list)
    experience_files = Column(JSON, nullable=False, default=list)
    offer_letter_url = Column(Text)
    permanent_address_url = Column(Text)
    current_address_url = Column(Text)
    other_certifications = Column(JSON, nullable=False, default=list)
    references = Column(JSON, nullable=False, default=list)
    last_updated = Column(Text, nullable=False)

    user = relationship("User", back_populates="docket")
