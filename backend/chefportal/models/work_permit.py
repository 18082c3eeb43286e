from sqlalchemy import Column, ForeignKey, Text
from sqlalchemy.orm import relationship
from chefportal.database import Base


class WorkPermit(Base):
    __tablename__ = "work_permits"

    id = Column(Text, primary_key=True)
    user_id = Column(Text, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)
    status = Column(Text, nullable=False, default="preparation")
    tracking_code = Column(Text)
    application_date = Column(Text)
    final_docket_url = Column(Text)
    notes = Column(Text)
    created_at = Column(Text, nullable=False)
    last_updated = Column(Text, nullable=False)

    user = relationship("User", back_populates="work_permit")
