# app/models/checkin.py
from sqlalchemy import Column, Integer, ForeignKey, DateTime, Boolean, UniqueConstraint, func
from app.db.session import Base

class CheckIn(Base):
    __tablename__ = "checkins"
    __table_args__ = (
        UniqueConstraint("user_id", "outlet_id", name="uq_checkins_user_outlet"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    outlet_id = Column(Integer, ForeignKey("outlets.id"), nullable=False, index=True)
    visit_count = Column(Integer, default=0, nullable=False, server_default='0')

    # Согласия на рассылки, собранные при первом визите
    consent_email = Column(Boolean, nullable=True)
    consent_sms = Column(Boolean, nullable=True)
    consent_push = Column(Boolean, nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
