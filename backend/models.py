from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func

from database import Base

STATUS_PENDING = "pending"
STATUS_CONFIRMED = "confirmed"


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    service = Column(String, nullable=False)
    date = Column(String, nullable=False)
    time = Column(String, nullable=False)
    duration = Column(Integer, nullable=False, default=60)
    name = Column(String, nullable=False)
    phone = Column(String, nullable=False)
    email = Column(String, nullable=True)
    status = Column(String, nullable=False, default=STATUS_PENDING)
    calendar_event_id = Column(String, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
