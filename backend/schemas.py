from typing import Optional

from pydantic import BaseModel


class BookingRequest(BaseModel):
    # required fields are checked by BookingService so a missing one is a 400
    service: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None
    duration: Optional[int] = None
    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
