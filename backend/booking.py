"""
Booking flow.

check availability -> store pending -> create calendar event
-> confirm stored booking -> notify customer

Steps run one after another and nothing is rolled back: a failure
leaves whatever already happened in place (e.g. a pending row with
no calendar event).
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from errors import ConflictError, ValidationError
from schemas import BookingRequest
from services.calendar_service import is_available
from services.email_service import NullMailer
from timeutils import booking_window

logger = logging.getLogger(__name__)

DEFAULT_DURATION = 60
MAX_DURATION = 24 * 60
REQUIRED_FIELDS = ("service", "date", "time", "name", "phone")


@dataclass
class BookingResult:
    event_id: str
    booking_id: Optional[int] = None


def validate_request(request: BookingRequest) -> int:
    """Check required fields and return the duration in minutes."""
    if any(not (getattr(request, field) or "").strip() for field in REQUIRED_FIELDS):
        raise ValidationError("Missing required fields")
    return resolve_duration(request.duration)


def resolve_duration(duration: Optional[int]) -> int:
    if duration is None:
        return DEFAULT_DURATION
    if not 0 < duration <= MAX_DURATION:
        raise ValidationError(f"Duration must be between 1 and {MAX_DURATION} minutes")
    return duration


def event_summary(business_name: str, service: str, name: str) -> str:
    return f"{business_name} — {service} - {name}"


def event_description(name: str, phone: str, email: Optional[str], service: str) -> str:
    return (
        f"Cliente: {name}\n"
        f"Telefone: {phone}\n"
        f"Email: {email or '-'}\n"
        f"Serviço: {service}"
    )


class BookingService:
    def __init__(self, calendar, store, notifier, mailer=None,
                 timezone: str = "Europe/Lisbon", business_name: str = "AZ Clean"):
        self.calendar = calendar
        self.store = store
        self.notifier = notifier
        self.mailer = mailer or NullMailer()
        self.timezone = timezone
        self.business_name = business_name

    async def _ensure_available(self, start: datetime, end: datetime):
        if not await is_available(self.calendar, start, end):
            raise ConflictError("Slot not available")

    async def check_availability(self, date: str, time: str, duration: Optional[int] = None) -> bool:
        if not date or not time:
            raise ValidationError("Missing required fields")
        start, end = booking_window(date, time, resolve_duration(duration), self.timezone)
        return await is_available(self.calendar, start, end)

    async def book(self, request: BookingRequest) -> BookingResult:
        duration = validate_request(request)
        start, end = booking_window(request.date, request.time, duration, self.timezone)

        await self._ensure_available(start, end)

        booking_id = self.store.create_pending(
            service=request.service,
            date=request.date,
            time=request.time,
            duration=duration,
            name=request.name,
            phone=request.phone,
            email=request.email,
        )

        event_id = await self.calendar.insert_event(
            summary=event_summary(self.business_name, request.service, request.name),
            description=event_description(request.name, request.phone, request.email, request.service),
            start=start,
            end=end,
        )

        if booking_id is not None:
            self.store.confirm(booking_id, event_id)

        await self.notifier.send_confirmation(
            name=request.name,
            phone=request.phone,
            service=request.service,
            date=request.date,
            time=request.time,
        )
        await self.mailer.send_confirmation(
            email=request.email,
            name=request.name,
            service=request.service,
            date=request.date,
            time=request.time,
        )

        logger.info(f"Booking confirmed: event={event_id} booking={booking_id}")
        return BookingResult(event_id=event_id, booking_id=booking_id)
