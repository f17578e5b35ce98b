import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from errors import StorageError
from models import Booking, STATUS_CONFIRMED, STATUS_PENDING

logger = logging.getLogger(__name__)


class SqlBookingStore:
    """Bookings persisted through SQLAlchemy."""

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def create_pending(self, service: str, date: str, time: str, duration: int,
                       name: str, phone: str, email: Optional[str]) -> int:
        db = self.session_factory()
        try:
            booking = Booking(
                service=service,
                date=date,
                time=time,
                duration=duration,
                name=name,
                phone=phone,
                email=email,
                status=STATUS_PENDING,
            )
            db.add(booking)
            db.commit()
            db.refresh(booking)
            logger.info(f"Booking {booking.id} stored as pending")
            return booking.id
        except SQLAlchemyError as e:
            db.rollback()
            raise StorageError(f"Failed to store booking: {e}")
        finally:
            db.close()

    def confirm(self, booking_id: int, event_id: str) -> None:
        db = self.session_factory()
        try:
            booking = db.get(Booking, booking_id)
            if booking is None:
                raise StorageError(f"Booking {booking_id} not found")
            booking.status = STATUS_CONFIRMED
            booking.calendar_event_id = event_id
            db.commit()
            logger.info(f"Booking {booking_id} confirmed with event {event_id}")
        except SQLAlchemyError as e:
            db.rollback()
            raise StorageError(f"Failed to confirm booking {booking_id}: {e}")
        finally:
            db.close()

    def get(self, booking_id: int) -> Optional[Booking]:
        db = self.session_factory()
        try:
            return db.get(Booking, booking_id)
        finally:
            db.close()


class NullBookingStore:
    """Used when no DATABASE_URL is configured."""

    def create_pending(self, *args, **kwargs) -> None:
        return None

    def confirm(self, booking_id, event_id) -> None:
        pass

    def get(self, booking_id) -> None:
        return None
