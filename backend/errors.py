"""
Booking errors.

Every error carries the HTTP status it maps to; the handlers in ``main``
turn them into JSON responses.
"""


class BookingError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(BookingError):
    status_code = 400


class ConflictError(BookingError):
    status_code = 409


class InternalError(BookingError):
    status_code = 500


class CalendarError(InternalError):
    pass


class StorageError(InternalError):
    pass


class NotificationError(InternalError):
    pass
