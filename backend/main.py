"""
Booking API.

Run with ``python main.py``, or through uvicorn's factory mode:

    uvicorn --factory main:create_app --port 3000
"""
import logging
from typing import Optional

from fastapi import Depends, FastAPI, Query, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from booking import BookingService
from config import Settings
from database import init_db, make_engine, make_session_factory
from errors import BookingError, InternalError
from repository import NullBookingStore, SqlBookingStore
from schemas import BookingRequest
from services.calendar_service import GoogleCalendar, ServiceAccountTokenSource
from services.email_service import build_mailer
from services.whatsapp_service import build_notifier

logger = logging.getLogger(__name__)


# ================== COLLABORATORS ==================
def build_calendar(settings: Settings) -> GoogleCalendar:
    token_source = ServiceAccountTokenSource(
        credentials_json=settings.GOOGLE_SERVICE_ACCOUNT_JSON,
        credentials_file=settings.GOOGLE_SERVICE_ACCOUNT_FILE,
    )
    return GoogleCalendar(token_source, calendar_id=settings.GCAL_ID)


def build_store(settings: Settings):
    if not settings.persistence_enabled:
        logger.warning("DATABASE_URL not set, bookings will not be stored")
        return NullBookingStore()
    engine = make_engine(settings.DATABASE_URL)
    init_db(engine)
    return SqlBookingStore(make_session_factory(engine))


# ================== ERRORS ==================
async def booking_error_handler(request: Request, exc: BookingError):
    if isinstance(exc, InternalError):
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return JSONResponse(status_code=exc.status_code,
                            content={"error": "Erro interno", "details": exc.message})
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400,
                        content={"error": "Invalid request", "details": jsonable_encoder(exc.errors())})


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"{request.method} {request.url.path} failed")
    return JSONResponse(status_code=500, content={"error": "Erro interno", "details": str(exc)})


# ================== APP ==================
def get_booking_service(request: Request) -> BookingService:
    return request.app.state.booking_service


def create_app(settings: Optional[Settings] = None, *, calendar=None, store=None,
               notifier=None, mailer=None) -> FastAPI:
    settings = settings or Settings()

    booking_service = BookingService(
        calendar=calendar if calendar is not None else build_calendar(settings),
        store=store if store is not None else build_store(settings),
        notifier=notifier if notifier is not None else build_notifier(settings),
        mailer=mailer if mailer is not None else build_mailer(settings),
        timezone=settings.DEFAULT_TZ,
        business_name=settings.BUSINESS_NAME,
    )

    app = FastAPI(title=f"{settings.BUSINESS_NAME} Booking API")
    app.state.settings = settings
    app.state.booking_service = booking_service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(BookingError, booking_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    # ================== API ==================
    @app.post("/api/book")
    async def book(data: BookingRequest, booking_service: BookingService = Depends(get_booking_service)):
        result = await booking_service.book(data)
        return {"success": True, "eventId": result.event_id, "bookingId": result.booking_id}

    @app.get("/api/availability")
    async def availability(
        date: Optional[str] = None,
        time: Optional[str] = None,
        duration: Optional[int] = Query(default=None),
        booking_service: BookingService = Depends(get_booking_service),
    ):
        return {"available": await booking_service.check_availability(date, time, duration)}

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


if __name__ == "__main__":
    import uvicorn

    settings = Settings()
    logging.basicConfig(level=settings.LOG_LEVEL,
                        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    app = create_app(settings)
    logger.info(f"Server running on port {settings.PORT}")
    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)
