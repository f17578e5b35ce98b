import sys
import os
from types import SimpleNamespace

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

# --- path to backend ---
BASE_DIR = os.path.dirname(os.path.dirname(__file__))
BACKEND_DIR = os.path.join(BASE_DIR, "backend")
sys.path.insert(0, BACKEND_DIR)

from database import Base, init_db, make_session_factory  # noqa: E402
from repository import SqlBookingStore  # noqa: E402
from services.whatsapp_service import WhatsAppNotifier  # noqa: E402


# ------------------ doubles ------------------
class FakeCalendar:
    def __init__(self, events=None, fail_on=None):
        self.events = list(events or [])
        self.fail_on = fail_on
        self.inserted = []
        self.queries = []

    async def list_events(self, start, end):
        self.queries.append((start, end))
        if self.fail_on == "list":
            raise RuntimeError("calendar unreachable")
        return [e for e in self.events if e["start"] < end and e["end"] > start]

    async def insert_event(self, summary, description, start, end):
        if self.fail_on == "insert":
            from errors import CalendarError
            raise CalendarError("insert rejected")
        event_id = f"evt-{len(self.inserted) + 1}"
        self.inserted.append({
            "id": event_id, "summary": summary, "description": description,
            "start": start, "end": end,
        })
        return event_id


class FakeTwilioClient:
    def __init__(self, fail=False):
        self.sent = []
        self.fail = fail
        self.messages = self

    def create(self, body, from_, to):
        if self.fail:
            from twilio.base.exceptions import TwilioException
            raise TwilioException("twilio down")
        self.sent.append({"body": body, "from_": from_, "to": to})
        return SimpleNamespace(sid=f"SM{len(self.sent)}")


class FakeMailer:
    def __init__(self):
        self.sent = []

    async def send_confirmation(self, email, name, service, date, time):
        self.sent.append({"email": email, "name": name, "service": service, "date": date, "time": time})


# ------------------ fixtures ------------------
@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def store(engine):
    return SqlBookingStore(make_session_factory(engine))


@pytest.fixture
def calendar():
    return FakeCalendar()


@pytest.fixture
def twilio_client():
    return FakeTwilioClient()


@pytest.fixture
def notifier(twilio_client):
    return WhatsAppNotifier(twilio_client, "whatsapp:+14155238886")


@pytest.fixture
def mailer():
    return FakeMailer()
