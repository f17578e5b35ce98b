"""
Google Calendar Service
Checks availability and creates booking events on a shared calendar,
authenticated as a service account.
"""
import json
import logging
import time
from datetime import datetime
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx
import jwt

from errors import CalendarError
from timeutils import to_rfc3339

logger = logging.getLogger(__name__)

GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_CALENDAR_API = "https://www.googleapis.com/calendar/v3"
CALENDAR_SCOPE = "https://www.googleapis.com/auth/calendar"
JWT_BEARER_GRANT = "urn:ietf:params:oauth:grant-type:jwt-bearer"

# refresh this many seconds before Google says the token expires
TOKEN_EXPIRY_MARGIN = 300


class ServiceAccountTokenSource:
    """
    Issues OAuth access tokens for a Google service account.

    The key is read on first use, from the JSON string when given,
    otherwise from ``credentials_file``. Tokens are cached until
    shortly before they expire.
    """

    def __init__(self, credentials_json: Optional[str] = None,
                 credentials_file: str = "./service-account-key.json"):
        self.credentials_json = credentials_json
        self.credentials_file = credentials_file
        self._info: Optional[Dict[str, Any]] = None
        self._token: Optional[str] = None
        self._expires_at = 0.0

    def _load_info(self) -> Dict[str, Any]:
        if self._info is None:
            try:
                if self.credentials_json:
                    info = json.loads(self.credentials_json)
                else:
                    with open(self.credentials_file, encoding="utf-8") as f:
                        info = json.load(f)
            except (OSError, ValueError) as e:
                raise CalendarError(f"Could not read service account credentials: {e}")
            if not isinstance(info, dict) or not info.get("client_email") or not info.get("private_key"):
                raise CalendarError("Service account credentials need client_email and private_key")
            self._info = info
        return self._info

    def _assertion(self, info: Dict[str, Any], now: int) -> str:
        claims = {
            "iss": info["client_email"],
            "scope": CALENDAR_SCOPE,
            "aud": info.get("token_uri", GOOGLE_TOKEN_URL),
            "iat": now,
            "exp": now + 3600,
        }
        try:
            return jwt.encode(claims, info["private_key"], algorithm="RS256")
        except (ValueError, TypeError, jwt.PyJWTError) as e:
            raise CalendarError(f"Invalid service account private key: {e}")

    async def get_token(self, client: httpx.AsyncClient) -> str:
        if self._token and time.time() < self._expires_at:
            return self._token

        info = self._load_info()
        now = int(time.time())
        response = await client.post(
            info.get("token_uri", GOOGLE_TOKEN_URL),
            data={"grant_type": JWT_BEARER_GRANT, "assertion": self._assertion(info, now)},
        )
        if response.status_code != 200:
            raise CalendarError(f"Token request failed: {response.text}")

        tokens = response.json()
        access_token = tokens.get("access_token")
        if not access_token:
            raise CalendarError("No access token in token response")

        self._token = access_token
        self._expires_at = now + int(tokens.get("expires_in", 3600)) - TOKEN_EXPIRY_MARGIN
        logger.info("Google Calendar access token refreshed")
        return access_token


class GoogleCalendar:
    def __init__(self, token_source, calendar_id: str = "primary",
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.token_source = token_source
        self.calendar_id = calendar_id
        self.transport = transport

    @property
    def events_url(self) -> str:
        return f"{GOOGLE_CALENDAR_API}/calendars/{quote(self.calendar_id, safe='')}/events"

    async def _request(self, method: str, **kwargs) -> Dict[str, Any]:
        try:
            async with httpx.AsyncClient(transport=self.transport) as client:
                token = await self.token_source.get_token(client)
                response = await client.request(
                    method,
                    self.events_url,
                    headers={"Authorization": f"Bearer {token}"},
                    **kwargs
                )
        except httpx.HTTPError as e:
            raise CalendarError(f"Google Calendar request failed: {e}")

        if response.status_code not in [200, 201]:
            raise CalendarError(
                f"Google Calendar returned {response.status_code}: {response.text}"
            )
        return response.json()

    async def list_events(self, start: datetime, end: datetime) -> List[Dict[str, Any]]:
        """Events overlapping [start, end)."""
        data = await self._request(
            "GET",
            params={
                "timeMin": to_rfc3339(start),
                "timeMax": to_rfc3339(end),
                "singleEvents": "true",
                "orderBy": "startTime",
            },
        )
        return data.get("items") or []

    async def insert_event(self, summary: str, description: str,
                           start: datetime, end: datetime) -> str:
        event_data = {
            "summary": summary,
            "description": description,
            "start": {"dateTime": to_rfc3339(start)},
            "end": {"dateTime": to_rfc3339(end)},
        }
        event = await self._request("POST", json=event_data)
        event_id = event.get("id")
        if not event_id:
            raise CalendarError("Google Calendar did not return an event id")
        logger.info(f"Google Calendar event created: {event_id}")
        return event_id


async def is_available(calendar, start: datetime, end: datetime) -> bool:
    events = await calendar.list_events(start, end)
    return len(events) == 0
