import asyncio
import logging

from twilio.base.exceptions import TwilioException
from twilio.rest import Client

from errors import NotificationError

logger = logging.getLogger(__name__)

WHATSAPP_PREFIX = "whatsapp:"


def normalize_phone(phone: str) -> str:
    phone = phone.strip()
    return phone if phone.startswith("+") else "+" + phone


def whatsapp_address(phone: str) -> str:
    if phone.startswith(WHATSAPP_PREFIX):
        return phone
    return f"{WHATSAPP_PREFIX}{normalize_phone(phone)}"


def confirmation_message(business_name: str, name: str, service: str, date: str, time: str) -> str:
    return (
        f"{business_name}: Olá {name}! Sua marcação para {service} "
        f"foi confirmada em {date} às {time}. Obrigado!"
    )


class WhatsAppNotifier:
    def __init__(self, client: Client, from_whatsapp: str, business_name: str = "AZ Clean"):
        self.client = client
        self.from_whatsapp = whatsapp_address(from_whatsapp)
        self.business_name = business_name

    def _send(self, to: str, body: str):
        return self.client.messages.create(
            body=body,
            from_=self.from_whatsapp,
            to=to
        )

    async def send_confirmation(self, name: str, phone: str, service: str, date: str, time: str):
        to = whatsapp_address(phone)
        body = confirmation_message(self.business_name, name, service, date, time)
        try:
            message = await asyncio.to_thread(self._send, to, body)
        except TwilioException as e:
            raise NotificationError(f"WhatsApp message to {to} failed: {e}")
        logger.info(f"WhatsApp confirmation sent to {to} (SID: {getattr(message, 'sid', None)})")


class NullNotifier:
    async def send_confirmation(self, name: str, phone: str, service: str, date: str, time: str):
        return None


def build_notifier(settings):
    if not settings.whatsapp_enabled:
        logger.warning("TWILIO_WHATSAPP_FROM not set, WhatsApp confirmations disabled")
        return NullNotifier()
    client = Client(settings.TWILIO_ACCOUNT_SID, settings.TWILIO_AUTH_TOKEN)
    return WhatsAppNotifier(client, settings.TWILIO_WHATSAPP_FROM, settings.BUSINESS_NAME)
