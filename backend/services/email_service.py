import logging
from typing import Optional

from fastapi_mail import ConnectionConfig, FastMail, MessageSchema

logger = logging.getLogger(__name__)


def render_booking_email(business_name: str, name: str, service: str, date: str, time: str) -> str:
    return f"""
    <html>
    <body>
        <h2>Olá {name},</h2>
        <p>A sua marcação para <b>{service}</b> em <b>{date}</b> às <b>{time}</b> foi confirmada.</p>
        <hr>
        <p>Obrigado, {business_name}</p>
    </body>
    </html>
    """


class EmailConfirmation:
    """Courtesy e-mail; a failed send is logged, never raised."""

    def __init__(self, fm: FastMail, business_name: str = "AZ Clean"):
        self.fm = fm
        self.business_name = business_name

    async def send_confirmation(self, email: Optional[str], name: str, service: str, date: str, time: str):
        if not email:
            return
        try:
            message = MessageSchema(
                subject=f"{self.business_name}: marcação confirmada",
                recipients=[email],
                body=render_booking_email(self.business_name, name, service, date, time),
                subtype="html"
            )
            await self.fm.send_message(message)
            logger.info(f"Confirmation e-mail sent to {email}")
        except Exception:
            logger.exception(f"Failed to send confirmation e-mail to {email}")


class NullMailer:
    async def send_confirmation(self, email: Optional[str], name: str, service: str, date: str, time: str):
        return None


def build_mailer(settings):
    if not settings.mail_enabled:
        logger.info("MAIL_* not configured, e-mail confirmations disabled")
        return NullMailer()
    conf = ConnectionConfig(
        MAIL_USERNAME=settings.MAIL_USERNAME,
        MAIL_PASSWORD=settings.MAIL_PASSWORD,
        MAIL_FROM=settings.MAIL_FROM,
        MAIL_PORT=settings.MAIL_PORT,
        MAIL_SERVER=settings.MAIL_SERVER,
        MAIL_STARTTLS=True,
        MAIL_SSL_TLS=False,
        USE_CREDENTIALS=True,
    )
    return EmailConfirmation(FastMail(conf), settings.BUSINESS_NAME)
