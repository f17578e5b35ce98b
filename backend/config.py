from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


# ================== SETTINGS ==================
class Settings(BaseSettings):
    # Google Calendar (service account)
    GOOGLE_SERVICE_ACCOUNT_JSON: Optional[str] = None
    GOOGLE_SERVICE_ACCOUNT_FILE: str = "./service-account-key.json"
    GCAL_ID: str = "primary"
    DEFAULT_TZ: str = "Europe/Lisbon"

    # Datastore, persistence is skipped when unset
    DATABASE_URL: Optional[str] = None

    # Twilio WhatsApp, notification is skipped when the sender is unset
    TWILIO_ACCOUNT_SID: Optional[str] = None
    TWILIO_AUTH_TOKEN: Optional[str] = None
    TWILIO_WHATSAPP_FROM: Optional[str] = None

    # E-mail confirmation (optional)
    MAIL_USERNAME: Optional[str] = None
    MAIL_PASSWORD: Optional[str] = None
    MAIL_FROM: Optional[str] = None
    MAIL_SERVER: str = "smtp.gmail.com"
    MAIL_PORT: int = 587

    BUSINESS_NAME: str = "AZ Clean"
    PORT: int = 3000
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="allow"
    )

    @property
    def persistence_enabled(self) -> bool:
        return bool(self.DATABASE_URL)

    @property
    def whatsapp_enabled(self) -> bool:
        return bool(self.TWILIO_WHATSAPP_FROM)

    @property
    def mail_enabled(self) -> bool:
        return bool(self.MAIL_USERNAME and self.MAIL_PASSWORD and self.MAIL_FROM)
