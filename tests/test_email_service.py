import asyncio

from config import Settings
from services.email_service import EmailConfirmation, NullMailer, build_mailer


class FakeFastMail:
    def __init__(self, fail=False):
        self.messages = []
        self.fail = fail

    async def send_message(self, message):
        if self.fail:
            raise ConnectionError("smtp down")
        self.messages.append(message)


def test_sends_html_confirmation():
    fm = FakeFastMail()
    mailer = EmailConfirmation(fm, "AZ Clean")

    asyncio.run(mailer.send_confirmation("ana@azclean.pt", "Ana", "Limpeza", "2025-06-01", "10:00"))

    message = fm.messages[0]
    assert message.subject == "AZ Clean: marcação confirmada"
    assert "Limpeza" in message.body
    assert "2025-06-01" in message.body


def test_skips_without_address():
    fm = FakeFastMail()
    asyncio.run(EmailConfirmation(fm).send_confirmation(None, "Ana", "Limpeza", "2025-06-01", "10:00"))
    assert fm.messages == []


def test_failure_is_not_raised():
    mailer = EmailConfirmation(FakeFastMail(fail=True))
    asyncio.run(mailer.send_confirmation("ana@azclean.pt", "Ana", "Limpeza", "2025-06-01", "10:00"))


def test_build_mailer_disabled_by_default():
    assert isinstance(build_mailer(Settings(_env_file=None)), NullMailer)
