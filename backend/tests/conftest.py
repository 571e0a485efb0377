import os

os.environ.setdefault("CORS_ORIGINS", "http://localhost")
os.environ.setdefault("RESEND_API_KEY", "re_test_secret_key")
os.environ.setdefault("PILOT_TO_EMAIL", "pilots@enthalpy.example")
os.environ.setdefault("PILOT_FROM_EMAIL", "Pilot Access <pilot@enthalpy.example>")

import pytest

from app.core.errors import ProviderError
from app.core.settings import MailConfig


class FakeSender:
    def __init__(self, fail_on=()):
        self.sent = []
        self.fail_on = set(fail_on)

    def send(self, email):
        self.sent.append(email)
        if len(self.sent) in self.fail_on:
            raise ProviderError("boom", status_code=500, code="application_error")
        return f"msg-{len(self.sent)}"


@pytest.fixture
def mail_config():
    return MailConfig(
        api_key="re_test_secret_key",
        to_email="pilots@enthalpy.example",
        from_email="Pilot Access <pilot@enthalpy.example>",
        send_confirmation=True,
    )


@pytest.fixture
def fake_sender():
    return FakeSender()
