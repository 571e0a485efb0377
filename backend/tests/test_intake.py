import pytest

from app.core.errors import ConfigurationError, ProviderError, ValidationError
from app.core.settings import MailConfig
from app.lib.intake import PilotIntakeHandler, send_confirmation_safely
from app.lib.pilot import PilotRequest, build_notification, validate_pilot_request

from conftest import FakeSender


def test_payload_coercion_trims_and_blanks():
    req = PilotRequest.from_payload(
        {"company": "  Acme  ", "email": None, "message": ["x"], "phone": 5551234, "extra": "ignored"}
    )
    assert req.company == "Acme"
    assert req.email == ""
    assert req.message == ""
    assert req.phone == "5551234"
    assert req.name == ""


@pytest.mark.parametrize("payload", [None, "text", 42, ["a", "b"]])
def test_non_object_payload_is_empty(payload):
    req = PilotRequest.from_payload(payload)
    assert req == PilotRequest()


def test_validation_order_first_failure_wins():
    with pytest.raises(ValidationError, match="Company"):
        validate_pilot_request(PilotRequest(email="bad", message=""))
    with pytest.raises(ValidationError, match="email"):
        validate_pilot_request(PilotRequest(company="Acme", email="bad"))


@pytest.mark.parametrize("email", ["ops@acme.com", "a.b+c@sub.example.co"])
def test_accepts_basic_email_shape(email):
    validate_pilot_request(PilotRequest(company="Acme", email=email, message="hi"))


@pytest.mark.parametrize("email", ["ops@acme", "@acme.com", "ops acme@x.com", "ops@.com"])
def test_rejects_bad_email_shape(email):
    # "ops@.com" has no non-space run between "@" and "."
    with pytest.raises(ValidationError):
        validate_pilot_request(PilotRequest(company="Acme", email=email, message="hi"))


def test_notification_escapes_html_and_sets_reply_to():
    req = PilotRequest(company="<Acme>", email="ops@acme.com", message="hi\nthere", industry="Pharma")
    email = build_notification(req, "from@x.com", "to@x.com")

    assert email.reply_to == "ops@acme.com"
    assert email.to == ["to@x.com"]
    assert "&lt;Acme&gt;" in email.html
    assert "<Acme>" in email.text
    assert "Name: -" in email.text
    assert "Industry: Pharma" in email.text
    assert "Phone" not in email.text


def test_handler_sends_one_required_email(mail_config, fake_sender):
    handler = PilotIntakeHandler(mail_config, sender_factory=lambda c: fake_sender)
    result = handler.handle({"company": "Acme", "email": "ops@acme.com", "message": "hi"})

    assert result.notification_id == "msg-1"
    assert len(fake_sender.sent) == 1
    assert result.confirmation is not None

    result.confirmation()
    assert fake_sender.sent[1].to == ["ops@acme.com"]


def test_handler_without_confirmation(mail_config, fake_sender):
    cfg = MailConfig(
        api_key=mail_config.api_key,
        to_email=mail_config.to_email,
        from_email=mail_config.from_email,
        send_confirmation=False,
    )
    result = PilotIntakeHandler(cfg, sender_factory=lambda c: fake_sender).handle(
        {"company": "Acme", "email": "ops@acme.com", "message": "hi"}
    )
    assert result.confirmation is None
    assert len(fake_sender.sent) == 1


def test_handler_validates_before_config(fake_sender):
    cfg = MailConfig(api_key=None, to_email=None, from_email="f@x.com")
    handler = PilotIntakeHandler(cfg, sender_factory=lambda c: fake_sender)

    with pytest.raises(ValidationError):
        handler.handle({"company": "Acme"})
    with pytest.raises(ConfigurationError) as exc:
        handler.handle({"company": "Acme", "email": "ops@acme.com", "message": "hi"})

    assert exc.value.missing == ["RESEND_API_KEY", "PILOT_TO_EMAIL"]
    assert fake_sender.sent == []


def test_blank_config_values_count_as_missing():
    class S:
        resend_api_key = "  "
        pilot_to_email = "to@x.com"
        pilot_from_email = "f@x.com"
        pilot_confirmation_enabled = True
        resend_api_url = "https://api.resend.com"
        email_timeout_seconds = 10.0

    assert MailConfig.from_settings(S()).missing() == ["RESEND_API_KEY"]


def test_provider_error_propagates(mail_config):
    sender = FakeSender(fail_on={1})
    handler = PilotIntakeHandler(mail_config, sender_factory=lambda c: sender)
    with pytest.raises(ProviderError):
        handler.handle({"company": "Acme", "email": "ops@acme.com", "message": "hi"})


def test_confirmation_failure_is_swallowed(caplog):
    class Exploding:
        def send(self, email):
            raise RuntimeError("smtp on fire")

    req = PilotRequest(company="Acme", email="ops@acme.com", message="hi")
    email = build_notification(req, "from@x.com", "to@x.com")

    send_confirmation_safely(Exploding(), email)

    assert "smtp on fire" in caplog.text
