import logging
from dataclasses import dataclass
from functools import partial
from typing import Any, Callable, Optional

from app.core.email import EmailSender, OutboundEmail, ResendClient, scrub_secret
from app.core.errors import (
    ConfigurationError,
    ConfirmationSendFailure,
    IntakeError,
    ProviderError,
)
from app.core.settings import MailConfig
from app.lib.pilot import (
    PilotRequest,
    build_confirmation,
    build_notification,
    validate_pilot_request,
)

log = logging.getLogger("uvicorn.error")


def resend_sender(config: MailConfig) -> EmailSender:
    return ResendClient(config.api_key or "", base_url=config.api_url, timeout=config.timeout)


@dataclass
class IntakeResult:
    spam: bool = False
    notification_id: Optional[str] = None
    # run after the response is sent; failures stay inside it
    confirmation: Optional[Callable[[], None]] = None


def send_confirmation_safely(sender: EmailSender, email: OutboundEmail) -> None:
    try:
        sender.send(email)
    except Exception as exc:
        failure = exc if isinstance(exc, ConfirmationSendFailure) else ConfirmationSendFailure(str(exc))
        log.warning(f"[pilot] confirmation to {email.to} not sent: {failure.detail}")


class PilotIntakeHandler:
    """
    Validates one pilot access request and forwards it by email.

    Holds only its config and a sender factory, so a single instance can be
    shared by concurrent requests.
    """

    def __init__(
        self,
        config: MailConfig,
        sender_factory: Callable[[MailConfig], EmailSender] = resend_sender,
    ):
        self.config = config
        self._sender_factory = sender_factory

    def handle(self, payload: Any) -> IntakeResult:
        req = PilotRequest.from_payload(payload)

        if req.is_spam:
            log.info("[pilot] honeypot filled, dropping submission")
            return IntakeResult(spam=True)

        validate_pilot_request(req)

        missing = self.config.missing()
        if missing:
            raise ConfigurationError(missing)

        sender = self._sender_factory(self.config)
        notification = build_notification(req, self.config.from_email, self.config.to_email)
        try:
            message_id = sender.send(notification)
        except IntakeError:
            raise
        except Exception as exc:
            detail = scrub_secret(f"{type(exc).__name__}: {exc}", self.config.api_key)
            raise ProviderError(detail, code="unexpected_error") from exc
        log.info(f"[pilot] request from company={req.company!r} reply_to={req.email} id={message_id}")

        confirmation = None
        if self.config.send_confirmation:
            email = build_confirmation(req, self.config.from_email, self.config.to_email)
            confirmation = partial(send_confirmation_safely, sender, email)

        return IntakeResult(notification_id=message_id, confirmation=confirmation)
