# app/core/email.py
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Protocol

import requests

from app.core.errors import DomainNotVerifiedError, ProviderError

log = logging.getLogger("uvicorn.error")

# Resend reports an unverified sender as a generic validation_error today;
# the dedicated names are checked first, the message text is the fallback.
DOMAIN_NOT_VERIFIED_CODES = {"domain_not_verified", "unverified_domain"}
DOMAIN_NOT_VERIFIED_HINTS = ("not verified", "verify a domain", "verify your domain")


@dataclass
class OutboundEmail:
    from_email: str
    to: List[str]
    subject: str
    text: str
    html: str = ""
    reply_to: Optional[str] = None
    tags: List[dict] = field(default_factory=list)


class EmailSender(Protocol):
    def send(self, email: OutboundEmail) -> str: ...


def scrub_secret(text: str, secret: Optional[str]) -> str:
    if secret and text:
        return text.replace(secret, "***")
    return text


def _is_domain_not_verified(code: Optional[str], message: str) -> bool:
    if code and code.lower() in DOMAIN_NOT_VERIFIED_CODES:
        return True
    lowered = (message or "").lower()
    return "domain" in lowered and any(h in lowered for h in DOMAIN_NOT_VERIFIED_HINTS)


class ResendClient:
    """Minimal client for Resend's `POST /emails` endpoint."""

    def __init__(self, api_key: str, base_url: str = "https://api.resend.com", timeout: float = 10.0):
        self._api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _payload(self, email: OutboundEmail) -> dict:
        body = {
            "from": email.from_email,
            "to": list(email.to),
            "subject": email.subject,
            "text": email.text,
        }
        if email.html:
            body["html"] = email.html
        if email.reply_to:
            body["reply_to"] = email.reply_to
        if email.tags:
            body["tags"] = email.tags
        return body

    def send(self, email: OutboundEmail) -> str:
        url = f"{self.base_url}/emails"
        try:
            resp = requests.post(
                url,
                json=self._payload(email),
                headers={
                    "Authorization": f"Bearer {self._api_key}",
                    "Content-Type": "application/json",
                },
                timeout=self.timeout,
            )
        except requests.Timeout as exc:
            raise ProviderError(
                f"email provider timed out after {self.timeout}s", code="timeout"
            ) from exc
        except requests.RequestException as exc:
            raise ProviderError(
                scrub_secret(f"email provider unreachable: {exc}", self._api_key),
                code="network_error",
            ) from exc

        try:
            data = resp.json()
        except ValueError:
            data = None
        if not isinstance(data, dict):
            data = {}

        if resp.status_code >= 400:
            code = data.get("name")
            message = str(data.get("message") or resp.text or f"HTTP {resp.status_code}")
            detail = scrub_secret(message, self._api_key)
            if _is_domain_not_verified(code, message):
                raise DomainNotVerifiedError(detail, status_code=resp.status_code, code=code)
            raise ProviderError(detail, status_code=resp.status_code, code=code)

        message_id = str(data.get("id") or "")
        log.info(f"[resend] sent subject={email.subject!r} id={message_id}")
        return message_id
