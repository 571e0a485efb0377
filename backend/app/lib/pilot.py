from html import escape
import re
from typing import Any, List, Tuple

from pydantic import BaseModel, field_validator

from app.core.email import OutboundEmail
from app.core.errors import ValidationError

EMAIL_RE = re.compile(r"\S+@\S+\.\S+")


class PilotRequest(BaseModel):
    name: str = ""
    company: str = ""
    email: str = ""
    message: str = ""
    phone: str = ""
    industry: str = ""
    # honeypot; hidden on the form so only bots fill it
    website: str = ""

    @field_validator("*", mode="before")
    @classmethod
    def _as_trimmed_text(cls, v: Any) -> str:
        if v is None or isinstance(v, (dict, list, tuple, set)):
            return ""
        return str(v).strip()

    @classmethod
    def from_payload(cls, payload: Any) -> "PilotRequest":
        if not isinstance(payload, dict):
            payload = {}
        known = {k: payload[k] for k in cls.model_fields if k in payload}
        return cls(**known)

    @property
    def is_spam(self) -> bool:
        return bool(self.website)


def validate_pilot_request(req: PilotRequest) -> None:
    """Raise ValidationError for the first bad field (company, email, message)."""
    if not req.company:
        raise ValidationError("Company is required")
    if not req.email or not EMAIL_RE.fullmatch(req.email):
        raise ValidationError("A valid email address is required")
    if not req.message:
        raise ValidationError("Message is required")


def _fields(req: PilotRequest) -> List[Tuple[str, str]]:
    rows = [
        ("Name", req.name or "-"),
        ("Company", req.company),
        ("Email", req.email),
    ]
    if req.phone:
        rows.append(("Phone", req.phone))
    if req.industry:
        rows.append(("Industry", req.industry))
    return rows


def build_notification(req: PilotRequest, from_email: str, to_email: str) -> OutboundEmail:
    rows = _fields(req)
    text = "New pilot access request\n\n"
    text += "\n".join(f"{k}: {v}" for k, v in rows)
    text += f"\n\nMessage:\n{req.message}\n"

    html = "<h2>New Pilot Access Request</h2>\n"
    html += "\n".join(f"<p><b>{k}:</b> {escape(v)}</p>" for k, v in rows)
    html += f"\n<p><b>Message:</b><br/>{escape(req.message).replace(chr(10), '<br/>')}</p>\n"

    return OutboundEmail(
        from_email=from_email,
        to=[to_email],
        subject=f"New pilot request – {req.company}",
        text=text,
        html=html,
        reply_to=req.email,
        tags=[{"name": "category", "value": "pilot_request"}],
    )


def build_confirmation(req: PilotRequest, from_email: str, reply_to: str) -> OutboundEmail:
    greeting = f"Hi {req.name}," if req.name else "Hi,"
    text = (
        f"{greeting}\n\n"
        f"Thanks for requesting pilot access for {req.company}. "
        "Our team will get back to you shortly.\n\n"
        f"Your message:\n{req.message}\n"
    )
    html = (
        f"<p>{escape(greeting)}</p>\n"
        f"<p>Thanks for requesting pilot access for <b>{escape(req.company)}</b>. "
        "Our team will get back to you shortly.</p>\n"
        f"<blockquote>{escape(req.message)}</blockquote>\n"
    )
    return OutboundEmail(
        from_email=from_email,
        to=[req.email],
        subject="We received your pilot request",
        text=text,
        html=html,
        reply_to=reply_to,
        tags=[{"name": "category", "value": "pilot_confirmation"}],
    )
