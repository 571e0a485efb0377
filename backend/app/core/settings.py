# app/core/settings.py
from dataclasses import dataclass
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    api_title: str = Field(default="Pilot Intake API", alias="API_TITLE")
    cors_origins: str = Field(default="http://localhost:3000", alias="CORS_ORIGINS")

    # Resend credentials + addresses; missing values only fail at request time
    resend_api_key: Optional[str] = Field(default=None, alias="RESEND_API_KEY")
    resend_api_url: str = Field(default="https://api.resend.com", alias="RESEND_API_URL")
    pilot_to_email: Optional[str] = Field(default=None, alias="PILOT_TO_EMAIL")
    pilot_from_email: str = Field(
        default="Pilot Access <onboarding@resend.dev>",
        alias="PILOT_FROM_EMAIL",
    )

    # Send a "we got it" mail back to the submitter after the internal one
    pilot_confirmation_enabled: bool = Field(default=True, alias="PILOT_CONFIRMATION_ENABLED")

    email_timeout_seconds: float = Field(default=10.0, alias="EMAIL_TIMEOUT_SECONDS")


settings = Settings()


@dataclass(frozen=True)
class MailConfig:
    """Mail settings handed to the intake handler when it is built."""

    api_key: Optional[str]
    to_email: Optional[str]
    from_email: str
    send_confirmation: bool = True
    api_url: str = "https://api.resend.com"
    timeout: float = 10.0

    @classmethod
    def from_settings(cls, s: Settings) -> "MailConfig":
        return cls(
            api_key=(s.resend_api_key or "").strip() or None,
            to_email=(s.pilot_to_email or "").strip() or None,
            from_email=s.pilot_from_email,
            send_confirmation=s.pilot_confirmation_enabled,
            api_url=s.resend_api_url,
            timeout=s.email_timeout_seconds,
        )

    def missing(self) -> List[str]:
        out = []
        if not self.api_key:
            out.append("RESEND_API_KEY")
        if not self.to_email:
            out.append("PILOT_TO_EMAIL")
        return out
