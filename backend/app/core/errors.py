# app/core/errors.py
import logging
from typing import List, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

log = logging.getLogger("uvicorn.error")


class IntakeError(Exception):
    status_code = 500
    public_message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.public_message)

    def to_response(self) -> dict:
        return {"error": self.public_message}


class ValidationError(IntakeError):
    """Caller fault: a required field is missing or malformed."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.public_message = message


class ConfigurationError(IntakeError):
    """Operator fault: the deployment is missing mail settings."""

    public_message = "The pilot request service is not configured"

    def __init__(self, missing: List[str]):
        super().__init__(f"missing configuration: {', '.join(missing)}")
        self.missing = list(missing)


class ProviderError(IntakeError):
    """The email provider rejected or failed a send."""

    public_message = "Email sending failed, please try again"

    def __init__(
        self,
        detail: str,
        status_code: Optional[int] = None,
        code: Optional[str] = None,
    ):
        super().__init__(detail)
        self.detail = detail
        self.provider_status = status_code
        self.code = code

    def to_response(self) -> dict:
        body = {"error": self.public_message}
        if self.detail:
            body["detail"] = self.detail
        return body


class DomainNotVerifiedError(ProviderError):
    public_message = (
        "Email sending failed: the sending domain is not verified with the email provider"
    )


class ConfirmationSendFailure(ProviderError):
    """Best-effort confirmation mail failed. Logged, never returned."""


def install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(IntakeError)
    async def _intake_error(request: Request, exc: IntakeError):
        if isinstance(exc, ConfigurationError):
            log.error(f"[pilot] configuration error, set: {', '.join(exc.missing)}")
        elif isinstance(exc, ProviderError):
            log.error(
                f"[pilot] provider error status={exc.provider_status} "
                f"code={exc.code} detail={exc.detail}"
            )
        return JSONResponse(status_code=exc.status_code, content=exc.to_response())
