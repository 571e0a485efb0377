# app/routers/health.py
from fastapi import APIRouter
from app.core.settings import MailConfig, settings

router = APIRouter(prefix="/health", tags=["health"])

@router.get("")
async def health_root():
    return {"status": "ok"}

@router.get("/config")
async def health_config():
    cfg = MailConfig.from_settings(settings)
    missing = cfg.missing()
    return {
        "ok": not missing,
        "mail": {
            "api_key":      cfg.api_key is not None,
            "to_email":     cfg.to_email is not None,
            "from_email":   bool(cfg.from_email),
            "confirmation": cfg.send_confirmation,
        },
        "missing": missing,
    }
