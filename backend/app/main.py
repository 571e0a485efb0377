# app/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from app.core.errors import install_error_handlers
from app.core.settings import MailConfig, settings
from app.routers.health import router as health_router
from app.routers.pilot_access import router as pilot_access_router

app = FastAPI(title=settings.api_title)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.cors_origins.split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

install_error_handlers(app)

missing = MailConfig.from_settings(settings).missing()
if missing:
    logging.getLogger("uvicorn.error").warning(
        f"[main] mail not configured, pilot requests will fail until set: {', '.join(missing)}"
    )

# Routers
app.include_router(pilot_access_router)
app.include_router(health_router)
