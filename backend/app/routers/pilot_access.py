# app/routers/pilot_access.py
import json
import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Request, Response
from fastapi.concurrency import run_in_threadpool

from app.core.errors import ValidationError
from app.core.settings import MailConfig, settings
from app.lib.intake import PilotIntakeHandler

router = APIRouter(prefix="/api", tags=["pilot-access"])
log = logging.getLogger("uvicorn.error")

USAGE = "POST JSON {name?, company, email, message, phone?, industry?} to this endpoint"


def get_intake_handler() -> PilotIntakeHandler:
    return PilotIntakeHandler(MailConfig.from_settings(settings))


def _parse_body(raw: bytes) -> dict:
    try:
        data = json.loads(raw or b"{}")
    except (ValueError, RecursionError):
        return {}
    return data if isinstance(data, dict) else {}


@router.get("/pilot-access")
def pilot_access_usage():
    return {"ok": True, "usage": USAGE}


@router.options("/pilot-access")
def pilot_access_options():
    return Response(
        status_code=204,
        headers={
            "Access-Control-Allow-Origin": "*",
            "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
            "Access-Control-Allow-Headers": "*",
        },
    )


@router.post("/pilot-access")
async def submit_pilot_access(
    request: Request,
    background_tasks: BackgroundTasks,
    handler: PilotIntakeHandler = Depends(get_intake_handler),
):
    payload = _parse_body(await request.body())
    try:
        result = await run_in_threadpool(handler.handle, payload)
    except ValidationError as exc:
        log.info(f"[pilot] rejected: {exc.public_message}")
        raise
    if result.confirmation is not None:
        background_tasks.add_task(result.confirmation)
    return {"ok": True}
