from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import ValidationError

from app.api.adapters import from_retell, from_vapi, to_retell, to_vapi
from app.api.deps import get_booking_service
from app.api.dispatcher import dispatch
from app.core.config import settings
from app.core.logger import logger
from app.core.security import verify_webhook_secret
from app.models.events import CallLifecycle, ToolInvocation
from app.models.retell_models import RetellAck, RetellWebhookPayload
from app.models.vapi_models import VapiWebhookPayload
from app.services.booking_service import BookingService
from app.services.llm_service import get_assistant_config

router = APIRouter(dependencies=[Depends(verify_webhook_secret)])


async def _read_body(request: Request) -> Dict[str, Any]:
    try:
        body = await request.json()
    except ValueError:
        body = None
    if not isinstance(body, dict) or not body:
        logger.warning("🚫 Webhook request without a JSON body")
        raise HTTPException(status_code=400, detail="Request body must be a JSON object")
    return body


def _log_lifecycle(provider: str, event: CallLifecycle):
    if event.event == "ended":
        logger.info(f"📊 [{provider}] Call ended | ID: {event.call_id} | Duration: {event.duration_seconds}s")
    elif event.event == "started":
        logger.info(f"📞 [{provider}] Call started: {event.call_id}")
    else:
        logger.debug(f"ℹ️ [{provider}] {event.raw_type} for call {event.call_id}")


@router.post("/api/webhook")
async def vapi_webhook(
    request: Request,
    booking_service: BookingService = Depends(get_booking_service),
) -> Dict[str, Any]:
    """
    Vapi server URL: tool calls are answered in one batch with the
    toolCallIds echoed back; everything else is acknowledged.
    """
    body = await _read_body(request)
    if not isinstance(body.get("message"), dict):
        raise HTTPException(status_code=400, detail="Missing 'message' envelope")

    try:
        payload = VapiWebhookPayload.model_validate(body)
    except ValidationError as e:
        logger.warning(f"🚫 Malformed Vapi payload: {e.errors()}")
        raise HTTPException(status_code=400, detail="Malformed Vapi message")

    msg_type = payload.message.type

    if msg_type == "assistant-request":
        logger.info("Handling assistant-request")
        return {"assistant": get_assistant_config(settings.SERVER_URL)}

    events = from_vapi(payload)
    if msg_type != "tool-calls":
        for event in events:
            _log_lifecycle("vapi", event)
        return {}

    results = []
    for invocation in events:
        results.append((invocation, await dispatch(invocation, booking_service)))
    return to_vapi(results)


@router.post("/webhook/retell")
async def retell_webhook(
    request: Request,
    booking_service: BookingService = Depends(get_booking_service),
) -> Dict[str, Any]:
    """
    Retell sends tool calls (with `name`) and lifecycle events (with `event`)
    to the same URL.
    """
    body = await _read_body(request)
    try:
        payload = RetellWebhookPayload.model_validate(body)
    except ValidationError as e:
        logger.warning(f"🚫 Malformed Retell payload: {e.errors()}")
        raise HTTPException(status_code=400, detail="Malformed Retell payload")

    event = from_retell(payload)
    if isinstance(event, ToolInvocation):
        return to_retell(event, await dispatch(event, booking_service))

    _log_lifecycle("retell", event)
    return RetellAck().model_dump()
