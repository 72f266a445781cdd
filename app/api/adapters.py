"""
Translate provider wire payloads into normalized events and back.
"""
from typing import List, Optional, Sequence, Tuple

from app.models.events import CallLifecycle, InboundEvent, ToolInvocation
from app.models.retell_models import RetellToolResponse, RetellWebhookPayload
from app.models.vapi_models import ToolCallResult, VapiToolCallResponse, VapiWebhookPayload

VAPI_LIFECYCLE = {
    "status-update": "other",
    "end-of-call-report": "report",
}

RETELL_LIFECYCLE = {
    "call_started": "started",
    "call_ended": "ended",
    "call_analyzed": "report",
}


def from_vapi(payload: VapiWebhookPayload) -> List[InboundEvent]:
    message = payload.message
    if message.type == "tool-calls":
        return [
            ToolInvocation(call_id=tc.id, name=tc.function.name, arguments=tc.function.arguments)
            for tc in message.tool_calls()
        ]

    event = VAPI_LIFECYCLE.get(message.type, "other")
    if message.type == "status-update" and message.status == "in-progress":
        event = "started"
    elif message.type == "status-update" and message.status == "ended":
        event = "ended"

    duration = int(message.durationSeconds) if message.durationSeconds is not None else None
    return [CallLifecycle(event=event, call_id=message.call_id(), duration_seconds=duration, raw_type=message.type)]


def to_vapi(results: Sequence[Tuple[ToolInvocation, str]]) -> dict:
    response = VapiToolCallResponse(
        results=[ToolCallResult(toolCallId=inv.call_id, result=text) for inv, text in results]
    )
    return response.model_dump()


def _ms_to_seconds(value) -> Optional[int]:
    # Retell sends numbers, but tolerate strings and junk on lifecycle events
    try:
        return round(float(value) / 1000)
    except (TypeError, ValueError):
        return None


def from_retell(payload: RetellWebhookPayload) -> InboundEvent:
    if payload.is_tool_call:
        return ToolInvocation(call_id=payload.tool_call_id, name=payload.name, arguments=payload.arguments)

    call = payload.call or {}
    return CallLifecycle(
        event=RETELL_LIFECYCLE.get(payload.event, "other"),
        call_id=call.get("call_id"),
        duration_seconds=_ms_to_seconds(call.get("duration_ms")),
        raw_type=payload.event,
    )


def to_retell(invocation: ToolInvocation, text: str) -> dict:
    return RetellToolResponse(tool_call_id=invocation.call_id, content=text).model_dump()
