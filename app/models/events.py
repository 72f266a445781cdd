"""
Provider-neutral inbound events.

Both voice platforms are translated into these shapes by `app.api.adapters`
so that the booking logic is written once.
"""
import json
from typing import Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator


class ToolInvocation(BaseModel):
    kind: Literal["tool"] = "tool"
    call_id: Optional[str] = None  # correlation id, echoed back unchanged
    name: str
    arguments: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("arguments", mode="before")
    @classmethod
    def decode_arguments(cls, value):
        # Some providers send function arguments as a JSON string
        if value is None or value == "":
            return {}
        if isinstance(value, str):
            try:
                decoded = json.loads(value)
            except json.JSONDecodeError:
                return {}
            return decoded if isinstance(decoded, dict) else {}
        return value


class CallLifecycle(BaseModel):
    kind: Literal["lifecycle"] = "lifecycle"
    event: Literal["started", "ended", "report", "other"] = "other"
    call_id: Optional[str] = None
    duration_seconds: Optional[int] = None
    raw_type: Optional[str] = None


InboundEvent = Union[ToolInvocation, CallLifecycle]
