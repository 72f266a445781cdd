from pydantic import BaseModel, Field
from typing import Optional, Dict, Any, Union

# Retell posts tool calls and lifecycle events to the same URL.
# Tool calls carry `name` and no `event`; lifecycle events carry `event`.

class RetellWebhookPayload(BaseModel):
    name: Optional[str] = None
    tool_call_id: Optional[str] = None
    arguments: Union[Dict[str, Any], str, None] = Field(default_factory=dict)
    event: Optional[str] = None
    call: Optional[Dict[str, Any]] = None

    @property
    def is_tool_call(self) -> bool:
        return bool(self.name)


class RetellToolResponse(BaseModel):
    tool_call_id: Optional[str] = None
    content: str


class RetellAck(BaseModel):
    received: bool = True
