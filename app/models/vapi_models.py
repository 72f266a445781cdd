from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any, Union

# --- Incoming Request Models ---

class VapiFunction(BaseModel):
    name: str
    # Vapi sends a dict, but OpenAI-style strings show up as well
    arguments: Union[Dict[str, Any], str] = Field(default_factory=dict)

class VapiToolCall(BaseModel):
    id: Optional[str] = None
    type: str = "function"
    function: VapiFunction

class VapiMessage(BaseModel):
    type: str
    toolCalls: Optional[List[VapiToolCall]] = None
    toolCallList: Optional[List[VapiToolCall]] = None
    call: Optional[Dict[str, Any]] = None
    status: Optional[str] = None
    durationSeconds: Optional[float] = None

    def tool_calls(self) -> List[VapiToolCall]:
        return self.toolCalls or self.toolCallList or []

    def call_id(self) -> Optional[str]:
        return (self.call or {}).get("id")

# Wrapper for the incoming JSON body from Vapi
class VapiWebhookPayload(BaseModel):
    message: VapiMessage


# --- Outgoing Response Models ---

class ToolCallResult(BaseModel):
    toolCallId: Optional[str] = None
    result: str

class VapiToolCallResponse(BaseModel):
    results: List[ToolCallResult]
