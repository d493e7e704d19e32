# app/schemas/chat.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Optional
from datetime import datetime

from app.models.message import SenderType

# ---------------------
# Request / Response Models
# ---------------------

class RelayRequest(BaseModel):
    model_config = ConfigDict(validate_by_name=True)

    # Presence is checked by the relay so a missing field answers 400, not 422
    session_id: Optional[str] = Field(default=None, alias="sessionId")
    message: Optional[str] = None
    sender_type: SenderType = Field(default="human", alias="senderType")

class WebhookPayload(BaseModel):
    model_config = ConfigDict(validate_by_name=True)

    session_id: str = Field(..., alias="sessionId")
    message: str
    sender_type: SenderType = Field(..., alias="senderType")
    timestamp: str

class WebhookReply(BaseModel):
    model_config = ConfigDict(extra="allow", strict=True)

    response: Optional[str] = None

class HistoryMessage(BaseModel):
    id: Optional[str] = None
    session_id: str
    sender_type: SenderType
    content: str
    timestamp: datetime

class SessionHistory(BaseModel):
    session_id: str
    messages: List[HistoryMessage]

class RelayResult(BaseModel):
    success: bool
    forwarded: bool
    message: str
    webhook_response: Optional[Dict[str, Any]] = None
