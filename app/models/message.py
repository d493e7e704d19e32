# app/models/message.py
from pydantic import BaseModel, Field
from typing import Literal, Optional
from datetime import datetime, timezone

SenderType = Literal["human", "ai", "system"]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ChatMessage(BaseModel):
    id: Optional[str] = None
    session_id: str
    sender_type: SenderType = "human"
    content: str
    timestamp: datetime = Field(default_factory=utc_now)

    def to_document(self) -> dict:
        """Row layout shared with the workflow engine's chat memory."""
        return {
            "session_id": self.session_id,
            "message": {
                "type": self.sender_type,
                "content": self.content,
                "timestamp": self.timestamp.isoformat(),
            },
        }

    @classmethod
    def from_document(cls, doc: dict) -> "ChatMessage":
        payload = doc.get("message") or {}
        return cls(
            id=str(doc["_id"]) if doc.get("_id") is not None else None,
            session_id=doc["session_id"],
            sender_type=payload.get("type", "human"),
            content=payload.get("content", ""),
            timestamp=payload.get("timestamp") or utc_now(),
        )
