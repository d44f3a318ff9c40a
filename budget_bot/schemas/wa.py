from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field


class IncomingMessage(BaseModel):
    from_number: str = Field(..., examples=["6281234567890@c.us"])
    message_type: Literal["text", "chat", "audio", "image", "document", "sticker"] = "chat"
    text: Optional[str] = None
    media_url: Optional[str] = None
    timestamp: Optional[datetime] = None


class Attachment(BaseModel):
    filename: str
    mime_type: str
    content_base64: str


class WAResponse(BaseModel):
    status: Literal["ok", "ignored", "error"] = "ok"
    reply: Optional[str] = None
    attachment: Optional[Attachment] = None


class OutgoingMessage(BaseModel):
    to: str
    message: str
