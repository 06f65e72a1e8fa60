from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional
from pydantic import Field, field_validator

from .models import CamelModel


class ConversationCreate(CamelModel):
    title: Optional[str] = None


class Conversation(CamelModel):
    id: int
    project_id: Optional[int] = None
    title: str
    created_at: datetime


Role = Literal["user", "assistant"]


class Message(CamelModel):
    id: int
    conversation_id: int
    role: Role
    content: str
    image_url: Optional[str] = None
    file_references: List[str] = Field(default_factory=list)
    created_at: datetime


class ChatRequest(CamelModel):
    conversation_id: Optional[int] = None
    message: Optional[str] = ""
    image_url: Optional[str] = None

    @field_validator("message", mode="before")
    @classmethod
    def _null_message_is_empty(cls, value):
        return "" if value is None else value
