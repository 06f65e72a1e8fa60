from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from threading import RLock
from typing import Dict, List, Optional, Protocol

from ..domain.chat_models import Conversation, Message


class ChatStore(Protocol):
    def create_conversation(self, title: Optional[str] = None, project_id: Optional[int] = None) -> Conversation: ...

    def list_conversations(self, project_id: Optional[int] = None) -> List[Conversation]: ...

    def get_conversation(self, conversation_id: int) -> Optional[Conversation]: ...

    def delete_conversation(self, conversation_id: int) -> bool: ...

    def add_message(
        self,
        conversation_id: int,
        role: str,
        content: str,
        image_url: Optional[str] = None,
        file_references: Optional[List[str]] = None,
    ) -> Message: ...

    def list_messages(self, conversation_id: int) -> List[Message]: ...


@dataclass
class _Conversation:
    id: int
    project_id: Optional[int]
    title: str
    created_at: datetime


@dataclass
class _Message:
    id: int
    conversation_id: int
    role: str
    content: str
    created_at: datetime
    image_url: Optional[str] = None
    file_references: List[str] = field(default_factory=list)


class InMemoryChatStore:
    """Conversations and their messages, keyed by auto-incrementing integers.

    Each call is atomic under the store lock; consecutive calls are not, so two
    exchanges on the same conversation may interleave their messages.
    """

    def __init__(self) -> None:
        self._conversations: Dict[int, _Conversation] = {}
        self._messages: Dict[int, _Message] = {}
        self._conversation_seq = 0
        self._message_seq = 0
        self._lock = RLock()

    def _now(self) -> datetime:
        return datetime.now(UTC)

    def _conversation_model(self, conv: _Conversation) -> Conversation:
        return Conversation(**conv.__dict__)

    def _message_model(self, message: _Message) -> Message:
        data = dict(message.__dict__)
        data["file_references"] = list(message.file_references)
        return Message(**data)

    def create_conversation(self, title: Optional[str] = None, project_id: Optional[int] = None) -> Conversation:
        with self._lock:
            self._conversation_seq += 1
            conv = _Conversation(
                id=self._conversation_seq,
                project_id=project_id,
                title=title or "New Chat",
                created_at=self._now(),
            )
            self._conversations[conv.id] = conv
            return self._conversation_model(conv)

    def list_conversations(self, project_id: Optional[int] = None) -> List[Conversation]:
        with self._lock:
            convs = list(self._conversations.values())
            if project_id is not None:
                convs = [c for c in convs if c.project_id == project_id]
            # Newest first; ids break timestamp ties
            convs.sort(key=lambda c: (c.created_at, c.id), reverse=True)
            return [self._conversation_model(c) for c in convs]

    def get_conversation(self, conversation_id: int) -> Optional[Conversation]:
        with self._lock:
            conv = self._conversations.get(conversation_id)
            if not conv:
                return None
            return self._conversation_model(conv)

    def delete_conversation(self, conversation_id: int) -> bool:
        with self._lock:
            removed = self._conversations.pop(conversation_id, None) is not None
            for mid in [m.id for m in self._messages.values() if m.conversation_id == conversation_id]:
                del self._messages[mid]
            return removed

    def add_message(
        self,
        conversation_id: int,
        role: str,
        content: str,
        image_url: Optional[str] = None,
        file_references: Optional[List[str]] = None,
    ) -> Message:
        with self._lock:
            if conversation_id not in self._conversations:
                raise KeyError("Conversation not found")
            self._message_seq += 1
            msg = _Message(
                id=self._message_seq,
                conversation_id=conversation_id,
                role=role,
                content=content,
                created_at=self._now(),
                image_url=image_url,
                file_references=list(file_references or []),
            )
            self._messages[msg.id] = msg
            return self._message_model(msg)

    def list_messages(self, conversation_id: int) -> List[Message]:
        with self._lock:
            return [
                self._message_model(m)
                for m in self._messages.values()
                if m.conversation_id == conversation_id
            ]


_store: ChatStore | None = None


def get_chat_store() -> ChatStore:
    global _store
    if _store is None:
        _store = InMemoryChatStore()
    return _store
