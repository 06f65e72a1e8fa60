from __future__ import annotations

import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.responses import JSONResponse, StreamingResponse

from ...domain.chat_models import ChatRequest, Conversation, ConversationCreate, Message
from ...infrastructure.chat_store import ChatStore, get_chat_store
from ...infrastructure.repository import ProjectRepository, get_repo
from ...services.chat_relay import CHAT_ERROR_MESSAGE, ChatRelay
from ...services.model_router import ModelRouter
from ...services.streaming import SSE_HEADERS


LOG = logging.getLogger("codekt.chat")

router = APIRouter(tags=["chat"])


def get_model_router() -> ModelRouter:
    return ModelRouter()


@router.get("/conversations", response_model=List[Conversation])
def list_conversations(store: ChatStore = Depends(get_chat_store)) -> List[Conversation]:
    return store.list_conversations()


@router.post("/conversations", response_model=Conversation, status_code=status.HTTP_201_CREATED)
def create_conversation(
    req: ConversationCreate | None = None,
    store: ChatStore = Depends(get_chat_store),
) -> Conversation:
    title = req.title if req else None
    return store.create_conversation(title=title, project_id=None)


@router.get("/conversations/{conversation_id}", response_model=Conversation)
def get_conversation(conversation_id: int, store: ChatStore = Depends(get_chat_store)) -> Conversation:
    conv = store.get_conversation(conversation_id)
    if not conv:
        raise HTTPException(status_code=404, detail="Conversation not found")
    return conv


@router.get("/conversations/{conversation_id}/messages", response_model=List[Message])
def list_messages(conversation_id: int, store: ChatStore = Depends(get_chat_store)) -> List[Message]:
    return store.list_messages(conversation_id)


@router.delete("/conversations/{conversation_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_conversation(conversation_id: int, store: ChatStore = Depends(get_chat_store)) -> Response:
    store.delete_conversation(conversation_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/chat", response_class=StreamingResponse)
async def chat(
    req: ChatRequest,
    repo: ProjectRepository = Depends(get_repo),
    store: ChatStore = Depends(get_chat_store),
    model_router: ModelRouter = Depends(get_model_router),
):
    if req.conversation_id is not None and not store.get_conversation(req.conversation_id):
        raise HTTPException(status_code=404, detail="Conversation not found")

    relay = ChatRelay(repo, store, router=model_router)
    try:
        events = await relay.open(req)
    except Exception:
        # Nothing has been streamed yet, so a plain error response is still possible
        LOG.exception("chat_open_failed")
        return JSONResponse(status_code=500, content={"error": CHAT_ERROR_MESSAGE})

    return StreamingResponse(events, media_type="text/event-stream", headers=SSE_HEADERS)
