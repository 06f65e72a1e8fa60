"""SSE relay for the KT chat endpoint.

``ChatRelay.open`` does all work that can still fail with a plain HTTP error
(metadata reads, prompt assembly, opening the model stream and pulling its first
chunk) and returns an async iterator of SSE frames. Anything that fails after
that point is reported to the client as a single ``error`` event.
"""

from __future__ import annotations

import logging
from typing import AsyncIterator, Optional

from ..domain.chat_models import ChatRequest
from ..infrastructure.chat_store import ChatStore
from ..infrastructure.repository import ProjectRepository
from . import chat_ai
from .fallback import generate_fallback_response
from .model_router import ModelRouter
from .project_context import build_project_context, compose_system_prompt
from .streaming import RelayState, prepend_chunk, relay_deltas, sse_event


LOG = logging.getLogger("codekt.chat")

CHAT_ERROR_MESSAGE = "Failed to process message"

# Metadata is read from this project id when no project is current.
FALLBACK_PROJECT_ID = 1


class ChatRelay:
    def __init__(
        self,
        repo: ProjectRepository,
        store: ChatStore,
        router: Optional[ModelRouter] = None,
    ) -> None:
        self._repo = repo
        self._store = store
        self._router = router or ModelRouter()

    def persist_exchange(self, req: ChatRequest, state: RelayState) -> None:
        """Append the user turn and the assistant reply, in that order."""
        if req.conversation_id is None:
            return
        self._store.add_message(
            req.conversation_id,
            role="user",
            content=req.message,
            image_url=req.image_url or None,
            file_references=[],
        )
        self._store.add_message(
            req.conversation_id,
            role="assistant",
            content=state.text,
            file_references=state.file_references,
        )

    async def open(self, req: ChatRequest) -> AsyncIterator[str]:
        project = self._repo.get_current_project()
        project_id = project.id if project else FALLBACK_PROJECT_ID
        components = self._repo.list_components(project_id)
        services = self._repo.list_services(project_id)
        routes = self._repo.list_routes(project_id)
        flows = self._repo.code_flows(project_id)
        system_prompt = compose_system_prompt(build_project_context(self._repo, project_id))

        selection = self._router.maybe_select_provider("conversation")
        if selection is None:
            LOG.info("chat_fallback_reply", extra={"conversation_id": req.conversation_id})
            text = generate_fallback_response(req.message, components, services, routes, flows, project)
            return self._fallback_events(req, text)

        llm = chat_ai.get_llm(selection, self._router.env)
        messages = chat_ai.build_chat_messages(system_prompt, req.message, req.image_url)
        deltas = chat_ai.stream_completion(llm, messages)
        try:
            first: Optional[str] = await anext(deltas)
        except StopAsyncIteration:
            first = None
        return self._model_events(req, prepend_chunk(first, deltas))

    async def _fallback_events(self, req: ChatRequest, text: str) -> AsyncIterator[str]:
        # Canned replies are stored without file references; none are streamed for them
        state = RelayState(text=text)
        try:
            yield sse_event({"content": text})
            self.persist_exchange(req, state)
            yield sse_event({"done": True})
        except Exception:
            LOG.exception("chat_fallback_failed")
            yield sse_event({"error": CHAT_ERROR_MESSAGE})

    async def _model_events(self, req: ChatRequest, deltas: AsyncIterator[str]) -> AsyncIterator[str]:
        state = RelayState()
        try:
            async for event in relay_deltas(deltas, state):
                yield sse_event(event)
            self.persist_exchange(req, state)
            if state.file_references:
                yield sse_event({"fileReferences": state.file_references})
            yield sse_event({"done": True})
            LOG.info(
                "chat_stream_complete",
                extra={"chars": len(state.text), "file_refs": len(state.file_references)},
            )
        except Exception:
            LOG.exception("chat_stream_failed")
            yield sse_event({"error": CHAT_ERROR_MESSAGE})
