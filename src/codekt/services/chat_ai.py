from __future__ import annotations

import logging
import os
from typing import Any, AsyncIterator, Dict, List, Mapping, Optional

from langchain_openai import ChatOpenAI

from .model_router import ProviderSelection


LOG = logging.getLogger("codekt.llm")

DEFAULT_IMAGE_PROMPT = (
    "What can you tell me about this UI screenshot? "
    "Identify components and suggest relevant files for modifications."
)


def build_chat_messages(system_prompt: str, message: str, image_url: Optional[str] = None) -> List[Dict[str, Any]]:
    """Return the chat-completion message list for one KT turn.

    Only ``data:image`` URLs are sent as an image part; anything else yields a
    plain text user turn.
    """
    msgs: List[Dict[str, Any]] = [{"role": "system", "content": system_prompt}]
    if image_url and image_url.startswith("data:image"):
        msgs.append(
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": message or DEFAULT_IMAGE_PROMPT},
                    {"type": "image_url", "image_url": {"url": image_url}},
                ],
            }
        )
    else:
        msgs.append({"role": "user", "content": message})
    return msgs


def get_llm(selection: ProviderSelection, env: Optional[Mapping[str, str]] = None) -> ChatOpenAI:
    env = env if env is not None else os.environ
    api_key = env.get(selection.api_key_env)
    if not api_key:
        raise RuntimeError("LLM not configured")
    base_url = selection.default_base_url
    if selection.base_url_env:
        base_url = env.get(selection.base_url_env) or base_url
    LOG.info(
        "Using remote LLM provider name=%s model=%s base_url=%s",
        selection.name,
        selection.model,
        base_url,
    )
    return ChatOpenAI(
        api_key=api_key,
        base_url=base_url,
        model=selection.model,
        max_tokens=selection.max_tokens,
        streaming=True,
    )


def _chunk_text(chunk: Any) -> str:
    content = chunk.content if hasattr(chunk, "content") else chunk
    if isinstance(content, list):
        return "".join(
            part.get("text", "") if isinstance(part, dict) else str(part)
            for part in content
        )
    return str(content or "")


async def stream_completion(llm: Any, messages: List[Dict[str, Any]]) -> AsyncIterator[str]:
    """Yield text deltas from a streaming chat completion, in arrival order."""
    LOG.debug("llm_stream_start", extra={"messages": len(messages)})
    async for chunk in llm.astream(messages):
        text = _chunk_text(chunk)
        if text:
            yield text
    LOG.debug("llm_stream_complete")
