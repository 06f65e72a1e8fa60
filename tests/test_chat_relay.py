import asyncio
import json

import pytest

from src.codekt.domain.chat_models import ChatRequest
from src.codekt.infrastructure.chat_store import InMemoryChatStore
from src.codekt.infrastructure.repository import InMemoryProjectRepository
from src.codekt.services.chat_ai import DEFAULT_IMAGE_PROMPT, build_chat_messages
from src.codekt.services.chat_relay import CHAT_ERROR_MESSAGE, ChatRelay
from src.codekt.services.model_router import ModelRouter


def _events(frames):
    return [json.loads(frame[len("data: "):]) for frame in frames]


def _run(relay, req):
    async def go():
        stream = await relay.open(req)
        return [frame async for frame in stream]

    return _events(asyncio.run(go()))


@pytest.fixture
def store():
    return InMemoryChatStore()


@pytest.fixture
def model_relay(store):
    router = ModelRouter(env={"OPENAI_API_KEY": "sk-test"})
    return ChatRelay(InMemoryProjectRepository(), store, router=router)


def test_fallback_reply_is_one_content_event_then_done(store):
    relay = ChatRelay(InMemoryProjectRepository(), store, router=ModelRouter(env={}))
    events = _run(relay, ChatRequest(message="Which routes exist?"))
    assert len(events) == 2
    assert events[0]["content"].startswith("## Routing in Demo Frontend App")
    assert events[1] == {"done": True}


def test_model_stream_relays_deltas_and_file_references(model_relay, store, stub_llm):
    stub_llm.chunks = ["See [App](src/App.tsx)", " and ", "[Header](src/components/Header.tsx)."]
    conv = store.create_conversation()
    events = _run(model_relay, ChatRequest(conversation_id=conv.id, message="Where is the header?"))

    assert [e["content"] for e in events[:3]] == stub_llm.chunks
    assert events[3] == {"fileReferences": ["src/App.tsx", "src/components/Header.tsx"]}
    assert events[4] == {"done": True}

    messages = store.list_messages(conv.id)
    assert [m.role for m in messages] == ["user", "assistant"]
    assert messages[0].content == "Where is the header?"
    assert messages[1].content == "".join(stub_llm.chunks)
    assert messages[1].file_references == ["src/App.tsx", "src/components/Header.tsx"]


def test_no_file_references_event_without_links(model_relay, stub_llm):
    stub_llm.chunks = ["plain", " answer"]
    events = _run(model_relay, ChatRequest(message="hi"))
    assert events == [{"content": "plain"}, {"content": " answer"}, {"done": True}]


def test_llm_is_built_from_selected_provider(model_relay, stub_llm):
    _run(model_relay, ChatRequest(message="hi"))
    init = stub_llm.captured["init"]
    assert init["api_key"] == "sk-test"
    assert init["base_url"] == "https://api.openai.com/v1"
    assert init["model"] == "gpt-4o"
    assert init["streaming"] is True
    system, user = stub_llm.captured["messages"]
    assert system["role"] == "system"
    assert "PROJECT: Demo Frontend App" in system["content"]
    assert user == {"role": "user", "content": "hi"}


def test_failure_before_first_chunk_raises_from_open(model_relay, store, stub_llm):
    stub_llm.fail_after = 0
    conv = store.create_conversation()
    with pytest.raises(RuntimeError):
        _run(model_relay, ChatRequest(conversation_id=conv.id, message="hi"))
    assert store.list_messages(conv.id) == []


def test_failure_mid_stream_emits_single_error_event(model_relay, store, stub_llm):
    stub_llm.chunks = ["partial", " more"]
    stub_llm.fail_after = 1
    conv = store.create_conversation()
    events = _run(model_relay, ChatRequest(conversation_id=conv.id, message="hi"))
    assert events == [{"content": "partial"}, {"error": CHAT_ERROR_MESSAGE}]
    assert store.list_messages(conv.id) == []


def test_image_data_url_becomes_multipart_turn():
    msgs = build_chat_messages("sys", "", "data:image/png;base64,AAAA")
    parts = msgs[1]["content"]
    assert parts[0] == {"type": "text", "text": DEFAULT_IMAGE_PROMPT}
    assert parts[1] == {"type": "image_url", "image_url": {"url": "data:image/png;base64,AAAA"}}


def test_non_data_image_url_is_ignored():
    msgs = build_chat_messages("sys", "look", "https://example.com/shot.png")
    assert msgs[1] == {"role": "user", "content": "look"}


def test_image_is_persisted_on_user_message(model_relay, store, stub_llm):
    conv = store.create_conversation()
    _run(model_relay, ChatRequest(conversation_id=conv.id, message="what is this", image_url="data:image/png;base64,AAAA"))
    user = store.list_messages(conv.id)[0]
    assert user.image_url == "data:image/png;base64,AAAA"
    assert isinstance(stub_llm.captured["messages"][1]["content"], list)


def test_null_message_is_treated_as_empty():
    assert ChatRequest.model_validate({"message": None}).message == ""


def test_fallback_exchange_is_stored_without_file_references(store):
    relay = ChatRelay(InMemoryProjectRepository(), store, router=ModelRouter(env={}))
    conv = store.create_conversation()
    events = _run(relay, ChatRequest(conversation_id=conv.id, message="Explain the architecture"))
    assert "[App.tsx](src/App.tsx)" in events[0]["content"]
    assistant = store.list_messages(conv.id)[1]
    assert assistant.content == events[0]["content"]
    assert assistant.file_references == []


def _first_frame_then_close(relay, req):
    async def go():
        stream = await relay.open(req)
        first = await anext(stream)
        await stream.aclose()
        return first

    return asyncio.run(go())


def test_closing_model_stream_early_stores_nothing(model_relay, store, stub_llm):
    stub_llm.chunks = ["one", " two", " three"]
    conv = store.create_conversation()
    first = _first_frame_then_close(model_relay, ChatRequest(conversation_id=conv.id, message="hi"))
    assert _events([first]) == [{"content": "one"}]
    assert store.list_messages(conv.id) == []


def test_closing_fallback_stream_early_stores_nothing(store):
    relay = ChatRelay(InMemoryProjectRepository(), store, router=ModelRouter(env={}))
    conv = store.create_conversation()
    _first_frame_then_close(relay, ChatRequest(conversation_id=conv.id, message="routes"))
    assert store.list_messages(conv.id) == []
