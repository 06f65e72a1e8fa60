import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
root_str = str(ROOT)
if root_str not in sys.path:
    sys.path.insert(0, root_str)


_MODEL_ENV_VARS = (
    "AI_INTEGRATIONS_OPENAI_API_KEY",
    "AI_INTEGRATIONS_OPENAI_BASE_URL",
    "OPENAI_API_KEY",
    "OPENAI_BASE_URL",
    "CODEKT_MODEL_PROVIDER",
    "CODEKT_CHAT_MODEL",
    "CODEKT_CHAT_MAX_TOKENS",
)


@pytest.fixture(autouse=True)
def _fallback_only_and_fresh_stores(monkeypatch):
    """Run every test without model credentials and against fresh in-memory stores."""
    from src.codekt.infrastructure import chat_store, repository

    for name in _MODEL_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(repository, "_repo", None, raising=False)
    monkeypatch.setattr(chat_store, "_store", None, raising=False)


class StubLLM:
    """Stands in for ChatOpenAI; replays ``chunks`` and optionally fails."""

    chunks = ["Hello"]
    fail_after = None
    captured: dict = {}

    def __init__(self, *args, **kwargs):
        StubLLM.captured["init"] = kwargs

    async def astream(self, messages):
        StubLLM.captured["messages"] = messages
        for idx, chunk in enumerate(self.chunks):
            if self.fail_after is not None and idx >= self.fail_after:
                raise RuntimeError("upstream exploded")
            yield type("Chunk", (), {"content": chunk})()
        if self.fail_after is not None and self.fail_after >= len(self.chunks):
            raise RuntimeError("upstream exploded")


@pytest.fixture
def stub_llm(monkeypatch):
    from src.codekt.services import chat_ai

    StubLLM.chunks = ["Hello"]
    StubLLM.fail_after = None
    StubLLM.captured = {}
    monkeypatch.setattr(chat_ai, "ChatOpenAI", StubLLM)
    return StubLLM
