import asyncio
import json

from src.codekt.services.streaming import (
    RelayState,
    extract_file_references,
    prepend_chunk,
    relay_deltas,
    sse_event,
)


async def iter_as_async(items):
    for item in items:
        yield item


def _relay(chunks):
    state = RelayState()

    async def run():
        return [event async for event in relay_deltas(iter_as_async(chunks), state)]

    events = asyncio.run(run())
    return events, state


def test_file_references_collected_in_order_without_duplicates():
    events, state = _relay(["[A](path/a.ts)", " and [B](path/b.ts)", " again [A](path/a.ts)"])
    assert [e["content"] for e in events] == ["[A](path/a.ts)", " and [B](path/b.ts)", " again [A](path/a.ts)"]
    assert state.file_references == ["path/a.ts", "path/b.ts"]
    assert state.text == "[A](path/a.ts) and [B](path/b.ts) again [A](path/a.ts)"


def test_links_split_across_chunks_are_not_detected():
    _, state = _relay(["See [Na", "me](path)"])
    assert state.text == "See [Name](path)"
    assert state.file_references == []


def test_empty_deltas_are_not_forwarded():
    events, state = _relay(["", "x", ""])
    assert events == [{"content": "x"}]
    assert state.text == "x"


def test_extract_file_references_returns_targets():
    text = "Open [App.tsx](src/App.tsx) or [docs](https://example.com/a) but not [broken]("
    assert extract_file_references(text) == ["src/App.tsx", "https://example.com/a"]
    assert extract_file_references("") == []


def test_prepend_chunk_keeps_arrival_order():
    async def run(first):
        return [c async for c in prepend_chunk(first, iter_as_async(["b", "c"]))]

    assert asyncio.run(run("a")) == ["a", "b", "c"]
    assert asyncio.run(run(None)) == ["b", "c"]


def test_sse_event_frames_json_payload():
    frame = sse_event({"fileReferences": ["a.ts"]})
    assert frame.startswith("data: ") and frame.endswith("\n\n")
    assert json.loads(frame[6:]) == {"fileReferences": ["a.ts"]}
