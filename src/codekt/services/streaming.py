from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Dict, List, Optional

# [label](target); only the target is collected
FILE_LINK_PATTERN = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


def sse_event(payload: Dict[str, Any]) -> str:
    return f"data: {json.dumps(payload)}\n\n"


def extract_file_references(text: str) -> List[str]:
    return [match.group(2) for match in FILE_LINK_PATTERN.finditer(text or "")]


@dataclass
class RelayState:
    """Accumulator threaded through a relayed stream.

    Links are matched per chunk, so a link split across two chunks is not
    collected.
    """

    text: str = ""
    file_references: List[str] = field(default_factory=list)

    def absorb(self, chunk: str) -> None:
        self.text += chunk
        for target in extract_file_references(chunk):
            if target not in self.file_references:
                self.file_references.append(target)


async def prepend_chunk(first: Optional[str], rest: AsyncIterator[str]) -> AsyncIterator[str]:
    if first is not None:
        yield first
    async for chunk in rest:
        yield chunk


async def relay_deltas(deltas: AsyncIterator[str], state: RelayState) -> AsyncIterator[Dict[str, Any]]:
    """Forward each non-empty delta as a content event while folding it into ``state``."""
    async for chunk in deltas:
        if not chunk:
            continue
        state.absorb(chunk)
        yield {"content": chunk}
