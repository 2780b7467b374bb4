"""Shared fixtures: fake backend streams/clients and a recording observer."""

from __future__ import annotations

from types import SimpleNamespace

import pytest
from openai.types.chat import ChatCompletionChunk

BASE_URL = "https://api.example.com/v1"


def make_chunk(content: str, model: str = "backend-model", index: int = 0) -> ChatCompletionChunk:
    return ChatCompletionChunk.model_validate({
        "id": f"chatcmpl-{index}",
        "object": "chat.completion.chunk",
        "created": 1700000000,
        "model": model,
        "choices": [{"index": 0, "delta": {"content": content}, "finish_reason": None}],
    })


def completion_payload(content: str = "Hello!", model: str = "backend-model") -> dict:
    return {
        "id": "chatcmpl-123",
        "object": "chat.completion",
        "created": 1700000000,
        "model": model,
        "choices": [
            {"index": 0, "message": {"role": "assistant", "content": content}, "finish_reason": "stop"}
        ],
        "usage": {"prompt_tokens": 3, "completion_tokens": 2, "total_tokens": 5},
    }


def sse_body(chunks) -> bytes:
    lines = [f"data: {c.model_dump_json()}\n\n" for c in chunks]
    lines.append("data: [DONE]\n\n")
    return "".join(lines).encode()


class FakeStream:
    """Async iterator over chunks; an Exception item is raised when reached."""

    def __init__(self, items):
        self._items = list(items)
        self.closed = 0

    def __aiter__(self):
        return self

    async def __anext__(self):
        if not self._items:
            raise StopAsyncIteration
        item = self._items.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    async def close(self):
        self.closed += 1


class FakeClient:
    def __init__(self, result=None, error: Exception | None = None):
        self.calls = []
        self.closed = 0
        self._result = result
        self._error = error
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._create))

    async def _create(self, **kwargs):
        self.calls.append(kwargs)
        if self._error is not None:
            raise self._error
        return self._result

    async def close(self):
        self.closed += 1


class RecordingObserver:
    def __init__(self):
        self.events = []
        self.errors = []

    def on_event(self, event, req, **fields):
        self.events.append((event, fields))

    def on_error(self, error, req):
        self.errors.append(error)


@pytest.fixture()
def observer():
    return RecordingObserver()
