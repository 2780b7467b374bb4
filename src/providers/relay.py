# providers/relay.py
"""
Response relay shared by every provider entry point.

Streaming requests are relayed chunk by chunk as SSE frames
(`data: <json>\\n\\n`), everything else is one blocking call re-serialized as
a JSON body. In both modes the `model` field sent back is the one the caller
asked for, whatever the backend reports.
"""
import logging
from typing import Any, AsyncIterator, Dict, Optional, Protocol, Union

import httpx
import openai
from fastapi.responses import JSONResponse, StreamingResponse

from providers.config import ResolvedClientConfig
from providers.errors import BackendCallError, ConfigurationError, GatewayError, SerializationError
from providers.schema import ChatRequest

logger = logging.getLogger(__name__)

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    # nginx: don't buffer the event stream
    "X-Accel-Buffering": "no",
}

# backend failures we turn into BackendCallError; ValueError covers malformed payloads
_BACKEND_ERRORS = (openai.OpenAIError, httpx.HTTPError, httpx.StreamError, ValueError)

Client = Union[openai.AsyncOpenAI, openai.AsyncAzureOpenAI]


# ---------------- Observer ----------------
class RelayObserver(Protocol):
    def on_event(self, event: str, req: ChatRequest, **fields: Any) -> None: ...

    def on_error(self, error: GatewayError, req: ChatRequest) -> None: ...


class LoggingObserver:
    """Default observer, writes relay events to the `providers.relay` logger."""

    def __init__(self, log: Optional[logging.Logger] = None):
        self._log = log or logger

    def on_event(self, event: str, req: ChatRequest, **fields: Any) -> None:
        level = logging.DEBUG if event == "chunk" else logging.INFO
        self._log.log(level, "%s model=%s %s", event, req.model, fields)

    def on_error(self, error: GatewayError, req: ChatRequest) -> None:
        self._log.error(
            "%s: %s (req=%s)", error.kind, error.detail,
            req.model_dump(exclude_none=True),
        )


# ---------------- Client ----------------
def build_client(conf: ResolvedClientConfig, timeout: Optional[float] = None) -> Client:
    """
    One client per request. Retries are disabled, a failed call is reported
    to the caller as is.
    """
    kwargs: Dict[str, Any] = {"api_key": conf.api_key, "max_retries": 0}
    if timeout is not None:
        kwargs["timeout"] = timeout
    try:
        if conf.azure:
            return openai.AsyncAzureOpenAI(
                azure_endpoint=conf.base_url,
                api_version=conf.api_version,
                **kwargs,
            )
        return openai.AsyncOpenAI(base_url=conf.base_url, **kwargs)
    except (openai.OpenAIError, httpx.InvalidURL, ValueError) as exc:
        raise ConfigurationError(f"could not create client for {conf.base_url!r}: {exc}") from exc


# ---------------- Serialization ----------------
def encode_chunk(chunk: Any, model: str) -> str:
    """Force the requested model onto `chunk` and render it as one SSE frame."""
    chunk.model = model
    try:
        payload = chunk.model_dump_json(exclude_unset=True)
    except (TypeError, ValueError) as exc:
        raise SerializationError(f"could not serialize chunk: {exc}") from exc
    return f"data: {payload}\n\n"


def to_canonical_response(completion: Any, model: str) -> Dict[str, Any]:
    try:
        data = completion.model_dump(mode="json", exclude_unset=True)
    except (TypeError, ValueError) as exc:
        raise SerializationError(f"could not serialize response: {exc}") from exc
    data.setdefault("object", "chat.completion")
    data.setdefault("choices", [])
    data["model"] = model
    return data


# ---------------- Streaming ----------------
async def open_stream(client: Client, req: ChatRequest):
    try:
        return await client.chat.completions.create(stream=True, **req.to_create_kwargs())
    except _BACKEND_ERRORS as exc:
        raise BackendCallError(f"ChatCompletionStream error: {exc}") from exc


async def iter_sse_frames(
    stream: AsyncIterator[Any],
    req: ChatRequest,
    observer: RelayObserver,
) -> AsyncIterator[str]:
    """
    Receive one chunk, emit one frame, repeat. Ends quietly at end of stream;
    a receive error raises BackendCallError after the frames already sent.
    """
    iterator = stream.__aiter__()
    count = 0
    while True:
        try:
            chunk = await iterator.__anext__()
        except StopAsyncIteration:
            observer.on_event("completed", req, chunks=count)
            return
        except _BACKEND_ERRORS as exc:
            raise BackendCallError(f"stream receive error after {count} chunks: {exc}") from exc

        frame = encode_chunk(chunk, req.model)
        count += 1
        observer.on_event("chunk", req, index=count, frame=frame)
        yield frame


async def relay_stream(
    client: Client,
    req: ChatRequest,
    observer: RelayObserver,
) -> StreamingResponse:
    """
    The backend stream is opened before anything is committed to the caller,
    so a failed open is still a plain error with no frames sent.
    """
    try:
        stream = await open_stream(client, req)
    except BackendCallError as exc:
        observer.on_error(exc, req)
        await client.close()
        raise
    except Exception:
        await client.close()
        raise
    observer.on_event("stream_opened", req)

    async def body() -> AsyncIterator[str]:
        try:
            async for frame in iter_sse_frames(stream, req, observer):
                yield frame
        except GatewayError as exc:
            observer.on_error(exc, req)
            raise
        finally:
            await stream.close()
            await client.close()

    return StreamingResponse(body(), media_type="text/event-stream", headers=SSE_HEADERS)


# ---------------- Standard ----------------
async def relay_standard(
    client: Client,
    req: ChatRequest,
    observer: RelayObserver,
) -> JSONResponse:
    try:
        try:
            completion = await client.chat.completions.create(**req.to_create_kwargs())
        except _BACKEND_ERRORS as exc:
            raise BackendCallError(f"ChatCompletion error: {exc}") from exc

        data = to_canonical_response(completion, req.model)
        try:
            response = JSONResponse(data, status_code=200)
        except (TypeError, ValueError) as exc:
            raise SerializationError(f"could not encode response body: {exc}") from exc
    except GatewayError as exc:
        observer.on_error(exc, req)
        raise
    finally:
        await client.close()

    observer.on_event("response", req, body=data)
    return response


async def relay(
    conf: ResolvedClientConfig,
    req: ChatRequest,
    observer: Optional[RelayObserver] = None,
    timeout: Optional[float] = None,
    client: Optional[Client] = None,
) -> Union[StreamingResponse, JSONResponse]:
    """Run `req` against `conf` and relay the result in the mode `req.stream` asks for."""
    observer = observer or LoggingObserver()
    if client is None:
        try:
            client = build_client(conf, timeout=timeout)
        except ConfigurationError as exc:
            observer.on_error(exc, req)
            raise
    if req.stream:
        return await relay_stream(client, req, observer)
    return await relay_standard(client, req, observer)
