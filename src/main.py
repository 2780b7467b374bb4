# main.py
import datetime
import logging
import socket

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from load_config import get_settings
from providers import get_provider_forward
from providers.errors import GatewayError
from providers.schema import ChatRequest

logger = logging.getLogger(__name__)

# ---------------- App init ----------------
app = FastAPI(title="Chat Completion Gateway", version="0.5")


@app.exception_handler(GatewayError)
async def gateway_error_handler(request: Request, exc: GatewayError):
    return JSONResponse(exc.to_dict(), status_code=exc.status_code)


# ---------------- API Endpoints ----------------
@app.get("/", response_model=dict)
async def root():
    return {
        "ok": True,
        "now": datetime.datetime.now(datetime.timezone.utc).isoformat(),
        "host": socket.gethostname(),
        "message": "API Gateway running",
        "providers": sorted(get_settings().providers),
    }


@app.get("/health", response_model=dict)
async def health():
    return {"ok": True, "now": datetime.datetime.now(datetime.timezone.utc).isoformat(), "message": "OK"}


@app.get("/v1/models")
async def list_models():
    settings = get_settings()
    return {
        "object": "list",
        "data": [
            {"id": m, "object": "model", "owned_by": settings.provider_for_model(m)}
            for m in settings.all_models()
        ],
    }


@app.post("/v1/chat/completions")
async def chat_completions(req: ChatRequest):
    settings = get_settings()

    provider_name = settings.provider_for_model(req.model)
    if not provider_name or provider_name not in settings.providers:
        return JSONResponse({
            "ok": False,
            "error": "no provider configured for model",
            "requested_model": req.model,
            "allowed_models": settings.all_models(),
        }, status_code=400)

    provider = settings.providers[provider_name]
    forward_fn = get_provider_forward(provider.type)
    if forward_fn is None:
        return JSONResponse({"ok": False, "error": "provider module not implemented"}, status_code=500)

    logger.info("Forwarding model=%s stream=%s to provider=%s", req.model, req.stream, provider_name)
    return await forward_fn(req, provider, timeout=settings.request_timeout)


if __name__ == "__main__":
    uvicorn.run("main:app", host="127.0.0.1", port=8100, log_level="info")
