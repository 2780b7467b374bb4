# providers/adjusters.py
import logging
from typing import Callable, List, Optional, Tuple

from providers.schema import ChatRequest

logger = logging.getLogger(__name__)

Adjuster = Callable[[ChatRequest], None]

# (base url prefix, mutator); looked up in registration order
ADJUSTERS: List[Tuple[str, Adjuster]] = []

GROQ_BASE_URL = "https://api.groq.com/openai/v1"


def register_adjuster(prefix: str):
    """Decorator: run `fn(req)` for every request whose base url starts with `prefix`."""
    def decorator(fn: Adjuster) -> Adjuster:
        ADJUSTERS.append((prefix, fn))
        return fn
    return decorator


def find_adjuster(base_url: str) -> Optional[Adjuster]:
    for prefix, fn in ADJUSTERS:
        if base_url.startswith(prefix):
            return fn
    return None


def adjust_request(base_url: str, req: ChatRequest) -> ChatRequest:
    """Mutate `req` in place for vendor quirks; returns it for convenience."""
    fn = find_adjuster(base_url)
    if fn is not None:
        logger.info("Adjusting request for %s using %s", base_url, fn.__name__)
        fn(req)
    return req


@register_adjuster(GROQ_BASE_URL)
def adjust_groq_request(req: ChatRequest) -> None:
    # groq rejects these outright
    req.logprobs = None
    req.top_logprobs = None
    req.logit_bias = None
    if req.n is not None and req.n != 1:
        req.n = 1
    for message in req.messages:
        message.pop("name", None)
