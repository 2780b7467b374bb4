# providers/openai.py
from typing import Optional

from providers.adjusters import adjust_request
from providers.config import ProviderConfig, resolve_config
from providers.errors import ConfigurationError
from providers.relay import LoggingObserver, RelayObserver, relay
from providers.schema import ChatRequest


async def forward(
    req: ChatRequest,
    provider: ProviderConfig,
    observer: Optional[RelayObserver] = None,
    timeout: Optional[float] = None,
):
    """
    Forward to a generic OpenAI-compatible backend:
      - resolve base url + key (explicit url or model-prefix default)
      - apply vendor quirks matched on the resolved url
      - relay the response (SSE or JSON)
    Raises ConfigurationError before any network call if the url is unusable.
    """
    observer = observer or LoggingObserver()
    try:
        conf = resolve_config(provider, req)
    except ConfigurationError as exc:
        observer.on_error(exc, req)
        raise
    adjust_request(conf.base_url, req)
    return await relay(conf, req, observer=observer, timeout=timeout)
