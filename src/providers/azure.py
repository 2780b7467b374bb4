# providers/azure.py
from typing import Optional

from providers.config import ProviderConfig, resolve_azure_config
from providers.errors import ConfigurationError
from providers.relay import LoggingObserver, RelayObserver, relay
from providers.schema import ChatRequest


async def forward(
    req: ChatRequest,
    provider: ProviderConfig,
    observer: Optional[RelayObserver] = None,
    timeout: Optional[float] = None,
):
    # the sdk builds /openai/deployments/<model>/... from the host, model is the deployment
    observer = observer or LoggingObserver()
    try:
        conf = resolve_azure_config(provider)
    except ConfigurationError as exc:
        observer.on_error(exc, req)
        raise
    return await relay(conf, req, observer=observer, timeout=timeout)
