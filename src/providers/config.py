# providers/config.py
import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Tuple

from providers.errors import ConfigurationError
from providers.schema import ChatRequest
from providers.urls import format_azure_url, get_default_server_url, validate_and_format_url

logger = logging.getLogger(__name__)

KEYNAME_API_KEY = "api_key"
DEFAULT_AZURE_API_VERSION = "2023-05-15"


@dataclass(frozen=True)
class ProviderConfig:
    """
    Static description of one backend, loaded once from config.json and
    shared read-only between requests.
    """
    type: str = "openai"
    credentials: Mapping[str, str] = field(default_factory=dict)
    server_url: str = ""
    api_version: str = DEFAULT_AZURE_API_VERSION
    models: Tuple[str, ...] = ()

    def __post_init__(self):
        # freeze the credentials mapping too, frozen=True only covers attributes
        object.__setattr__(self, "credentials", MappingProxyType(dict(self.credentials)))
        object.__setattr__(self, "models", tuple(self.models))

    @property
    def api_key(self) -> str:
        return self.credentials.get(KEYNAME_API_KEY, "") or ""


@dataclass(frozen=True)
class ResolvedClientConfig:
    base_url: str
    api_key: str
    azure: bool = False
    api_version: str = DEFAULT_AZURE_API_VERSION


def resolve_config(provider: ProviderConfig, req: ChatRequest) -> ResolvedClientConfig:
    """
    Client config for a generic OpenAI-compatible provider.
    Uses the explicit server_url, else a default picked from the model prefix,
    and normalizes it down to the versioned root.
    """
    server_url = provider.server_url
    if not server_url:
        server_url = get_default_server_url(req.model)
        logger.info("Using default server URL %r for model %r", server_url, req.model)

    if not server_url:
        raise ConfigurationError("server URL is empty")

    formatted_url, ok = validate_and_format_url(server_url)
    if not ok:
        raise ConfigurationError(f"formatted server URL is invalid: {server_url!r}")

    logger.info("Formatted server URL is valid: %s", formatted_url)
    return ResolvedClientConfig(base_url=formatted_url, api_key=provider.api_key)


def resolve_azure_config(provider: ProviderConfig) -> ResolvedClientConfig:
    """
    Azure client config. The sdk builds the deployment path itself, so only
    scheme://host is kept; a url that can't be parsed is used as configured.
    """
    try:
        server_url = format_azure_url(provider.server_url)
    except ValueError:
        logger.warning("Could not parse Azure server URL %r, using it unformatted", provider.server_url)
        server_url = provider.server_url

    conf = ResolvedClientConfig(
        base_url=server_url,
        api_key=provider.api_key,
        azure=True,
        api_version=provider.api_version,
    )

    # emptiness is checked after formatting
    if not provider.server_url:
        raise ConfigurationError("server URL is empty")
    return conf
