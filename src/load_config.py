# load_config.py
import os
import json
import logging
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Dict, Optional

from dotenv import load_dotenv

from providers import supported_provider_types
from providers.config import DEFAULT_AZURE_API_VERSION, KEYNAME_API_KEY, ProviderConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config.json"


@dataclass(frozen=True)
class Settings:
    providers: Dict[str, ProviderConfig] = field(default_factory=dict)
    default_provider: Optional[str] = None
    request_timeout: Optional[float] = None

    def provider_for_model(self, model: str) -> Optional[str]:
        """Name of the provider serving `model`, else the default provider."""
        for name, provider in self.providers.items():
            if model in provider.models:
                return name
        return self.default_provider

    def all_models(self):
        return sorted({m for p in self.providers.values() for m in p.models})


# -------- Config loader from config.json --------
def load_config_from_json(path: Optional[str] = None) -> Dict:
    """
    Loads and parses the JSON configuration file.
    """
    path = path or os.getenv("CONFIG_PATH") or DEFAULT_CONFIG_PATH
    if not os.path.exists(path):
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        raw = json.load(f)
    return raw


def _provider_from_entry(name: str, entry: Dict) -> ProviderConfig:
    if not isinstance(entry, dict):
        raise ValueError(f"providers.{name} must be an object/dict in config.json")

    ptype = str(entry.get("type", "openai")).lower()
    if ptype not in supported_provider_types():
        raise ValueError(f"providers.{name}.type {ptype!r} is not one of {supported_provider_types()}")

    credentials = entry.get("credentials", {}) or {}
    if not isinstance(credentials, dict):
        raise ValueError(f"providers.{name}.credentials must be an object/dict in config.json")
    credentials = {str(k): str(v) for k, v in credentials.items()}

    # key from env wins over an inline one, secrets belong in .env
    env_name = entry.get("api_key_env")
    if env_name:
        env_key = os.getenv(str(env_name))
        if env_key:
            credentials[KEYNAME_API_KEY] = env_key
        elif KEYNAME_API_KEY not in credentials:
            logger.warning("provider '%s': env var %s is not set", name, env_name)

    models = entry.get("models", [])
    if not isinstance(models, list):
        raise ValueError(f"providers.{name}.models must be a list in config.json")

    return ProviderConfig(
        type=ptype,
        credentials=credentials,
        server_url=str(entry.get("server_url", "") or "").strip(),
        api_version=str(entry.get("api_version", DEFAULT_AZURE_API_VERSION)),
        models=tuple(str(m) for m in models),
    )


def validate_and_normalize_config(raw: Dict) -> Settings:
    """
    Validates the raw config dictionary and builds the read-only Settings.
    """
    if not isinstance(raw, dict):
        raise ValueError("config.json root must be an object/dict")

    entries = raw.get("providers", {})
    if not isinstance(entries, dict):
        raise ValueError("providers must be an object/dict in config.json")
    providers = {str(name).lower(): _provider_from_entry(str(name).lower(), e) for name, e in entries.items()}

    default_provider = raw.get("default_provider")
    if default_provider is not None:
        default_provider = str(default_provider).lower()
        if default_provider not in providers:
            raise ValueError(f"default_provider '{default_provider}' has no entry under providers")

    timeout = os.getenv("REQUEST_TIMEOUT") or raw.get("request_timeout")
    try:
        timeout = float(timeout) if timeout not in (None, "") else None
    except (TypeError, ValueError):
        raise ValueError(f"request_timeout must be a number of seconds, got {timeout!r}")

    return Settings(providers=providers, default_provider=default_provider, request_timeout=timeout)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load .env and config.json once; call get_settings.cache_clear() to reload."""
    load_dotenv()
    try:
        settings = validate_and_normalize_config(load_config_from_json())
    except (OSError, ValueError) as e:
        raise RuntimeError(f"Failed to load/validate config.json: {e}") from e
    logger.info("Configuration loaded: providers=%s", sorted(settings.providers))
    return settings
