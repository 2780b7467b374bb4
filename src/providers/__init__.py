# providers/__init__.py
from importlib import import_module

# map provider type -> module path
_PROVIDER_MODULES = {
    "openai": "providers.openai",
    "azure": "providers.azure",
}


# lazy loader: returns the async forward(req, provider_config, ...) of a provider type
def get_provider_forward(provider_type: str):
    mod_name = _PROVIDER_MODULES.get(provider_type)
    if not mod_name:
        return None
    mod = import_module(mod_name)
    return getattr(mod, "forward", None)


def supported_provider_types():
    return sorted(_PROVIDER_MODULES)
