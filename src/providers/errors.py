# providers/errors.py
from typing import Optional


class GatewayError(Exception):
    """
    Base error for the gateway. `kind` is a stable tag the HTTP layer can
    switch on, `detail` is the human readable message.
    """
    kind = "gateway_error"
    status_code = 500

    def __init__(self, detail: str, kind: Optional[str] = None):
        super().__init__(detail)
        self.detail = detail
        if kind:
            self.kind = kind

    def to_dict(self) -> dict:
        return {"ok": False, "error": self.kind, "detail": self.detail}


class ConfigurationError(GatewayError):
    """Server URL missing or not normalizable. Raised before any network call."""
    kind = "configuration_error"
    status_code = 500


class BackendCallError(GatewayError):
    """The create / create-stream call or a stream receive failed."""
    kind = "backend_call_error"
    status_code = 502


class SerializationError(GatewayError):
    kind = "serialization_error"
    status_code = 500
