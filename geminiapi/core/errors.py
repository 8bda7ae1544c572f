"""Error taxonomy for the generation facade.

Startup errors (`ConfigError`, `ServerBindError`) are fatal and abort the process.
Per-request errors (`ValidationError`, `UpstreamError`) are converted to an HTTP
status plus a plain-text body by `geminiapi.api.http_api` and never cross a
request boundary.
"""


class GeminiApiError(Exception):
    """Base error."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigError(GeminiApiError):
    """Raised when environment configuration is missing or invalid."""


class ServerBindError(GeminiApiError):
    """Raised when the HTTP listener cannot bind its port."""


class ValidationError(GeminiApiError):
    """Raised for malformed or incomplete client requests."""


class UpstreamError(GeminiApiError):
    """Raised when the provider call fails."""


class UpstreamEmptyResponse(UpstreamError):
    """Raised when the provider returns no usable candidate."""

    def __init__(self, message: str = "error generating response") -> None:
        super().__init__(message)
