"""Provider transport client for Gemini `generateContent` calls.

Architectural role:
    Owns the long-lived HTTP session to the provider. `ProviderSession` is built
    once at startup, injected into the HTTP app, and only read afterwards, so it
    can be shared by concurrent requests.

Model invocation flow:
    `service.generate_*` -> `session.generative_model(name)` ->
    `GenerativeModel.generate_content(*parts)` -> decoded JSON response body.

Retry behavior:
    No retry loop is implemented. Each call is attempted once. A timeout is only
    applied when one is configured.

Failure handling model:
    Transport errors, non-2xx statuses, undecodable or non-object bodies raise
    `ProviderError` with a provider-labeled message. Callers wrap it with request
    context.
"""

import logging

import requests

from geminiapi.llm.provider_config import DEFAULT_BASE_URL


logger = logging.getLogger(__name__)

API_KEY_HEADER = "x-goog-api-key"
MAX_ERROR_DETAIL_CHARS = 240


class ProviderError(RuntimeError):
    """Raised when a provider call cannot produce a decoded response."""


def _build_http_error(model_name: str, response: requests.Response) -> str:
    """Build model-labeled HTTP error text with a bounded excerpt of the body."""
    detail = (response.text or "").strip()
    if len(detail) > MAX_ERROR_DETAIL_CHARS:
        detail = detail[:MAX_ERROR_DETAIL_CHARS] + "..."
    message = f"{model_name} HTTP ERROR ({response.status_code})"
    if detail:
        message = f"{message}: {detail}"
    return message


class GenerativeModel:
    """A named model reachable through a `ProviderSession`."""

    def __init__(self, session: "ProviderSession", name: str) -> None:
        self._session = session
        self.name = name

    @property
    def url(self) -> str:
        return f"{self._session.base_url}/models/{self.name}:generateContent"

    def generate_content(self, *parts: dict) -> dict:
        """Send one `generateContent` call with `parts` as a single user turn.

        Returns:
            Decoded JSON response body, including `candidates`.

        Raises:
            ProviderError: on transport failure, non-2xx status, or a body that is
                not a JSON object.
        """
        payload = {"contents": [{"role": "user", "parts": list(parts)}]}
        return self._session.post_json(self.url, payload, label=self.name)


class ProviderSession:
    """Shared handle to the generative-model provider.

    Args:
        api_key: Provider credential.
        base_url: Root of the provider REST API.
        timeout_seconds: Per-call timeout, `None` for none.
        http: Optional pre-built `requests.Session`, mainly for tests.
    """

    def __init__(self, api_key: str, base_url: str = DEFAULT_BASE_URL, timeout_seconds=None, http=None) -> None:
        if not api_key:
            raise ValueError("api_key must not be empty")
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._http = http if http is not None else requests.Session()
        self._http.headers.update({
            API_KEY_HEADER: api_key,
            "Content-Type": "application/json",
        })

    @classmethod
    def from_config(cls, config) -> "ProviderSession":
        return cls(
            api_key=config.api_key,
            base_url=config.base_url,
            timeout_seconds=config.timeout_seconds,
        )

    def generative_model(self, name: str) -> GenerativeModel:
        return GenerativeModel(self, name)

    def post_json(self, url: str, payload: dict, label: str = "provider") -> dict:
        logger.debug("Calling %s", label)
        try:
            response = self._http.post(url, json=payload, timeout=self.timeout_seconds)
        except requests.exceptions.RequestException as err:
            raise ProviderError(f"{label} REQUEST FAILED: {err}") from err

        if response.status_code < 200 or response.status_code >= 300:
            raise ProviderError(_build_http_error(label, response))

        try:
            body = response.json()
        except ValueError as err:
            raise ProviderError(f"{label} returned an invalid JSON response") from err

        if not isinstance(body, dict):
            raise ProviderError(f"{label} returned a non-object JSON response")
        return body

    def close(self) -> None:
        self._http.close()
