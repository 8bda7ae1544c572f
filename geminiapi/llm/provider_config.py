"""Provider/runtime configuration for the generation facade.

Architectural role:
    Resolves the provider credential, listen port, model names and request limits
    from the process environment. Consumed once at startup by
    `geminiapi.api.main` and then injected into the client and the HTTP app.

Resolution:
    `load_dotenv()` runs at import time, so a local `.env` file fills in variables
    that are not already set in the process environment. Field names match the
    environment variable names case-insensitively (`API_KEY` -> `api_key`).

Failure behavior:
    `load_config` converts settings validation failures into `ConfigError`.
    Startup treats this as fatal.
"""

from dotenv import load_dotenv
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from geminiapi.core.errors import ConfigError
from geminiapi.core.generation_types import MODEL_BY_MODE, GenerationMode

load_dotenv()


DEFAULT_HTTP_PORT = 8085
DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_MAX_IMAGE_BYTES = 10 * 1024 * 1024


class ProviderConfig(BaseSettings):
    """Immutable process configuration.

    Attributes:
        api_key: Provider credential sent with every call. Required.
        http_port: Listen port for the HTTP server.
        gemini_base_url: Root of the provider REST API.
        text_model: Model used for `modal` requests.
        vision_model: Model used for `multimodal` requests.
        provider_timeout_seconds: Per-call timeout, `None` for no timeout.
        max_image_bytes: Upper bound for uploaded images.
        image_required_for_all_modes: Require the image part for text-only
            requests too.
        debug: Log request fields and results at debug level.
    """

    model_config = SettingsConfigDict(extra="ignore", frozen=True)

    api_key: str
    http_port: int = Field(default=DEFAULT_HTTP_PORT, gt=0, lt=65536)
    gemini_base_url: str = DEFAULT_BASE_URL
    text_model: str = Field(default=MODEL_BY_MODE[GenerationMode.TEXT_ONLY], min_length=1)
    vision_model: str = Field(default=MODEL_BY_MODE[GenerationMode.TEXT_AND_IMAGE], min_length=1)
    provider_timeout_seconds: float | None = Field(default=None, gt=0)
    max_image_bytes: int = Field(default=DEFAULT_MAX_IMAGE_BYTES, gt=0)
    image_required_for_all_modes: bool = True
    debug: bool = False

    @field_validator("api_key")
    @classmethod
    def _api_key_not_empty(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    @field_validator("gemini_base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return (value.strip() or DEFAULT_BASE_URL).rstrip("/")

    @field_validator("provider_timeout_seconds", mode="before")
    @classmethod
    def _blank_timeout_is_unset(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def base_url(self) -> str:
        return self.gemini_base_url

    @property
    def timeout_seconds(self) -> float | None:
        return self.provider_timeout_seconds

    @property
    def models(self) -> dict:
        return {
            GenerationMode.TEXT_ONLY: self.text_model,
            GenerationMode.TEXT_AND_IMAGE: self.vision_model,
        }


def _describe(err: ValidationError) -> str:
    problems = []
    for item in err.errors():
        name = ".".join(str(part) for part in item.get("loc", ())).upper() or "CONFIG"
        problems.append(f"{name}: {item.get('msg')}")
    return "invalid environment configuration: " + "; ".join(problems)


def load_config() -> ProviderConfig:
    """Build a `ProviderConfig` from the process environment.

    Raises:
        ConfigError: `API_KEY` is absent or empty, or any optional value is
            present but malformed.
    """
    try:
        return ProviderConfig()
    except ValidationError as err:
        raise ConfigError(_describe(err)) from err
