"""
HTTP API adapter for the generation facade.

Architectural role:
- Expose the single generation endpoint over HTTP.
- Enforce adapter-level input validation and mode selection.
- Delegate provider work to `geminiapi.llm.service.generate`.
- Serialize the first candidate's content parts as the JSON response body.

Endpoint responsibilities:
- `POST /`: parse form fields (`type`, `text`, `image`), validate, dispatch,
  and return the provider's content parts unchanged.

API request lifecycle (`POST /`):
1. Parse the multipart or url-encoded form body.
2. Validate mandatory fields, read the image part, and resolve the mode.
3. Run the blocking provider call in a worker thread.
4. Return the content parts as JSON.

Error handling strategy:
- `ValidationError` -> HTTP 400 with the plain-text message. Unparseable form
  bodies are converted to `ValidationError` as well.
- `UpstreamError` (and `UpstreamEmptyResponse`) -> HTTP 500 with the plain-text
  message.
- Errors are handled per request; nothing is retained across requests.

Dependency wiring:
- The provider session and configuration are injected through `create_app` and
  held by the `GenerationHandler` bound to the route. No module-level client
  exists.

Determinism considerations:
- Serialization is deterministic: identical provider output yields identical
  response bytes.
"""

import asyncio
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException
from starlette.formparsers import MultiPartException

from geminiapi.api.request_validator import validate_request
from geminiapi.core.errors import UpstreamError, ValidationError
from geminiapi.llm.service import generate


logger = logging.getLogger(__name__)


# ============================================================
# Request Handler
# ============================================================

class GenerationHandler:
    """Handles `POST /` against one shared provider session.

    Args:
        session: Provider session, used read-only by concurrent requests.
        config: `ProviderConfig` carrying model names and validation limits.
    """

    def __init__(self, session, config) -> None:
        self.session = session
        self.config = config

    async def generate_text(self, request: Request):
        try:
            form = await request.form()
        except (HTTPException, MultiPartException) as err:
            detail = getattr(err, "detail", None) or getattr(err, "message", None) or str(err)
            raise ValidationError(f"invalid form body: {detail}") from err
        type_value = form.get("type")
        text_value = form.get("text")

        if self.config.debug:
            logger.debug("Incoming form type=%r text=%r fields=%s", type_value, text_value, list(form.keys()))

        generation_request = await validate_request(
            type_value,
            text_value,
            form.get("image"),
            required_for_all_modes=self.config.image_required_for_all_modes,
            max_image_bytes=self.config.max_image_bytes,
        )

        parts = await asyncio.to_thread(generate, self.session, generation_request, self.config.models)

        if self.config.debug:
            logger.debug("Generated %d content parts: %r", len(parts), parts)

        return JSONResponse(content=parts)


# ============================================================
# Error mapping
# ============================================================

async def _handle_validation_error(request: Request, exc: ValidationError):
    logger.info("Rejected request to %s: %s", request.url.path, exc.message)
    return PlainTextResponse(exc.message, status_code=400)


async def _handle_upstream_error(request: Request, exc: UpstreamError):
    logger.warning("Upstream generation failed: %s", exc.message)
    return PlainTextResponse(exc.message, status_code=500)


# ============================================================
# App factory
# ============================================================

def create_app(session, config) -> FastAPI:
    """Build the FastAPI application around an injected provider session."""
    app = FastAPI(title="geminiapi")

    handler = GenerationHandler(session, config)
    app.add_api_route("/", handler.generate_text, methods=["POST"])

    app.add_exception_handler(ValidationError, _handle_validation_error)
    app.add_exception_handler(UpstreamError, _handle_upstream_error)

    return app
