"""Mode dispatcher for text-only and text-plus-image generation.

Architectural role:
    Bridges a validated `GenerationRequest` to the provider client. Selects the
    model for the request mode, assembles the ordered input parts, and returns the
    content parts of the first candidate.

Model call flow:
    request -> `generate` -> `generate_text_with_text` |
    `generate_text_with_text_and_image` -> `GenerativeModel.generate_content`.

Failure scenarios:
    - Provider call errors are re-raised as `UpstreamError` carrying the input
      text for diagnostics.
    - Zero candidates raise `UpstreamEmptyResponse`.
"""

import logging

from geminiapi.core.errors import UpstreamEmptyResponse, UpstreamError
from geminiapi.core.generation_types import (
    MODEL_BY_MODE,
    GenerationMode,
    GenerationRequest,
    image_part,
    text_part,
)
from geminiapi.llm.client import ProviderError


logger = logging.getLogger(__name__)

VISION_IMAGE_FORMAT = "png"


def _first_candidate_parts(response: dict) -> list:
    """Return the content parts of the first candidate, unchanged.

    A missing candidate, or a first candidate without content parts (for example
    one blocked with `finishReason: SAFETY`), raises `UpstreamEmptyResponse`.
    """
    candidates = response.get("candidates") if isinstance(response, dict) else None
    if not isinstance(candidates, list) or not candidates:
        raise UpstreamEmptyResponse()

    candidate = candidates[0]
    content = candidate.get("content") if isinstance(candidate, dict) else None
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list) or not parts:
        finish_reason = candidate.get("finishReason") if isinstance(candidate, dict) else None
        logger.warning("First candidate has no content parts (finishReason=%s)", finish_reason)
        raise UpstreamEmptyResponse()

    return list(parts)


def generate_text_with_text(session, text: str, model_name: str = MODEL_BY_MODE[GenerationMode.TEXT_ONLY]) -> list:
    model = session.generative_model(model_name)
    try:
        response = model.generate_content(text_part(text))
    except ProviderError as err:
        raise UpstreamError(f"error generating content to text: {text}. error: {err}") from err

    return _first_candidate_parts(response)


def generate_text_with_text_and_image(
    session,
    text: str,
    image: bytes,
    model_name: str = MODEL_BY_MODE[GenerationMode.TEXT_AND_IMAGE],
) -> list:
    # Image part first, then the prompt.
    model = session.generative_model(model_name)
    prompt = [
        image_part(VISION_IMAGE_FORMAT, image),
        text_part(text),
    ]
    try:
        response = model.generate_content(*prompt)
    except ProviderError as err:
        raise UpstreamError(
            f"error generating content to text: {text}, with this image, error: {err}"
        ) from err

    return _first_candidate_parts(response)


def generate(session, request: GenerationRequest, models=None) -> list:
    """Run the generation strategy selected by `request.mode`.

    Args:
        session: Provider session exposing `generative_model(name)`.
        request: Validated generation request.
        models: Optional mode-to-model mapping, defaults to `MODEL_BY_MODE`.

    Returns:
        Content parts of the first candidate.

    Raises:
        UpstreamError: provider failure.
        UpstreamEmptyResponse: provider returned no candidates.
    """
    models = models or MODEL_BY_MODE
    model_name = models[request.mode]
    logger.info("Generating content mode=%s model=%s", request.mode.value, model_name)

    if request.mode is GenerationMode.TEXT_AND_IMAGE:
        return generate_text_with_text_and_image(session, request.text, request.image, model_name)

    return generate_text_with_text(session, request.text, model_name)
