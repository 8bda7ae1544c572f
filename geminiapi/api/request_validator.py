"""Inbound form validation for `POST /`.

Validation order:
1. `type` and `text` must both be non-empty.
2. The image part is read before mode dispatch when `image_required` says so.
3. `type` must be `modal` or `multimodal`.

Open behavior:
- By default the image part is mandatory for every mode, including `modal`.
  `image_required` is the single switch for relaxing this to `multimodal` only
  (`IMAGE_REQUIRED_FOR_ALL_MODES=false`).
"""

from geminiapi.api.multimodal.image_input import read_image
from geminiapi.core.errors import ValidationError
from geminiapi.core.generation_types import GenerationMode, GenerationRequest
from geminiapi.llm.provider_config import DEFAULT_MAX_IMAGE_BYTES


MISSING_FIELDS_MESSAGE = "missing mandatory fields. type or text"


def image_required(type_value: str, required_for_all_modes: bool = True) -> bool:
    if required_for_all_modes:
        return True
    return type_value == GenerationMode.TEXT_AND_IMAGE.value


async def validate_request(
    type_value,
    text_value,
    image,
    *,
    required_for_all_modes: bool = True,
    max_image_bytes: int = DEFAULT_MAX_IMAGE_BYTES,
) -> GenerationRequest:
    """Validate raw form fields into a `GenerationRequest`.

    Args:
        type_value: Raw `type` form value, possibly `None`.
        text_value: Raw `text` form value, possibly `None`.
        image: Raw `image` form value (upload, string or `None`).
        required_for_all_modes: Require the image part for `modal` as well.
        max_image_bytes: Upper bound for the uploaded image.

    Raises:
        ValidationError: any rule above is violated.
    """
    if not isinstance(type_value, str) or not isinstance(text_value, str) or not type_value or not text_value:
        raise ValidationError(MISSING_FIELDS_MESSAGE)

    image_bytes = None
    if image_required(type_value, required_for_all_modes):
        image_bytes = await read_image(image, max_bytes=max_image_bytes)

    mode = GenerationMode.parse(type_value)
    if mode is GenerationMode.TEXT_ONLY:
        # The text path never sends the image.
        image_bytes = None

    return GenerationRequest(mode=mode, text=text_value, image=image_bytes)
