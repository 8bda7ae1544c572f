"""Generation request contracts shared by the API adapter and the LLM layer.

Architectural role:
    Defines the generation modes accepted on the wire, the default mode-to-model
    mapping, the per-request `GenerationRequest` value, and builders for the
    content parts sent to the provider.

Determinism:
    Purely structural. Part builders are deterministic for identical inputs.
"""

import base64
from dataclasses import dataclass
from enum import Enum

from geminiapi.core.errors import ValidationError


INVALID_TYPE_MESSAGE = "invalid type. Select modal or multimodal"


class GenerationMode(str, Enum):
    """Wire values of the `type` form field."""

    TEXT_ONLY = "modal"
    TEXT_AND_IMAGE = "multimodal"

    @classmethod
    def parse(cls, raw: str) -> "GenerationMode":
        try:
            return cls(raw)
        except ValueError:
            raise ValidationError(INVALID_TYPE_MESSAGE) from None


MODEL_BY_MODE = {
    GenerationMode.TEXT_ONLY: "gemini-pro",
    GenerationMode.TEXT_AND_IMAGE: "gemini-pro-vision",
}


@dataclass(frozen=True)
class GenerationRequest:
    """One validated generation request.

    Attributes:
        mode: Selected generation strategy.
        text: Prompt text, never empty.
        image: Raw image bytes. Required and non-empty for `TEXT_AND_IMAGE`.
    """

    mode: GenerationMode
    text: str
    image: bytes | None = None

    def __post_init__(self):
        if not self.text:
            raise ValidationError("missing mandatory fields. type or text")
        if self.mode is GenerationMode.TEXT_AND_IMAGE and not self.image:
            raise ValidationError("image is required for multimodal generation")


# ============================================================
# Content parts
# ============================================================

def text_part(text: str) -> dict:
    return {"text": text}


def image_part(image_format: str, data: bytes) -> dict:
    """Build an inline image part tagged `image/<image_format>`."""
    return {
        "inline_data": {
            "mime_type": f"image/{image_format}",
            "data": base64.b64encode(data).decode("ascii"),
        }
    }
