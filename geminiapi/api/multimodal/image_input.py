"""Uploaded image reading for the generation endpoint.

Architectural role:
- Turn the `image` form value into raw bytes for the vision path.
- Enforce presence, readability and size before any provider call.

Input validation behavior:
- Absent field or a plain string value (no file part) -> `ValidationError`.
- Read failure -> `ValidationError("error reading image")`.
- Payload above the configured limit -> `ValidationError`.
- An empty file part is readable and returns `b""`; whether that is acceptable
  is decided by the caller per mode.

Side effects:
- Closes the upload after reading. Starlette spools large uploads to temporary
  files and removes them on close.
"""

import logging

from starlette.datastructures import UploadFile

from geminiapi.core.errors import ValidationError
from geminiapi.llm.provider_config import DEFAULT_MAX_IMAGE_BYTES


logger = logging.getLogger(__name__)

MISSING_IMAGE_MESSAGE = "missing image file"
UNREADABLE_IMAGE_MESSAGE = "error reading image"
OVERSIZED_IMAGE_MESSAGE = "image exceeds max size limit"


async def read_image(upload, max_bytes: int = DEFAULT_MAX_IMAGE_BYTES) -> bytes:
    """Read an uploaded image part into memory."""
    if not isinstance(upload, UploadFile):
        raise ValidationError(MISSING_IMAGE_MESSAGE)

    # Reject on the declared size before buffering the whole payload.
    if upload.size is not None and upload.size > max_bytes:
        await upload.close()
        raise ValidationError(OVERSIZED_IMAGE_MESSAGE)

    try:
        data = await upload.read()
    except (OSError, ValueError):
        logger.warning("Failed to read uploaded image %r", upload.filename, exc_info=True)
        raise ValidationError(UNREADABLE_IMAGE_MESSAGE) from None
    finally:
        await upload.close()

    if len(data) > max_bytes:
        raise ValidationError(OVERSIZED_IMAGE_MESSAGE)

    return data
