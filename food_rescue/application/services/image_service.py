"""Image service — turn an uploaded photo into a storable data URL reference."""

import base64
from typing import Optional

from fastapi import UploadFile

from food_rescue.config import get_settings
from food_rescue.core.exceptions import ValidationError

settings = get_settings()


def encode_data_url(content: bytes, content_type: str, max_bytes: int = settings.MAX_IMAGE_BYTES) -> str:
    if not content_type or not content_type.startswith("image/"):
        raise ValidationError("Only image uploads are accepted", details={"content_type": content_type})
    if len(content) > max_bytes:
        raise ValidationError("Image is too large", details={"size": len(content), "max_bytes": max_bytes})

    encoded = base64.b64encode(content).decode("ascii")
    return f"data:{content_type};base64,{encoded}"


async def image_to_data_url(file: Optional[UploadFile]) -> Optional[str]:
    """Read the whole upload; no file (or an empty one) means no image."""
    if file is None or not file.filename:
        return None
    content = await file.read()
    if not content:
        return None
    return encode_data_url(content, file.content_type or "")
