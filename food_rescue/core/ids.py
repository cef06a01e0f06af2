"""Opaque id generation for listings, users and chat messages."""

import time
import uuid

LISTING_PREFIX = "L"
USER_PREFIX = "U"
MESSAGE_PREFIX = "M"


def generate_id(prefix: str = LISTING_PREFIX) -> str:
    """Return `<prefix>-<ms timestamp hex>-<random suffix>`."""
    millis = int(time.time() * 1000)
    return f"{prefix}-{millis:x}-{uuid.uuid4().hex[:8]}"
