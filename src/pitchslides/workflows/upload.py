"""Relay of generated slides to object storage.

The relay accepts an image the caller already holds (as a ``data:`` URI or
raw base64), decodes it, and stores it under a key derived from the idea
text and the current time::

    slides/<slug>/<epoch-ms>.png

The slug is the idea lower-cased, with every run of characters outside
``[a-z0-9]`` collapsed to a single hyphen, leading and trailing hyphens
removed, and the result cut to 50 characters.  For example
``"A Flying Car! Service"`` becomes ``a-flying-car-service``.
"""

from __future__ import annotations

import base64
import binascii
import logging
import re
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from pitchslides.clients.storage import StorageClient
from pitchslides.core.errors import ValidationFault

logger = logging.getLogger(__name__)

KEY_PREFIX = "slides"
SLUG_MAX_LENGTH = 50
EMPTY_SLUG = "untitled"

_DATA_URI_PREFIX = re.compile(r"^data:image/\w+;base64,")
_NON_ALNUM_RUN = re.compile(r"[^a-z0-9]+")


def slugify(idea: str) -> str:
    """Turn idea text into a path-safe slug of at most 50 characters."""
    slug = _NON_ALNUM_RUN.sub("-", idea.lower()).strip("-")
    return slug[:SLUG_MAX_LENGTH]


def build_object_key(idea: str | None, timestamp_ms: int) -> str:
    """Return the storage key for a slide uploaded at ``timestamp_ms``.

    An idea that slugs to nothing (missing, empty, or punctuation only) is
    filed under ``untitled``.
    """
    slug = slugify(idea or "") or EMPTY_SLUG
    return f"{KEY_PREFIX}/{slug}/{timestamp_ms}.png"


def decode_image(image_base64: str) -> bytes:
    """Strip any ``data:image/...;base64,`` prefix and decode the payload.

    Raises:
        ValidationFault: If the payload is not valid base64.
    """
    payload = _DATA_URI_PREFIX.sub("", image_base64.strip(), count=1)
    payload = "".join(payload.split())
    payload += "=" * (-len(payload) % 4)
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValidationFault("Image data is not valid base64") from e


def epoch_millis() -> int:
    return time.time_ns() // 1_000_000


@dataclass(frozen=True)
class StoredSlide:
    """Storage descriptor returned to the caller."""

    key: Any
    file_name: str
    file_url: Any
    bucket: Any
    uploaded_at: Any


class UploadRelay:
    """Forwards slide images to the storage service.

    Args:
        storage: Storage API client.
        clock: Returns the current time in epoch milliseconds.  Injected so
            object keys are reproducible in tests.
    """

    def __init__(self, storage: StorageClient, clock: Callable[[], int] = epoch_millis) -> None:
        self._storage = storage
        self._clock = clock

    async def upload(self, image_base64: str, idea: str | None) -> StoredSlide:
        """Decode the image and store it under a slug/timestamp key.

        Raises:
            ValidationFault: If the image data cannot be decoded.
            UploadFault: If the storage service rejects the upload.
        """
        content = decode_image(image_base64)
        timestamp = self._clock()
        key = build_object_key(idea, timestamp)
        logger.info("Uploading %d bytes to %s", len(content), key)

        descriptor = await self._storage.put_object(
            key,
            content,
            filename=f"{timestamp}.png",
            content_type="image/png",
        )
        return StoredSlide(
            key=descriptor.get("key"),
            file_name=key,
            file_url=descriptor.get("url"),
            bucket=descriptor.get("bucket"),
            uploaded_at=descriptor.get("uploadedAt"),
        )
