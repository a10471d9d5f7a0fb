"""Client for the InsForge object-storage API.

Objects are written with a single multipart ``PUT``::

    PUT {base}/api/storage/buckets/{bucket}/objects/{key}
    Authorization: Bearer <storage key>
    file=<bytes>; filename=<name>; content-type=image/png

The service replies with a descriptor (``key``, ``url``, ``bucket``,
``uploadedAt``), sometimes wrapped in a ``data`` envelope.  The descriptor
is returned unwrapped and otherwise untouched.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from pitchslides.core.config import PitchSlidesConfig
from pitchslides.core.errors import UploadFault

logger = logging.getLogger(__name__)

UPLOAD_ERROR = "Upload to InsForge failed"


class StorageClient:
    """Async wrapper over the storage bucket object endpoint."""

    def __init__(self, http: httpx.AsyncClient, config: PitchSlidesConfig) -> None:
        self._http = http
        self._config = config

    @property
    def bucket(self) -> str:
        return self._config.storage_bucket

    def object_url(self, key: str) -> str:
        """Return the endpoint URL for an object key."""
        base = self._config.storage_base_url.rstrip("/")
        return f"{base}/api/storage/buckets/{self.bucket}/objects/{key}"

    async def put_object(
        self,
        key: str,
        content: bytes,
        *,
        filename: str,
        content_type: str = "image/png",
    ) -> dict[str, Any]:
        """Store ``content`` under ``key`` and return the storage descriptor.

        Raises:
            UploadFault: On any non-success response or transport error.  The
                upstream payload is attached as ``details``.
        """
        headers = {}
        token = self._config.storage_api_key
        if token is not None:
            headers["Authorization"] = f"Bearer {token.get_secret_value()}"

        try:
            response = await self._http.put(
                self.object_url(key),
                files={"file": (filename, content, content_type)},
                headers=headers,
            )
        except httpx.HTTPError as e:
            logger.error("Upload error: %s", e)
            raise UploadFault(UPLOAD_ERROR, details=str(e)) from e

        payload = _read_payload(response)
        if not response.is_success:
            logger.error("Upload error (%s): %s", response.status_code, payload)
            raise UploadFault(
                UPLOAD_ERROR,
                details=payload,
                upstream_status=response.status_code,
            )

        logger.info("Upload successful: %s", payload)
        if isinstance(payload, dict) and isinstance(payload.get("data"), dict):
            return payload["data"]
        if isinstance(payload, dict):
            return payload
        raise UploadFault(UPLOAD_ERROR, details=payload)


def _read_payload(response: httpx.Response) -> Any:
    """Return the JSON body when there is one, else the raw text."""
    try:
        return response.json()
    except ValueError:
        return response.text
