"""Client for the generative language API (text and image models).

Two endpoints are used:

- ``POST {base}/models/{text_model}:generateContent`` with a role/parts
  ``contents`` structure; the reply text is read from
  ``candidates[0].content.parts[0].text``.
- ``POST {base}/models/{image_model}:predict`` with a prompt instance plus
  ``sampleCount`` / ``aspectRatio`` parameters; the image is read from
  ``predictions[0].bytesBase64Encoded``.

The API key travels as the ``key`` query parameter.  It is never logged and
never copied into a fault payload.

Every call is single-shot: a non-success status, a transport error, or an
unreadable body raises :class:`~pitchslides.core.errors.UpstreamFault` with
the message chosen by the calling operation.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from pitchslides.core.config import PitchSlidesConfig
from pitchslides.core.errors import UpstreamFault

logger = logging.getLogger(__name__)


class GenerativeClient:
    """Thin async wrapper over the text and image generation endpoints.

    Attributes:
        _http: Shared ``httpx.AsyncClient`` owned by the application.
        _config: Application configuration (models, base URL, key).
    """

    def __init__(self, http: httpx.AsyncClient, config: PitchSlidesConfig) -> None:
        self._http = http
        self._config = config

    # -- Public interface ---------------------------------------------------

    async def generate_text(self, prompt: str, *, error_message: str) -> str | None:
        """Run the text model on a single user prompt.

        Args:
            prompt: Complete prompt text.
            error_message: Fault message used if the call fails.

        Returns:
            The first candidate's text, or ``None`` when the response holds
            no text.

        Raises:
            UpstreamFault: On any non-success response or transport error.
        """
        body = {"contents": [{"role": "user", "parts": [{"text": prompt}]}]}
        data = await self._post(self._config.text_model, "generateContent", body, error_message)
        return _first_candidate_text(data)

    async def generate_image(
        self,
        prompt: str,
        *,
        error_message: str,
        empty_message: str = "No image generated",
    ) -> str:
        """Run the image model and return the first image as base64.

        Args:
            prompt: Complete image prompt.
            error_message: Fault message used if the call fails.
            empty_message: Fault message used if the response holds no image.

        Raises:
            UpstreamFault: On any non-success response, transport error, or
                a response without predictions.
        """
        body = {
            "instances": [{"prompt": prompt}],
            "parameters": {
                "sampleCount": self._config.sample_count,
                "aspectRatio": self._config.aspect_ratio,
            },
        }
        data = await self._post(self._config.image_model, "predict", body, error_message)

        predictions = data.get("predictions") if isinstance(data, dict) else None
        image = None
        if predictions and isinstance(predictions[0], dict):
            image = predictions[0].get("bytesBase64Encoded")
        if not image:
            logger.error("Image model %s returned no predictions", self._config.image_model)
            raise UpstreamFault(empty_message)
        return image

    # -- Internals ----------------------------------------------------------

    def _endpoint(self, model: str, method: str) -> str:
        base = self._config.generative_base_url.rstrip("/")
        return f"{base}/models/{model}:{method}"

    def _params(self) -> dict[str, str]:
        key = self._config.gemini_api_key
        return {"key": key.get_secret_value()} if key is not None else {}

    async def _post(
        self,
        model: str,
        method: str,
        body: dict[str, Any],
        error_message: str,
    ) -> Any:
        logger.debug("Calling %s:%s", model, method)
        try:
            response = await self._http.post(
                self._endpoint(model, method),
                params=self._params(),
                json=body,
            )
        except httpx.HTTPError as e:
            logger.error("%s:%s transport error: %s", model, method, type(e).__name__)
            raise UpstreamFault(error_message, details=type(e).__name__) from e

        if not response.is_success:
            logger.error(
                "%s:%s returned %s: %s",
                model,
                method,
                response.status_code,
                response.text,
            )
            raise UpstreamFault(
                error_message,
                details=response.text or None,
                upstream_status=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            logger.error("%s:%s returned a non-JSON body", model, method)
            raise UpstreamFault(error_message, details=response.text or None) from e


def _first_candidate_text(data: Any) -> str | None:
    """Dig ``candidates[0].content.parts[0].text`` out of a response body."""
    try:
        text = data["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return None
    return text if isinstance(text, str) else None
