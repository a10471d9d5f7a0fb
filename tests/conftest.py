"""Shared pytest fixtures for Pitch Slides tests.

Upstream services are simulated with :class:`FakeUpstream`, an
``httpx.MockTransport`` handler that answers the text, image and storage
endpoints and records every request it receives.  No test touches the
network.
"""

from __future__ import annotations

import asyncio
import base64
import io
import json
from collections.abc import Generator
from typing import Any

import httpx
import pytest
from fastapi.testclient import TestClient
from PIL import Image

from pitchslides.api.main import create_app
from pitchslides.core.config import PitchSlidesConfig

FIXED_TIMESTAMP = 1_700_000_000_000

GENERATIVE_BASE_URL = "https://generative.test/v1beta"
STORAGE_BASE_URL = "https://storage.test"

SAMPLE_DESCRIPTION = (
    "SLIDE CONCEPT:\n"
    "• Headline: **SkyCart** Groceries in Minutes\n"
    "• Style: minimalist with bold typography\n"
    "• Key Points: Drone delivery, 15-minute windows, zero emissions\n"
    "\n"
    "Visual layout: a white canvas with a huge black headline on the left and a "
    "single drone silhouette on the right."
)


def _make_png() -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (16, 9), color=(20, 40, 200)).save(buffer, format="PNG")
    return buffer.getvalue()


PNG_BYTES = _make_png()
PNG_BASE64 = base64.b64encode(PNG_BYTES).decode("ascii")


def text_reply(text: str) -> dict:
    """Build a ``generateContent`` response body carrying ``text``."""
    return {"candidates": [{"content": {"role": "model", "parts": [{"text": text}]}}]}


def image_reply(image_base64: str = PNG_BASE64) -> dict:
    """Build a ``predict`` response body carrying one image."""
    return {"predictions": [{"bytesBase64Encoded": image_base64, "mimeType": "image/png"}]}


class FakeUpstream:
    """Scriptable stand-in for the generative and storage services.

    Attributes:
        requests: Every request received, in arrival order.
        text_status / text_body: Reply for ``:generateContent`` calls.
        image_status / image_body: Reply for ``:predict`` calls.
        image_failures: Prompt substrings whose image calls return 500.
        image_delays: Prompt substring -> seconds to wait before replying.
        completed_image_prompts: Image prompts in the order their replies were sent.
        storage_status / storage_body: Reply for storage uploads.
        clients: Every ``httpx.AsyncClient`` created by :meth:`client`.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.clients: list[httpx.AsyncClient] = []
        self.text_status = 200
        self.text_body: Any = text_reply(SAMPLE_DESCRIPTION)
        self.image_status = 200
        self.image_body: Any = image_reply()
        self.image_failures: list[str] = []
        self.image_delays: dict[str, float] = {}
        self.completed_image_prompts: list[str] = []
        self.storage_status = 200
        self.storage_body: Any = {
            "data": {
                "key": "slides/a-flying-car-service/1700000000000.png",
                "url": f"{STORAGE_BASE_URL}/objects/slides/a-flying-car-service/1700000000000.png",
                "bucket": "slides",
                "uploadedAt": "2023-11-14T22:13:20.000Z",
            }
        }

    def reply_text(self, text: str | None) -> None:
        """Make text calls answer with ``text`` (``None`` drops the candidates)."""
        self.text_body = text_reply(text) if text is not None else {"candidates": []}

    # -- Request views ------------------------------------------------------

    def _matching(self, suffix: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path.endswith(suffix)]

    @property
    def text_requests(self) -> list[httpx.Request]:
        return self._matching(":generateContent")

    @property
    def image_requests(self) -> list[httpx.Request]:
        return self._matching(":predict")

    @property
    def storage_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if "/api/storage/" in r.url.path]

    @property
    def text_prompts(self) -> list[str]:
        return [
            json.loads(r.content)["contents"][0]["parts"][0]["text"] for r in self.text_requests
        ]

    @property
    def image_prompts(self) -> list[str]:
        return [json.loads(r.content)["instances"][0]["prompt"] for r in self.image_requests]

    # -- Transport ----------------------------------------------------------

    async def handler(self, request: httpx.Request) -> httpx.Response:
        await request.aread()
        self.requests.append(request)
        path = request.url.path

        if path.endswith(":generateContent"):
            return _reply(self.text_status, self.text_body)

        if path.endswith(":predict"):
            prompt = json.loads(request.content)["instances"][0]["prompt"]
            for marker, delay in self.image_delays.items():
                if marker in prompt:
                    await asyncio.sleep(delay)
            self.completed_image_prompts.append(prompt)
            if any(marker in prompt for marker in self.image_failures):
                return _reply(500, {"error": {"code": 500, "message": "model overloaded"}})
            return _reply(self.image_status, self.image_body)

        if "/api/storage/" in path:
            return _reply(self.storage_status, self.storage_body)

        return httpx.Response(404, json={"error": f"unexpected path {path}"})

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def client(self) -> httpx.AsyncClient:
        client = httpx.AsyncClient(transport=self.transport())
        self.clients.append(client)
        return client

    async def aclose(self) -> None:
        """Close every client handed out by :meth:`client`."""
        for client in self.clients:
            await client.aclose()


def _reply(status: int, body: Any) -> httpx.Response:
    if isinstance(body, (dict, list)):
        return httpx.Response(status, json=body)
    return httpx.Response(status, text=body if body is not None else "")


@pytest.fixture
def test_config() -> PitchSlidesConfig:
    """Create a configuration pointing at the fake upstream hosts.

    Returns:
        PitchSlidesConfig instance for testing
    """
    return PitchSlidesConfig(
        gemini_api_key="test-gemini-key",
        storage_api_key="test-storage-key",
        generative_base_url=GENERATIVE_BASE_URL,
        storage_base_url=STORAGE_BASE_URL,
        _env_file=None,
    )


@pytest.fixture
def upstream() -> Generator[FakeUpstream, None, None]:
    """Fresh fake upstream for each test.

    Clients created from it are closed once the test (and any TestClient
    using them) has finished.
    """
    fake = FakeUpstream()
    yield fake
    asyncio.run(fake.aclose())


@pytest.fixture
def test_client(
    test_config: PitchSlidesConfig, upstream: FakeUpstream
) -> Generator[TestClient, None, None]:
    """FastAPI TestClient wired to the fake upstream and a fixed clock.

    Yields:
        TestClient with the lifespan already started
    """
    app = create_app(
        test_config,
        http_client=upstream.client(),
        clock=lambda: FIXED_TIMESTAMP,
    )
    with TestClient(app) as client:
        yield client


@pytest.fixture
def png_base64() -> str:
    """Base64 of a small real PNG, as returned by the fake image model."""
    return PNG_BASE64


@pytest.fixture
def sample_description() -> str:
    """Slide description with a well-formed concept block."""
    return SAMPLE_DESCRIPTION


@pytest.fixture
def fixed_timestamp() -> int:
    """Epoch milliseconds returned by the test clock."""
    return FIXED_TIMESTAMP
