"""Pydantic request and response models for the Pitch Slides API.

These models define the JSON schema for every API endpoint.  FastAPI uses
them for request parsing, serialisation, and OpenAPI documentation.

Field names are snake_case in Python and camelCase on the wire
(``selectedOption``, ``imageBase64``...), matching the browser client.
Request fields are all optional at the schema level: required-field checks
happen in the route handlers so that a missing field produces the
endpoint's own 400 message instead of a generic schema error.

Models
------
IdeaRequest
    ``POST /generate-options``.
SlideRequest
    ``POST /generate-final`` and ``POST /get-refine-options``.
RefineRequest
    ``POST /refine-slide``.
UploadRequest
    ``POST /upload``.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase JSON keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Requests.
# ---------------------------------------------------------------------------


class IdeaRequest(CamelModel):
    """Request body carrying only the business idea.

    Attributes:
        prompt: Free-text business idea.
    """

    prompt: str | None = Field(
        default=None,
        description="Free-text business idea.",
    )


class SlideRequest(IdeaRequest):
    """Request body for stages that operate on a chosen style.

    Attributes:
        selected_option: Zero-based index of the chosen style option.
    """

    selected_option: int | None = Field(
        default=None,
        description="Style option index (0, 1 or 2).",
    )


class RefineRequest(SlideRequest):
    """Request body for ``POST /refine-slide``.

    Attributes:
        refinement_instruction: Suggested or free-form refinement.
        is_custom: ``True`` when the instruction was typed by the user.
    """

    refinement_instruction: str | None = Field(
        default=None,
        description="Refinement to apply to the slide.",
    )
    is_custom: bool | None = Field(
        default=False,
        description="True if the instruction is user-written rather than suggested.",
    )


class UploadRequest(CamelModel):
    """Request body for ``POST /upload``.

    Attributes:
        image_base64: PNG data as a ``data:`` URI or raw base64.
        prompt: Idea text used to build the storage key.
    """

    image_base64: str | None = Field(
        default=None,
        description="Image as a data URI or raw base64.",
    )
    prompt: str | None = Field(
        default=None,
        description="Idea text used for the object key slug.",
    )


# ---------------------------------------------------------------------------
# Responses.
# ---------------------------------------------------------------------------


class OptionPayload(CamelModel):
    id: int
    concept: str
    image_base64: str
    image: str


class OptionsResponse(CamelModel):
    success: bool = True
    options: list[OptionPayload]


class SlideResponse(CamelModel):
    success: bool = True
    image: str
    image_base64: str
    description: str


class RefinedSlideResponse(SlideResponse):
    is_refinement: bool = True


class SuggestionsResponse(CamelModel):
    success: bool = True
    suggestions: list[str] = Field(..., min_length=3, max_length=3)


class UploadResponse(CamelModel):
    success: bool = True
    key: Any = None
    file_name: str
    file_url: Any = None
    bucket: Any = None
    uploaded_at: Any = None
