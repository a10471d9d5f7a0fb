"""Multi-stage slide generation workflow.

A pitch slide is produced in up to three caller-driven stages.  The server
keeps no state between them; the caller resends the idea and the selected
style index on every call.

1. **Options** — three rough sketches, one per style option, generated
   concurrently (:meth:`SlideWorkflow.generate_options`).
2. **Final** — a text description with a ``SLIDE CONCEPT:`` summary, then a
   polished render of that description (:meth:`SlideWorkflow.generate_final`).
3. **Refinement** — three suggested improvements
   (:meth:`SlideWorkflow.get_refine_options`) and a refined render for the
   chosen or custom instruction (:meth:`SlideWorkflow.refine_slide`).

Every operation is all-or-nothing: the first upstream fault aborts it and
propagates to the caller.  Nothing is retried.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from pitchslides.clients.generative import GenerativeClient
from pitchslides.core import prompts
from pitchslides.core.parsing import (
    ParserChain,
    SummaryContext,
    extract_concept_summary,
    extract_suggestions,
)
from pitchslides.core.styles import STYLE_OPTIONS, StyleOption, get_style

logger = logging.getLogger(__name__)

IMAGE_ERROR = "Image generation failed"

FINAL_HEADLINE_LENGTH = 50
REFINED_HEADLINE_LENGTH = 40


def to_data_uri(image_base64: str) -> str:
    """Wrap base64 PNG data in a ``data:`` URI."""
    return f"data:image/png;base64,{image_base64}"


@dataclass(frozen=True)
class SlideOption:
    """One rough sketch produced by the options stage."""

    id: int
    concept: str
    image_base64: str

    @property
    def image(self) -> str:
        return to_data_uri(self.image_base64)


@dataclass(frozen=True)
class SlideArtifact:
    """A rendered slide and its display summary."""

    image_base64: str
    description: str
    is_refinement: bool = False

    @property
    def image(self) -> str:
        return to_data_uri(self.image_base64)


class SlideWorkflow:
    """Sequences text and image generation calls for each workflow stage.

    Args:
        generative: Client for the text and image models.
        parser_chain: Strategy chain used to read structured model output.
            Defaults to strict marker parsing with deterministic fallback.
    """

    def __init__(
        self,
        generative: GenerativeClient,
        parser_chain: ParserChain | None = None,
    ) -> None:
        self._generative = generative
        self._parsers = parser_chain or ParserChain()

    # -- Stage 1: options ---------------------------------------------------

    async def generate_options(self, idea: str) -> list[SlideOption]:
        """Render one rough sketch per style option.

        The three image calls run concurrently.  The first failure fails the
        whole operation; the remaining calls are left to finish on their own.
        Results follow :data:`STYLE_OPTIONS` order regardless of which call
        completes first.
        """
        logger.info("Generating %d rough options for: %s", len(STYLE_OPTIONS), idea)
        images = await asyncio.gather(
            *(self._sketch(idea, style) for style in STYLE_OPTIONS)
        )
        return [
            SlideOption(id=style.id, concept=style.concept, image_base64=image)
            for style, image in zip(STYLE_OPTIONS, images)
        ]

    async def _sketch(self, idea: str, style: StyleOption) -> str:
        message = f"Option {style.id} generation failed"
        return await self._generative.generate_image(
            prompts.build_sketch_prompt(idea, style),
            error_message=message,
            empty_message=message,
        )

    # -- Stage 2: final slide -----------------------------------------------

    async def generate_final(self, idea: str, style_index: int) -> SlideArtifact:
        """Describe the slide in text, then render the description."""
        style = get_style(style_index)
        logger.info("Generating final slide for option: %s", style_index)

        description = await self._describe(
            idea,
            prompts.build_description_prompt(idea, style),
            error_message="Text generation failed",
        )
        summary = extract_concept_summary(
            description,
            SummaryContext(idea=idea, concept=style.concept, headline_length=FINAL_HEADLINE_LENGTH),
            self._parsers,
        )
        image = await self._generative.generate_image(
            prompts.build_render_prompt(description),
            error_message=IMAGE_ERROR,
        )
        return SlideArtifact(image_base64=image, description=summary)

    # -- Stage 3: refinement ------------------------------------------------

    async def get_refine_options(self, idea: str, style_index: int) -> list[str]:
        """Ask the text model for exactly three improvement suggestions.

        Unparseable output is replaced with fixed suggestions rather than
        reported as a fault.
        """
        get_style(style_index)
        logger.info("Generating refinement suggestions for: %s", idea)

        text = await self._generative.generate_text(
            prompts.build_suggestions_prompt(idea),
            error_message="Refinement suggestions generation failed",
        )
        return extract_suggestions(text or "", self._parsers)

    async def refine_slide(
        self,
        idea: str,
        style_index: int,
        instruction: str,
        *,
        is_custom: bool = False,
    ) -> SlideArtifact:
        """Re-describe and re-render the slide with a refinement applied.

        Args:
            idea: The caller's business idea.
            style_index: Selected style option.
            instruction: Suggested or free-form refinement.
            is_custom: Whether the instruction was typed by the user rather
                than picked from the suggestions.  Informational only.
        """
        style = get_style(style_index)
        logger.info(
            "Refining slide with %s instruction: %s",
            "custom" if is_custom else "suggested",
            instruction,
        )

        description = await self._describe(
            idea,
            prompts.build_refined_description_prompt(idea, style, instruction),
            error_message="Refined description generation failed",
        )
        summary = extract_concept_summary(
            description,
            SummaryContext(
                idea=idea,
                concept=style.concept,
                headline_length=REFINED_HEADLINE_LENGTH,
                refinement=True,
            ),
            self._parsers,
        )
        image = await self._generative.generate_image(
            prompts.build_render_prompt(description, refined=True),
            error_message=IMAGE_ERROR,
        )
        return SlideArtifact(image_base64=image, description=summary, is_refinement=True)

    # -- Internals ----------------------------------------------------------

    async def _describe(self, idea: str, prompt: str, *, error_message: str) -> str:
        """Return the model's slide description, or the idea if it sent none."""
        text = await self._generative.generate_text(prompt, error_message=error_message)
        description = text or idea
        logger.debug("Generated slide description: %s", description)
        return description
