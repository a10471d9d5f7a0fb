"""Prompt templates for each stage of the slide workflow.

The workflow has three prompt families:

Sketch (image)
    One short wireframe prompt per style option, used by
    ``generate-options`` to produce rough concept sketches.

Description (text) -> Render (image)
    ``generate-final`` and ``refine-slide`` first ask the text model for a
    slide description that opens with a ``SLIDE CONCEPT:`` block, then feed
    the whole description into an image prompt wrapped in fixed
    "investor-ready" quality modifiers.

Suggestions (text)
    ``get-refine-options`` asks the text model for a JSON array of three
    improvement ideas.

The ``SLIDE CONCEPT:`` layout requested here is the contract that
:class:`pitchslides.core.parsing.MarkerParser` relies on, so the two modules
must change together.

Usage
-----
::

    style = get_style(0)
    text_prompt = build_description_prompt("Drone grocery delivery", style)
    image_prompt = build_render_prompt(description)
"""

from __future__ import annotations

from pitchslides.core.styles import StyleOption

CONCEPT_MARKER = "SLIDE CONCEPT:"

# Refinement instructions are clipped to this many characters inside the
# concept block so the summary stays one line.
REFINEMENT_PREVIEW_LENGTH = 30

_SKETCH_MODIFIERS = (
    "Wireframe style, basic layout, minimal detail, grayscale or simple colors, "
    "placeholder text blocks. Think of this as a preliminary concept sketch."
)

_RENDER_MODIFIERS = (
    "Stunning visual design, investor-ready quality, crisp typography, perfect color "
    "harmony, print-quality resolution, modern aesthetic, Appropriate for Silicon "
    "Valley VC presentations."
)

_REFINED_RENDER_SUFFIX = (
    "This is an IMPROVED, more polished version with enhanced visual appeal."
)

_SUGGESTION_EXAMPLE = """[
  "Make it more visual with data charts and infographics",
  "Add customer testimonials and social proof",
  "Emphasize the revenue model with clear financial projections"
]"""


def build_sketch_prompt(idea: str, style: StyleOption) -> str:
    """Return the rough-sketch image prompt for one style option."""
    return (
        f"Simple rough sketch of a business pitch slide for: {idea}. "
        f"Style: {style.concept}. {_SKETCH_MODIFIERS}"
    )


def build_description_prompt(idea: str, style: StyleOption) -> str:
    """Return the text prompt for a final slide description.

    The response is expected to open with a ``SLIDE CONCEPT:`` block
    (headline, style, key points) followed by a free-form visual layout
    description.
    """
    return f"""You are a professional business presentation designer. Create a sophisticated business pitch slide for this idea: "{idea}"

Design style: {style.concept}

First, provide a concise slide concept summary (for display to user) in this exact format:
{CONCEPT_MARKER}
• Headline: [short, catchy title]
• Style: {style.concept}
• Key Points: [3 short bullet points max 6 words each]

Then, describe the visual layout for image generation. Be specific about typography, colors, layout, and visual elements for creating an investor-ready pitch slide."""


def build_refined_description_prompt(idea: str, style: StyleOption, instruction: str) -> str:
    """Return the text prompt for a refined slide description.

    Same layout as :func:`build_description_prompt`, with the refinement
    instruction embedded and a ``Refinement`` line ahead of the key points.
    """
    preview = instruction[:REFINEMENT_PREVIEW_LENGTH]
    return f"""You are a professional business presentation designer. Create a REFINED business pitch slide.

Original idea: "{idea}"
Design style: {style.concept}
REFINEMENT: {instruction}

First, provide a concise slide concept summary (for display to user) in this exact format:
{CONCEPT_MARKER}
• Headline: [short, catchy title]
• Style: {style.concept}
• Refinement: {preview}...
• Key Points: [3 short bullet points max 6 words each]

Then, describe the visual layout for image generation incorporating the refinement. Be specific about typography, colors, layout, and visual elements for creating an improved investor-ready pitch slide."""


def build_render_prompt(description: str, *, refined: bool = False) -> str:
    """Wrap a slide description in the investor-ready image modifiers.

    Args:
        description: Full text returned by the description stage.
        refined: Mark the prompt as a refined version and ask for extra
            polish.
    """
    if refined:
        return (
            f"Ultra high-end professional business pitch slide (REFINED VERSION): "
            f"{description}. {_RENDER_MODIFIERS} {_REFINED_RENDER_SUFFIX}"
        )
    return f"Ultra high-end professional business pitch slide: {description}. {_RENDER_MODIFIERS}"


def build_suggestions_prompt(idea: str) -> str:
    """Return the text prompt asking for three refinement suggestions."""
    return f"""You are an expert presentation designer. Based on this business idea: "{idea}"

Suggest 3 specific ways to IMPROVE and REFINE a pitch slide for this idea. Each suggestion should be actionable and different from the others.

Format your response as a JSON array of strings, like this:
{_SUGGESTION_EXAMPLE}

Provide only the JSON array, no other text."""
