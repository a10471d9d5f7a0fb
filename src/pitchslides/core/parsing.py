"""Extraction of structured content from free-form model text.

The text model is asked for two kinds of structured output:

- a ``SLIDE CONCEPT:`` block at the top of a slide description, shown to the
  user as the slide summary
- a JSON array of exactly three refinement suggestions

Model output is not guaranteed to follow either format, so extraction is
split into interchangeable strategies behind :class:`StructuredTextParser`:

- :class:`MarkerParser` reads the requested format strictly and returns
  ``None`` when it cannot.
- :class:`FallbackSynthesizer` ignores the text and returns deterministic
  content.

:class:`ParserChain` tries strategies in order and returns the first result.
Malformed output never becomes an error for the caller; it is replaced with
fallback content and logged at WARNING.

Usage
-----
::

    context = SummaryContext(idea="Drone grocery delivery", concept=style.concept)
    summary = extract_concept_summary(description, context)
    suggestions = extract_suggestions(model_text)
"""

from __future__ import annotations

import json
import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Sequence

from pitchslides.core.prompts import CONCEPT_MARKER

logger = logging.getLogger(__name__)

SUGGESTION_COUNT = 3

FALLBACK_SUGGESTIONS: tuple[str, ...] = (
    "Add more visual elements and data visualizations",
    "Emphasize the unique value proposition more prominently",
    "Include social proof and credibility indicators",
)

SUGGESTION_FILLER = "Enhance the slide with more professional design elements"

# Concept block: everything after the marker up to the first blank line or
# the end of the text.
_CONCEPT_PATTERN = re.compile(re.escape(CONCEPT_MARKER) + r"(.*?)(?=\n\n|\Z)", re.DOTALL)

# Greedy on purpose: spans from the first "[" to the last "]".
_JSON_ARRAY_PATTERN = re.compile(r"\[.*\]", re.DOTALL)


@dataclass(frozen=True)
class SummaryContext:
    """Request data needed to build a fallback summary.

    Attributes:
        idea: The caller's business idea.
        concept: Concept phrase of the selected style option.
        headline_length: Number of idea characters used as the fallback
            headline (50 for final slides, 40 for refinements).
        refinement: Whether the summary belongs to a refined slide.
    """

    idea: str
    concept: str
    headline_length: int = 50
    refinement: bool = False


class StructuredTextParser(ABC):
    """Strategy for extracting structured content from model text."""

    name: str = "base"

    @abstractmethod
    def parse_concept(self, text: str, context: SummaryContext) -> str | None:
        """Return the slide summary, or ``None`` if this strategy cannot."""

    @abstractmethod
    def parse_suggestions(self, text: str) -> list[str] | None:
        """Return refinement suggestions, or ``None`` if this strategy cannot.

        The returned list is not yet normalised to three entries.
        """


class MarkerParser(StructuredTextParser):
    """Strict parser for the formats requested in the prompts."""

    name = "marker"

    def parse_concept(self, text: str, context: SummaryContext) -> str | None:
        match = _CONCEPT_PATTERN.search(text)
        if match is None:
            return None
        return match.group(1).strip().replace("**", "")

    def parse_suggestions(self, text: str) -> list[str] | None:
        match = _JSON_ARRAY_PATTERN.search(text)
        if match is None:
            # No array at all: start from nothing and let normalisation pad.
            return []
        try:
            parsed = json.loads(match.group(0))
        except json.JSONDecodeError:
            return None
        if not isinstance(parsed, list):
            return None
        return [item if isinstance(item, str) else json.dumps(item) for item in parsed]


class FallbackSynthesizer(StructuredTextParser):
    """Deterministic content used when the model output is unusable."""

    name = "fallback"

    def parse_concept(self, text: str, context: SummaryContext) -> str:
        headline = context.idea[: context.headline_length]
        if context.refinement:
            return (
                f"• Headline: {headline}...\n"
                f"• Style: {context.concept}\n"
                f"• Refinement: Applied"
            )
        return (
            f"• Headline: {headline}...\n"
            f"• Style: {context.concept}\n"
            f"• Key Points: Professional pitch design"
        )

    def parse_suggestions(self, text: str) -> list[str]:
        return list(FALLBACK_SUGGESTIONS)


class ParserChain:
    """Try a sequence of parsers and return the first non-``None`` result.

    The default chain is strict marker parsing followed by the fallback
    synthesizer, so it always produces a result.
    """

    def __init__(self, parsers: Sequence[StructuredTextParser] | None = None) -> None:
        self.parsers: list[StructuredTextParser] = list(
            parsers if parsers is not None else (MarkerParser(), FallbackSynthesizer())
        )

    def parse_concept(self, text: str, context: SummaryContext) -> str | None:
        for parser in self.parsers:
            result = parser.parse_concept(text, context)
            if result is not None:
                if parser is not self.parsers[0]:
                    logger.warning("Concept block not found, using %s summary", parser.name)
                return result
        return None

    def parse_suggestions(self, text: str) -> list[str] | None:
        for parser in self.parsers:
            result = parser.parse_suggestions(text)
            if result is not None:
                if parser is not self.parsers[0]:
                    logger.warning("Suggestion array unparseable, using %s suggestions", parser.name)
                return result
        return None


default_parser_chain = ParserChain()


def normalize_suggestions(suggestions: Sequence[str]) -> list[str]:
    """Pad with the filler or truncate so exactly three suggestions remain."""
    normalized = list(suggestions)[:SUGGESTION_COUNT]
    while len(normalized) < SUGGESTION_COUNT:
        normalized.append(SUGGESTION_FILLER)
    return normalized


def extract_concept_summary(
    text: str,
    context: SummaryContext,
    chain: ParserChain | None = None,
) -> str:
    """Return the display summary for a slide description."""
    summary = (chain or default_parser_chain).parse_concept(text, context)
    if summary is None:
        summary = FallbackSynthesizer().parse_concept(text, context)
    return summary


def extract_suggestions(text: str, chain: ParserChain | None = None) -> list[str]:
    """Return exactly three refinement suggestions parsed from model text."""
    suggestions = (chain or default_parser_chain).parse_suggestions(text)
    if suggestions is None:
        suggestions = FallbackSynthesizer().parse_suggestions(text)
    return normalize_suggestions(suggestions)
