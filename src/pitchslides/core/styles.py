"""The fixed set of visual concepts a slide can be rendered in.

Style options are selected by ordinal index (0, 1, 2) and are not
user-extensible.  Their order is significant: ``generate-options`` returns
its results in exactly this order.
"""

from __future__ import annotations

from dataclasses import dataclass

from pitchslides.core.errors import ValidationFault


@dataclass(frozen=True)
class StyleOption:
    """A named visual concept.

    Attributes:
        index: Zero-based ordinal used by clients (``selectedOption``).
        slug: Stable machine-readable name.
        concept: Phrase embedded in prompts and echoed back to clients.
    """

    index: int
    slug: str
    concept: str

    @property
    def id(self) -> int:
        """One-based identifier shown to users."""
        return self.index + 1


STYLE_OPTIONS: tuple[StyleOption, ...] = (
    StyleOption(0, "minimalist/bold-typography", "minimalist with bold typography"),
    StyleOption(1, "data-visualization-focus", "with data visualization focus"),
    StyleOption(2, "icon-heavy", "with icon-heavy design"),
)


def get_style(index: int) -> StyleOption:
    """Look up a style option by its ordinal index.

    Raises:
        ValidationFault: If ``index`` is outside ``0..len(STYLE_OPTIONS)-1``.
    """
    if isinstance(index, bool) or not 0 <= index < len(STYLE_OPTIONS):
        raise ValidationFault("Selected option must be 0, 1 or 2")
    return STYLE_OPTIONS[index]
