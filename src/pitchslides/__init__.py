"""Pitch Slides - pitch slide generation over text, image and storage APIs."""

__version__ = "0.1.0"

from pitchslides.core.config import PitchSlidesConfig, config

__all__ = [
    "PitchSlidesConfig",
    "config",
]
