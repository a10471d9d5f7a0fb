"""Core building blocks for the slide workflow.

- **config**: Configuration management using Pydantic Settings
- **errors**: Fault hierarchy mapped to HTTP status codes
- **styles**: The fixed, ordered set of style options
- **prompts**: Prompt templates for every workflow stage
- **parsing**: Structured text extraction with deterministic fallbacks
"""

from pitchslides.core.config import PitchSlidesConfig, config
from pitchslides.core.errors import SlideWorkflowError, UploadFault, UpstreamFault, ValidationFault
from pitchslides.core.styles import STYLE_OPTIONS, StyleOption, get_style

__all__ = [
    "PitchSlidesConfig",
    "config",
    "SlideWorkflowError",
    "UploadFault",
    "UpstreamFault",
    "ValidationFault",
    "STYLE_OPTIONS",
    "StyleOption",
    "get_style",
]
