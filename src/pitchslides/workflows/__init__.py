"""Slide generation workflow and storage relay."""

from pitchslides.workflows.orchestrator import SlideArtifact, SlideOption, SlideWorkflow
from pitchslides.workflows.upload import StoredSlide, UploadRelay

__all__ = ["SlideArtifact", "SlideOption", "SlideWorkflow", "StoredSlide", "UploadRelay"]
