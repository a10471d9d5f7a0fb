"""HTTP clients for the upstream services."""

from pitchslides.clients.generative import GenerativeClient
from pitchslides.clients.storage import StorageClient

__all__ = ["GenerativeClient", "StorageClient"]
