"""Configuration management for the Pitch Slides server.

This module provides centralized configuration management using Pydantic Settings.
All configuration is loaded from environment variables with the PITCHSLIDES_ prefix,
allowing easy customization without code changes.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Environment variables (PITCHSLIDES_* prefix, plus the legacy names below)
2. .env file in the project root
3. Default values defined in PitchSlidesConfig

Credentials are also accepted under the names used by existing deployments,
so a host that already exports them needs no changes:

- ``GEMINI_API_KEY`` or ``GOOGLE_GENAI_API_KEY`` for the generative API
- ``INSFORGE_STORAGE_KEY`` or ``INSFORGE_API_KEY`` for the storage API
- ``INSFORGE_STORAGE_URL`` for the storage base URL
- ``PORT`` for the listening port

Example .env file:
    GEMINI_API_KEY=...
    INSFORGE_STORAGE_KEY=...
    PITCHSLIDES_TEXT_MODEL=gemini-3-flash-preview
    PITCHSLIDES_LOG_LEVEL=DEBUG

Usage Example
-------------
    from pitchslides.core.config import config

    print(config.text_model)
    print(config.storage_bucket)

Tests build their own instance instead of touching the global one:

    cfg = PitchSlidesConfig(gemini_api_key="test", storage_api_key="test", _env_file=None)
"""

from typing import Literal

from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class PitchSlidesConfig(BaseSettings):
    """Main configuration for the Pitch Slides server.

    Values are loaded from environment variables with the PITCHSLIDES_ prefix,
    with fallback to defaults defined here.  Credentials are held as
    ``SecretStr`` so they never show up in ``repr()`` or log output.

    Attributes
    ----------
    Credentials:
        gemini_api_key : SecretStr | None
            API key for the text and image generation endpoints
        storage_api_key : SecretStr | None
            Bearer token for the object-storage endpoint

    Upstream Services:
        generative_base_url : str
            Base URL of the generative language API (including version)
        text_model : str
            Model used for slide descriptions and refinement suggestions
        image_model : str
            Model used for slide images
        storage_base_url : str
            Base URL of the storage service
        storage_bucket : str
            Bucket that receives uploaded slides
        request_timeout : float
            Timeout in seconds for every outbound call

    Image Parameters:
        sample_count : int
            Number of images requested per call (only the first is used)
        aspect_ratio : str
            Aspect ratio passed to the image model

    Server Settings:
        server_host : str
            Bind address for uvicorn
        server_port : int
            Listening port (1024-65535)
        log_level : str
            Root log level configured by the CLI entry point
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="PITCHSLIDES_",
        case_sensitive=False,
        extra="ignore",
    )

    # Credentials
    gemini_api_key: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "gemini_api_key",
            "pitchslides_gemini_api_key",
            "google_genai_api_key",
        ),
        description="API key for the generative language API",
    )
    storage_api_key: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "storage_api_key",
            "pitchslides_storage_api_key",
            "insforge_storage_key",
            "insforge_api_key",
        ),
        description="Bearer token for the storage API",
    )

    # Generative API
    generative_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        description="Base URL of the generative language API",
    )
    text_model: str = Field(
        default="gemini-3-flash-preview",
        description="Text model used for descriptions and suggestions",
    )
    image_model: str = Field(
        default="imagen-4.0-fast-generate-001",
        description="Image model used for slide rendering",
    )
    sample_count: int = Field(default=1, ge=1, le=4)
    aspect_ratio: Literal["1:1", "3:4", "4:3", "9:16", "16:9"] = Field(
        default="16:9",
        description="Aspect ratio requested from the image model",
    )

    # Storage API
    storage_base_url: str = Field(
        default="https://dx2ji8ea.us-west.insforge.app",
        validation_alias=AliasChoices(
            "storage_base_url",
            "pitchslides_storage_base_url",
            "insforge_storage_url",
        ),
        description="Base URL of the storage service",
    )
    storage_bucket: str = Field(
        default="slides",
        description="Bucket that receives uploaded slides",
    )

    request_timeout: float = Field(
        default=60.0,
        gt=0,
        description="Timeout in seconds for outbound HTTP calls",
    )

    # Server settings
    server_host: str = Field(
        default="0.0.0.0",
        description="Server bind address",
    )
    server_port: int = Field(
        default=5000,
        validation_alias=AliasChoices(
            "server_port",
            "pitchslides_server_port",
            "port",
        ),
        description="Server port",
        ge=1024,
        le=65535,
    )
    log_level: str = Field(
        default="INFO",
        description="Root log level (DEBUG, INFO, WARNING, ERROR)",
    )

    def missing_credentials(self) -> list[str]:
        """Return the environment variable names of unset credentials.

        Empty strings count as unset.  The returned names are the primary
        deployment names so they can be printed verbatim in an error message.
        """
        missing: list[str] = []
        if self.gemini_api_key is None or not self.gemini_api_key.get_secret_value():
            missing.append("GEMINI_API_KEY or GOOGLE_GENAI_API_KEY")
        if self.storage_api_key is None or not self.storage_api_key.get_secret_value():
            missing.append("INSFORGE_STORAGE_KEY or INSFORGE_API_KEY")
        return missing


# Global configuration instance
# Loads values from environment variables and the .env file on import.
config = PitchSlidesConfig()
