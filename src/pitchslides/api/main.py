"""Pitch Slides — FastAPI Application.

This module is the single entry point for the web application.  It defines
the application factory, all REST API routes, the fault-to-response
translation, and the ``main()`` CLI function that launches the uvicorn
server.

Architecture
------------
The application follows a stateless REST pattern:

- **Configuration** comes from :class:`~pitchslides.core.config.PitchSlidesConfig`
  and is injected into :func:`create_app`, so tests can substitute it.
- **Upstream access** goes through one shared ``httpx.AsyncClient`` created
  in the lifespan and wrapped by the generative and storage clients.
- **Workflow logic** lives in :class:`~pitchslides.workflows.orchestrator.SlideWorkflow`
  and :class:`~pitchslides.workflows.upload.UploadRelay`; route handlers only
  validate input and shape output.
- **Faults** are raised as :class:`~pitchslides.core.errors.SlideWorkflowError`
  subclasses and turned into ``{"error": ..., "details": ...}`` bodies by a
  single exception handler.

Endpoints
---------
========  ========================  ======================================
Method    Path                      Purpose
========  ========================  ======================================
GET       ``/api/config``           Models, bucket and style options
POST      ``/generate-options``     Three rough sketches, one per style
POST      ``/generate-final``       Described and rendered final slide
POST      ``/get-refine-options``   Three refinement suggestions
POST      ``/refine-slide``         Refined slide for one instruction
POST      ``/upload``               Store a slide image in the bucket
========  ========================  ======================================

Usage
-----
CLI (installed entry point)::

    pitchslides

Direct invocation::

    python -m pitchslides.api.main
"""

from __future__ import annotations

import logging
import sys
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pitchslides import __version__
from pitchslides.api.models import (
    IdeaRequest,
    OptionPayload,
    OptionsResponse,
    RefinedSlideResponse,
    RefineRequest,
    SlideRequest,
    SlideResponse,
    SuggestionsResponse,
    UploadRequest,
    UploadResponse,
)
from pitchslides.clients.generative import GenerativeClient
from pitchslides.clients.storage import StorageClient
from pitchslides.core.config import PitchSlidesConfig, config
from pitchslides.core.errors import SlideWorkflowError, ValidationFault
from pitchslides.core.styles import STYLE_OPTIONS
from pitchslides.workflows.orchestrator import SlideWorkflow
from pitchslides.workflows.upload import UploadRelay

logger = logging.getLogger(__name__)


def create_app(
    app_config: PitchSlidesConfig | None = None,
    *,
    http_client: httpx.AsyncClient | None = None,
    clock: Callable[[], int] | None = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        app_config: Configuration to use.  Defaults to the global instance.
        http_client: Pre-built client for upstream calls.  When given, the
            caller owns it and it is not closed on shutdown.
        clock: Epoch-millisecond clock for upload keys.

    Returns:
        The configured application.
    """
    cfg = app_config or config

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Create the upstream clients on startup and close them on shutdown."""
        # --- Startup -------------------------------------------------------
        http = http_client or httpx.AsyncClient(timeout=cfg.request_timeout)
        generative = GenerativeClient(http, cfg)
        storage = StorageClient(http, cfg)

        app.state.workflow = SlideWorkflow(generative)
        app.state.upload_relay = (
            UploadRelay(storage, clock=clock) if clock is not None else UploadRelay(storage)
        )
        logger.info("Text model: %s", cfg.text_model)
        logger.info("Image model: %s", cfg.image_model)
        logger.info("Storage bucket: %s", cfg.storage_bucket)

        yield  # Application runs here.

        # --- Shutdown ------------------------------------------------------
        if http_client is None:
            await http.aclose()

    app = FastAPI(
        title="Pitch Slides",
        description="Business pitch slide generation over text, image and storage APIs.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.config = cfg

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_exception_handlers(app)
    _register_routes(app)
    return app


# ---------------------------------------------------------------------------
# Fault translation.
# ---------------------------------------------------------------------------


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(SlideWorkflowError)
    async def handle_workflow_error(request: Request, exc: SlideWorkflowError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        else:
            logger.warning("%s %s rejected: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload())

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        errors = exc.errors()
        message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
        logger.warning("%s %s rejected: %s", request.method, request.url.path, message)
        return JSONResponse(status_code=400, content={"error": message})


# ---------------------------------------------------------------------------
# Request validation helpers.
# ---------------------------------------------------------------------------


def _require(condition: bool, message: str) -> None:
    """Raise a 400 fault with ``message`` unless ``condition`` holds."""
    if not condition:
        raise ValidationFault(message)


# ---------------------------------------------------------------------------
# Routes.
# ---------------------------------------------------------------------------


def _register_routes(app: FastAPI) -> None:
    @app.get("/api/config")
    async def get_config() -> dict:
        """Return non-secret configuration for the frontend.

        Returns:
            Dictionary with ``version``, ``text_model``, ``image_model``,
            ``bucket`` and ``styles`` (index, id, slug, concept).
        """
        cfg: PitchSlidesConfig = app.state.config
        return {
            "version": __version__,
            "text_model": cfg.text_model,
            "image_model": cfg.image_model,
            "bucket": cfg.storage_bucket,
            "styles": [
                {"index": s.index, "id": s.id, "slug": s.slug, "concept": s.concept}
                for s in STYLE_OPTIONS
            ],
        }

    @app.post("/generate-options", response_model=OptionsResponse)
    async def generate_options(req: IdeaRequest | None = None) -> OptionsResponse:
        """Generate three rough sketches, one per style option.

        Raises:
            ValidationFault: 400 if ``prompt`` is missing.
            UpstreamFault: 500 if any of the three image calls fails.
        """
        req = req or IdeaRequest()
        _require(bool(req.prompt), "Prompt is required")

        workflow: SlideWorkflow = app.state.workflow
        options = await workflow.generate_options(req.prompt)
        return OptionsResponse(
            options=[
                OptionPayload(
                    id=o.id,
                    concept=o.concept,
                    image_base64=o.image_base64,
                    image=o.image,
                )
                for o in options
            ]
        )

    @app.post("/generate-final", response_model=SlideResponse)
    async def generate_final(req: SlideRequest | None = None) -> SlideResponse:
        """Describe and render the final slide for the selected style.

        Raises:
            ValidationFault: 400 if ``prompt`` or ``selectedOption`` is
                missing or the option is out of range.
            UpstreamFault: 500 if the text or image call fails.
        """
        req = req or SlideRequest()
        _require(
            bool(req.prompt) and req.selected_option is not None,
            "Prompt and selected option are required",
        )

        workflow: SlideWorkflow = app.state.workflow
        slide = await workflow.generate_final(req.prompt, req.selected_option)
        return SlideResponse(
            image=slide.image,
            image_base64=slide.image_base64,
            description=slide.description,
        )

    @app.post("/get-refine-options", response_model=SuggestionsResponse)
    async def get_refine_options(req: SlideRequest | None = None) -> SuggestionsResponse:
        """Return exactly three refinement suggestions for the idea.

        Raises:
            ValidationFault: 400 if ``prompt`` or ``selectedOption`` is
                missing or the option is out of range.
            UpstreamFault: 500 if the text call fails.
        """
        req = req or SlideRequest()
        _require(
            bool(req.prompt) and req.selected_option is not None,
            "Prompt and selected option are required",
        )

        workflow: SlideWorkflow = app.state.workflow
        suggestions = await workflow.get_refine_options(req.prompt, req.selected_option)
        return SuggestionsResponse(suggestions=suggestions)

    @app.post("/refine-slide", response_model=RefinedSlideResponse)
    async def refine_slide(req: RefineRequest | None = None) -> RefinedSlideResponse:
        """Re-describe and re-render the slide with a refinement applied.

        Raises:
            ValidationFault: 400 if ``prompt``, ``selectedOption`` or
                ``refinementInstruction`` is missing.
            UpstreamFault: 500 if the text or image call fails.
        """
        req = req or RefineRequest()
        _require(
            bool(req.prompt)
            and req.selected_option is not None
            and bool(req.refinement_instruction),
            "Prompt, selected option, and refinement instruction are required",
        )

        workflow: SlideWorkflow = app.state.workflow
        slide = await workflow.refine_slide(
            req.prompt,
            req.selected_option,
            req.refinement_instruction,
            is_custom=bool(req.is_custom),
        )
        return RefinedSlideResponse(
            image=slide.image,
            image_base64=slide.image_base64,
            description=slide.description,
        )

    @app.post("/upload", response_model=UploadResponse)
    async def upload(req: UploadRequest | None = None) -> UploadResponse:
        """Store a generated slide in the storage bucket.

        Raises:
            ValidationFault: 400 if ``imageBase64`` is missing or not base64.
            UploadFault: 500 if the storage service rejects the upload.
        """
        req = req or UploadRequest()
        _require(bool(req.image_base64), "Image data is required")

        relay: UploadRelay = app.state.upload_relay
        stored = await relay.upload(req.image_base64, req.prompt)
        return UploadResponse(
            key=stored.key,
            file_name=stored.file_name,
            file_url=stored.file_url,
            bucket=stored.bucket,
            uploaded_at=stored.uploaded_at,
        )


# ---------------------------------------------------------------------------
# FastAPI application instance.
# ---------------------------------------------------------------------------
app = create_app()


# ---------------------------------------------------------------------------
# CLI entry point.
# ---------------------------------------------------------------------------


def main() -> None:
    """Validate credentials and launch the uvicorn ASGI server.

    Host, port and log level come from :data:`~pitchslides.core.config.config`.
    Exits with status 1 if either API key is unset.

    This function is registered as the ``pitchslides`` console script in
    ``pyproject.toml``.
    """
    import uvicorn

    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    # httpx logs full request URLs at INFO, and the generative API key is a
    # query parameter.
    logging.getLogger("httpx").setLevel(logging.WARNING)

    missing = config.missing_credentials()
    if missing:
        for name in missing:
            logger.error("ERROR: %s environment variable is not set", name)
        sys.exit(1)

    logger.info("Server running at http://localhost:%s", config.server_port)
    uvicorn.run(
        "pitchslides.api.main:app",
        host=config.server_host,
        port=config.server_port,
        reload=False,
    )


if __name__ == "__main__":
    main()
