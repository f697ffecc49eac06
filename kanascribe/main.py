"""
KanaScribe — FastAPI Entry Point

Japanese speech → text → kana over a single HTTP endpoint.
"""

from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from loguru import logger

from kanascribe.config import get_settings
from kanascribe.routers import transcribe
from kanascribe.schemas import HealthResponse
from kanascribe.services import SpeechServices, load_speech_services

settings = get_settings()


def create_app(services: Optional[SpeechServices] = None) -> FastAPI:
    """
    Build the application.

    When *services* is given they are used as-is; otherwise the model and
    analyzer are loaded during startup, before any request is accepted.
    A load failure aborts startup.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application startup / shutdown lifecycle."""
        logger.info(f"🚀 Starting {settings.app_name} v{settings.app_version}")
        loaded_here = getattr(app.state, "services", None) is None
        if loaded_here:
            app.state.services = load_speech_services(settings)

        yield
        logger.info("🛑 Shutting down KanaScribe API")
        if loaded_here:
            app.state.services = None

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description=(
            "Fetches a remote recording, transcribes Japanese speech offline with "
            "Vosk and returns the text together with its kana reading."
        ),
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.services = services

    # ── CORS (open for local dev — restrict in production) ────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Routers ───────────────────────────────────────────────────────────
    app.include_router(transcribe.router)

    # ── Root health-check ─────────────────────────────────────────────────
    @app.get("/", tags=["Health"])
    async def root():
        return {
            "service": settings.app_name,
            "version": settings.app_version,
            "status": "ok",
        }

    @app.get("/health", tags=["Health"], response_model=HealthResponse)
    async def health():
        return HealthResponse(status="healthy")

    return app


app = create_app()
