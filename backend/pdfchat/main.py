"""FastAPI application entrypoint."""

import structlog
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pdfchat import __version__
from pdfchat.config import get_settings
from pdfchat.modules.generation import build_generator
from pdfchat.modules.observability import setup_logging
from pdfchat.routes import health, documents, chats, metrics


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    settings = get_settings()
    logger = structlog.get_logger()

    # Startup; a missing GEMINI_API_KEY raises ConfigurationError here
    logger.info("Starting PDF Chat backend", env=settings.app_env)
    app.state.generator = build_generator(settings)

    settings.documents_dir.mkdir(parents=True, exist_ok=True)
    settings.chats_dir.mkdir(parents=True, exist_ok=True)
    logger.info(
        "Data directory ready",
        path=str(settings.data_dir),
        model_override=settings.gemini_model,
    )

    yield

    # Shutdown
    await app.state.generator.aclose()
    logger.info("Shutting down PDF Chat backend")


def create_app() -> FastAPI:
    """Application factory."""
    settings = get_settings()
    setup_logging(settings.log_level)

    app = FastAPI(
        title=settings.app_name,
        description="Chat with an uploaded PDF, answered by Gemini",
        version=__version__,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.debug else ["http://localhost:5173"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(health.router, tags=["Health"])
    app.include_router(documents.router, prefix="/documents", tags=["Documents"])
    app.include_router(chats.router, prefix="/chats", tags=["Chats"])
    app.include_router(metrics.router, prefix="/metrics", tags=["Metrics"])

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "pdfchat.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
