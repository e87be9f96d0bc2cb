import logging
import os
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .agents.blueprint_agent.facade import build_blueprint_service
from .config import load_settings
from .routes.blueprint import router as blueprint_router
from .routes.wizard import router as wizard_router
from .services.export_service import HtmlSnapshotExporter
from .services.openai_client import OpenAIChatClient
from .services.wizard import WizardStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = load_settings()

    # Startup
    print("Starting IdeaForge Blueprint Service")
    print(f"   Backend:     {settings.blueprint_backend}")
    print(f"   OpenAI Key:  {' Configured' if settings.openai_configured else ' Not set (template engine only)'}")
    print(f"   Loading floor: {settings.min_loading_seconds:.1f}s")

    async with httpx.AsyncClient() as http:
        client = OpenAIChatClient.from_settings(http, settings) if settings.openai_configured else None
        service = build_blueprint_service(settings, client)

        app.state.settings = settings
        app.state.blueprint_service = service
        app.state.wizard_store = WizardStore(
            service,
            min_loading_seconds=settings.min_loading_seconds,
            ttl_seconds=settings.session_ttl_seconds,
        )
        app.state.exporter = HtmlSnapshotExporter()
        print("   Ready to forge blueprints!")

        yield

    print("Shutting down IdeaForge Blueprint Service")


app = FastAPI(
    title="IdeaForge Startup Blueprint Service",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)


app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",      # Next.js dev server
        "http://127.0.0.1:3000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(blueprint_router)
app.include_router(wizard_router)


@app.get(
    "/",
    summary="API Root",
    description="Welcome endpoint with API information",
    tags=["General"]
)
async def root():
    """Root endpoint with API information."""
    return {
        "name": "IdeaForge",
        "version": "0.1.0",
        "description": "Startup blueprint generation",
        "docs": "/docs",
        "endpoints": {
            "generate": "POST /blueprint/generate - Generate a blueprint",
            "render": "POST /blueprint/render - Render a blueprint as HTML",
            "wizard": "POST /wizard - Start a guided wizard session",
        }
    }


@app.get(
    "/health",
    summary="Global Health Check",
    description="Check if the API server is running",
    tags=["General"]
)
async def health():
    """Global health check endpoint."""
    service = getattr(app.state, "blueprint_service", None)
    return {
        "status": "healthy",
        "service": "ideaforge",
        "version": "0.1.0",
        "backend": service.backend if service else None,
    }


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Global exception handler for unhandled errors."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    settings = getattr(request.app.state, "settings", None)
    debug = settings.debug if settings is not None else False
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal server error",
            "detail": str(exc) if debug else "An unexpected error occurred"
        }
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "ideaforge.main:app",
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
        reload=os.getenv("DEBUG", "true").lower() == "true",
    )
