"""
FastAPI Application - API Layer
Application factory and the module-level ``app`` used by uvicorn:

    uvicorn api.main:app --reload
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from infrastructure.logging import configure_logging

from .dependencies.dependency_injection import get_cors_origins, get_slow_request_threshold_ms
from .middleware.error_handler import add_error_handlers
from .middleware.logging_middleware import LoggingMiddleware
from .middleware.performance_middleware import PerformanceMiddleware
from .routers import auth_router, health_router, roadmap_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting SkillPath API")
    yield
    logger.info("Shutting down SkillPath API")


def create_app() -> FastAPI:
    configure_logging()

    app = FastAPI(
        title="SkillPath API",
        description="Personalised, AI-generated learning roadmaps with progress tracking",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    origins = get_cors_origins()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        # Browsers reject credentialed requests against a wildcard origin
        allow_credentials=origins != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(PerformanceMiddleware, slow_threshold_ms=get_slow_request_threshold_ms())
    app.add_middleware(LoggingMiddleware)

    add_error_handlers(app)

    app.include_router(health_router.router, prefix="/api", tags=["Health"])
    app.include_router(auth_router.router, prefix="/api", tags=["Auth"])
    app.include_router(roadmap_router.router, prefix="/api", tags=["Roadmaps"])

    return app


app = create_app()
