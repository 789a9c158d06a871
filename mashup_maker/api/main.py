"""FastAPI application factory."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from mashup_maker.core.config import Settings, get_settings
from mashup_maker.core.errors import MashupError
from mashup_maker.core.logging_setup import configure_logging
from mashup_maker.api.routes import get_service, router

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL, settings.LOG_JSON)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.CLEANUP_ON_STARTUP:
            service = app.dependency_overrides.get(get_service, get_service)()
            await service.cleanup()
        logger.info("%s started (%s)", settings.APP_NAME, settings.ENVIRONMENT)
        yield

    app = FastAPI(
        title=settings.APP_NAME,
        description="Random public-API mashup ideas with downloadable starter code",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(MashupError)
    async def mashup_error_handler(request: Request, exc: MashupError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc,
                         extra={"error_code": exc.error_code})
        else:
            logger.warning("%s %s rejected: %s", request.method, request.url.path, exc,
                           extra={"error_code": exc.error_code})
        hide = settings.is_production and exc.status_code >= 500
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "success": False,
                "error": {
                    "code": exc.error_code,
                    "message": "Internal server error" if hide else exc.message,
                    "details": None if hide else exc.details,
                },
            },
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={
                "success": False,
                "error": {
                    "code": "VALIDATION_ERROR",
                    "message": "Request validation failed",
                    "details": [
                        {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
                        for err in exc.errors()
                    ],
                },
            },
        )

    app.include_router(router, prefix="/api")

    return app


app = create_app()
