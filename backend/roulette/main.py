"""Restaurant Roulette FastAPI Application.

Main entry point for the backend API server.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from roulette.api import router
from roulette.config import Settings, settings
from roulette.models import ErrorCode
from roulette.services.roulette import RouletteService, create_roulette_service

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    datefmt="%H:%M:%S",
)


def create_app(
    app_settings: Settings | None = None,
    service: RouletteService | None = None,
) -> FastAPI:
    app_settings = app_settings or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler."""
        roulette = service or create_roulette_service(app_settings)
        app.state.roulette = roulette
        # Startup: fresh state, one location check, then the recurring monitor
        await roulette.on_startup()
        yield
        await roulette.shutdown()

    app = FastAPI(
        title="Restaurant Roulette API",
        description="Pick a random open restaurant nearby",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    @app.exception_handler(ValidationError)
    async def validation_exception_handler(request: Request, exc: Exception):
        """Handle request body and Pydantic validation errors."""
        return JSONResponse(
            status_code=422,
            content={
                "success": False,
                "error": {
                    "code": ErrorCode.VALIDATION_ERROR.value,
                    "message": str(exc),
                    "user_message": "Invalid request format. Please check your input.",
                },
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle unexpected errors."""
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "error": {
                    "code": ErrorCode.API_ERROR.value,
                    "message": str(exc),
                    "user_message": "Something went wrong. Please try again.",
                },
            },
        )

    app.include_router(router, prefix="/api")

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


app = create_app()
