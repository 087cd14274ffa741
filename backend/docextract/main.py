# docextract/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from docextract.core.config import settings
from docextract.core.logging_config import configure_logging
from docextract.middleware.request_logging import RequestLoggingMiddleware
from docextract.routers.health import router as health_router
from docextract.routers.extractions import router as extractions_router
from docextract.core.exception_handlers import (
    app_error_handler,
    unhandled_exception_handler,
    validation_error_handler,
)
from fastapi.exceptions import RequestValidationError
from docextract.core import AppError

configure_logging()


def _split_csv(value: str | None) -> list[str]:
    if not value:
        return []
    return [v.strip() for v in value.split(",") if v.strip()]


def create_app() -> FastAPI:
    app = FastAPI(title=settings.app_name)

    app.add_middleware(RequestLoggingMiddleware)

    # ---- CORS (env-driven) ----
    # CORS_ALLOW_ORIGINS="http://localhost:3000,https://lms.example.edu"
    allow_origins = _split_csv(settings.CORS_ALLOW_ORIGINS)
    if not allow_origins:
        allow_origins = ["http://localhost:3000"]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # Routers
    app.include_router(health_router)
    app.include_router(extractions_router)

    return app


app = create_app()
