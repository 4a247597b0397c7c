from __future__ import annotations

from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from complaint_engine.api.error_handling import register_exception_handlers
from complaint_engine.api.v1.router import router as api_v1_router
from complaint_engine.config.database import init_db
from complaint_engine.config.logging import setup_logging
from complaint_engine.config.settings import Settings, get_settings
from complaint_engine.services.base.notification_dispatcher import get_notification_dispatcher


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Application factory for the FastAPI app.

    - Configures title, version, debug mode from Settings.
    - Registers CORS and exception handlers.
    - Includes the versioned API router under API_V1_STR.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.APP_NAME,
        debug=settings.DEBUG,
        version=settings.API_VERSION,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=settings.CORS_ORIGINS != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    app.include_router(api_v1_router, prefix=settings.API_V1_STR)

    @app.on_event("startup")
    async def on_startup() -> None:
        setup_logging(settings)
        if not settings.is_production():
            # Production schemas are managed by migrations
            init_db()

    @app.on_event("shutdown")
    async def on_shutdown() -> None:
        get_notification_dispatcher().shutdown(wait=True)

    return app


app = create_app()
