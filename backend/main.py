"""
Progression API application.

create_app() builds the app from a Settings instance so tests can run it
without environment variables; `app` is the instance uvicorn serves
(uvicorn backend.main:app).
"""

import logging
from typing import Optional, Sequence

import sentry_sdk
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.settings import Settings, get_settings

logger = logging.getLogger(__name__)

SENTRY_SAMPLE_RATE = 0.1


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the progression API. Defaults to the cached environment settings."""
    settings = settings or get_settings()
    _init_sentry(settings)

    app = FastAPI(
        title="Lift Progression API",
        description="Program definitions, replayed schedules and result logging",
        version="1.0.0",
    )
    _configure_cors(app, settings.cors_origins)

    from api.routers import definitions_router, health_router, programs_router

    for router in (health_router, definitions_router, programs_router):
        app.include_router(router)
    return app


def _init_sentry(settings: Settings) -> None:
    """Report errors to Sentry when a DSN is set."""
    if not settings.sentry_dsn:
        return
    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment=settings.environment,
        traces_sample_rate=SENTRY_SAMPLE_RATE,
        profiles_sample_rate=SENTRY_SAMPLE_RATE,
    )
    logger.info(f"Sentry enabled ({settings.environment})")


def _configure_cors(app: FastAPI, origins: Sequence[str] = ("*",)) -> None:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


app = create_app()
