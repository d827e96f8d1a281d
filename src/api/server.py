"""FastAPI server for the health engine."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.health_routes import health_router
from src.config import Settings, settings
from src.health.history import HistoryStore
from src.health.layout import ProjectLayout
from src.health.notifications import NotificationEngine
from src.health.runner import HealthRunner
from src.notifications import AlertDispatcher

logger = logging.getLogger(__name__)

HISTORY_FILE = "health-history.json"
NOTIFICATIONS_FILE = "health-notifications.json"
CONFIG_FILE = "health-config.json"


def build_state(app: FastAPI, cfg: Settings) -> None:
    """Wire runner, stores and dispatcher onto ``app.state``."""
    layout = ProjectLayout.from_settings(cfg)
    data_dir = Path(cfg.health_data_dir)

    app.state.layout = layout
    app.state.runner = HealthRunner(
        layout,
        max_workers=cfg.health_max_workers,
        timeout=cfg.health_check_timeout,
    )
    app.state.history = HistoryStore(data_dir / HISTORY_FILE, retention_days=cfg.health_history_days)
    app.state.notifications = NotificationEngine(
        data_dir / NOTIFICATIONS_FILE,
        data_dir / CONFIG_FILE,
        max_notifications=cfg.health_max_notifications,
    )
    app.state.dispatcher = AlertDispatcher.from_settings(cfg)
    logger.info("Health engine scanning %s (state in %s)", layout.root, data_dir)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Initialize shared resources on startup unless a test already did."""
    if not hasattr(app.state, "runner"):
        build_state(app, settings)

    yield

    # Shutdown
    app.state.runner.close()


def create_app() -> FastAPI:
    app = FastAPI(
        title="Codebase Health Engine",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health_router, prefix="/api")

    return app


app = create_app()
