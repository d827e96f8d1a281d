"""API routes for the Health Engine.

Endpoints:
  POST /api/health/run              run all checks, persist score, raise notifications
  GET  /api/health/run              run all checks without persisting
  GET  /api/health/checks           registered check types
  GET  /api/health/checks/{type}    run a single check
  GET  /api/health/history          recent daily scores
  GET  /api/health/notifications    inbox (``?action=count`` for unread count)
  POST /api/health/notifications    mark_read / mark_all_read
  GET  /api/health/config           notification policy
  POST /api/health/config           update notification policy
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError

from src.health.history import HistoryStore, generate_placeholder
from src.health.notifications import NotificationEngine
from src.health.runner import HealthRunner

logger = logging.getLogger(__name__)

health_router = APIRouter(prefix="/health", tags=["health"])


# ── Request models ───────────────────────────────────────────────────────────


class NotificationActionBody(BaseModel):
    action: str
    notificationId: str | None = None


# ── Helpers ──────────────────────────────────────────────────────────────────


def _runner(request: Request) -> HealthRunner:
    return request.app.state.runner  # type: ignore[no-any-return]


def _history(request: Request) -> HistoryStore:
    return request.app.state.history  # type: ignore[no-any-return]


def _notifications(request: Request) -> NotificationEngine:
    return request.app.state.notifications  # type: ignore[no-any-return]


# ── Runs ─────────────────────────────────────────────────────────────────────


@health_router.post("/run", response_model=None)
async def run_and_record(request: Request) -> dict[str, Any] | JSONResponse:
    """Run every check, save the score and evaluate the alerting policy."""
    history = _history(request)
    engine = _notifications(request)

    try:
        previous_score = history.latest_score(days=1)
        result = await _runner(request).run()
        history.save(result.overall_score)
        created = engine.check_and_notify(result.checks, result.overall_score, previous_score)
    except Exception as e:
        logger.exception("Health run failed")
        return JSONResponse(status_code=500, content={"error": "Health check failed", "message": str(e)})

    dispatcher = getattr(request.app.state, "dispatcher", None)
    if dispatcher is not None and created:
        await dispatcher.dispatch(created)

    return result.to_dict()


@health_router.get("/run")
async def run_preview(request: Request) -> dict[str, Any]:
    """Run every check without touching history or notifications."""
    result = await _runner(request).run()
    return result.to_dict()


@health_router.get("/checks")
def list_checks(request: Request) -> dict[str, Any]:
    return {"checks": _runner(request).check_types()}


@health_router.get("/checks/{check_type}")
async def run_single_check(check_type: str, request: Request) -> dict[str, Any]:
    result = await _runner(request).run_single(check_type)
    if result is None:
        raise HTTPException(status_code=404, detail=f"Unknown check type: {check_type}")
    return result.to_dict()


# ── History ──────────────────────────────────────────────────────────────────


@health_router.get("/history")
def get_history(request: Request, days: int = 30, placeholder: bool = False) -> dict[str, Any]:
    """Daily scores for the last ``days`` days."""
    if placeholder:
        points = generate_placeholder(days)
    else:
        points = _history(request).get_recent(days)
    return {"history": [p.to_dict() for p in points]}


# ── Notifications ────────────────────────────────────────────────────────────


@health_router.get("/notifications")
def list_notifications(request: Request, action: str | None = None) -> dict[str, Any]:
    engine = _notifications(request)
    if action == "count":
        return {"count": engine.get_unread_count()}
    return {"notifications": [n.to_dict() for n in engine.load()]}


@health_router.post("/notifications")
def update_notifications(body: NotificationActionBody, request: Request) -> dict[str, Any]:
    engine = _notifications(request)

    if body.action == "mark_read" and body.notificationId:
        found = engine.mark_as_read(body.notificationId)
        return {"success": True, "found": found}

    if body.action == "mark_all_read":
        engine.mark_all_as_read()
        return {"success": True}

    raise HTTPException(status_code=400, detail="Invalid action")


# ── Config ───────────────────────────────────────────────────────────────────


@health_router.get("/config")
def get_config(request: Request) -> dict[str, Any]:
    return _notifications(request).load_config().to_dict()


@health_router.post("/config")
def save_config(body: dict[str, Any], request: Request) -> dict[str, Any]:
    try:
        config = _notifications(request).update_config(body)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=f"Invalid config: {e.errors(include_url=False)}")
    return {"success": True, "config": config.to_dict()}
