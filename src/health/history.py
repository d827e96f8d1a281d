"""Daily health-score history backed by a JSON document.

Document shape: ``{"history": [HistoryPoint...], "lastUpdated": iso}``.
One point per UTC calendar date; a later save on the same date replaces
the earlier point. Points older than the retention window are dropped on
every save.
"""

from __future__ import annotations

import logging
import math
import random
from datetime import datetime, timedelta, timezone
from pathlib import Path

from src.health.jsonstore import JsonDocument
from src.health.models import HistoryPoint, round_half_up

logger = logging.getLogger(__name__)

DEFAULT_RETENTION_DAYS = 90


def _now(now: datetime | None) -> datetime:
    return now or datetime.now(timezone.utc)


def _iso(dt: datetime) -> str:
    return dt.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def _utc_date(dt: datetime) -> str:
    return dt.astimezone(timezone.utc).date().isoformat()


def cutoff_date(days: int, now: datetime | None = None) -> str:
    return _utc_date(_now(now) - timedelta(days=days))


class HistoryStore:
    """Append/merge store for one score sample per day."""

    def __init__(self, path: Path | str, retention_days: int = DEFAULT_RETENTION_DAYS) -> None:
        self._doc = JsonDocument(path)
        self.retention_days = retention_days

    @property
    def path(self) -> Path:
        return self._doc.path

    def load(self) -> list[HistoryPoint]:
        """Full collection, or [] if the document is absent or corrupt."""
        data = self._doc.read(default={})
        if not isinstance(data, dict):
            return []
        points = []
        for raw in data.get("history") or []:
            try:
                points.append(HistoryPoint.from_dict(raw))
            except (KeyError, TypeError, ValueError):
                logger.warning("Skipping malformed history point: %r", raw)
        return points

    def save(self, score: int, now: datetime | None = None) -> HistoryPoint:
        """Record today's score, merging with any earlier sample from today."""
        moment = _now(now)
        timestamp = _iso(moment)
        point = HistoryPoint(date=_utc_date(moment), score=score, timestamp=timestamp)

        with self._doc.transaction():
            by_date = {p.date: p for p in self.load()}
            by_date[point.date] = point

            cutoff = cutoff_date(self.retention_days, moment)
            history = sorted((p for p in by_date.values() if p.date >= cutoff), key=lambda p: p.date)

            try:
                self._doc.write({
                    "history": [p.to_dict() for p in history],
                    "lastUpdated": timestamp,
                })
            except OSError:
                logger.exception("Failed to save health history to %s", self.path)
                raise

        return point

    def get_recent(self, days: int = 30, now: datetime | None = None) -> list[HistoryPoint]:
        cutoff = cutoff_date(days, now)
        return [p for p in self.load() if p.date >= cutoff]

    def latest_score(self, days: int = 1, now: datetime | None = None) -> int | None:
        """Score of the most recent point within ``days``, the baseline for drop alerts.

        Older points don't count: a run after a long pause has no baseline.
        """
        recent = self.get_recent(days, now=now)
        if not recent:
            return None
        return max(recent, key=lambda p: p.date).score

    def clear(self) -> None:
        with self._doc.transaction():
            if self._doc.delete():
                logger.info("Cleared health history at %s", self.path)


def generate_placeholder(days: int = 30, now: datetime | None = None, rng: random.Random | None = None) -> list[HistoryPoint]:
    """Synthetic demo series for dashboards without real history yet."""
    rng = rng or random.Random()
    moment = _now(now)
    base = 70
    history = []
    for i in range(days - 1, -1, -1):
        day = moment - timedelta(days=i)
        variation = math.sin(i * 0.3) * 10 + rng.random() * 8
        score = max(45, min(100, round_half_up(base + variation)))
        history.append(HistoryPoint(date=_utc_date(day), score=score, timestamp=_iso(day)))
    return history
