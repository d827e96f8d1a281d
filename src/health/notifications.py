"""Threshold notifications derived from health runs.

Two JSON documents:
- notifications: ``{"notifications": [...]}``, newest first, capped at 50
  (the oldest are dropped on write, read or not)
- config: the NotificationConfig object itself, merged over defaults on
  load so partial documents are valid
"""

from __future__ import annotations

import logging
import random
import string
import time
from collections.abc import Sequence
from dataclasses import asdict, dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from src.health.jsonstore import JsonDocument
from src.health.models import CheckResult, Status, utc_now_iso

logger = logging.getLogger(__name__)

DEFAULT_MAX_NOTIFICATIONS = 50

_ID_ALPHABET = string.ascii_lowercase + string.digits


class NotificationType(str, Enum):
    FAIL = "fail"
    WARN = "warn"
    SCORE_DROP = "score_drop"


class NotificationConfig(BaseModel):
    """Alerting policy. Serialized with camelCase keys."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    enabled: bool = True
    notify_on_fail: bool = Field(default=True, alias="notifyOnFail")
    notify_on_warn: bool = Field(default=True, alias="notifyOnWarn")
    notify_on_score_drops: bool = Field(default=True, alias="notifyOnScoreDrops")
    score_drop_threshold: int = Field(default=10, alias="scoreDropThreshold", ge=0)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


def new_notification_id() -> str:
    suffix = "".join(random.choices(_ID_ALPHABET, k=9))
    return f"notif-{int(time.time() * 1000)}-{suffix}"


@dataclass
class Notification:
    """A persisted alert. Only ``read`` changes after creation."""

    id: str
    timestamp: str
    type: NotificationType
    title: str
    message: str
    read: bool = False

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        d["type"] = self.type.value
        return d

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Notification:
        return cls(
            id=str(d["id"]),
            timestamp=str(d.get("timestamp", "")),
            type=NotificationType(d["type"]),
            title=str(d.get("title", "")),
            message=str(d.get("message", "")),
            read=bool(d.get("read", False)),
        )

    @classmethod
    def create(cls, type: NotificationType, title: str, message: str) -> Notification:
        return cls(id=new_notification_id(), timestamp=utc_now_iso(), type=type, title=title, message=message)


class NotificationEngine:
    """Evaluates the alerting policy and keeps the notification inbox."""

    def __init__(
        self,
        notifications_path: Path | str,
        config_path: Path | str,
        max_notifications: int = DEFAULT_MAX_NOTIFICATIONS,
    ) -> None:
        self._inbox = JsonDocument(notifications_path)
        self._config = JsonDocument(config_path)
        self.max_notifications = max_notifications

    # -- Config -------------------------------------------------------------

    def load_config(self) -> NotificationConfig:
        raw = self._config.read(default={})
        if not isinstance(raw, dict):
            return NotificationConfig()
        try:
            return NotificationConfig.model_validate(raw)
        except ValueError as e:
            logger.warning("Invalid notification config, using defaults: %s", e)
            return NotificationConfig()

    def save_config(self, config: NotificationConfig) -> None:
        with self._config.transaction():
            self._config.write(config.to_dict())

    def update_config(self, changes: dict[str, Any]) -> NotificationConfig:
        """Merge (partial) changes over the stored config and save.

        Keys may use either the camelCase wire names or the field names.
        """
        incoming = NotificationConfig.model_validate(changes)
        updates = {name: getattr(incoming, name) for name in incoming.model_fields_set}
        with self._config.transaction():
            config = self.load_config().model_copy(update=updates)
            self._config.write(config.to_dict())
        return config

    # -- Inbox --------------------------------------------------------------

    def load(self) -> list[Notification]:
        data = self._inbox.read(default={})
        if not isinstance(data, dict):
            return []
        result = []
        for raw in data.get("notifications") or []:
            try:
                result.append(Notification.from_dict(raw))
            except (KeyError, TypeError, ValueError):
                logger.warning("Skipping malformed notification: %r", raw)
        return result

    def _write(self, notifications: list[Notification]) -> None:
        self._inbox.write({"notifications": [n.to_dict() for n in notifications]})

    def _prepend(self, new: Sequence[Notification]) -> None:
        """Insert in emission order, newest ending up first, then trim."""
        if not new:
            return
        with self._inbox.transaction():
            notifications = list(reversed(new)) + self.load()
            self._write(notifications[: self.max_notifications])

    def add(self, type: NotificationType, title: str, message: str) -> Notification:
        notification = Notification.create(type, title, message)
        self._prepend([notification])
        return notification

    def mark_as_read(self, notification_id: str) -> bool:
        with self._inbox.transaction():
            notifications = self.load()
            target = next((n for n in notifications if n.id == notification_id), None)
            if target is None:
                return False
            target.read = True
            self._write(notifications)
        return True

    def mark_all_as_read(self) -> int:
        """Mark everything read; returns how many were unread."""
        with self._inbox.transaction():
            notifications = self.load()
            changed = sum(1 for n in notifications if not n.read)
            for n in notifications:
                n.read = True
            self._write(notifications)
        return changed

    def get_unread_count(self) -> int:
        return sum(1 for n in self.load() if not n.read)

    # -- Policy -------------------------------------------------------------

    def check_and_notify(
        self,
        checks: Sequence[CheckResult],
        current_score: int,
        previous_score: int | None = None,
    ) -> list[Notification]:
        """Emit notifications for a finished run according to the config.

        Returns the notifications created, in emission order.
        """
        config = self.load_config()
        if not config.enabled:
            return []

        created: list[Notification] = []

        if config.notify_on_fail:
            for check in checks:
                if Status(check.status) == Status.FAIL:
                    created.append(Notification.create(
                        NotificationType.FAIL, f"Check Failed: {check.name}", check.details,
                    ))

        if config.notify_on_warn:
            for check in checks:
                if Status(check.status) == Status.WARN:
                    created.append(Notification.create(
                        NotificationType.WARN, f"Warning: {check.name}", check.details,
                    ))

        if config.notify_on_score_drops and previous_score is not None:
            drop = previous_score - current_score
            if drop >= config.score_drop_threshold:
                created.append(Notification.create(
                    NotificationType.SCORE_DROP,
                    "Health Score Dropped",
                    f"Score decreased from {previous_score} to {current_score} (-{drop} points)",
                ))

        self._prepend(created)
        if created:
            logger.info("Created %d health notifications", len(created))
        return created
