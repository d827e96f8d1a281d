"""Push health notifications to chat webhooks.

The inbox in ``src.health.notifications`` is the record of truth; this
module only mirrors new entries to Slack and/or Telegram. A delivery that
fails is logged and skipped.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

import httpx

from src.config import Settings, settings
from src.health.notifications import Notification, NotificationType

logger = logging.getLogger(__name__)

DELIVERY_TIMEOUT = 10.0

# type -> (marker, severity label)
SEVERITY: dict[NotificationType, tuple[str, str]] = {
    NotificationType.FAIL: ("🔴", "FAIL"),
    NotificationType.WARN: ("⚠️", "WARN"),
    NotificationType.SCORE_DROP: ("📉", "SCORE"),
}


def format_alert(notification: Notification) -> str:
    marker, label = SEVERITY[notification.type]
    lines = [f"{marker} [{label}] *{notification.title}*"]
    if notification.message:
        lines.append(notification.message)
    return "\n".join(lines)


@dataclass(frozen=True)
class AlertChannel:
    """One webhook endpoint and how to shape its JSON body."""

    name: str
    url: str
    build_payload: Callable[[str], dict[str, Any]]


def slack_channel(webhook_url: str) -> AlertChannel:
    return AlertChannel("slack", webhook_url, lambda text: {"text": text, "mrkdwn": True})


def telegram_channel(bot_token: str, chat_id: str) -> AlertChannel:
    return AlertChannel(
        "telegram",
        f"https://api.telegram.org/bot{bot_token}/sendMessage",
        lambda text: {"chat_id": chat_id, "text": text, "parse_mode": "Markdown"},
    )


def channels_from_settings(cfg: Settings | None = None) -> list[AlertChannel]:
    cfg = cfg or settings
    channels = []
    if cfg.slack_webhook_url:
        channels.append(slack_channel(cfg.slack_webhook_url))
    if cfg.telegram_bot_token and cfg.telegram_chat_id:
        channels.append(telegram_channel(cfg.telegram_bot_token, cfg.telegram_chat_id))
    return channels


class AlertDispatcher:
    def __init__(self, channels: Sequence[AlertChannel] = ()) -> None:
        self.channels = list(channels)

    @classmethod
    def from_settings(cls, cfg: Settings | None = None) -> AlertDispatcher:
        return cls(channels_from_settings(cfg))

    @property
    def is_enabled(self) -> bool:
        return bool(self.channels)

    def status(self) -> dict[str, Any]:
        return {"enabled": self.is_enabled, "channels": [c.name for c in self.channels]}

    async def dispatch(self, notifications: Sequence[Notification]) -> int:
        """Deliver each notification to every channel over one client.

        Returns the number of successful posts.
        """
        if not self.channels or not notifications:
            return 0

        delivered = 0
        async with httpx.AsyncClient(timeout=DELIVERY_TIMEOUT) as client:
            for notification in notifications:
                text = format_alert(notification)
                for channel in self.channels:
                    if await self._post(client, channel, text):
                        delivered += 1
        logger.info("Delivered %d alert(s) for %d notification(s)", delivered, len(notifications))
        return delivered

    @staticmethod
    async def _post(client: httpx.AsyncClient, channel: AlertChannel, text: str) -> bool:
        try:
            resp = await client.post(channel.url, json=channel.build_payload(text))
        except httpx.HTTPError as e:
            logger.warning("%s alert failed: %s", channel.name, e)
            return False
        if not resp.is_success:
            logger.warning("%s alert rejected with HTTP %d", channel.name, resp.status_code)
            return False
        return True
