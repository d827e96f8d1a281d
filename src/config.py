from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Central configuration loaded from environment / .env file."""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    # Scanned project (all paths relative to the project root)
    health_project_root: str = "."
    health_source_dir: str = "src"
    health_public_dir: str = "public"
    health_components_dir: str = "src/components"
    health_manifest_file: str = "SITE_MANIFEST.json"

    # Durable state: history, notifications and config documents live here
    health_data_dir: str = "data"
    health_history_days: int = 90
    health_max_notifications: int = 50

    # Runner
    health_check_timeout: float = 60.0  # seconds per detector, 0 disables
    health_max_workers: int = 8

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Logging
    log_level: str = "INFO"

    # Alert delivery (optional, Slack / Telegram)
    slack_webhook_url: str = ""
    telegram_bot_token: str = ""
    telegram_chat_id: str = ""


settings = Settings()
