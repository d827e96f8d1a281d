"""Detector registry: the fixed order defines the check IDs of a run."""

from __future__ import annotations

from src.health.checks.accessibility import check_accessibility
from src.health.checks.base import Detector, Issue, guarded
from src.health.checks.images import check_broken_images
from src.health.checks.imports import check_broken_imports
from src.health.checks.links import check_broken_links
from src.health.checks.manifest import ManifestError, check_manifest_sync
from src.health.checks.runtime import check_console_errors, check_performance
from src.health.checks.tokens import check_token_consistency

CHECKS: tuple[tuple[str, Detector], ...] = (
    ("token-consistency", check_token_consistency),
    ("manifest-sync", check_manifest_sync),
    ("broken-imports", check_broken_imports),
    ("broken-links", check_broken_links),
    ("broken-images", check_broken_images),
    ("console-errors", check_console_errors),
    ("accessibility", check_accessibility),
    ("performance", check_performance),
)

__all__ = [
    "CHECKS",
    "Detector",
    "Issue",
    "ManifestError",
    "check_accessibility",
    "check_broken_images",
    "check_broken_imports",
    "check_broken_links",
    "check_console_errors",
    "check_manifest_sync",
    "check_performance",
    "check_token_consistency",
    "guarded",
]
