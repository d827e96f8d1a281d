"""Shared detector plumbing: issue records and the error boundary."""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable
from dataclasses import dataclass

from src.health.layout import ProjectLayout
from src.health.models import CheckResult, Status

logger = logging.getLogger(__name__)

Detector = Callable[[ProjectLayout], CheckResult]


@dataclass
class Issue:
    """A single finding at file:line."""

    file: str
    line: int
    text: str

    def render(self) -> str:
        return f"{self.file}:{self.line} - {self.text}"


def guarded(name: str, check_type: str, details: str = "Fout tijdens scannen") -> Callable[[Detector], Detector]:
    """Convert any exception raised by a detector into a fail/0 result.

    The wrapped detector carries its display label as ``check_name``.
    """

    def decorator(fn: Detector) -> Detector:
        @functools.wraps(fn)
        def wrapper(layout: ProjectLayout) -> CheckResult:
            try:
                return fn(layout)
            except Exception as e:
                logger.exception("Check %s crashed", check_type)
                return CheckResult(
                    name=name,
                    type=check_type,
                    status=Status.FAIL,
                    score=0,
                    details=details,
                    expanded=str(e) or type(e).__name__,
                )

        wrapper.check_name = name  # type: ignore[attr-defined]
        return wrapper

    return decorator
