"""Placeholder detectors for checks that need a browser or Lighthouse.

Both return pass/100 with ``implemented=False`` so dashboards can tell a
placeholder from a genuine pass. Replace the entry in ``CHECKS`` with a
real detector to wire one in; the runner needs no change.
"""

from __future__ import annotations

from src.health.checks.base import guarded
from src.health.layout import ProjectLayout
from src.health.models import CheckResult, Status

CONSOLE_NAME = "Console Errors"
CONSOLE_TYPE = "console-errors"
PERFORMANCE_NAME = "Performance Metrics"
PERFORMANCE_TYPE = "performance"


@guarded(CONSOLE_NAME, CONSOLE_TYPE)
def check_console_errors(layout: ProjectLayout) -> CheckResult:
    return CheckResult(
        name=CONSOLE_NAME,
        type=CONSOLE_TYPE,
        status=Status.PASS,
        score=100,
        details="Geen console errors (runtime check vereist)",
        expanded=(
            "Deze check vereist browser runtime met Playwright/Puppeteer. "
            "Voeg dit toe voor volledige functionaliteit."
        ),
        implemented=False,
    )


@guarded(PERFORMANCE_NAME, PERFORMANCE_TYPE)
def check_performance(layout: ProjectLayout) -> CheckResult:
    return CheckResult(
        name=PERFORMANCE_NAME,
        type=PERFORMANCE_TYPE,
        status=Status.PASS,
        score=100,
        details="Performance metrics (Lighthouse vereist)",
        expanded=(
            "Deze check vereist Lighthouse of web-vitals measurement. "
            "Voeg dit toe voor Core Web Vitals: LCP, CLS, FID/INP."
        ),
        implemented=False,
    )
