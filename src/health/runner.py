"""Health runner: fans all detectors out concurrently and aggregates a score.

Detectors are blocking filesystem scans, so each one runs in a thread
pool via ``run_in_executor``. The runner never persists anything; the
caller sequences history and notifications after a run.
"""

from __future__ import annotations

import asyncio
import logging
import time
from concurrent.futures import ThreadPoolExecutor

from src.health.checks import CHECKS, Detector
from src.health.layout import ProjectLayout
from src.health.models import (
    CheckResult,
    HealthCheck,
    HealthCheckResult,
    Status,
    round_half_up,
    utc_now_iso,
)

logger = logging.getLogger(__name__)


def overall_score(results: list[CheckResult]) -> int:
    """Unweighted mean of all scores, rounded half up. 100 for no checks."""
    if not results:
        return 100
    return round_half_up(sum(r.score for r in results) / len(results))


class HealthRunner:
    """Runs the registered detectors against one project layout."""

    def __init__(
        self,
        layout: ProjectLayout,
        checks: tuple[tuple[str, Detector], ...] = CHECKS,
        max_workers: int = 8,
        timeout: float | None = None,
    ) -> None:
        self.layout = layout
        self.checks = checks
        self.timeout = timeout or None  # 0 disables
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="health-check")

    def check_types(self) -> list[str]:
        return [check_type for check_type, _ in self.checks]

    async def run(self) -> HealthCheckResult:
        """Run every detector concurrently and aggregate the results."""
        t0 = time.perf_counter()
        results = await asyncio.gather(
            *(self._execute(check_type, detector) for check_type, detector in self.checks)
        )

        checks = [HealthCheck.from_result(r, i + 1) for i, r in enumerate(results)]
        result = HealthCheckResult(
            checks=checks,
            overall_score=overall_score(list(results)),
            timestamp=utc_now_iso(),
        )
        logger.info(
            "Health run finished: score %d across %d checks (%.0fms)",
            result.overall_score, len(checks), (time.perf_counter() - t0) * 1000,
        )
        return result

    async def run_single(self, check_type: str) -> CheckResult | None:
        """Run one detector by type; None if the type isn't registered."""
        for registered, detector in self.checks:
            if registered == check_type:
                return await self._execute(registered, detector)
        return None

    async def _execute(self, check_type: str, detector: Detector) -> CheckResult:
        label = getattr(detector, "check_name", check_type)
        loop = asyncio.get_running_loop()
        future = loop.run_in_executor(self._executor, detector, self.layout)
        try:
            return await asyncio.wait_for(future, timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning("Check %s timed out after %ss", check_type, self.timeout)
            return CheckResult(
                name=label, type=check_type, status=Status.FAIL, score=0,
                details=f"Timeout na {self.timeout:g}s",
                expanded=f"De check duurde langer dan {self.timeout:g} seconden",
            )
        except Exception as e:
            # Unguarded (e.g. plugged-in) detectors still must not abort the run
            logger.exception("Check %s crashed", check_type)
            return CheckResult(
                name=label, type=check_type, status=Status.FAIL, score=0,
                details="Fout tijdens scannen", expanded=f"{type(e).__name__}: {e}",
            )

    def close(self) -> None:
        self._executor.shutdown(wait=False)
