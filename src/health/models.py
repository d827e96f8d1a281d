"""Health data model: check results, run results, history points.

Scores are integers in [0, 100]. Status and score are derived per detector
from its own issue count; see ``score_for_count`` for the shared rule.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

MAX_EXPANDED_LINES = 10


class Status(str, Enum):
    PASS = "pass"
    WARN = "warn"
    FAIL = "fail"


@dataclass
class CheckResult:
    """Outcome of one detector over the project tree."""

    name: str
    type: str
    status: Status
    score: int
    details: str = ""
    expanded: str = ""
    implemented: bool = True  # False for placeholder detectors

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        d["status"] = self.status.value
        return d


@dataclass
class HealthCheck(CheckResult):
    """A CheckResult tagged with its position in a run (``check-<n>``)."""

    id: str = ""

    @classmethod
    def from_result(cls, result: CheckResult, position: int) -> HealthCheck:
        return cls(
            id=f"check-{position}",
            name=result.name,
            type=result.type,
            status=result.status,
            score=result.score,
            details=result.details,
            expanded=result.expanded,
            implemented=result.implemented,
        )

    def to_dict(self) -> dict[str, Any]:
        d = super().to_dict()
        # id first, matching the wire order consumers expect
        return {"id": d.pop("id"), **d}


@dataclass
class HealthCheckResult:
    """One complete run of every registered detector."""

    checks: list[HealthCheck]
    overall_score: int
    timestamp: str = ""

    def __post_init__(self) -> None:
        if not self.timestamp:
            self.timestamp = utc_now_iso()

    def to_dict(self) -> dict[str, Any]:
        return {
            "checks": [c.to_dict() for c in self.checks],
            "overallScore": self.overall_score,
            "timestamp": self.timestamp,
        }


@dataclass
class HistoryPoint:
    """Daily score sample. ``date`` is the unique key."""

    date: str
    score: int
    timestamp: str = field(default_factory=lambda: utc_now_iso())

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> HistoryPoint:
        return cls(date=str(d["date"]), score=int(d["score"]), timestamp=str(d.get("timestamp", "")))


# ── Helpers ──────────────────────────────────────────────────────────────────


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (builtin round() is banker's)."""
    return int(math.floor(value + 0.5))


def score_for_count(
    count: int,
    *,
    warn_ceiling: int,
    penalty: int,
    warn_floor: int,
    fail_floor: int | None,
    fail_penalty: int | None = None,
) -> tuple[Status, int]:
    """Map an issue count to (status, score).

    0 issues → pass/100. Up to ``warn_ceiling`` → warn, floored at
    ``warn_floor``. Above it → fail, floored at ``fail_floor``; a
    ``fail_floor`` of None pins the fail score to 0.
    """
    if count <= 0:
        return Status.PASS, 100
    if count <= warn_ceiling:
        return Status.WARN, max(warn_floor, 100 - count * penalty)
    if fail_floor is None:
        return Status.FAIL, 0
    per_issue = penalty if fail_penalty is None else fail_penalty
    return Status.FAIL, max(fail_floor, 100 - count * per_issue)


def format_expanded(lines: list[str], limit: int = MAX_EXPANDED_LINES) -> str:
    """Join detail lines, truncated to ``limit`` with a '... en N meer' suffix."""
    if not lines:
        return ""
    text = "\n".join(lines[:limit])
    if len(lines) > limit:
        text += f"\n... en {len(lines) - limit} meer"
    return text


def plural(count: int, singular: str, suffix: str) -> str:
    """Dutch-style pluralisation: ``plural(2, 'link', 's')`` → 'links'."""
    return singular if count == 1 else singular + suffix
