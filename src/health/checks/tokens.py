"""Token consistency: hardcoded colours that should come from design tokens."""

from __future__ import annotations

import re

from src.health.checks.base import Issue, guarded
from src.health.layout import ProjectLayout
from src.health.models import CheckResult, format_expanded, score_for_count
from src.health.walker import read_lines, relative_name, walk_files

NAME = "Token Consistentie"
TYPE = "token-consistency"

EXTENSIONS = (".ts", ".tsx", ".js", ".jsx", ".css", ".scss")

_COLOR_PATTERNS = (
    re.compile(r"#[0-9a-fA-F]{3,6}\b"),
    re.compile(r"rgb\(\s*\d+\s*,\s*\d+\s*,\s*\d+\s*\)"),
    re.compile(r"rgba\(\s*\d+\s*,\s*\d+\s*,\s*\d+\s*,\s*[\d.]+\s*\)"),
)

ALLOWED = frozenset({"#fff", "#000", "#ffffff", "#000000"})


def _skip_line(line: str) -> bool:
    stripped = line.strip()
    return stripped.startswith("//") or stripped.startswith("*") or "import" in line


def find_hardcoded_values(layout: ProjectLayout) -> list[Issue]:
    issues: list[Issue] = []
    for path in walk_files(layout.source_dir, EXTENSIONS):
        lines = read_lines(path)
        if lines is None:
            continue
        rel = relative_name(path, layout.source_dir)
        for lineno, line in enumerate(lines, start=1):
            if _skip_line(line):
                continue
            for pattern in _COLOR_PATTERNS:
                for match in pattern.findall(line):
                    if match in ALLOWED:
                        continue
                    issues.append(Issue(rel, lineno, match))
    return issues


@guarded(NAME, TYPE)
def check_token_consistency(layout: ProjectLayout) -> CheckResult:
    issues = find_hardcoded_values(layout)
    count = len(issues)
    status, score = score_for_count(count, warn_ceiling=10, penalty=5, warn_floor=60, fail_floor=0)

    if count == 0:
        details = "Geen hardcoded waarden gevonden"
    else:
        details = f"{count} hardcoded waarde{'' if count == 1 else 'n'} gevonden"

    return CheckResult(
        name=NAME,
        type=TYPE,
        status=status,
        score=score,
        details=details,
        expanded=format_expanded([i.render() for i in issues]),
    )
