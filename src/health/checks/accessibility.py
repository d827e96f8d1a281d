"""Accessibility heuristics over JSX/TSX source.

Line-scoped pattern matching, not DOM analysis: an element spread over
several lines is judged on the line holding its opening tag only, so
false positives and negatives are expected.
"""

from __future__ import annotations

import re
from collections.abc import Callable

from src.health.checks.base import Issue, guarded
from src.health.layout import ProjectLayout
from src.health.models import CheckResult, format_expanded, score_for_count
from src.health.walker import read_lines, relative_name, walk_files

NAME = "Toegankelijkheid"
TYPE = "accessibility"

EXTENSIONS = (".tsx", ".jsx")

_ALT = re.compile(r"alt\s*=")
_ARIA_LABEL = re.compile(r"aria-label\s*=")
_ID = re.compile(r"\bid\s*=")
_ROLE = re.compile(r"role\s*=")
_ON_CLICK = re.compile(r"onClick\s*=")
_TAG = re.compile(r"<[^>]*>")
_WORD = re.compile(r"\w")


def _inner_has_text(line: str, tag: str) -> bool:
    """True if some ``<tag ...>…</tag>`` on the line wraps visible text."""
    for m in re.finditer(rf"<{tag}\b[^>]*>(.*?)</{tag}>", line):
        if _WORD.search(_TAG.sub("", m.group(1))):
            return True
    return False


def _img_without_alt(line: str) -> bool:
    return re.search(r"<img\s", line) is not None and not _ALT.search(line)


def _image_without_alt(line: str) -> bool:
    return re.search(r"<Image\s", line) is not None and not _ALT.search(line)


def _button_without_label(line: str) -> bool:
    if not re.search(r"<button\s", line) or "</button>" not in line:
        return False
    return not _ARIA_LABEL.search(line) and not _inner_has_text(line, "button")


def _link_without_label(line: str) -> bool:
    if not re.search(r"<a\s", line) or "</a>" not in line:
        return False
    return not _ARIA_LABEL.search(line) and not _inner_has_text(line, "a")


def _input_without_label(line: str) -> bool:
    return re.search(r"<input\s", line) is not None and not _ARIA_LABEL.search(line) and not _ID.search(line)


def _clickable_div(line: str) -> bool:
    return bool(_ON_CLICK.search(line) and re.search(r"<div\s", line) and not _ROLE.search(line))


# (element, issue text, predicate)
RULES: tuple[tuple[str, str, Callable[[str], bool]], ...] = (
    ("img", "Missing alt attribute", _img_without_alt),
    ("Image", "Missing alt attribute", _image_without_alt),
    ("button", "Button without text or aria-label", _button_without_label),
    ("a", "Link without text or aria-label", _link_without_label),
    ("input", "Input without label or aria-label", _input_without_label),
    ("div", "onClick on div without role", _clickable_div),
)


def find_a11y_issues(layout: ProjectLayout) -> list[Issue]:
    issues: list[Issue] = []
    for path in walk_files(layout.source_dir, EXTENSIONS):
        lines = read_lines(path)
        if lines is None:
            continue
        rel = relative_name(path, layout.source_dir)
        for lineno, line in enumerate(lines, start=1):
            for element, text, predicate in RULES:
                if predicate(line):
                    issues.append(Issue(rel, lineno, f"{element}: {text}"))
    return issues


@guarded(NAME, TYPE)
def check_accessibility(layout: ProjectLayout) -> CheckResult:
    issues = find_a11y_issues(layout)
    count = len(issues)
    status, score = score_for_count(count, warn_ceiling=10, penalty=5, warn_floor=60, fail_floor=30)

    if count == 0:
        details = "Geen toegankelijkheidsproblemen gevonden"
    else:
        details = f"{count} potentiële {'probleem' if count == 1 else 'problemen'} gevonden"

    return CheckResult(
        name=NAME,
        type=TYPE,
        status=status,
        score=score,
        details=details,
        expanded=format_expanded([i.render() for i in issues]),
    )
