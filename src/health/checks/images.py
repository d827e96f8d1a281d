"""Broken images: src/srcSet, markdown images and CSS url() that point nowhere."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from src.health.checks.base import Issue, guarded
from src.health.layout import ProjectLayout
from src.health.models import CheckResult, format_expanded, score_for_count
from src.health.walker import read_lines, relative_name, walk_files

NAME = "Kapotte Afbeeldingen"
TYPE = "broken-images"

EXTENSIONS = (".tsx", ".jsx", ".ts", ".js", ".css", ".scss", ".md", ".mdx")

# (pattern, group holding the reference)
_PATTERNS = (
    (re.compile(r"""(?:src|srcSet)\s*=\s*["']([^"']+)["']"""), 1),
    (re.compile(r"!\[([^\]]*)\]\(([^)]+)\)"), 2),
    (re.compile(r"""url\s*\(\s*["']?([^"')]+)["']?\s*\)"""), 1),
)


@dataclass
class ImageRef:
    source: Path  # file containing the reference
    issue: Issue


def is_external(src: str) -> bool:
    return src.startswith("http") or src.startswith("//") or src.startswith("data:")


def collect_images(layout: ProjectLayout) -> list[ImageRef]:
    refs: list[ImageRef] = []
    for path in walk_files(layout.source_dir, EXTENSIONS):
        lines = read_lines(path)
        if lines is None:
            continue
        rel = relative_name(path, layout.source_dir)
        for lineno, line in enumerate(lines, start=1):
            for pattern, group in _PATTERNS:
                for m in pattern.finditer(line):
                    src = m.group(group)
                    if not is_external(src):
                        refs.append(ImageRef(path, Issue(rel, lineno, src)))
    return refs


def image_exists(layout: ProjectLayout, src: str, from_file: Path) -> bool:
    """Root-relative refs live in public/; relative refs next to the file, then public/."""
    if src.startswith("/"):
        return (layout.public_dir / src.lstrip("/")).exists()
    if (from_file.parent / src).exists():
        return True
    return (layout.public_dir / src).exists()


@guarded(NAME, TYPE)
def check_broken_images(layout: ProjectLayout) -> CheckResult:
    refs = collect_images(layout)
    broken = [r.issue for r in refs if not image_exists(layout, r.issue.text, r.source)]

    count, total = len(broken), len(refs)
    status, score = score_for_count(count, warn_ceiling=5, penalty=10, warn_floor=60, fail_floor=0)

    noun = "afbeelding" if total == 1 else "afbeeldingen"
    if count == 0:
        details = f"Alle {total} {noun} gevonden"
    else:
        missing = "ontbrekende afbeelding" if count == 1 else "ontbrekende afbeeldingen"
        details = f"{count} {missing} van {total}"

    return CheckResult(
        name=NAME,
        type=TYPE,
        status=status,
        score=score,
        details=details,
        expanded=format_expanded([i.render() for i in broken]),
    )
