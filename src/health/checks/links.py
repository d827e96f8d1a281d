"""Broken internal links: site-root hrefs with no page or public asset."""

from __future__ import annotations

import re
from pathlib import Path

from src.health.checks.base import Issue, guarded
from src.health.layout import ProjectLayout
from src.health.models import CheckResult, format_expanded, plural, score_for_count
from src.health.walker import read_lines, relative_name, walk_files

NAME = "Kapotte Links"
TYPE = "broken-links"

EXTENSIONS = (".tsx", ".jsx", ".ts", ".js", ".md", ".mdx")

_HREF_RE = re.compile(r"""href\s*=\s*["']([^"']+)["']""")
_MD_LINK_RE = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")


def is_internal(url: str) -> bool:
    return url.startswith("/") and not url.startswith("//")


def clean_url(url: str) -> str:
    """Strip query string and fragment."""
    return url.split("?")[0].split("#")[0]


def collect_links(layout: ProjectLayout) -> list[Issue]:
    """All internal link occurrences, in scan order."""
    links: list[Issue] = []
    for path in walk_files(layout.source_dir, EXTENSIONS):
        lines = read_lines(path)
        if lines is None:
            continue
        rel = relative_name(path, layout.source_dir)
        for lineno, line in enumerate(lines, start=1):
            for m in _HREF_RE.finditer(line):
                if is_internal(m.group(1)):
                    links.append(Issue(rel, lineno, m.group(1)))
            for m in _MD_LINK_RE.finditer(line):
                if is_internal(m.group(2)):
                    links.append(Issue(rel, lineno, m.group(2)))
    return links


def _candidates(layout: ProjectLayout, route: str) -> list[Path]:
    app, pages = layout.app_dir, layout.pages_dir
    return [
        # app router
        app / route / "page.tsx",
        app / route / "page.jsx",
        app / route / "page.ts",
        app / route / "page.js",
        app / f"{route}.tsx",
        app / f"{route}.jsx",
        # pages router
        pages / f"{route}.tsx",
        pages / f"{route}.jsx",
        pages / route / "index.tsx",
        pages / route / "index.jsx",
        # static asset
        layout.public_dir / route,
    ]


def link_exists(layout: ProjectLayout, url: str) -> bool:
    route = clean_url(url).strip("/")
    return any(p.exists() for p in _candidates(layout, route))


@guarded(NAME, TYPE)
def check_broken_links(layout: ProjectLayout) -> CheckResult:
    links = collect_links(layout)

    first_seen: dict[str, Issue] = {}
    for link in links:
        first_seen.setdefault(link.text, link)

    broken = [issue for url, issue in first_seen.items() if not link_exists(layout, url)]
    count = len(broken)
    status, score = score_for_count(count, warn_ceiling=5, penalty=10, warn_floor=60, fail_floor=0)

    if count == 0:
        details = f"{len(first_seen)} links gecontroleerd, 0 kapot"
    else:
        details = f"{count} kapotte {plural(count, 'link', 's')} gevonden"

    return CheckResult(
        name=NAME,
        type=TYPE,
        status=status,
        score=score,
        details=details,
        expanded=format_expanded([i.render() for i in broken]),
    )
