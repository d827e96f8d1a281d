"""Broken imports: relative import/require paths that resolve to nothing."""

from __future__ import annotations

import os
import re
from pathlib import Path

from src.health.checks.base import Issue, guarded
from src.health.layout import ProjectLayout
from src.health.models import CheckResult, format_expanded, plural, score_for_count
from src.health.walker import read_lines, relative_name, walk_files

NAME = "Kapotte Imports"
TYPE = "broken-imports"

EXTENSIONS = (".ts", ".tsx", ".js", ".jsx")
RESOLVE_SUFFIXES = ("", ".ts", ".tsx", ".js", ".jsx", ".json")

_IMPORT_RE = re.compile(r"""^import\s+(?:(?:[\w*\s{},]*)\s+from\s+)?['"]([^'"]+)['"]""")
_REQUIRE_RE = re.compile(r"""require\s*\(\s*['"]([^'"]+)['"]\s*\)""")


def is_local(import_path: str) -> bool:
    return import_path.startswith(".") or import_path.startswith("/")


def resolve_import(import_path: str, from_file: Path) -> bool:
    """True if ``import_path`` resolves to a file relative to ``from_file``.

    Package imports are always considered resolvable.
    """
    if not is_local(import_path):
        return True

    base = from_file.parent
    for ext in RESOLVE_SUFFIXES:
        if os.path.exists(os.path.normpath(os.path.join(base, import_path + ext))):
            return True
        if os.path.exists(os.path.normpath(os.path.join(base, import_path, "index" + ext))):
            return True
    return False


def extract_import(line: str) -> str | None:
    stripped = line.strip()
    match = _IMPORT_RE.match(stripped) or _REQUIRE_RE.search(stripped)
    return match.group(1) if match else None


def find_broken_imports(layout: ProjectLayout) -> tuple[list[Issue], int]:
    """Return (broken imports, number of files scanned)."""
    broken: list[Issue] = []
    scanned = 0
    for path in walk_files(layout.source_dir, EXTENSIONS):
        scanned += 1
        lines = read_lines(path)
        if lines is None:
            continue
        rel = relative_name(path, layout.source_dir)
        for lineno, line in enumerate(lines, start=1):
            target = extract_import(line)
            if target is None or not is_local(target):
                continue
            if not resolve_import(target, path):
                broken.append(Issue(rel, lineno, f"import '{target}'"))
    return broken, scanned


@guarded(NAME, TYPE)
def check_broken_imports(layout: ProjectLayout) -> CheckResult:
    broken, scanned = find_broken_imports(layout)
    count = len(broken)
    status, score = score_for_count(count, warn_ceiling=5, penalty=10, warn_floor=50, fail_floor=None)

    if count == 0:
        details = f"{scanned} bestanden gecontroleerd, 0 kapot"
    else:
        details = f"{count} kapotte {plural(count, 'import', 's')} gevonden"

    return CheckResult(
        name=NAME,
        type=TYPE,
        status=status,
        score=score,
        details=details,
        expanded=format_expanded([i.render() for i in broken]),
    )
