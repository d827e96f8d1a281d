"""Manifest sync: every component listed in SITE_MANIFEST.json has a file."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ValidationError

from src.health.checks.base import guarded
from src.health.layout import ProjectLayout
from src.health.models import CheckResult, Status, format_expanded, score_for_count

NAME = "Manifest Sync"
TYPE = "manifest-sync"


class ManifestError(Exception):
    """Raised when the manifest exists but cannot be parsed or validated."""


class ManifestComponent(BaseModel):
    model_config = {"extra": "allow"}

    name: str | None = None
    id: str | None = None


class SiteManifest(BaseModel):
    model_config = {"extra": "allow"}

    components: list[str | ManifestComponent]

    def component_names(self) -> list[str]:
        names = []
        for c in self.components:
            name = c if isinstance(c, str) else (c.name or c.id)
            if name:
                names.append(name)
        return names


def has_components_array(raw: Any) -> bool:
    return isinstance(raw, dict) and isinstance(raw.get("components"), list)


def parse_manifest(raw: Any) -> SiteManifest:
    try:
        return SiteManifest.model_validate(raw)
    except ValidationError as e:
        raise ManifestError(f"Ongeldige componenten in manifest: {e}") from e


def read_manifest_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ManifestError(f"{path.name} is geen geldige JSON: {e}") from e


def component_candidates(components_dir: Path, name: str) -> list[Path]:
    lower = name.lower()
    return [
        components_dir / f"{name}.tsx",
        components_dir / f"{name}.jsx",
        components_dir / name / "index.tsx",
        components_dir / name / "index.jsx",
        components_dir / f"{lower}.tsx",
        components_dir / f"{lower}.jsx",
    ]


def component_exists(components_dir: Path, name: str) -> bool:
    return any(p.exists() for p in component_candidates(components_dir, name))


def _warn(details: str, expanded: str) -> CheckResult:
    return CheckResult(name=NAME, type=TYPE, status=Status.WARN, score=50, details=details, expanded=expanded)


@guarded(NAME, TYPE, details="Fout tijdens controleren")
def check_manifest_sync(layout: ProjectLayout) -> CheckResult:
    manifest_name = layout.manifest_path.name
    if not layout.manifest_path.is_file():
        return _warn(
            f"{manifest_name} niet gevonden",
            f"Maak een {manifest_name} bestand in de root van het project",
        )

    raw = read_manifest_json(layout.manifest_path)
    if not has_components_array(raw):
        return _warn(
            "Manifest heeft geen components array",
            f'Voeg een "components" array toe aan {manifest_name}',
        )

    names = parse_manifest(raw).component_names()
    try:
        components_label = layout.components_dir.relative_to(layout.root).as_posix()
    except ValueError:
        components_label = layout.components_dir.as_posix()
    missing = [
        f"{name}: Component file not found in {components_label}/"
        for name in names
        if not component_exists(layout.components_dir, name)
    ]

    count, total = len(missing), len(names)
    status, score = score_for_count(
        count, warn_ceiling=3, penalty=10, warn_floor=60, fail_floor=20, fail_penalty=15,
    )

    if count == 0:
        details = f"Alle {total} {'component' if total == 1 else 'componenten'} gevonden"
    else:
        details = f"{count} {'component' if count == 1 else 'componenten'} niet gevonden van {total}"

    return CheckResult(
        name=NAME,
        type=TYPE,
        status=status,
        score=score,
        details=details,
        expanded=format_expanded(missing),
    )
