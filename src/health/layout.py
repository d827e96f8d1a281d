"""Resolved filesystem layout of the project being scanned."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from src.config import Settings, settings


@dataclass(frozen=True)
class ProjectLayout:
    """Absolute paths every detector works against."""

    root: Path
    source_dir: Path
    public_dir: Path
    components_dir: Path
    manifest_path: Path

    @property
    def app_dir(self) -> Path:
        return self.source_dir / "app"

    @property
    def pages_dir(self) -> Path:
        return self.source_dir / "pages"

    @classmethod
    def for_root(
        cls,
        root: Path | str,
        source_dir: str = "src",
        public_dir: str = "public",
        components_dir: str = "src/components",
        manifest_file: str = "SITE_MANIFEST.json",
    ) -> ProjectLayout:
        base = Path(root).resolve()
        return cls(
            root=base,
            source_dir=base / source_dir,
            public_dir=base / public_dir,
            components_dir=base / components_dir,
            manifest_path=base / manifest_file,
        )

    @classmethod
    def from_settings(cls, cfg: Settings | None = None) -> ProjectLayout:
        cfg = cfg or settings
        return cls.for_root(
            cfg.health_project_root,
            source_dir=cfg.health_source_dir,
            public_dir=cfg.health_public_dir,
            components_dir=cfg.health_components_dir,
            manifest_file=cfg.health_manifest_file,
        )
