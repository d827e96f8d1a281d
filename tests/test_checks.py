"""Tests for the source-tree detectors."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from src.health.checks import (
    CHECKS,
    check_accessibility,
    check_broken_images,
    check_broken_imports,
    check_broken_links,
    check_console_errors,
    check_manifest_sync,
    check_performance,
    check_token_consistency,
    guarded,
)
from src.health.layout import ProjectLayout
from src.health.models import CheckResult, Status, format_expanded, score_for_count


# ── Shared scoring ───────────────────────────────────────────────────────────


class TestScoring:
    def test_zero_is_pass(self) -> None:
        assert score_for_count(0, warn_ceiling=5, penalty=10, warn_floor=60, fail_floor=0) == (Status.PASS, 100)

    def test_warn_tier_floor(self) -> None:
        assert score_for_count(3, warn_ceiling=10, penalty=5, warn_floor=60, fail_floor=0) == (Status.WARN, 85)
        assert score_for_count(10, warn_ceiling=10, penalty=5, warn_floor=60, fail_floor=0) == (Status.WARN, 60)

    def test_fail_tier_floor(self) -> None:
        assert score_for_count(11, warn_ceiling=10, penalty=5, warn_floor=60, fail_floor=0) == (Status.FAIL, 45)
        assert score_for_count(40, warn_ceiling=10, penalty=5, warn_floor=60, fail_floor=30) == (Status.FAIL, 30)

    def test_fixed_zero_fail(self) -> None:
        assert score_for_count(6, warn_ceiling=5, penalty=10, warn_floor=50, fail_floor=None) == (Status.FAIL, 0)

    def test_separate_fail_penalty(self) -> None:
        assert score_for_count(4, warn_ceiling=3, penalty=10, warn_floor=60, fail_floor=20, fail_penalty=15) == (
            Status.FAIL, 40,
        )


class TestFormatExpanded:
    def test_empty(self) -> None:
        assert format_expanded([]) == ""

    def test_truncates_to_ten(self) -> None:
        lines = [f"line {i}" for i in range(13)]
        text = format_expanded(lines)
        assert text.split("\n")[:10] == lines[:10]
        assert text.endswith("... en 3 meer")
        assert len(text.split("\n")) == 11


# ── Properties over every detector ───────────────────────────────────────────


@pytest.mark.parametrize("check_type,detector", CHECKS, ids=[t for t, _ in CHECKS])
class TestEveryDetector:
    def test_clean_project_passes(self, check_type, detector, clean_project: Path) -> None:
        result = detector(ProjectLayout.for_root(clean_project))
        assert result.type == check_type
        assert result.status == Status.PASS
        assert result.score == 100

    def test_missing_root_is_bounded(self, check_type, detector, tmp_path: Path) -> None:
        result = detector(ProjectLayout.for_root(tmp_path / "nowhere"))
        assert result.status in set(Status)
        assert 0 <= result.score <= 100


class TestGuarded:
    def test_exception_becomes_fail(self, layout: ProjectLayout) -> None:
        @guarded("Boom", "boom")
        def explode(_: ProjectLayout) -> CheckResult:
            raise RuntimeError("disk on fire")

        result = explode(layout)
        assert result.status == Status.FAIL
        assert result.score == 0
        assert result.type == "boom"
        assert result.expanded == "disk on fire"


# ── Token consistency ────────────────────────────────────────────────────────


class TestTokenConsistency:
    def test_six_hex_colors_is_warn(self, layout: ProjectLayout, write) -> None:
        write(
            "src/theme.ts",
            'export const palette = ["#123456", "#abcdef", "#ff0000", "#00ff00", "#0000ff", "#abc"];\n',
        )
        result = check_token_consistency(layout)
        assert result.status == Status.WARN
        assert result.score == 70
        assert result.details == "6 hardcoded waarden gevonden"
        assert result.expanded.split("\n")[0] == "theme.ts:1 - #123456"

    def test_allowlisted_colors_ignored(self, layout: ProjectLayout, write) -> None:
        write("src/base.css", "body { color: #fff; background: #000000; }\n.x { color: #000; border-color: #ffffff; }\n")
        result = check_token_consistency(layout)
        assert result.status == Status.PASS
        assert result.details == "Geen hardcoded waarden gevonden"

    def test_rgb_and_rgba(self, layout: ProjectLayout, write) -> None:
        write("src/a.scss", ".a { color: rgb(10, 20, 30); }\n.b { color: rgba(0, 0, 0, 0.5); }\n")
        result = check_token_consistency(layout)
        assert result.status == Status.WARN
        assert result.score == 90
        assert result.expanded == "a.scss:1 - rgb(10, 20, 30)\na.scss:2 - rgba(0, 0, 0, 0.5)"

    def test_comments_and_imports_skipped(self, layout: ProjectLayout, write) -> None:
        write(
            "src/a.tsx",
            "// primary is #123456\n"
            " * legacy #654321\n"
            "import styles from './x.css' // #abcdef\n",
        )
        assert check_token_consistency(layout).status == Status.PASS

    def test_other_extensions_ignored(self, layout: ProjectLayout, write) -> None:
        write("src/notes.md", "color #123456\n")
        assert check_token_consistency(layout).status == Status.PASS

    def test_many_colors_fail(self, layout: ProjectLayout, write) -> None:
        write("src/a.css", "".join(f".c{i} {{ color: #1234{i:02d}; }}\n" for i in range(12)))
        result = check_token_consistency(layout)
        assert result.status == Status.FAIL
        assert result.score == 40
        assert result.expanded.endswith("... en 2 meer")


# ── Broken imports ───────────────────────────────────────────────────────────


class TestBrokenImports:
    def test_single_missing_import(self, layout: ProjectLayout, write) -> None:
        write("src/index.ts", "import x from './missing'\n")
        result = check_broken_imports(layout)
        assert result.status == Status.WARN
        assert result.score == 90
        assert result.expanded == "index.ts:1 - import './missing'"
        assert result.details == "1 kapotte import gevonden"

    def test_resolution_variants(self, layout: ProjectLayout, write) -> None:
        write("src/util.ts", "export const u = 1\n")
        write("src/lib/index.tsx", "export default {}\n")
        write("src/data.json", "{}\n")
        write("src/styles.css", "")
        write(
            "src/main.tsx",
            "import React from 'react'\n"
            "import { u } from './util'\n"
            "import lib from './lib'\n"
            "import data from './data.json'\n"
            "import './styles.css'\n"
            "const path = require('path')\n",
        )
        result = check_broken_imports(layout)
        assert result.status == Status.PASS
        # util.ts, lib/index.tsx, main.tsx
        assert result.details == "3 bestanden gecontroleerd, 0 kapot"

    def test_parent_relative_require(self, layout: ProjectLayout, write) -> None:
        write("src/shared/helpers.js", "")
        write("src/pages/a/page.js", "const h = require('../../shared/helpers')\nconst n = require('../nope')\n")
        result = check_broken_imports(layout)
        assert result.status == Status.WARN
        assert result.expanded == "pages/a/page.js:2 - import '../nope'"

    def test_more_than_five_is_zero(self, layout: ProjectLayout, write) -> None:
        write("src/a.ts", "".join(f"import m{i} from './gone{i}'\n" for i in range(6)))
        result = check_broken_imports(layout)
        assert result.status == Status.FAIL
        assert result.score == 0

    def test_five_is_warn_floor(self, layout: ProjectLayout, write) -> None:
        write("src/a.ts", "".join(f"import m{i} from './gone{i}'\n" for i in range(5)))
        result = check_broken_imports(layout)
        assert result.status == Status.WARN
        assert result.score == 50


# ── Broken links ─────────────────────────────────────────────────────────────


class TestBrokenLinks:
    @pytest.fixture
    def site(self, write) -> None:
        write("src/app/about/page.tsx", "")
        write("src/app/page.tsx", "")
        write("src/pages/docs.tsx", "")
        write("src/pages/blog/index.jsx", "")
        write("public/files/guide.pdf", "")

    def test_resolved_links(self, layout: ProjectLayout, write, site) -> None:
        write(
            "src/components/Nav.tsx",
            '<a href="/">Home</a>\n'
            '<a href="/about?ref=nav#top">About</a>\n'
            '<Link href="/docs">Docs</Link>\n'
            '<Link href="/blog">Blog</Link>\n'
            '<a href="/files/guide.pdf">Guide</a>\n'
            '<a href="//cdn.example.com/x">CDN</a>\n'
            '<a href="https://example.com">Ext</a>\n',
        )
        result = check_broken_links(layout)
        assert result.status == Status.PASS
        assert result.details == "5 links gecontroleerd, 0 kapot"

    def test_broken_links_deduplicated(self, layout: ProjectLayout, write, site) -> None:
        write("src/components/A.tsx", '<a href="/pricing">Pricing</a>\n')
        write("src/components/B.tsx", 'x\n<a href="/pricing">Pricing</a>\n')
        write("src/content/intro.md", "See [the team](/team) for more.\n")
        result = check_broken_links(layout)
        assert result.status == Status.WARN
        assert result.score == 80
        assert result.expanded == "components/A.tsx:1 - /pricing\ncontent/intro.md:1 - /team"
        assert result.details == "2 kapotte links gevonden"


# ── Broken images ────────────────────────────────────────────────────────────


class TestBrokenImages:
    def test_mixed_references(self, layout: ProjectLayout, write) -> None:
        write("public/hero.png", "")
        write("public/logo.svg", "")
        write("src/components/local.png", "")
        write(
            "src/components/Hero.tsx",
            '<img src="/hero.png" alt="Hero" />\n'
            '<img src="./local.png" alt="" />\n'
            '<img src="logo.svg" alt="Logo" />\n'
            '<img src="/missing.png" alt="Gone" />\n'
            '<img src="https://example.com/a.png" alt="Ext" />\n'
            '<img src="data:image/png;base64,AAAA" alt="Inline" />\n',
        )
        write("src/styles/site.css", ".hero { background: url('/bg.jpg'); }\n")

        result = check_broken_images(layout)
        assert result.status == Status.WARN
        assert result.score == 80
        assert result.details == "2 ontbrekende afbeeldingen van 5"
        assert result.expanded == "components/Hero.tsx:4 - /missing.png\nstyles/site.css:1 - /bg.jpg"

    def test_markdown_images(self, layout: ProjectLayout, write) -> None:
        write("public/img/diagram.png", "")
        write("src/docs/guide.mdx", "![diagram](/img/diagram.png)\n![chart](./chart.png)\n")
        result = check_broken_images(layout)
        assert result.status == Status.WARN
        assert result.expanded == "docs/guide.mdx:2 - ./chart.png"

    def test_all_found(self, layout: ProjectLayout, write) -> None:
        write("public/a.png", "")
        write("src/A.jsx", '<img src="/a.png" alt="a" />\n')
        result = check_broken_images(layout)
        assert result.status == Status.PASS
        assert result.details == "Alle 1 afbeelding gevonden"


# ── Accessibility ────────────────────────────────────────────────────────────


class TestAccessibility:
    def test_detects_each_rule(self, layout: ProjectLayout, write) -> None:
        write(
            "src/components/Form.tsx",
            '<img src="/a.png" />\n'
            '<Image src="/b.png" width={10} />\n'
            "<button onClick={close}></button>\n"
            "<button onClick={save}>Save</button>\n"
            '<button aria-label="Close" onClick={close}><X /></button>\n'
            '<a href="/x"><Icon /></a>\n'
            '<a href="/x">Home</a>\n'
            '<input type="text" />\n'
            '<input id="email" type="email" />\n'
            "<div onClick={go}>Go</div>\n"
            '<div role="button" onClick={go}>Go</div>\n',
        )
        result = check_accessibility(layout)
        assert result.status == Status.WARN
        assert result.score == 70
        assert result.expanded.split("\n") == [
            "components/Form.tsx:1 - img: Missing alt attribute",
            "components/Form.tsx:2 - Image: Missing alt attribute",
            "components/Form.tsx:3 - button: Button without text or aria-label",
            "components/Form.tsx:6 - a: Link without text or aria-label",
            "components/Form.tsx:8 - input: Input without label or aria-label",
            "components/Form.tsx:10 - div: onClick on div without role",
        ]

    def test_only_jsx_files(self, layout: ProjectLayout, write) -> None:
        write("src/template.ts", 'const html = `<img src="/a.png" />`\n')
        assert check_accessibility(layout).status == Status.PASS

    def test_fail_floor(self, layout: ProjectLayout, write) -> None:
        write("src/Gallery.jsx", '<img src="/a.png" />\n' * 11)
        result = check_accessibility(layout)
        assert result.status == Status.FAIL
        assert result.score == 45

        write("src/Gallery.jsx", '<img src="/a.png" />\n' * 20)
        assert check_accessibility(layout).score == 30


# ── Manifest sync ────────────────────────────────────────────────────────────


class TestManifestSync:
    def test_missing_manifest(self, layout: ProjectLayout) -> None:
        result = check_manifest_sync(layout)
        assert result.status == Status.WARN
        assert result.score == 50
        assert result.details == "SITE_MANIFEST.json niet gevonden"

    @pytest.mark.parametrize("doc", [{"pages": []}, {"components": "Button"}, ["Button"]])
    def test_without_components_array(self, layout: ProjectLayout, write, doc) -> None:
        write("SITE_MANIFEST.json", json.dumps(doc))
        result = check_manifest_sync(layout)
        assert result.status == Status.WARN
        assert result.score == 50
        assert result.details == "Manifest heeft geen components array"

    def test_invalid_json_is_fail(self, layout: ProjectLayout, write) -> None:
        write("SITE_MANIFEST.json", "{oops")
        result = check_manifest_sync(layout)
        assert result.status == Status.FAIL
        assert result.score == 0
        assert result.details == "Fout tijdens controleren"
        assert "SITE_MANIFEST.json" in result.expanded

    def test_invalid_entries_are_fail(self, layout: ProjectLayout, write) -> None:
        write("SITE_MANIFEST.json", json.dumps({"components": [123]}))
        result = check_manifest_sync(layout)
        assert result.status == Status.FAIL
        assert result.score == 0

    def test_naming_conventions(self, layout: ProjectLayout, write) -> None:
        write("src/components/Button.tsx", "")
        write("src/components/Card/index.tsx", "")
        write("src/components/modal.jsx", "")
        write(
            "SITE_MANIFEST.json",
            json.dumps({"components": ["Button", {"name": "Card"}, {"id": "Modal"}, "Footer"]}),
        )
        result = check_manifest_sync(layout)
        assert result.status == Status.WARN
        assert result.score == 90
        assert result.details == "1 component niet gevonden van 4"
        assert result.expanded == "Footer: Component file not found in src/components/"

    def test_many_missing_fail(self, layout: ProjectLayout, write) -> None:
        write("SITE_MANIFEST.json", json.dumps({"components": [f"C{i}" for i in range(4)]}))
        result = check_manifest_sync(layout)
        assert result.status == Status.FAIL
        assert result.score == 40

        write("SITE_MANIFEST.json", json.dumps({"components": [f"C{i}" for i in range(6)]}))
        assert check_manifest_sync(layout).score == 20


# ── Placeholder detectors ────────────────────────────────────────────────────


class TestPlaceholders:
    @pytest.mark.parametrize("detector", [check_console_errors, check_performance])
    def test_marked_not_implemented(self, layout: ProjectLayout, detector) -> None:
        result = detector(layout)
        assert result.status == Status.PASS
        assert result.score == 100
        assert result.implemented is False
        assert result.expanded
