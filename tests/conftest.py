"""Shared fixtures for the zonedocs test suite.

``site_root`` writes a two-zone site (``/guides`` and ``/reference``) with
``site.yaml``, per-zone ``menu.json`` files and Markdown sources into a
temporary directory. ``site`` builds the :class:`~zonedocs.site.SiteContext`
from it, and ``memory_reader`` offers an in-memory
:class:`~zonedocs.sources.SourceReader` whose contents tests can mutate.
"""

from __future__ import annotations

import json
import typing as typ

import pytest

from zonedocs.config import load_site_config
from zonedocs.errors import NotFoundError
from zonedocs.pipeline import ContentRenderer
from zonedocs.site import build_site_context

if typ.TYPE_CHECKING:
    from pathlib import Path

    from zonedocs.config import SiteConfig
    from zonedocs.site import SiteContext

RAW_QUERY_MD = """# Raw queries

Use `db.rawQuery` to run SQL. See [models](./models) and [the models page](models.md).

## Executing

:::warning
Raw queries bypass **bindings**.
:::

```ts{2} title="query.ts"
const db = use('db')
const users = await db.rawQuery('select * from users')
```

### Bindings

Press :kbd[Ctrl+C] to cancel.
"""

MODELS_MD = "# Models\n\nBack to [raw queries](raw-query).\n"

INTRODUCTION_MD = """# Introduction

Welcome. Read [raw queries](/reference/db/raw-query) or [a missing page](/reference/nope).
"""

REFERENCE_MENU = {
    "name": "root",
    "categories": [
        {
            "name": "Database",
            "docs": [
                {
                    "title": "Raw queries",
                    "permalink": "db/raw-query",
                    "contentPath": "database/raw-query.md",
                },
                {
                    "title": "Models",
                    "permalink": "db/models",
                    "contentPath": "database/models.md",
                },
            ],
        }
    ],
}

GUIDES_MENU = [
    {
        "name": "Getting started",
        "categories": [
            {
                "name": "root",
                "docs": [
                    {
                        "title": "Introduction",
                        "permalink": "introduction",
                        "contentPath": "introduction.md",
                    },
                    {
                        "title": "Missing",
                        "permalink": "missing",
                        "contentPath": "missing.md",
                    },
                ],
            }
        ],
    }
]

SITE_YAML = """
defaults:
  pygments_style: monokai
  unknown_directives: literal
  workers: 4
  output_dir: public
zones:
  - name: guides
    title: Guides
    base_url: /guides
    content_path: content/guides
  - name: reference
    title: Reference
    base_url: /reference/
    content_path: content/reference
    menu: content/reference/menu.json
""".lstrip()


class MemoryReader:
    """In-memory :class:`~zonedocs.sources.SourceReader` for tests."""

    def __init__(self, files: dict[str, str] | None = None) -> None:
        self.files: dict[str, str] = dict(files or {})
        self.stamps: dict[str, int] = dict.fromkeys(self.files, 1)
        self.reads = 0

    def put(self, content_path: str, text: str) -> None:
        self.files[content_path] = text
        self.stamps[content_path] = self.stamps.get(content_path, 0) + 1

    def read(self, root: Path, content_path: str) -> str:
        self.reads += 1
        try:
            return self.files[content_path]
        except KeyError as exc:
            msg = f"Content file '{content_path}' not found."
            raise NotFoundError(msg) from exc

    def stamp(self, root: Path, content_path: str) -> int | None:
        return self.stamps.get(content_path)


def write_site(root: Path) -> Path:
    """Write the fixture site under ``root`` and return the config path."""
    guides = root / "content" / "guides"
    reference = root / "content" / "reference"
    (reference / "database").mkdir(parents=True)
    guides.mkdir(parents=True)
    (guides / "menu.json").write_text(json.dumps(GUIDES_MENU), encoding="utf-8")
    (reference / "menu.json").write_text(json.dumps(REFERENCE_MENU), encoding="utf-8")
    (guides / "introduction.md").write_text(INTRODUCTION_MD, encoding="utf-8")
    (reference / "database" / "raw-query.md").write_text(RAW_QUERY_MD, encoding="utf-8")
    (reference / "database" / "models.md").write_text(MODELS_MD, encoding="utf-8")
    config_path = root / "site.yaml"
    config_path.write_text(SITE_YAML, encoding="utf-8")
    return config_path


@pytest.fixture
def site_root(tmp_path: Path) -> Path:
    """Return the directory holding the fixture site."""
    write_site(tmp_path)
    return tmp_path


@pytest.fixture
def site_config(site_root: Path) -> SiteConfig:
    return load_site_config(site_root / "site.yaml")


@pytest.fixture
def site(site_config: SiteConfig) -> SiteContext:
    return build_site_context(site_config)


@pytest.fixture
def memory_reader() -> MemoryReader:
    return MemoryReader(
        {
            "database/raw-query.md": RAW_QUERY_MD,
            "database/models.md": MODELS_MD,
            "introduction.md": INTRODUCTION_MD,
        }
    )


@pytest.fixture
def renderer(site: SiteContext, memory_reader: MemoryReader) -> ContentRenderer:
    """Return a renderer over the fixture site backed by ``memory_reader``."""
    return ContentRenderer(site, memory_reader)
