"""Render zoned Markdown documentation to HTML.

The package resolves request URLs to docs registered in per-zone ``menu.json``
files, parses the Markdown into a positioned AST with directive support,
highlights code server-side with Pygments, and memoises compiled pages.

Exports
-------
- ``ContentRenderer``: ``render(url)`` entry point returning HTML or an error.
- ``build_site_context``: assemble zones and registries from ``SiteConfig``.
- ``load_site_config``: read ``site.yaml``.
- ``app`` / ``main``: the Cyclopts CLI.

Examples
--------
>>> from pathlib import Path
>>> from zonedocs import ContentRenderer, build_site_context, load_site_config
>>> site = build_site_context(load_site_config(Path("site.yaml")))  # doctest: +SKIP
>>> ContentRenderer(site).render("/guides/intro").ok  # doctest: +SKIP
True
"""

from __future__ import annotations

from .cli import app, main
from .config import load_site_config
from .pipeline import ContentRenderer, RenderedPage
from .site import SiteContext, build_site_context

__all__ = [
    "ContentRenderer",
    "RenderedPage",
    "SiteContext",
    "app",
    "build_site_context",
    "load_site_config",
    "main",
]
