"""Pre-render every navigable doc into static HTML files.

The builder walks each zone's navigation (group, category, doc), renders the
doc's canonical URL through :class:`~zonedocs.pipeline.ContentRenderer` on a
bounded thread pool, and writes ``{output_dir}{url}.html``. Pages that fail to
render or to write are logged and reported; they never abort the build.

Example
-------
>>> report = StaticSiteBuilder(renderer, Path("public")).run()  # doctest: +SKIP
>>> report.ok  # doctest: +SKIP
True
"""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as typ
from concurrent.futures import ThreadPoolExecutor

from zonedocs.errors import ErrorPayload

if typ.TYPE_CHECKING:
    from pathlib import Path

    from zonedocs.pipeline import ContentRenderer

logger = logging.getLogger(__name__)


@dc.dataclass(slots=True)
class BuildReport:
    """Files written and per-URL failures from a static build."""

    written: list[Path] = dc.field(default_factory=list)
    failures: dict[str, ErrorPayload] = dc.field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failures


class StaticSiteBuilder:
    """Render all docs to ``output_dir`` using a bounded worker pool."""

    def __init__(
        self, renderer: ContentRenderer, output_dir: Path, *, workers: int = 8
    ) -> None:
        self.renderer = renderer
        self.output_dir = output_dir
        self.workers = max(1, workers)

    def urls(self) -> list[str]:
        """Return every doc URL in zone and menu order."""
        site = self.renderer.site
        return [
            site.resolver.url_for(zone, doc)
            for zone in site.zones
            for doc in zone.navigation.iter_docs()
        ]

    def output_path(self, url: str) -> Path:
        return self.output_dir / f"{url.strip('/')}.html"

    def run(self) -> BuildReport:
        """Render and write every doc, returning a :class:`BuildReport`."""
        urls = self.urls()
        report = BuildReport()
        with ThreadPoolExecutor(max_workers=self.workers) as pool:
            for url, page in zip(urls, pool.map(self.renderer.render, urls), strict=True):
                if page.error is not None:
                    logger.error("Skipping %s: %s", url, page.error.message)
                    report.failures[url] = page.error
                    continue
                path = self.output_path(url)
                try:
                    path.parent.mkdir(parents=True, exist_ok=True)
                    path.write_text(page.html or "", encoding="utf-8")
                except OSError as exc:
                    logger.exception("Unable to write %s", path)
                    report.failures[url] = ErrorPayload(
                        kind="write", message=f"Unable to write '{path}': {exc}"
                    )
                    continue
                report.written.append(path)
        logger.info(
            "Built %d pages into %s (%d failed)",
            len(report.written),
            self.output_dir,
            len(report.failures),
        )
        return report


__all__ = ["BuildReport", "StaticSiteBuilder"]
