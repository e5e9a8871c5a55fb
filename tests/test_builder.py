"""Tests for the static site builder."""

from __future__ import annotations

import typing as typ

from bs4 import BeautifulSoup

from zonedocs.builder import StaticSiteBuilder
from zonedocs.pipeline import ContentRenderer

if typ.TYPE_CHECKING:
    from pathlib import Path

    from zonedocs.site import SiteContext


def test_urls_follow_zone_and_menu_order(site: SiteContext, tmp_path: Path) -> None:
    builder = StaticSiteBuilder(ContentRenderer(site), tmp_path)

    assert builder.urls() == [
        "/guides/introduction",
        "/guides/missing",
        "/reference/db/raw-query",
        "/reference/db/models",
    ]
    assert builder.output_path("/reference/db/raw-query") == (
        tmp_path / "reference" / "db" / "raw-query.html"
    )


def test_build_writes_pages_and_reports_failures(
    site: SiteContext, tmp_path: Path
) -> None:
    output = tmp_path / "out"
    builder = StaticSiteBuilder(ContentRenderer(site), output, workers=2)

    report = builder.run()

    assert report.written == [
        output / "guides" / "introduction.html",
        output / "reference" / "db" / "raw-query.html",
        output / "reference" / "db" / "models.html",
    ]
    assert not report.ok
    assert list(report.failures) == ["/guides/missing"]
    assert report.failures["/guides/missing"].kind == "not_found"
    assert not (output / "guides" / "missing.html").exists()

    page = (output / "reference" / "db" / "raw-query.html").read_text(encoding="utf-8")
    soup = BeautifulSoup(page, "html.parser")
    assert soup.select_one("article h1").get_text() == "Raw queries"


def test_build_matches_on_demand_rendering(site: SiteContext, tmp_path: Path) -> None:
    renderer = ContentRenderer(site)
    builder = StaticSiteBuilder(renderer, tmp_path, workers=4)

    builder.run()

    on_demand = ContentRenderer(site).render("/reference/db/models")
    written = builder.output_path("/reference/db/models").read_text(encoding="utf-8")
    assert written == on_demand.html


def test_worker_count_is_at_least_one(site: SiteContext, tmp_path: Path) -> None:
    assert StaticSiteBuilder(ContentRenderer(site), tmp_path, workers=0).workers == 1


def test_write_failure_is_reported_and_build_continues(
    site: SiteContext, tmp_path: Path
) -> None:
    output = tmp_path / "out"
    blocked = output / "reference" / "db" / "raw-query.html"
    blocked.mkdir(parents=True)
    builder = StaticSiteBuilder(ContentRenderer(site), output, workers=2)

    report = builder.run()

    assert list(report.failures) == ["/guides/missing", "/reference/db/raw-query"]
    failure = report.failures["/reference/db/raw-query"]
    assert failure.kind == "write"
    assert "raw-query.html" in failure.message
    assert report.written == [
        output / "guides" / "introduction.html",
        output / "reference" / "db" / "models.html",
    ]
    assert (output / "reference" / "db" / "models.html").is_file()
