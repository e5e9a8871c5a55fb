"""Tests for the node renderer registry and the built-in element renderers."""

from __future__ import annotations

import logging
import typing as typ

import pytest
from bs4 import BeautifulSoup

from zonedocs.errors import ConfigError
from zonedocs.parser import NodeKind, parse_markdown
from zonedocs.render import RenderContext, RendererRegistry, TocEntry, slugify
from zonedocs.render.elements import DEFAULT_RENDERERS

if typ.TYPE_CHECKING:
    from zonedocs.site import SiteContext


def render_body(
    site: SiteContext,
    source: str,
    *,
    zone: str = "reference",
    permalink: str = "db/raw-query",
    registry: RendererRegistry | None = None,
) -> tuple[BeautifulSoup, RenderContext]:
    """Render ``source`` as the body of ``permalink`` in ``zone``."""
    zone_obj = site.get_zone(zone)
    doc = zone_obj.navigation.get(permalink)
    assert doc is not None
    ctx = RenderContext(
        zone=zone_obj,
        doc=doc,
        resolver=site.resolver,
        highlighter=site.highlighter,
        env=site.env,
        registry=registry or site.renderers,
        options=site.options,
    )
    html = ctx.render(parse_markdown(source, options=site.options.parser_options))
    return BeautifulSoup(html, "html.parser"), ctx


def hrefs(soup: BeautifulSoup) -> list[str]:
    return [str(anchor["href"]) for anchor in soup.find_all("a")]


class TestRegistry:
    def test_missing_kinds_are_rejected(self) -> None:
        partial = {
            kind: renderer
            for kind, renderer in DEFAULT_RENDERERS.items()
            if kind not in (NodeKind.HEADING, NodeKind.TABLE)
        }

        with pytest.raises(ConfigError, match="heading, table"):
            RendererRegistry(partial)

    def test_default_table_covers_every_kind(self) -> None:
        assert set(DEFAULT_RENDERERS) == set(NodeKind)

    def test_overrides_replace_single_entries(self, site: SiteContext) -> None:
        registry = site.renderers.with_overrides(
            {NodeKind.TEXT: lambda node, ctx: node.value.upper()}  # type: ignore[attr-defined]
        )

        soup, _ = render_body(site, "quiet *words*", registry=registry)

        assert str(soup.p) == "<p>QUIET <em>WORDS</em></p>"
        assert site.renderers[NodeKind.TEXT] is DEFAULT_RENDERERS[NodeKind.TEXT]


class TestHeadings:
    def test_first_h1_becomes_title(self, site: SiteContext) -> None:
        _, ctx = render_body(site, "# First\n\n# Second\n")

        assert ctx.title == "First"

    def test_slugs_are_unique(self, site: SiteContext) -> None:
        soup, _ = render_body(
            site, "## Setup\n\n## Setup\n\n### Setup 1\n\n## Tips & tricks\n"
        )

        ids = [heading["id"] for heading in soup.find_all(["h2", "h3"])]
        assert ids == ["setup", "setup-1", "setup-1-1", "tips-tricks"]

    def test_toc_collects_configured_levels(self, site: SiteContext) -> None:
        _, ctx = render_body(
            site, "# Title\n\n## Install\n\n### From *source*\n\n#### Deep\n"
        )

        assert ctx.toc == [
            TocEntry(level=2, text="Install", slug="install"),
            TocEntry(level=3, text="From source", slug="from-source"),
        ]

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("Raw queries & bindings", "raw-queries-bindings"),
            ("Café au lait", "cafe-au-lait"),
            ("  --Edge__case--  ", "edge-case"),
            ("!!!", "section"),
        ],
    )
    def test_slugify(self, text: str, expected: str) -> None:
        assert slugify(text) == expected


class TestLinks:
    def test_relative_and_absolute_targets_are_rewritten(
        self, site: SiteContext
    ) -> None:
        soup, ctx = render_body(
            site,
            "[a](./models) [b](models.md) [c](../db/models) "
            "[d](/reference/db/models#usage) [e](models?tab=1#top) "
            "[f](/guides/introduction/)",
        )

        assert hrefs(soup) == [
            "/reference/db/models",
            "/reference/db/models",
            "/reference/db/models",
            "/reference/db/models#usage",
            "/reference/db/models?tab=1#top",
            "/guides/introduction",
        ]
        assert ctx.warnings == []

    def test_external_and_unzoned_targets_pass_through(
        self, site: SiteContext
    ) -> None:
        soup, ctx = render_body(
            site,
            "[a](https://example.com/x) [b](#local) [c](mailto:dev@example.com) "
            "[d](/blog/post) [e](//cdn.example.com/lib.js)",
        )

        assert hrefs(soup) == [
            "https://example.com/x",
            "#local",
            "mailto:dev@example.com",
            "/blog/post",
            "//cdn.example.com/lib.js",
        ]
        assert ctx.warnings == []

    def test_broken_link_is_flagged_once(
        self, site: SiteContext, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING, logger="zonedocs.render.context"):
            soup, ctx = render_body(site, "See [gone](./nope) and [ok](./models).")

        broken = soup.select("a.broken-link")
        assert len(broken) == 1
        assert broken[0]["href"] == "./nope"
        assert len(ctx.warnings) == 1
        warning = ctx.warnings[0]
        assert warning.kind == "broken_link"
        assert warning.line == 1
        assert "./nope" in warning.message
        assert "./nope" in caplog.text

    def test_absolute_link_to_unknown_doc_in_zone_is_broken(
        self, site: SiteContext
    ) -> None:
        soup, ctx = render_body(
            site, "[x](/reference/nope)", zone="guides", permalink="introduction"
        )

        assert soup.a["class"] == ["broken-link"]
        assert [warning.kind for warning in ctx.warnings] == ["broken_link"]

    def test_link_title_is_escaped(self, site: SiteContext) -> None:
        soup, _ = render_body(site, "[a](https://example.com 'Say \"hi\" <now>')")

        assert soup.a["title"] == 'Say "hi" <now>'


class TestBlocks:
    def test_text_is_escaped(self, site: SiteContext) -> None:
        soup, _ = render_body(site, "a < b & c")

        assert soup.p.decode_contents() == "a &lt; b &amp; c"

    def test_alert_directive(self, site: SiteContext) -> None:
        soup, _ = render_body(site, ":::warning Careful\nThis is **bold**.\n:::\n")

        alert = soup.select_one("div.alert")
        assert alert is not None
        assert alert["class"] == ["alert", "alert-warning"]
        assert alert.select_one(".alert-title").get_text() == "Careful"
        assert alert.select_one(".alert-body strong").get_text() == "bold"

    def test_alert_title_defaults_to_name(self, site: SiteContext) -> None:
        soup, _ = render_body(site, ":::tip\nShort.\n:::\n")

        assert soup.select_one(".alert-title").get_text() == "Tip"

    def test_fenced_code_block(self, site: SiteContext) -> None:
        soup, _ = render_body(
            site, '```ts{2} title="query.ts"\nconst a = 1\nconst b = 2\n```\n'
        )

        block = soup.select_one("div.code-block")
        assert block is not None
        assert block["data-language"] == "ts"
        assert block["data-title"] == "query.ts"
        assert [span.get_text() for span in block.select("span.hll")] == [
            "const b = 2\n"
        ]

    def test_code_group_tabs(self, site: SiteContext) -> None:
        source = (
            ":::codegroup\n"
            '```ts title="app.ts"\nconst a = 1\n```\n'
            "```sh\nnpm i\n```\n"
            ":::\n"
        )

        soup, _ = render_body(site, source)

        buttons = soup.select("div.codegroup button.codegroup-tab")
        assert [button.get_text() for button in buttons] == ["app.ts", "sh"]
        assert "active" in buttons[0]["class"]
        assert "active" not in buttons[1]["class"]
        panels = soup.select("div.codegroup-panel")
        assert len(panels) == 2
        assert not panels[0].has_attr("hidden")
        assert panels[1].has_attr("hidden")
        assert panels[1].select_one("div.codehilite")["data-language"] == "sh"

    def test_tight_list_items_skip_paragraph(self, site: SiteContext) -> None:
        soup, _ = render_body(site, "- one\n- two\n")

        assert [str(item) for item in soup.find_all("li")] == [
            "<li>one</li>",
            "<li>two</li>",
        ]

    def test_ordered_list_start(self, site: SiteContext) -> None:
        soup, _ = render_body(site, "3. three\n4. four\n")

        assert soup.ol["start"] == "3"

    def test_table_alignment(self, site: SiteContext) -> None:
        soup, _ = render_body(site, "| a | b |\n| :-- | --: |\n| 1 | 2 |\n")

        assert [th.get_text() for th in soup.select("thead th")] == ["a", "b"]
        cells = soup.select("tbody td")
        assert cells[0]["style"] == "text-align: left"
        assert cells[1]["style"] == "text-align: right"

    def test_html_block_passes_through(self, site: SiteContext) -> None:
        soup, _ = render_body(site, '<div class="custom">raw</div>\n')

        assert soup.select_one("div.custom").get_text() == "raw"


class TestInlineDirectives:
    def test_kbd_splits_key_combinations(self, site: SiteContext) -> None:
        soup, _ = render_body(site, "Press :kbd[Ctrl+Shift+P].")

        assert [key.get_text() for key in soup.find_all("kbd")] == [
            "Ctrl",
            "Shift",
            "P",
        ]

    def test_badge_variants(self, site: SiteContext) -> None:
        soup, _ = render_body(
            site, ':badge[Beta]{variant="warning"} :badge[Odd]{variant="sparkly"}'
        )

        badges = soup.select("span.badge")
        assert [badge["class"] for badge in badges] == [
            ["badge", "badge-warning"],
            ["badge", "badge-neutral"],
        ]

    def test_abbr_title(self, site: SiteContext) -> None:
        soup, _ = render_body(site, ':abbr[SQL]{title="Structured Query Language"}')

        assert soup.abbr["title"] == "Structured Query Language"
        assert soup.abbr.get_text() == "SQL"
