"""Typed dataclasses describing zonedocs site configuration structures."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path

from zonedocs.parser.options import ParserOptions, UnknownDirectivePolicy

DEFAULT_TEMPLATE = "doc_page.jinja"


@dc.dataclass(frozen=True, slots=True)
class RenderOptions:
    """Every option recognised by the rendering pipeline.

    Attributes
    ----------
    pygments_style : str
        Pygments style used for the code-block stylesheet.
    template : str
        Default page template; zones may override it.
    unknown_directives : UnknownDirectivePolicy
        Parser policy for directive names it does not recognise.
    toc_levels : tuple[int, ...]
        Heading levels collected into the table of contents.
    workers : int
        Upper bound on concurrent renders during a static build.
    """

    pygments_style: str = "monokai"
    template: str = DEFAULT_TEMPLATE
    unknown_directives: UnknownDirectivePolicy = UnknownDirectivePolicy.LITERAL
    toc_levels: tuple[int, ...] = (2, 3)
    workers: int = 8

    @property
    def parser_options(self) -> ParserOptions:
        """Return the subset of options consumed by the Markdown parser."""
        return ParserOptions(unknown_directives=self.unknown_directives)


@dc.dataclass(frozen=True, slots=True)
class ZoneConfig:
    """Registration entry for a single content zone."""

    name: str
    title: str
    base_url: str
    content_path: Path
    menu_path: Path
    template: str | None = None


@dc.dataclass(frozen=True, slots=True)
class SiteConfig:
    """Zones in registration order alongside shared rendering options."""

    zones: tuple[ZoneConfig, ...]
    options: RenderOptions = RenderOptions()
    output_dir: Path = Path("public")

    def get_zone(self, name: str) -> ZoneConfig:
        """Return the zone registered as ``name``."""
        for zone in self.zones:
            if zone.name == name:
                return zone
        available = ", ".join(zone.name for zone in self.zones)
        msg = f"Unknown zone '{name}'. Known zones: {available}"
        raise KeyError(msg)


__all__ = ["DEFAULT_TEMPLATE", "RenderOptions", "SiteConfig", "ZoneConfig"]
