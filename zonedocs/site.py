"""Runtime site model assembled once at startup.

:func:`build_site_context` turns a :class:`~zonedocs.config.SiteConfig` into
immutable :class:`Zone` records (navigation loaded from each ``menu.json``),
the URL resolver, the frozen grammar and renderer registries, and the Jinja
environment. The resulting :class:`SiteContext` is shared read-only by every
render.

Example
-------
>>> from pathlib import Path
>>> from zonedocs.config import load_site_config
>>> site = build_site_context(load_site_config(Path("site.yaml")))  # doctest: +SKIP
>>> [zone.name for zone in site.zones]  # doctest: +SKIP
['guides', 'reference']
"""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as typ
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, TemplateNotFound

from zonedocs.errors import ConfigError
from zonedocs.highlight import Highlighter, default_grammars
from zonedocs.navigation import load_navigation_file
from zonedocs.render import RendererRegistry, default_registry
from zonedocs.resolver import UrlResolver

if typ.TYPE_CHECKING:
    from zonedocs.config import RenderOptions, SiteConfig, ZoneConfig
    from zonedocs.highlight import GrammarRegistry
    from zonedocs.navigation import NavigationTree

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"


@dc.dataclass(frozen=True, slots=True)
class Zone:
    """A named section of the documentation with its own URL prefix."""

    name: str
    title: str
    base_url: str
    content_root: Path
    navigation: NavigationTree
    template: str


@dc.dataclass(frozen=True, slots=True)
class SiteContext:
    """Read-only collaborators shared by every render."""

    zones: tuple[Zone, ...]
    resolver: UrlResolver
    highlighter: Highlighter
    renderers: RendererRegistry
    env: Environment
    options: RenderOptions

    def get_zone(self, name: str) -> Zone:
        """Return the zone registered as ``name``."""
        for zone in self.zones:
            if zone.name == name:
                return zone
        msg = f"Unknown zone '{name}'."
        raise KeyError(msg)


def create_environment(templates_dir: Path | None = None) -> Environment:
    """Return the Jinja environment used for pages and element templates."""
    return Environment(
        loader=FileSystemLoader(str(templates_dir or TEMPLATES_DIR)),
        autoescape=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )


def build_zone(zone_config: ZoneConfig, options: RenderOptions) -> Zone:
    """Load the navigation menu for ``zone_config`` and freeze it into a zone."""
    navigation = load_navigation_file(zone_config.menu_path)
    logger.debug(
        "Loaded zone %s at %s with %d docs",
        zone_config.name,
        zone_config.base_url,
        len(navigation),
    )
    return Zone(
        name=zone_config.name,
        title=zone_config.title,
        base_url=zone_config.base_url,
        content_root=zone_config.content_path,
        navigation=navigation,
        template=zone_config.template or options.template,
    )


def build_site_context(
    site_config: SiteConfig,
    *,
    grammars: GrammarRegistry | None = None,
    renderers: RendererRegistry | None = None,
    templates_dir: Path | None = None,
) -> SiteContext:
    """Assemble the shared site context.

    Parameters
    ----------
    site_config : SiteConfig
        Parsed site configuration.
    grammars : GrammarRegistry, optional
        Grammar registry; defaults to :func:`zonedocs.highlight.default_grammars`.
        It is frozen before use.
    renderers : RendererRegistry, optional
        Node renderer table; defaults to :func:`zonedocs.render.default_registry`.
    templates_dir : Path, optional
        Directory of Jinja templates; defaults to the packaged templates.

    Raises
    ------
    ConfigError
        If a menu is malformed, a page template is missing, or the Pygments
        style is unknown.
    """
    options = site_config.options
    zones = tuple(build_zone(zone, options) for zone in site_config.zones)
    env = create_environment(templates_dir)
    for template in sorted({zone.template for zone in zones}):
        try:
            env.get_template(template)
        except TemplateNotFound as exc:
            msg = f"Page template '{template}' not found."
            raise ConfigError(msg) from exc
    registry = grammars or default_grammars()
    registry.freeze()
    return SiteContext(
        zones=zones,
        resolver=UrlResolver(zones),
        highlighter=Highlighter(registry, options.pygments_style),
        renderers=renderers or default_registry(),
        env=env,
        options=options,
    )


__all__ = [
    "TEMPLATES_DIR",
    "SiteContext",
    "Zone",
    "build_site_context",
    "build_zone",
    "create_environment",
]
