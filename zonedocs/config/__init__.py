"""Load and validate the zonedocs site configuration.

This subpackage parses the project's ``site.yaml`` file, which registers the
content zones (title, base URL, content root, ``menu.json``) in order together
with shared rendering options, and produces slotted dataclasses
(:class:`SiteConfig`, :class:`ZoneConfig`, :class:`RenderOptions`) consumed by
:func:`zonedocs.site.build_site_context`.

Examples
--------
>>> from pathlib import Path
>>> from zonedocs.config import load_site_config
>>> site = load_site_config(Path("config/site.yaml"))  # doctest: +SKIP
>>> [zone.base_url for zone in site.zones]  # doctest: +SKIP
['/guides', '/reference']
"""

from .loader import load_site_config
from .models import DEFAULT_TEMPLATE, RenderOptions, SiteConfig, ZoneConfig

__all__ = [
    "DEFAULT_TEMPLATE",
    "RenderOptions",
    "SiteConfig",
    "ZoneConfig",
    "load_site_config",
]
