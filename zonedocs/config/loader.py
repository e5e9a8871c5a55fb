"""Load site configuration YAML into typed dataclasses."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from zonedocs.errors import ConfigError

from .helpers import (
    _build_render_options,
    _normalize_base_url,
    _optional_str,
    _resolve_path,
)
from .models import SiteConfig, ZoneConfig


def load_site_config(path: Path) -> SiteConfig:
    """Load the YAML configuration describing content zones and render options.

    Parameters
    ----------
    path : Path
        Filesystem path to the YAML configuration file (for example,
        ``config/site.yaml``). Relative zone paths resolve against its parent
        directory.

    Returns
    -------
    SiteConfig
        Zones in registration order plus shared render options.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    ConfigError
        If the YAML cannot be parsed, is not a mapping, defines no zones, or a
        zone entry misses a required field or repeats a name.

    Examples
    --------
    >>> from pathlib import Path
    >>> from zonedocs.config import load_site_config
    >>> config = load_site_config(Path("config/site.yaml"))  # doctest: +SKIP
    >>> [zone.base_url for zone in config.zones]  # doctest: +SKIP
    ['/guides', '/reference']
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    try:
        with path.open("r", encoding="utf-8") as handle:
            loaded = loader.load(handle) or {}
    except YAMLError as exc:
        msg = f"Configuration file '{path}' is not valid YAML: {exc}"
        raise ConfigError(msg) from exc
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise ConfigError(msg)

    raw: dict[str, typ.Any] = dict(loaded)
    defaults = dict(raw.get("defaults") or {})
    base_dir = path.parent
    output_dir = Path(defaults.get("output_dir", "public"))
    if not output_dir.is_absolute():
        output_dir = base_dir / output_dir
    options = _build_render_options(defaults)

    zones_raw = raw.get("zones") or []
    if not isinstance(zones_raw, list) or not zones_raw:
        msg = "No zones defined in site configuration."
        raise ConfigError(msg)

    zones: list[ZoneConfig] = []
    seen: set[str] = set()
    for index, payload in enumerate(zones_raw):
        if not isinstance(payload, dict):
            msg = f"Zone entry #{index + 1} must be a mapping."
            raise ConfigError(msg)
        zone = _build_zone_config(payload, base_dir=base_dir, index=index)
        if zone.name in seen:
            msg = f"Zone '{zone.name}' is defined more than once."
            raise ConfigError(msg)
        seen.add(zone.name)
        zones.append(zone)

    return SiteConfig(zones=tuple(zones), options=options, output_dir=output_dir)


def _build_zone_config(
    payload: typ.Mapping[str, typ.Any], *, base_dir: Path, index: int
) -> ZoneConfig:
    """Build a ZoneConfig for a single zone entry."""
    title = _optional_str(payload.get("title"))
    name = _optional_str(payload.get("name")) or (title.lower() if title else None)
    if not name:
        msg = f"Zone entry #{index + 1} is missing 'name' or 'title'."
        raise ConfigError(msg)
    content_path = _resolve_path(
        payload.get("content_path"), base_dir, field="content_path", zone=name
    )
    menu_value = payload.get("menu") or str(
        Path(str(payload.get("content_path", ""))) / "menu.json"
    )
    return ZoneConfig(
        name=name,
        title=title or name.replace("-", " ").title(),
        base_url=_normalize_base_url(payload.get("base_url"), name),
        content_path=content_path,
        menu_path=_resolve_path(menu_value, base_dir, field="menu", zone=name),
        template=_optional_str(payload.get("template")),
    )


__all__ = ["load_site_config"]
