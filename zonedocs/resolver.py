"""Map incoming URLs to a ``(zone, doc)`` pair.

Resolution strips the query string, fragment, and trailing slash, then matches
zone base URLs on whole path segments. When several zone prefixes match, the
longest one wins; equal-length prefixes keep registration order.

Example
-------
>>> resolver = UrlResolver(zones)  # doctest: +SKIP
>>> resolver.resolve("/reference/db/raw-query?tab=1").doc.permalink  # doctest: +SKIP
'db/raw-query'
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ
from urllib.parse import unquote, urlsplit

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .navigation import Doc
    from .site import Zone


@dc.dataclass(frozen=True, slots=True)
class Resolution:
    """Successful URL lookup."""

    zone: Zone
    doc: Doc


def normalize_url_path(url: str) -> str:
    """Return the path of ``url`` with a leading slash and no trailing slash."""
    path = unquote(urlsplit(url.strip()).path)
    path = "/" + path.strip("/")
    return path


class UrlResolver:
    """Resolve URLs against registered zones and their permalink indexes."""

    def __init__(self, zones: cabc.Sequence[Zone]) -> None:
        self._zones = tuple(zones)
        # Stable sort keeps registration order for equal-length prefixes.
        self._by_prefix = tuple(
            sorted(self._zones, key=lambda zone: len(zone.base_url), reverse=True)
        )

    @property
    def zones(self) -> tuple[Zone, ...]:
        """Zones in registration order."""
        return self._zones

    def resolve(self, url: str) -> Resolution | None:
        """Return the matching zone and doc, or ``None`` when nothing matches.

        Parameters
        ----------
        url : str
            Request URL or path; query strings and fragments are ignored.

        Returns
        -------
        Resolution | None
            ``None`` is the routine not-found outcome.
        """
        path = normalize_url_path(url)
        for zone in self._by_prefix:
            remainder = _strip_prefix(path, zone.base_url)
            if remainder is None:
                continue
            doc = zone.navigation.get(remainder)
            if doc is not None:
                return Resolution(zone=zone, doc=doc)
            # The longest matching prefix owns the URL.
            return None
        return None

    def zone_for(self, url: str) -> Zone | None:
        """Return the zone whose base URL owns ``url``, if any."""
        path = normalize_url_path(url)
        for zone in self._by_prefix:
            if _strip_prefix(path, zone.base_url) is not None:
                return zone
        return None

    @staticmethod
    def url_for(zone: Zone, doc: Doc) -> str:
        """Return the canonical URL of ``doc`` within ``zone``."""
        base = zone.base_url.rstrip("/")
        return f"{base}/{doc.permalink}"


def _strip_prefix(path: str, base_url: str) -> str | None:
    """Return the part of ``path`` after ``base_url`` or ``None`` on mismatch."""
    base = base_url.rstrip("/")
    if not base:
        return path.lstrip("/")
    if path == base:
        return ""
    if path.startswith(base + "/"):
        return path[len(base) + 1 :]
    return None


__all__ = ["Resolution", "UrlResolver", "normalize_url_path"]
