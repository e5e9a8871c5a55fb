"""Rewrite Markdown link targets to canonical zone URLs.

External targets (a scheme, a host, or ``//``) and pure fragments pass through
untouched. Absolute paths under a registered zone prefix must resolve to a
doc. Relative targets are joined with the current doc's permalink directory,
or with its content-path directory when they name a ``.md`` file, and are
rewritten to ``base_url/permalink``. Anything that fails to resolve keeps its
original href and is reported as broken.
"""

from __future__ import annotations

import dataclasses as dc
import posixpath
import typing as typ
from urllib.parse import urlsplit

if typ.TYPE_CHECKING:
    from zonedocs.navigation import Doc

    from .context import RenderContext

_EXTERNAL_PREFIXES = ("mailto:", "tel:", "data:", "javascript:")


@dc.dataclass(frozen=True, slots=True)
class LinkTarget:
    """Outcome of resolving a link target."""

    href: str
    broken: bool = False


def resolve_link(target: str, ctx: RenderContext) -> LinkTarget:
    """Return the href to emit for ``target`` within the current document."""
    if not target or target.startswith(("#", "//")) or "://" in target:
        return LinkTarget(target)
    if target.lower().startswith(_EXTERNAL_PREFIXES):
        return LinkTarget(target)
    parsed = urlsplit(target)
    if parsed.scheme or parsed.netloc or not parsed.path:
        return LinkTarget(target)

    suffix = _suffix(parsed.query, parsed.fragment)
    if parsed.path.startswith("/"):
        return _resolve_absolute(target, parsed.path, suffix, ctx)

    doc = _resolve_relative(parsed.path, ctx)
    if doc is None:
        return LinkTarget(target, broken=True)
    return LinkTarget(ctx.resolver.url_for(ctx.zone, doc) + suffix)


def _resolve_absolute(
    target: str, path: str, suffix: str, ctx: RenderContext
) -> LinkTarget:
    if ctx.resolver.zone_for(path) is None:
        return LinkTarget(target)
    resolution = ctx.resolver.resolve(path)
    if resolution is None:
        return LinkTarget(target, broken=True)
    return LinkTarget(ctx.resolver.url_for(resolution.zone, resolution.doc) + suffix)


def _resolve_relative(path: str, ctx: RenderContext) -> Doc | None:
    navigation = ctx.zone.navigation
    if path.lower().endswith(".md"):
        base_dir = posixpath.dirname(ctx.doc.content_path)
        joined = posixpath.normpath(posixpath.join(base_dir, path))
        if joined.startswith("../") or joined == "..":
            return None
        return navigation.get_by_content_path(joined)
    base_dir = posixpath.dirname(ctx.doc.permalink)
    joined = posixpath.normpath(posixpath.join(base_dir, path))
    if joined.startswith("../") or joined in (".", ".."):
        return None
    return navigation.get(joined)


def _suffix(query: str, fragment: str) -> str:
    suffix = f"?{query}" if query else ""
    if fragment:
        suffix = f"{suffix}#{fragment}"
    return suffix


__all__ = ["LinkTarget", "resolve_link"]
