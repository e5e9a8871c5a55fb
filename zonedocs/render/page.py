"""Wrap a rendered document body in the zone's page template."""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from markupsafe import Markup

if typ.TYPE_CHECKING:
    from zonedocs.navigation import Doc
    from zonedocs.resolver import UrlResolver
    from zonedocs.site import Zone

    from .context import RenderContext


@dc.dataclass(frozen=True, slots=True)
class NavLink:
    title: str
    url: str
    active: bool


@dc.dataclass(frozen=True, slots=True)
class NavCategory:
    """Sidebar category; ``name`` is ``None`` for the root sentinel."""

    name: str | None
    links: tuple[NavLink, ...]


@dc.dataclass(frozen=True, slots=True)
class NavGroup:
    """Sidebar group; ``name`` is ``None`` for the root sentinel."""

    name: str | None
    categories: tuple[NavCategory, ...]


def build_sidebar(zone: Zone, current: Doc, resolver: UrlResolver) -> list[NavGroup]:
    """Return the sidebar model for ``zone`` with ``current`` marked active.

    Groups and categories named ``"root"`` keep their docs but lose their
    heading.
    """
    groups: list[NavGroup] = []
    for group in zone.navigation.groups:
        categories = [
            NavCategory(
                name=None if category.is_root else category.name,
                links=tuple(
                    NavLink(
                        title=doc.title,
                        url=resolver.url_for(zone, doc),
                        active=doc.permalink == current.permalink,
                    )
                    for doc in category.docs
                ),
            )
            for category in group.categories
        ]
        groups.append(
            NavGroup(name=None if group.is_root else group.name, categories=tuple(categories))
        )
    return groups


def render_page(body: str, ctx: RenderContext) -> str:
    """Render the full HTML page for the current document.

    Parameters
    ----------
    body : str
        HTML produced by rendering the document's AST.
    ctx : RenderContext
        Context populated by the body render (title, TOC, warnings).

    Returns
    -------
    str
        Complete HTML document.

    Raises
    ------
    zonedocs.errors.RenderFailure
        If the page template fails.
    """
    return ctx.render_template(
        ctx.zone.template,
        zone=ctx.zone,
        doc=ctx.doc,
        title=ctx.title or ctx.doc.title,
        url=ctx.resolver.url_for(ctx.zone, ctx.doc),
        body=Markup(body),  # noqa: S704 - assembled from escaped fragments
        toc=ctx.toc,
        sidebar=build_sidebar(ctx.zone, ctx.doc, ctx.resolver),
        stylesheet=Markup(ctx.highlighter.stylesheet),  # noqa: S704 - Pygments CSS
    )


__all__ = ["NavCategory", "NavGroup", "NavLink", "build_sidebar", "render_page"]
