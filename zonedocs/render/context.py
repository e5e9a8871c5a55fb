"""Per-render state threaded through every node renderer."""

from __future__ import annotations

import dataclasses as dc
import logging
import re
import typing as typ
import unicodedata

from jinja2 import TemplateError

from zonedocs.errors import RenderFailure, RenderWarning

if typ.TYPE_CHECKING:
    from jinja2 import Environment

    from zonedocs.config import RenderOptions
    from zonedocs.highlight import Highlighter
    from zonedocs.navigation import Doc
    from zonedocs.parser.nodes import Node, Position
    from zonedocs.resolver import UrlResolver
    from zonedocs.site import Zone

    from .registry import RendererRegistry

logger = logging.getLogger(__name__)

_SLUG_STRIP = re.compile(r"[^\w\s-]")
_SLUG_SPACES = re.compile(r"[\s_-]+")


@dc.dataclass(frozen=True, slots=True)
class TocEntry:
    """Heading collected for the page's table of contents."""

    level: int
    text: str
    slug: str


def slugify(text: str) -> str:
    """Return a lowercase, hyphen-separated anchor for ``text``.

    Example
    -------
    >>> slugify("Raw queries & bindings")
    'raw-queries-bindings'
    """
    normalized = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode()
    cleaned = _SLUG_STRIP.sub("", normalized).strip().lower()
    return _SLUG_SPACES.sub("-", cleaned).strip("-") or "section"


@dc.dataclass(slots=True)
class RenderContext:
    """Collaborators and accumulators for rendering one document.

    Attributes
    ----------
    toc : list[TocEntry]
        Headings at the configured TOC levels, in document order.
    warnings : list[RenderWarning]
        Non-fatal problems such as broken links.
    title : str | None
        Text of the first level-1 heading, if any.
    """

    zone: Zone
    doc: Doc
    resolver: UrlResolver
    highlighter: Highlighter
    env: Environment
    registry: RendererRegistry
    options: RenderOptions
    toc: list[TocEntry] = dc.field(default_factory=list)
    warnings: list[RenderWarning] = dc.field(default_factory=list)
    title: str | None = None
    _slugs: dict[str, int] = dc.field(default_factory=dict)

    def render(self, node: Node) -> str:
        """Render ``node`` through the registry."""
        return self.registry.render(node, self)

    def render_children(self, node: Node) -> str:
        """Render the children of ``node`` depth-first and concatenate them."""
        return "".join(self.render(child) for child in node.children)

    def render_template(self, name: str, **values: typ.Any) -> str:
        """Render the Jinja template ``name`` with ``values``.

        Raises
        ------
        RenderFailure
            If the template is missing or fails to render.
        """
        try:
            return self.env.get_template(name).render(**values)
        except TemplateError as exc:
            msg = f"Template '{name}' failed to render: {exc}"
            raise RenderFailure(msg) from exc

    def unique_slug(self, text: str) -> str:
        """Return a slug for ``text`` not yet used in this document."""
        base = slugify(text)
        count = self._slugs.get(base, 0)
        self._slugs[base] = count + 1
        if count == 0:
            return base
        candidate = f"{base}-{count}"
        while candidate in self._slugs:
            count += 1
            candidate = f"{base}-{count}"
        self._slugs[candidate] = 1
        return candidate

    def warn(self, kind: str, message: str, position: Position | None = None) -> None:
        """Record a non-fatal render warning."""
        warning = RenderWarning(
            kind=kind,
            message=message,
            line=position.line if position else None,
            column=position.column if position else None,
        )
        self.warnings.append(warning)
        logger.warning(
            "%s/%s: %s", self.zone.name, self.doc.content_path, message
        )


__all__ = ["RenderContext", "TocEntry", "slugify"]
