"""Render orchestration: URL in, HTML page or structured error out.

:class:`ContentRenderer` resolves the URL to a ``(zone, doc)`` pair, asks the
:class:`~zonedocs.cache.RenderCache` for the compiled page, and converts every
failure into an :class:`~zonedocs.errors.ErrorPayload`:

- no matching zone or doc, or a missing source file, gives ``not_found``;
- a :class:`~zonedocs.errors.ParseError` gives ``parse`` with line and column;
- anything else gives ``render`` and is logged with a traceback.

Example
-------
>>> renderer = ContentRenderer(build_site_context(config))  # doctest: +SKIP
>>> renderer.render("/reference/db/raw-query").to_dict()  # doctest: +SKIP
{'html': '<!DOCTYPE html>...'}
"""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as typ

from zonedocs.cache import RenderCache
from zonedocs.errors import ErrorPayload, NotFoundError, ParseError
from zonedocs.parser import parse_markdown
from zonedocs.render import RenderContext, render_page
from zonedocs.sources import FileSourceReader

if typ.TYPE_CHECKING:
    from zonedocs.errors import RenderWarning
    from zonedocs.navigation import Doc
    from zonedocs.render import TocEntry
    from zonedocs.site import SiteContext, Zone
    from zonedocs.sources import SourceReader

logger = logging.getLogger(__name__)


@dc.dataclass(frozen=True, slots=True)
class RenderedPage:
    """Result of rendering a URL: exactly one of ``html`` or ``error`` is set."""

    html: str | None = None
    error: ErrorPayload | None = None
    title: str | None = None
    toc: tuple[TocEntry, ...] = ()
    warnings: tuple[RenderWarning, ...] = ()

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, typ.Any]:
        """Return the ``{"html": ...}`` or ``{"error": {...}}`` contract."""
        if self.error is not None:
            return {"error": self.error.to_dict()}
        return {"html": self.html}


def error_page(
    kind: str, message: str, *, line: int | None = None, column: int | None = None
) -> RenderedPage:
    """Return a :class:`RenderedPage` carrying only an error payload."""
    return RenderedPage(error=ErrorPayload(kind=kind, message=message, line=line, column=column))


class DocumentCompiler:
    """Parse and render one document source into a full page."""

    def __init__(self, site: SiteContext) -> None:
        self.site = site

    def __call__(self, zone: Zone, doc: Doc, source: str) -> RenderedPage:
        """Compile ``source`` for ``doc`` in ``zone``.

        Raises
        ------
        ParseError
            If the Markdown is malformed.
        RenderFailure
            If a template fails.
        """
        site = self.site
        document = parse_markdown(source, options=site.options.parser_options)
        ctx = RenderContext(
            zone=zone,
            doc=doc,
            resolver=site.resolver,
            highlighter=site.highlighter,
            env=site.env,
            registry=site.renderers,
            options=site.options,
        )
        body = ctx.render(document)
        html = render_page(body, ctx)
        return RenderedPage(
            html=html,
            title=ctx.title or doc.title,
            toc=tuple(ctx.toc),
            warnings=tuple(ctx.warnings),
        )


class ContentRenderer:
    """Entry point implementing ``render(url) -> {html | error}``."""

    def __init__(
        self,
        site: SiteContext,
        reader: SourceReader | None = None,
        cache: RenderCache | None = None,
    ) -> None:
        """Create a renderer over a built site context.

        Parameters
        ----------
        site : SiteContext
            Zones, resolver, registries and templates built at startup.
        reader : SourceReader, optional
            Source capability; defaults to :class:`FileSourceReader`.
        cache : RenderCache, optional
            Page cache; defaults to a cache over :class:`DocumentCompiler`.
        """
        self.site = site
        self.reader = reader or FileSourceReader()
        self.cache = cache or RenderCache(DocumentCompiler(site))

    def render(self, url: str) -> RenderedPage:
        """Render the document at ``url``; never raises for per-page failures."""
        resolution = self.site.resolver.resolve(url)
        if resolution is None:
            logger.debug("No document matches %s", url)
            return error_page("not_found", f"No document matches '{url}'.")
        zone, doc = resolution.zone, resolution.doc
        try:
            return self.cache.get_or_render(zone, doc, self.reader)
        except NotFoundError as exc:
            logger.info("Missing content for %s: %s", url, exc)
            return error_page("not_found", str(exc))
        except ParseError as exc:
            logger.warning("Failed to parse %s/%s: %s", zone.name, doc.content_path, exc)
            return error_page("parse", exc.message, line=exc.line, column=exc.column)
        except Exception as exc:
            logger.exception("Failed to render %s", url)
            return error_page("render", f"Failed to render '{url}': {exc}")


__all__ = ["ContentRenderer", "DocumentCompiler", "RenderedPage", "error_page"]
