"""Turn a parsed document into HTML through the node renderer registry.

Example
-------
>>> from zonedocs.render import default_registry
>>> registry = default_registry()
>>> from zonedocs.parser import NodeKind
>>> callable(registry[NodeKind.HEADING])
True
"""

from .context import RenderContext, TocEntry, slugify
from .links import LinkTarget, resolve_link
from .page import build_sidebar, render_page
from .registry import NodeRenderer, RendererRegistry, default_registry

__all__ = [
    "LinkTarget",
    "NodeRenderer",
    "RenderContext",
    "RendererRegistry",
    "TocEntry",
    "build_sidebar",
    "default_registry",
    "render_page",
    "resolve_link",
    "slugify",
]
