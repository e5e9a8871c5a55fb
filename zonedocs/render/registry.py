"""Exhaustive ``NodeKind -> renderer`` dispatch table."""

from __future__ import annotations

import types
import typing as typ

from zonedocs.errors import ConfigError
from zonedocs.parser.nodes import NodeKind

from .elements import DEFAULT_RENDERERS

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from zonedocs.parser.nodes import Node

    from .context import RenderContext

NodeRenderer = typ.Callable[["Node", "RenderContext"], str]


class RendererRegistry:
    """Map every :class:`~zonedocs.parser.nodes.NodeKind` to a renderer.

    Parameters
    ----------
    renderers : Mapping[NodeKind, NodeRenderer]
        One callable per node kind, each returning an HTML fragment.

    Raises
    ------
    ConfigError
        If any node kind lacks a renderer; the table is checked once at
        construction so dispatch never falls through at render time.
    """

    def __init__(self, renderers: cabc.Mapping[NodeKind, NodeRenderer]) -> None:
        missing = [kind.value for kind in NodeKind if kind not in renderers]
        if missing:
            msg = f"No renderer registered for node kinds: {', '.join(missing)}"
            raise ConfigError(msg)
        self._renderers = types.MappingProxyType(dict(renderers))

    def __getitem__(self, kind: NodeKind) -> NodeRenderer:
        return self._renderers[kind]

    def render(self, node: Node, ctx: RenderContext) -> str:
        """Render ``node`` with the renderer registered for its kind."""
        return self._renderers[node.kind](node, ctx)

    def with_overrides(
        self, overrides: cabc.Mapping[NodeKind, NodeRenderer]
    ) -> RendererRegistry:
        """Return a new registry with ``overrides`` replacing existing entries."""
        return RendererRegistry({**self._renderers, **overrides})


def default_registry() -> RendererRegistry:
    """Return the registry populated with the built-in element renderers."""
    return RendererRegistry(DEFAULT_RENDERERS)


__all__ = ["NodeRenderer", "RendererRegistry", "default_registry"]
