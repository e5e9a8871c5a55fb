"""Markdown parser producing a positioned AST with first-class directives.

Tokenizing is done by markdown-it (see :mod:`zonedocs.parser.syntax`); the
token stream is then folded into :mod:`zonedocs.parser.nodes` by
:class:`~zonedocs.parser.tree.TreeBuilder`.

Example
-------
>>> from zonedocs.parser import parse_markdown
>>> document = parse_markdown("# Title\\n\\n:::note\\nBody\\n:::\\n")
>>> [child.kind.value for child in document.children]
['heading', 'directive']
"""

from __future__ import annotations

from .nodes import Document, Node, NodeKind, Position
from .options import ParserOptions, UnknownDirectivePolicy
from .syntax import build_markdown
from .tree import SourceLines, TreeBuilder

_MARKDOWN = build_markdown()


def parse_markdown(source: str, *, options: ParserOptions | None = None) -> Document:
    """Parse ``source`` into a :class:`~zonedocs.parser.nodes.Document`.

    Parameters
    ----------
    source : str
        Markdown text.
    options : ParserOptions, optional
        Parser behaviour switches; defaults to :class:`ParserOptions`.

    Returns
    -------
    Document
        Root of the AST; every node carries its source position.

    Raises
    ------
    zonedocs.errors.ParseError
        When the source contains malformed fences or directives.
    """
    text = source.replace("\r\n", "\n").replace("\r", "\n")
    builder = TreeBuilder(SourceLines(text), options or ParserOptions())
    return builder.build(_MARKDOWN.parse(text))


__all__ = [
    "Document",
    "Node",
    "NodeKind",
    "ParserOptions",
    "Position",
    "TreeBuilder",
    "UnknownDirectivePolicy",
    "parse_markdown",
]
