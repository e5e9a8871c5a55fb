"""markdown-it configuration for zonedocs Markdown.

The tokenizer starts from the CommonMark preset with tables enabled, then adds
the ``container`` plugin for ``:::name`` block directives and an inline rule
for ``:name[content]{key="value"}`` shortcodes. These rules only tokenize;
directive names and the unknown-directive policy are checked when the tokens
become nodes.
"""

from __future__ import annotations

import typing as typ

from markdown_it import MarkdownIt
from markdown_it.common.utils import unescapeAll
from markdown_it.helpers import parseLinkLabel
from mdit_py_plugins.container import container_plugin

from .directives import (
    DIRECTIVE_PARAMS_PATTERN,
    INLINE_DIRECTIVE_PATTERN,
    parse_attributes,
)

if typ.TYPE_CHECKING:
    from markdown_it.rules_inline import StateInline

DIRECTIVE_CONTAINER = "directive"
BLOCK_DIRECTIVE_OPEN = f"container_{DIRECTIVE_CONTAINER}_open"
BLOCK_DIRECTIVE_CLOSE = f"container_{DIRECTIVE_CONTAINER}_close"
INLINE_DIRECTIVE = "inline_directive"


def _is_directive(params: str, *args: typ.Any) -> bool:
    return DIRECTIVE_PARAMS_PATTERN.match(params) is not None


def inline_directive(state: StateInline, silent: bool) -> bool:  # noqa: FBT001
    """Tokenize ``:name[content]{attrs}`` at ``state.pos``.

    The token's ``meta`` holds the directive name, unescaped content,
    attributes, and the offset of the leading colon in ``state.src``. An
    opening ``:name[`` without a matching ``]`` still yields a token, marked
    ``terminated=False``, so the tree builder can report it.
    """
    src = state.src
    start = state.pos
    if src[start] != ":":
        return False
    if start > 0 and (src[start - 1].isalnum() or src[start - 1] == ":"):
        return False
    match = INLINE_DIRECTIVE_PATTERN.match(src, start, state.posMax)
    if match is None:
        return False

    bracket = match.end() - 1
    closing = parseLinkLabel(state, bracket)
    content = ""
    attributes: dict[str, str] = {}
    if closing < 0:
        end = bracket + 1
    else:
        end = closing + 1
        if end < state.posMax and src[end] == "{":
            brace = src.find("}", end, state.posMax)
            if brace != -1:
                attributes = parse_attributes(src[end : brace + 1])
                end = brace + 1
        content = unescapeAll(src[bracket + 1 : closing])

    if not silent:
        token = state.push(INLINE_DIRECTIVE, "", 0)
        token.content = src[start:end]
        token.meta = {
            "name": match.group("name"),
            "content": content,
            "attributes": attributes,
            "offset": start,
            "terminated": closing >= 0,
        }
    state.pos = end
    return True


def build_markdown() -> MarkdownIt:
    """Return a configured :class:`~markdown_it.MarkdownIt` tokenizer.

    Example
    -------
    >>> tokens = build_markdown().parse(":::note\\nBody\\n:::\\n")
    >>> tokens[0].type, tokens[0].info
    ('container_directive_open', 'note')
    """
    md = MarkdownIt("commonmark").enable("table")
    container_plugin(md, DIRECTIVE_CONTAINER, validate=_is_directive)
    md.inline.ruler.push(INLINE_DIRECTIVE, inline_directive)
    return md


__all__ = [
    "BLOCK_DIRECTIVE_CLOSE",
    "BLOCK_DIRECTIVE_OPEN",
    "INLINE_DIRECTIVE",
    "build_markdown",
    "inline_directive",
]
