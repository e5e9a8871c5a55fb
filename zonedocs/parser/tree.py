"""Fold the markdown-it token stream into the zonedocs AST.

markdown-it returns a flat list of block tokens: ``*_open`` and ``*_close``
pairs bracket containers, and each ``inline`` token holds a flat list of child
tokens. :class:`TreeBuilder` turns that stream into owned
:class:`~zonedocs.parser.nodes.Node` trees. Block positions come from each
token's ``map`` line range; inline nodes carry the line they start on.

markdown-it is lenient where the zonedocs format is not, so the builder also
raises :class:`~zonedocs.errors.ParseError` for fences and directives left open
at the end of their container, stray ``:::`` closers, unbalanced highlight
sentinels, and unknown directives under the strict policy.
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from zonedocs.errors import ParseError

from .directives import (
    BLOCK_DIRECTIVES,
    CODEGROUP_DIRECTIVE,
    DIRECTIVE_CLOSE_PATTERN,
    DIRECTIVE_PARAMS_PATTERN,
    INLINE_DIRECTIVES,
    parse_attributes,
)
from .fences import parse_fence_body, parse_info_string
from .nodes import (
    Blockquote,
    CodeGroup,
    Directive,
    Document,
    Emphasis,
    FencedCode,
    Heading,
    HtmlBlock,
    HtmlInline,
    Image,
    InlineCode,
    InlineDirective,
    LineBreak,
    Link,
    ListBlock,
    ListItem,
    Node,
    Paragraph,
    Position,
    Strong,
    Table,
    TableCell,
    TableRow,
    Text,
    ThematicBreak,
)
from .options import ParserOptions, UnknownDirectivePolicy
from .syntax import BLOCK_DIRECTIVE_OPEN, INLINE_DIRECTIVE

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from markdown_it.token import Token

_TEXT_TOKENS = frozenset({"text", "text_special"})
_EMPHASIS_NODES: dict[str, type[Node]] = {"em_open": Emphasis, "strong_open": Strong}


class SourceLines:
    """Source text split the way markdown-it numbers lines."""

    def __init__(self, text: str) -> None:
        lines = text.split("\n")
        if lines[-1] == "":
            lines.pop()
        self.lines = lines

    def __len__(self) -> int:
        return len(self.lines)

    def line(self, index: int) -> str:
        """Return the 0-based line ``index`` or ``""`` past the end."""
        return self.lines[index] if 0 <= index < len(self.lines) else ""

    def column(self, index: int) -> int:
        """Return the 1-based column of the first non-blank character."""
        text = self.line(index)
        return len(text) - len(text.lstrip()) + 1

    def block_position(self, index: int) -> Position:
        return Position(index + 1, self.column(index))

    def content_positions(self, first: int, content: str) -> list[Position]:
        """Locate each line of an inline token's ``content`` in the source.

        markdown-it strips container markers and indentation from inline
        content, so each content line is found again in its source line.
        """
        positions: list[Position] = []
        for offset, text in enumerate(content.split("\n")):
            index = first + offset
            stripped = text.strip()
            found = self.line(index).rfind(stripped) if stripped else -1
            column = found + 1 if found >= 0 else self.column(index)
            positions.append(Position(index + 1, column))
        return positions


@dc.dataclass(slots=True)
class _Frame:
    """An open container; ``node`` is ``None`` when children splice upward."""

    token: Token | None
    node: Node | None
    children: list[Node]


class TreeBuilder:
    """Build a :class:`~zonedocs.parser.nodes.Document` from block tokens.

    One builder handles one document; it is not reusable.
    """

    def __init__(self, source: SourceLines, options: ParserOptions) -> None:
        self.source = source
        self.options = options
        self._stack: list[_Frame] = []
        self._in_head = False

    @property
    def strict(self) -> bool:
        return self.options.unknown_directives is UnknownDirectivePolicy.STRICT

    def build(self, tokens: cabc.Sequence[Token]) -> Document:
        """Return the document tree for ``tokens``.

        Raises
        ------
        ParseError
            When the token stream hides malformed fences or directives.
        """
        document = Document(position=Position(1, 1))
        self._stack = [_Frame(None, document, document.children)]
        for token in tokens:
            if token.nesting == 1:
                self._stack.append(self._open(token))
            elif token.nesting == -1:
                frame = self._stack.pop()
                self._stack[-1].children.extend(self._close(frame, token))
            else:
                self._leaf(token)
        return document

    def _position(self, token: Token) -> Position:
        if token.map:
            return self.source.block_position(token.map[0])
        return self.source.block_position(self._enclosing_line())

    def _enclosing_line(self) -> int:
        for frame in reversed(self._stack):
            if frame.token is not None and frame.token.map:
                return frame.token.map[0]
        return 0

    def _open(self, token: Token) -> _Frame:
        kind = token.type
        position = self._position(token)
        if kind == BLOCK_DIRECTIVE_OPEN:
            return self._open_directive(token, position)
        if kind in {"thead_open", "tbody_open"}:
            self._in_head = kind == "thead_open"
            return _Frame(token, None, [])

        node: Node
        if kind == "paragraph_open":
            node = Paragraph(position=position)
        elif kind == "heading_open":
            node = Heading(position=position, level=int(token.tag[1:]))
        elif kind == "bullet_list_open":
            node = ListBlock(position=position)
        elif kind == "ordered_list_open":
            start = int(token.attrGet("start") or 1)
            node = ListBlock(position=position, ordered=True, start=start)
        elif kind == "list_item_open":
            node = ListItem(position=position)
        elif kind == "blockquote_open":
            node = Blockquote(position=position)
        elif kind == "table_open":
            node = Table(position=position)
        elif kind == "tr_open":
            node = TableRow(position=position, header=self._in_head)
        elif kind in {"th_open", "td_open"}:
            node = TableCell(
                position=position, header=kind == "th_open", align=_alignment(token)
            )
        else:
            msg = f"unsupported Markdown block '{kind}'"
            raise ParseError(msg, line=position.line, column=position.column)
        return _Frame(token, node, node.children)

    def _open_directive(self, token: Token, position: Position) -> _Frame:
        match = DIRECTIVE_PARAMS_PATTERN.match(token.info)
        assert match is not None  # noqa: S101 - the container only opens on a match
        name = match.group("name").lower()
        self._require_closed(token, name, position)

        if name not in BLOCK_DIRECTIVES:
            if self.strict:
                msg = f"unknown directive ':::{name}'"
                raise ParseError(msg, line=position.line, column=position.column)
            return _Frame(token, None, [])
        if name == CODEGROUP_DIRECTIVE:
            group = CodeGroup(position=position)
            return _Frame(token, group, group.children)

        attributes = parse_attributes(match.group("attrs"))
        title = match.group("title") or attributes.pop("title", None)
        directive = Directive(
            position=position, name=name, title=title or None, attributes=attributes
        )
        return _Frame(token, directive, directive.children)

    def _require_closed(self, token: Token, name: str, position: Position) -> None:
        """Reject a directive that ran into the end of its container.

        The container plugin closes a block at the end of its parent instead of
        failing. A directive is closed only when the line it ends on is a
        closing marker that lies inside the nearest enclosing directive.
        """
        limit = len(self.source)
        for frame in reversed(self._stack):
            if frame.token is not None and frame.token.type == BLOCK_DIRECTIVE_OPEN:
                limit = frame.token.map[1] if frame.token.map else limit
                break
        end = token.map[1] if token.map else limit
        if end < limit and DIRECTIVE_CLOSE_PATTERN.match(self.source.line(end)):
            return
        msg = f"unterminated ':::{name}' directive"
        raise ParseError(msg, line=position.line, column=position.column)

    def _close(self, frame: _Frame, token: Token) -> list[Node]:
        opener = frame.token
        if frame.node is None:
            if opener is not None and opener.type == BLOCK_DIRECTIVE_OPEN:
                return self._literal_directive(opener, token, frame.children)
            return frame.children
        if isinstance(frame.node, Table):
            header = frame.node.children[0] if frame.node.children else None
            frame.node.alignments = tuple(
                typ.cast("TableCell", cell).align
                for cell in (header.children if header else [])
            )
        elif isinstance(frame.node, CodeGroup):
            for child in frame.node.children:
                if not isinstance(child, FencedCode):
                    msg = "codegroup directive may only contain fenced code blocks"
                    raise ParseError(
                        msg, line=child.position.line, column=child.position.column
                    )
        return [frame.node]

    def _literal_directive(
        self, opener: Token, closer: Token, children: list[Node]
    ) -> list[Node]:
        """Keep an unknown directive's marker lines as plain paragraphs."""
        start = self._position(opener)
        marker = f"{opener.markup}{opener.info}".strip()
        end_line = opener.map[1] if opener.map else start.line
        end = self.source.block_position(end_line)
        return [
            Paragraph(
                position=start,
                children=[Text(position=start, value=marker)],
            ),
            *children,
            Paragraph(
                position=end,
                children=[Text(position=end, value=closer.markup.strip() or ":::")],
            ),
        ]

    def _leaf(self, token: Token) -> None:
        kind = token.type
        target = self._stack[-1].children
        if kind == "inline":
            self._inline(token)
        elif kind == "fence":
            target.append(self._fence(token))
        elif kind == "code_block":
            code = token.content.rstrip("\n")
            target.append(FencedCode(position=self._position(token), code=code))
        elif kind == "html_block":
            html = token.content.rstrip("\n")
            target.append(HtmlBlock(position=self._position(token), html=html))
        elif kind == "hr":
            target.append(ThematicBreak(position=self._position(token)))
        else:
            position = self._position(token)
            msg = f"unsupported Markdown block '{kind}'"
            raise ParseError(msg, line=position.line, column=position.column)

    def _fence(self, token: Token) -> FencedCode:
        position = self._position(token)
        body = token.content.split("\n")
        if body[-1] == "":
            body.pop()
        start = token.map[0] if token.map else position.line - 1
        end = token.map[1] if token.map else start
        # A closed fence spans its opening line, the body, and the closing line.
        if end - start != len(body) + 2:
            msg = "unterminated fenced code block"
            raise ParseError(msg, line=position.line, column=position.column)

        info = token.info.strip()
        meta = parse_info_string(info, line=position.line, column=position.column)
        content = parse_fence_body(body, first_line=position.line + 1)
        return FencedCode(
            position=position,
            language=meta.language,
            code=content.code,
            title=meta.title or content.title,
            highlight_lines=meta.highlight_lines | content.highlight_lines,
            info=info,
        )

    def _inline(self, token: Token) -> None:
        frame = self._stack[-1]
        first = token.map[0] if token.map else self._enclosing_line()
        positions = self.source.content_positions(first, token.content)
        if isinstance(frame.node, Paragraph):
            for text, position in zip(token.content.split("\n"), positions):
                if DIRECTIVE_CLOSE_PATTERN.match(text.strip()):
                    msg = "closing ':::' marker without an open directive"
                    raise ParseError(msg, line=position.line, column=position.column)
            frame.node.position = positions[0]
        builder = InlineBuilder(token.content, positions, self.options)
        frame.children.extend(builder.build(token.children or []))


class InlineBuilder:
    """Convert the flat children of one ``inline`` token into nested nodes."""

    def __init__(
        self, content: str, positions: list[Position], options: ParserOptions
    ) -> None:
        self.content = content
        self.positions = positions
        self.options = options
        self._line = 0

    def build(self, tokens: cabc.Sequence[Token]) -> list[Node]:
        root: list[Node] = []
        targets = [root]
        for token in tokens:
            kind = token.type
            position = self.positions[min(self._line, len(self.positions) - 1)]
            if kind in _TEXT_TOKENS:
                _append(targets[-1], Text(position=position, value=token.content))
            elif kind == "softbreak":
                _append(targets[-1], Text(position=position, value="\n"))
                self._line += 1
            elif kind == "hardbreak":
                targets[-1].append(LineBreak(position=position))
                self._line += 1
            elif kind == "code_inline":
                targets[-1].append(InlineCode(position=position, value=token.content))
            elif kind == "html_inline":
                targets[-1].append(HtmlInline(position=position, html=token.content))
            elif kind == "image":
                targets[-1].append(
                    Image(
                        position=position,
                        src=_attr(token, "src") or "",
                        alt=_plain_text(token.children or []),
                        title=_attr(token, "title"),
                    )
                )
            elif kind == INLINE_DIRECTIVE:
                _append(targets[-1], self._directive(token))
            elif kind == "link_open":
                link = Link(
                    position=position,
                    target=_attr(token, "href") or "",
                    title=_attr(token, "title"),
                )
                targets[-1].append(link)
                targets.append(link.children)
            elif kind in _EMPHASIS_NODES:
                node = _EMPHASIS_NODES[kind](position=position)
                targets[-1].append(node)
                targets.append(node.children)
            elif token.nesting == -1:
                targets.pop()
            else:
                _append(targets[-1], Text(position=position, value=token.content))
        return root

    def _offset_position(self, offset: int) -> Position:
        index = self.content.count("\n", 0, offset)
        line_start = self.content.rfind("\n", 0, offset) + 1
        line_end = self.content.find("\n", offset)
        text = self.content[line_start : line_end if line_end != -1 else None]
        indent = len(text) - len(text.lstrip())
        base = self.positions[min(index, len(self.positions) - 1)]
        return Position(base.line, base.column + offset - line_start - indent)

    def _directive(self, token: Token) -> Node:
        meta = token.meta
        name = meta["name"]
        position = self._offset_position(meta["offset"])
        known = name in INLINE_DIRECTIVES
        strict = self.options.unknown_directives is UnknownDirectivePolicy.STRICT
        if not meta["terminated"] and (known or strict):
            msg = f"unterminated inline directive ':{name}['"
            raise ParseError(msg, line=position.line, column=position.column)
        if not known:
            if strict:
                msg = f"unknown inline directive ':{name}'"
                raise ParseError(msg, line=position.line, column=position.column)
            return Text(position=position, value=token.content)
        return InlineDirective(
            position=position,
            name=name,
            content=meta["content"],
            attributes=dict(meta["attributes"]),
        )


def _append(nodes: list[Node], node: Node) -> None:
    """Append ``node``, merging adjacent text runs."""
    if isinstance(node, Text) and nodes and isinstance(nodes[-1], Text):
        nodes[-1].value += node.value
        return
    nodes.append(node)


def _attr(token: Token, name: str) -> str | None:
    value = token.attrGet(name)
    return None if value is None else str(value)


def _alignment(token: Token) -> str | None:
    style = _attr(token, "style")
    if not style:
        return None
    return style.removeprefix("text-align:").strip() or None


def _plain_text(tokens: cabc.Sequence[Token]) -> str:
    parts: list[str] = []
    for token in tokens:
        if token.children:
            parts.append(_plain_text(token.children))
        elif token.type in {"softbreak", "hardbreak"}:
            parts.append(" ")
        else:
            parts.append(token.content)
    return "".join(parts)


__all__ = ["InlineBuilder", "SourceLines", "TreeBuilder"]
