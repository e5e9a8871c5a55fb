"""AST node types produced by :func:`zonedocs.parser.parse_markdown`.

Every node carries a :class:`NodeKind` tag used by the renderer registry for
exhaustive dispatch, a :class:`Position`, and kind-specific attributes. Nodes
own their children; the tree never shares subtrees.
"""

from __future__ import annotations

import dataclasses as dc
import enum
import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc


class NodeKind(enum.Enum):
    """Closed set of node kinds understood by the renderer registry."""

    DOCUMENT = "document"
    PARAGRAPH = "paragraph"
    HEADING = "heading"
    FENCED_CODE = "fenced_code"
    CODE_GROUP = "code_group"
    LIST = "list"
    LIST_ITEM = "list_item"
    BLOCKQUOTE = "blockquote"
    TABLE = "table"
    TABLE_ROW = "table_row"
    TABLE_CELL = "table_cell"
    THEMATIC_BREAK = "thematic_break"
    HTML_BLOCK = "html_block"
    DIRECTIVE = "directive"
    TEXT = "text"
    EMPHASIS = "emphasis"
    STRONG = "strong"
    INLINE_CODE = "inline_code"
    LINK = "link"
    IMAGE = "image"
    INLINE_DIRECTIVE = "inline_directive"
    LINE_BREAK = "line_break"
    HTML_INLINE = "html_inline"


@dc.dataclass(frozen=True, slots=True)
class Position:
    """1-based source location of a node."""

    line: int
    column: int = 1


@dc.dataclass(slots=True, kw_only=True)
class Node:
    """Base class for AST nodes."""

    kind: typ.ClassVar[NodeKind]
    position: Position
    children: list[Node] = dc.field(default_factory=list)

    def walk(self) -> cabc.Iterator[Node]:
        """Yield this node and all descendants depth-first."""
        yield self
        for child in self.children:
            yield from child.walk()

    def text_content(self) -> str:
        """Return the concatenated plain text of this subtree."""
        return "".join(child.text_content() for child in self.children)


@dc.dataclass(slots=True, kw_only=True)
class Document(Node):
    kind: typ.ClassVar[NodeKind] = NodeKind.DOCUMENT


@dc.dataclass(slots=True, kw_only=True)
class Paragraph(Node):
    kind: typ.ClassVar[NodeKind] = NodeKind.PARAGRAPH


@dc.dataclass(slots=True, kw_only=True)
class Heading(Node):
    kind: typ.ClassVar[NodeKind] = NodeKind.HEADING
    level: int


@dc.dataclass(slots=True, kw_only=True)
class FencedCode(Node):
    """Fenced code block with metadata from the info string and sentinels.

    Attributes
    ----------
    language : str | None
        Language identifier from the info string.
    code : str
        Body with sentinel lines removed.
    title : str | None
        Caption taken from ``title="..."`` or a ``// title:`` sentinel.
    highlight_lines : frozenset[int]
        1-based line numbers of ``code`` to mark as highlighted.
    info : str
        Raw info string as written after the fence.
    """

    kind: typ.ClassVar[NodeKind] = NodeKind.FENCED_CODE
    language: str | None = None
    code: str = ""
    title: str | None = None
    highlight_lines: frozenset[int] = frozenset()
    info: str = ""

    def text_content(self) -> str:
        return self.code


@dc.dataclass(slots=True, kw_only=True)
class CodeGroup(Node):
    """Tabbed set of fenced code blocks (``:::codegroup``)."""

    kind: typ.ClassVar[NodeKind] = NodeKind.CODE_GROUP


@dc.dataclass(slots=True, kw_only=True)
class ListBlock(Node):
    kind: typ.ClassVar[NodeKind] = NodeKind.LIST
    ordered: bool = False
    start: int = 1


@dc.dataclass(slots=True, kw_only=True)
class ListItem(Node):
    kind: typ.ClassVar[NodeKind] = NodeKind.LIST_ITEM


@dc.dataclass(slots=True, kw_only=True)
class Blockquote(Node):
    kind: typ.ClassVar[NodeKind] = NodeKind.BLOCKQUOTE


@dc.dataclass(slots=True, kw_only=True)
class Table(Node):
    kind: typ.ClassVar[NodeKind] = NodeKind.TABLE
    alignments: tuple[str | None, ...] = ()


@dc.dataclass(slots=True, kw_only=True)
class TableRow(Node):
    kind: typ.ClassVar[NodeKind] = NodeKind.TABLE_ROW
    header: bool = False


@dc.dataclass(slots=True, kw_only=True)
class TableCell(Node):
    kind: typ.ClassVar[NodeKind] = NodeKind.TABLE_CELL
    header: bool = False
    align: str | None = None


@dc.dataclass(slots=True, kw_only=True)
class ThematicBreak(Node):
    kind: typ.ClassVar[NodeKind] = NodeKind.THEMATIC_BREAK


@dc.dataclass(slots=True, kw_only=True)
class HtmlBlock(Node):
    kind: typ.ClassVar[NodeKind] = NodeKind.HTML_BLOCK
    html: str = ""


@dc.dataclass(slots=True, kw_only=True)
class Directive(Node):
    """Triple-colon block directive such as ``:::note``."""

    kind: typ.ClassVar[NodeKind] = NodeKind.DIRECTIVE
    name: str
    title: str | None = None
    attributes: dict[str, str] = dc.field(default_factory=dict)


@dc.dataclass(slots=True, kw_only=True)
class Text(Node):
    kind: typ.ClassVar[NodeKind] = NodeKind.TEXT
    value: str = ""

    def text_content(self) -> str:
        return self.value


@dc.dataclass(slots=True, kw_only=True)
class Emphasis(Node):
    kind: typ.ClassVar[NodeKind] = NodeKind.EMPHASIS


@dc.dataclass(slots=True, kw_only=True)
class Strong(Node):
    kind: typ.ClassVar[NodeKind] = NodeKind.STRONG


@dc.dataclass(slots=True, kw_only=True)
class InlineCode(Node):
    kind: typ.ClassVar[NodeKind] = NodeKind.INLINE_CODE
    value: str = ""

    def text_content(self) -> str:
        return self.value


@dc.dataclass(slots=True, kw_only=True)
class Link(Node):
    kind: typ.ClassVar[NodeKind] = NodeKind.LINK
    target: str = ""
    title: str | None = None


@dc.dataclass(slots=True, kw_only=True)
class Image(Node):
    kind: typ.ClassVar[NodeKind] = NodeKind.IMAGE
    src: str = ""
    alt: str = ""
    title: str | None = None

    def text_content(self) -> str:
        return self.alt


@dc.dataclass(slots=True, kw_only=True)
class InlineDirective(Node):
    """Inline shortcode such as ``:kbd[Ctrl+C]``."""

    kind: typ.ClassVar[NodeKind] = NodeKind.INLINE_DIRECTIVE
    name: str
    content: str = ""
    attributes: dict[str, str] = dc.field(default_factory=dict)

    def text_content(self) -> str:
        return self.content


@dc.dataclass(slots=True, kw_only=True)
class LineBreak(Node):
    kind: typ.ClassVar[NodeKind] = NodeKind.LINE_BREAK

    def text_content(self) -> str:
        return "\n"


@dc.dataclass(slots=True, kw_only=True)
class HtmlInline(Node):
    kind: typ.ClassVar[NodeKind] = NodeKind.HTML_INLINE
    html: str = ""

    def text_content(self) -> str:
        return ""


__all__ = [
    "Blockquote",
    "CodeGroup",
    "Directive",
    "Document",
    "Emphasis",
    "FencedCode",
    "Heading",
    "HtmlBlock",
    "HtmlInline",
    "Image",
    "InlineCode",
    "InlineDirective",
    "LineBreak",
    "Link",
    "ListBlock",
    "ListItem",
    "Node",
    "NodeKind",
    "Paragraph",
    "Position",
    "Strong",
    "Table",
    "TableCell",
    "TableRow",
    "Text",
    "ThematicBreak",
]
