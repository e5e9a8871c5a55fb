"""Built-in HTML renderers, one per node kind.

Text is escaped with :mod:`markupsafe`; raw HTML nodes pass through untouched.
Alerts, fenced code and code groups go through the ``elements/*.jinja``
templates so a site can restyle them without touching Python.
"""

from __future__ import annotations

import typing as typ

from markupsafe import Markup, escape

from zonedocs.parser.directives import ALERT_DIRECTIVES
from zonedocs.parser.nodes import Node, NodeKind, Paragraph

from .context import TocEntry
from .links import resolve_link

if typ.TYPE_CHECKING:
    from zonedocs.parser.nodes import (
        Directive,
        FencedCode,
        Heading,
        HtmlBlock,
        HtmlInline,
        Image,
        InlineCode,
        InlineDirective,
        Link,
        ListBlock,
        TableCell,
        TableRow,
        Text,
    )

    from .context import RenderContext
    from .registry import NodeRenderer

ALERT_TEMPLATE = "elements/alert.jinja"
CODE_TEMPLATE = "elements/code.jinja"
CODEGROUP_TEMPLATE = "elements/codegroup.jinja"
BADGE_VARIANTS = frozenset({"info", "success", "warning", "danger", "neutral"})


def _attr(name: str, value: str | None) -> str:
    return "" if value is None else f' {name}="{escape(value)}"'


def render_document(node: Node, ctx: RenderContext) -> str:
    return ctx.render_children(node)


def render_paragraph(node: Node, ctx: RenderContext) -> str:
    return f"<p>{ctx.render_children(node)}</p>\n"


def render_heading(node: Node, ctx: RenderContext) -> str:
    """Render a heading with a unique anchor and feed the TOC and page title."""
    heading = typ.cast("Heading", node)
    text = heading.text_content().strip()
    slug = ctx.unique_slug(text)
    if heading.level == 1 and ctx.title is None:
        ctx.title = text
    if heading.level in ctx.options.toc_levels:
        ctx.toc.append(TocEntry(level=heading.level, text=text, slug=slug))
    level = heading.level
    return f'<h{level} id="{slug}">{ctx.render_children(heading)}</h{level}>\n'


def _highlight(code: FencedCode, ctx: RenderContext, *, title: str | None) -> Markup:
    return Markup(  # noqa: S704 - Pygments output is already escaped
        ctx.highlighter.highlight(
            code.code,
            code.language,
            highlight_lines=code.highlight_lines,
            title=title,
        )
    )


def render_fenced_code(node: Node, ctx: RenderContext) -> str:
    code = typ.cast("FencedCode", node)
    return ctx.render_template(
        CODE_TEMPLATE,
        language=code.language or "text",
        title=code.title,
        highlighted=_highlight(code, ctx, title=code.title),
    )


def render_code_group(node: Node, ctx: RenderContext) -> str:
    """Render a ``:::codegroup`` as tabs, one per fenced block."""
    group_id = ctx.unique_slug("codegroup")
    tabs = []
    for index, child in enumerate(node.children, start=1):
        code = typ.cast("FencedCode", child)
        tabs.append(
            {
                "id": f"{group_id}-tab-{index}",
                "label": code.title or code.language or f"Tab {index}",
                "language": code.language or "text",
                "highlighted": _highlight(code, ctx, title=None),
            }
        )
    return ctx.render_template(CODEGROUP_TEMPLATE, group_id=group_id, tabs=tabs)


def render_list(node: Node, ctx: RenderContext) -> str:
    block = typ.cast("ListBlock", node)
    if block.ordered:
        start = f' start="{block.start}"' if block.start != 1 else ""
        return f"<ol{start}>\n{ctx.render_children(block)}</ol>\n"
    return f"<ul>\n{ctx.render_children(block)}</ul>\n"


def render_list_item(node: Node, ctx: RenderContext) -> str:
    """Render a list item; a lone paragraph is rendered without ``<p>``."""
    paragraphs = [child for child in node.children if isinstance(child, Paragraph)]
    parts: list[str] = []
    for child in node.children:
        if isinstance(child, Paragraph) and len(paragraphs) == 1:
            parts.append(ctx.render_children(child))
        else:
            parts.append(ctx.render(child))
    return f"<li>{''.join(parts).rstrip()}</li>\n"


def render_blockquote(node: Node, ctx: RenderContext) -> str:
    return f"<blockquote>\n{ctx.render_children(node)}</blockquote>\n"


def render_table(node: Node, ctx: RenderContext) -> str:
    rows = typ.cast("list[TableRow]", node.children)
    head = "".join(ctx.render(row) for row in rows if row.header)
    body = "".join(ctx.render(row) for row in rows if not row.header)
    html = f"<table>\n<thead>\n{head}</thead>\n"
    if body:
        html += f"<tbody>\n{body}</tbody>\n"
    return html + "</table>\n"


def render_table_row(node: Node, ctx: RenderContext) -> str:
    return f"<tr>{ctx.render_children(node)}</tr>\n"


def render_table_cell(node: Node, ctx: RenderContext) -> str:
    cell = typ.cast("TableCell", node)
    tag = "th" if cell.header else "td"
    style = f' style="text-align: {cell.align}"' if cell.align else ""
    return f"<{tag}{style}>{ctx.render_children(cell)}</{tag}>"


def render_thematic_break(node: Node, ctx: RenderContext) -> str:
    return "<hr>\n"


def render_html_block(node: Node, ctx: RenderContext) -> str:
    return typ.cast("HtmlBlock", node).html + "\n"


def render_directive(node: Node, ctx: RenderContext) -> str:
    """Render an alert directive such as ``:::warning``."""
    directive = typ.cast("Directive", node)
    variant = directive.name if directive.name in ALERT_DIRECTIVES else "note"
    return ctx.render_template(
        ALERT_TEMPLATE,
        variant=variant,
        title=directive.title or directive.name.title(),
        attributes=directive.attributes,
        body=Markup(ctx.render_children(directive)),  # noqa: S704 - rendered HTML
    )


def render_text(node: Node, ctx: RenderContext) -> str:
    return str(escape(typ.cast("Text", node).value))


def render_emphasis(node: Node, ctx: RenderContext) -> str:
    return f"<em>{ctx.render_children(node)}</em>"


def render_strong(node: Node, ctx: RenderContext) -> str:
    return f"<strong>{ctx.render_children(node)}</strong>"


def render_inline_code(node: Node, ctx: RenderContext) -> str:
    return f"<code>{escape(typ.cast('InlineCode', node).value)}</code>"


def render_link(node: Node, ctx: RenderContext) -> str:
    """Render a link, rewriting internal targets and flagging broken ones."""
    link = typ.cast("Link", node)
    target = resolve_link(link.target, ctx)
    css = ""
    if target.broken:
        ctx.warn(
            "broken_link",
            f"Link target '{link.target}' does not resolve to a document.",
            link.position,
        )
        css = ' class="broken-link"'
    title = _attr("title", link.title)
    return f'<a href="{escape(target.href)}"{css}{title}>{ctx.render_children(link)}</a>'


def render_image(node: Node, ctx: RenderContext) -> str:
    image = typ.cast("Image", node)
    title = _attr("title", image.title)
    return f'<img src="{escape(image.src)}" alt="{escape(image.alt)}"{title}>'


def render_inline_directive(node: Node, ctx: RenderContext) -> str:
    """Render ``:kbd[...]``, ``:badge[...]`` and ``:abbr[...]`` shortcodes."""
    directive = typ.cast("InlineDirective", node)
    content = escape(directive.content)
    if directive.name == "kbd":
        keys = [escape(key.strip()) for key in directive.content.split("+")]
        return "+".join(f"<kbd>{key}</kbd>" for key in keys if key)
    if directive.name == "badge":
        variant = directive.attributes.get("variant", "neutral")
        if variant not in BADGE_VARIANTS:
            variant = "neutral"
        return f'<span class="badge badge-{variant}">{content}</span>'
    if directive.name == "abbr":
        title = _attr("title", directive.attributes.get("title"))
        return f"<abbr{title}>{content}</abbr>"
    return str(content)


def render_line_break(node: Node, ctx: RenderContext) -> str:
    return "<br>\n"


def render_html_inline(node: Node, ctx: RenderContext) -> str:
    return typ.cast("HtmlInline", node).html


DEFAULT_RENDERERS: dict[NodeKind, NodeRenderer] = {
    NodeKind.DOCUMENT: render_document,
    NodeKind.PARAGRAPH: render_paragraph,
    NodeKind.HEADING: render_heading,
    NodeKind.FENCED_CODE: render_fenced_code,
    NodeKind.CODE_GROUP: render_code_group,
    NodeKind.LIST: render_list,
    NodeKind.LIST_ITEM: render_list_item,
    NodeKind.BLOCKQUOTE: render_blockquote,
    NodeKind.TABLE: render_table,
    NodeKind.TABLE_ROW: render_table_row,
    NodeKind.TABLE_CELL: render_table_cell,
    NodeKind.THEMATIC_BREAK: render_thematic_break,
    NodeKind.HTML_BLOCK: render_html_block,
    NodeKind.DIRECTIVE: render_directive,
    NodeKind.TEXT: render_text,
    NodeKind.EMPHASIS: render_emphasis,
    NodeKind.STRONG: render_strong,
    NodeKind.INLINE_CODE: render_inline_code,
    NodeKind.LINK: render_link,
    NodeKind.IMAGE: render_image,
    NodeKind.INLINE_DIRECTIVE: render_inline_directive,
    NodeKind.LINE_BREAK: render_line_break,
    NodeKind.HTML_INLINE: render_html_inline,
}


__all__ = ["DEFAULT_RENDERERS"]
