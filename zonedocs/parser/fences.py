r"""Fenced code metadata: the info-string mini-grammar and body sentinels.

The info string after the opening fence reads::

    lang[,extras]{1,3-5} title="app.ts"

Inside the body, comment sentinels are consumed before highlighting:

- ``// title: app.ts`` on the first line sets the caption;
- ``// highlight-start`` and ``// highlight-end`` mark the lines between them.

``#``, ``--``, ``<!-- ... -->`` and ``{{-- ... --}}`` comment forms are
accepted as well so the sentinels work in shell, SQL, HTML and Edge snippets.

Example
-------
>>> meta = parse_fence_body(["// title: app.ts", "a", "// highlight-start", "b",
...                          "// highlight-end"], first_line=2)
>>> meta.code, meta.title, sorted(meta.highlight_lines)
('a\nb', 'app.ts', [2])
"""

from __future__ import annotations

import dataclasses as dc
import re
import typing as typ

from zonedocs.errors import ParseError

from .directives import parse_attributes

if typ.TYPE_CHECKING:
    import collections.abc as cabc

INFO_PATTERN = re.compile(
    r"^(?P<lang>[A-Za-z0-9_+#.-]+)?(?:,[^\s{]*)?"
    r"(?:\{(?P<ranges>[^}]*)\})?(?P<rest>.*)$"
)
_SENTINEL_PATTERN = re.compile(
    r"^\s*(?://|#|--|<!--|\{\{--)\s*"
    r"(?:(?P<start>highlight-start)|(?P<end>highlight-end)|title:\s*(?P<title>.+?))"
    r"\s*(?:-->|--\}\})?\s*$"
)
_RANGE_PATTERN = re.compile(r"^(\d+)(?:-(\d+))?$")


@dc.dataclass(frozen=True, slots=True)
class FenceInfo:
    """Parsed info string."""

    language: str | None
    highlight_lines: frozenset[int]
    title: str | None
    attributes: dict[str, str]


@dc.dataclass(frozen=True, slots=True)
class FenceBody:
    """Fence body after sentinel removal."""

    code: str
    title: str | None
    highlight_lines: frozenset[int]


def parse_info_string(info: str, *, line: int, column: int = 1) -> FenceInfo:
    """Split ``info`` into language, highlight ranges, and attributes.

    Raises
    ------
    ParseError
        If the ``{...}`` range list is malformed.
    """
    match = INFO_PATTERN.match(info.strip())
    if match is None:  # pragma: no cover - pattern matches any input
        return FenceInfo(None, frozenset(), None, {})
    ranges = match.group("ranges")
    highlight = (
        _parse_ranges(ranges, line=line, column=column) if ranges is not None else frozenset()
    )
    attributes = parse_attributes(match.group("rest"))
    language = match.group("lang")
    return FenceInfo(
        language=language.lower() if language else None,
        highlight_lines=highlight,
        title=attributes.pop("title", None),
        attributes=attributes,
    )


def parse_fence_body(lines: cabc.Sequence[str], *, first_line: int) -> FenceBody:
    """Strip title and highlight sentinels from a fence body.

    Parameters
    ----------
    lines : Sequence[str]
        Body lines without the opening and closing fences.
    first_line : int
        Source line number of ``lines[0]``; used in error positions.

    Raises
    ------
    ParseError
        If highlight sentinels are nested or unbalanced.
    """
    kept: list[str] = []
    highlighted: set[int] = set()
    title: str | None = None
    open_line: int | None = None
    for index, text in enumerate(lines):
        source_line = first_line + index
        match = _SENTINEL_PATTERN.match(text)
        if match is None:
            kept.append(text)
            if open_line is not None:
                highlighted.add(len(kept))
            continue
        if match.group("title") is not None:
            if index == 0:
                title = match.group("title").strip()
            else:
                kept.append(text)
                if open_line is not None:
                    highlighted.add(len(kept))
        elif match.group("start") is not None:
            if open_line is not None:
                msg = "nested highlight-start sentinel"
                raise ParseError(msg, line=source_line)
            open_line = source_line
        else:
            if open_line is None:
                msg = "highlight-end sentinel without a matching highlight-start"
                raise ParseError(msg, line=source_line)
            open_line = None
    if open_line is not None:
        msg = "unterminated highlight-start sentinel"
        raise ParseError(msg, line=open_line)
    return FenceBody(
        code="\n".join(kept), title=title, highlight_lines=frozenset(highlighted)
    )


def _parse_ranges(text: str, *, line: int, column: int) -> frozenset[int]:
    numbers: set[int] = set()
    for chunk in text.split(","):
        part = chunk.strip()
        if not part:
            continue
        match = _RANGE_PATTERN.match(part)
        if match is None:
            msg = f"invalid highlight range '{part}' in fence info string"
            raise ParseError(msg, line=line, column=column)
        start = int(match.group(1))
        end = int(match.group(2) or start)
        if start < 1 or end < start:
            msg = f"invalid highlight range '{part}' in fence info string"
            raise ParseError(msg, line=line, column=column)
        numbers.update(range(start, end + 1))
    return frozenset(numbers)


__all__ = ["FenceBody", "FenceInfo", "parse_fence_body", "parse_info_string"]
