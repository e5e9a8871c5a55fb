"""Directive vocabulary and attribute parsing.

Block directives open with ``:::name{key="value"} Optional title`` and close
with a line of at least as many colons. A directive nests inside another by
giving the outer one a longer marker (``::::warning`` around ``:::tip``).
Inline directives read ``:name[content]{key="value"}``.
"""

from __future__ import annotations

import re

ALERT_DIRECTIVES = frozenset({"note", "tip", "info", "warning", "danger", "important"})
CODEGROUP_DIRECTIVE = "codegroup"
BLOCK_DIRECTIVES = ALERT_DIRECTIVES | {CODEGROUP_DIRECTIVE}
INLINE_DIRECTIVES = frozenset({"kbd", "badge", "abbr"})

# Text after the ``:::`` marker of an opening line.
DIRECTIVE_PARAMS_PATTERN = re.compile(
    r"^[ \t]*(?P<name>[A-Za-z][\w-]*)(?P<attrs>\{[^}]*\})?"
    r"(?:[ \t]+(?P<title>.*?))?[ \t]*$"
)
# A closing marker line, possibly behind blockquote markers.
DIRECTIVE_CLOSE_PATTERN = re.compile(r"^[ \t>]*:{3,}[ \t]*$")
INLINE_DIRECTIVE_PATTERN = re.compile(r":(?P<name>[A-Za-z][\w-]*)\[")
_ATTRIBUTE_PATTERN = re.compile(
    r"""(?P<key>[A-Za-z_][\w-]*)\s*=\s*(?:"(?P<dq>[^"]*)"|'(?P<sq>[^']*)'|(?P<bare>[^\s"'}]+))"""
)


def parse_attributes(text: str | None) -> dict[str, str]:
    """Parse ``key="value"`` pairs, with or without surrounding braces.

    Example
    -------
    >>> parse_attributes('{title="Heads up" level=2}')
    {'title': 'Heads up', 'level': '2'}
    """
    if not text:
        return {}
    body = text.strip()
    if body.startswith("{") and body.endswith("}"):
        body = body[1:-1]
    attributes: dict[str, str] = {}
    for match in _ATTRIBUTE_PATTERN.finditer(body):
        value = match.group("dq")
        if value is None:
            value = match.group("sq")
        if value is None:
            value = match.group("bare")
        attributes[match.group("key")] = value
    return attributes


__all__ = [
    "ALERT_DIRECTIVES",
    "BLOCK_DIRECTIVES",
    "CODEGROUP_DIRECTIVE",
    "DIRECTIVE_CLOSE_PATTERN",
    "DIRECTIVE_PARAMS_PATTERN",
    "INLINE_DIRECTIVES",
    "INLINE_DIRECTIVE_PATTERN",
    "parse_attributes",
]
