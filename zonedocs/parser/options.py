"""Parser configuration."""

from __future__ import annotations

import dataclasses as dc
import enum


class UnknownDirectivePolicy(enum.StrEnum):
    """How the parser treats directive names it does not recognise.

    ``LITERAL`` keeps the directive source as plain text so newer content still
    renders on older builds; ``STRICT`` raises :class:`~zonedocs.errors.ParseError`.
    """

    LITERAL = "literal"
    STRICT = "strict"


@dc.dataclass(frozen=True, slots=True)
class ParserOptions:
    """Options recognised by :func:`zonedocs.parser.parse_markdown`.

    Attributes
    ----------
    unknown_directives : UnknownDirectivePolicy
        Policy for unknown block (``:::name``) and inline (``:name[...]``)
        directives.
    """

    unknown_directives: UnknownDirectivePolicy = UnknownDirectivePolicy.LITERAL


__all__ = ["ParserOptions", "UnknownDirectivePolicy"]
