"""Error taxonomy shared by the zonedocs rendering pipeline.

Only :class:`ConfigError` is allowed to escape to the caller (at startup);
everything else is converted into an :class:`ErrorPayload` by
:class:`~zonedocs.pipeline.ContentRenderer`.

Examples
--------
>>> from zonedocs.errors import ParseError
>>> err = ParseError("unterminated fenced code block", line=3, column=1)
>>> str(err)
'unterminated fenced code block (line 3, column 1)'
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ


class ConfigError(ValueError):
    """Raised when zone, menu, or site configuration is malformed."""


class NotFoundError(LookupError):
    """Raised when a URL or content file does not resolve to a document."""


class ParseError(ValueError):
    """Raised when Markdown or directive syntax is malformed.

    Attributes
    ----------
    message : str
        Human-readable description without position information.
    line : int
        1-based source line of the offending construct.
    column : int
        1-based source column of the offending construct.
    """

    def __init__(self, message: str, *, line: int, column: int = 1) -> None:
        super().__init__(f"{message} (line {line}, column {column})")
        self.message = message
        self.line = line
        self.column = column


class RenderFailure(RuntimeError):
    """Raised when a node renderer or page template cannot produce output."""


@dc.dataclass(frozen=True, slots=True)
class RenderWarning:
    """Non-fatal problem recorded while rendering a document."""

    kind: str
    message: str
    line: int | None = None
    column: int | None = None


@dc.dataclass(frozen=True, slots=True)
class ErrorPayload:
    """Structured error returned in the ``error`` branch of the render contract."""

    kind: str
    message: str
    line: int | None = None
    column: int | None = None

    def to_dict(self) -> dict[str, typ.Any]:
        """Return the payload as a mapping, omitting unknown positions."""
        payload: dict[str, typ.Any] = {"kind": self.kind, "message": self.message}
        if self.line is not None:
            payload["line"] = self.line
        if self.column is not None:
            payload["column"] = self.column
        return payload


__all__ = [
    "ConfigError",
    "ErrorPayload",
    "NotFoundError",
    "ParseError",
    "RenderFailure",
    "RenderWarning",
]
