"""Grammar lookup and server-side highlighting with Pygments.

:class:`GrammarRegistry` maps language identifiers to lexer classes. Custom
grammars take precedence over Pygments' built-in lexers; once the registry is
frozen it rejects further registrations, so it can be shared across threads.
:class:`Highlighter` turns code into ``codehilite`` HTML, marking the requested
lines with Pygments' ``hll`` spans. Languages without a grammar render as
escaped plain text.

Example
-------
>>> highlighter = Highlighter(default_grammars())
>>> "hll" in highlighter.highlight("a\\nb", "python", highlight_lines={2})
True
"""

from __future__ import annotations

import logging
import typing as typ
from html import escape

from pygments import highlight as pygments_highlight
from pygments.formatters.html import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.lexers.special import TextLexer
from pygments.util import ClassNotFound

from zonedocs.errors import ConfigError

from .lexers import DotenvLexer, EdgeHtmlLexer, ShellLexer

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from pygments.lexer import Lexer

logger = logging.getLogger(__name__)

CSS_CLASS = "codehilite"
PLAIN_TEXT = "text"


class GrammarRegistry:
    """Language identifier to lexer class mapping."""

    def __init__(self) -> None:
        self._grammars: dict[str, type[Lexer]] = {}
        self._frozen = False

    def register(self, lexer_cls: type[Lexer], *languages: str) -> None:
        """Register ``lexer_cls`` for ``languages`` (defaults to its aliases).

        Raises
        ------
        ConfigError
            If the registry has already been frozen.
        """
        if self._frozen:
            msg = "Grammar registry is frozen; register grammars at startup."
            raise ConfigError(msg)
        for language in languages or tuple(lexer_cls.aliases):
            self._grammars[language.lower()] = lexer_cls

    def freeze(self) -> GrammarRegistry:
        """Reject further registrations and return ``self``."""
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def languages(self) -> tuple[str, ...]:
        """Custom language identifiers in registration order."""
        return tuple(self._grammars)

    def __contains__(self, language: object) -> bool:
        return isinstance(language, str) and self.lexer_for(language) is not None

    def lexer_for(self, language: str | None, **options: typ.Any) -> Lexer | None:
        """Return a lexer instance for ``language`` or ``None`` when unknown."""
        if not language:
            return None
        key = language.lower()
        custom = self._grammars.get(key)
        if custom is not None:
            return custom(**options)
        try:
            return get_lexer_by_name(key, **options)
        except ClassNotFound:
            return None


def default_grammars() -> GrammarRegistry:
    """Return a frozen registry with the bundled custom grammars."""
    registry = GrammarRegistry()
    registry.register(EdgeHtmlLexer)
    registry.register(ShellLexer)
    registry.register(DotenvLexer)
    return registry.freeze()


class Highlighter:
    """Render code blocks to HTML with a fixed Pygments style."""

    def __init__(self, grammars: GrammarRegistry, style: str = "monokai") -> None:
        """Create a highlighter bound to ``grammars`` and ``style``.

        Raises
        ------
        ConfigError
            If ``style`` is not a known Pygments style.
        """
        self.grammars = grammars
        self.style = style
        try:
            self._stylesheet = HtmlFormatter(style=style, cssclass=CSS_CLASS).get_style_defs(
                f".{CSS_CLASS}"
            )
        except ClassNotFound as exc:
            msg = f"Unknown Pygments style '{style}'."
            raise ConfigError(msg) from exc

    @property
    def stylesheet(self) -> str:
        """Return the CSS used for highlighted code blocks."""
        return self._stylesheet

    def highlight(
        self,
        code: str,
        language: str | None,
        *,
        highlight_lines: cabc.Iterable[int] = (),
        title: str | None = None,
    ) -> str:
        """Return ``code`` as highlighted HTML.

        Parameters
        ----------
        code : str
            Source snippet with sentinel lines already removed.
        language : str, optional
            Language identifier; unknown or missing languages fall back to
            plain escaped text.
        highlight_lines : Iterable[int], optional
            1-based line numbers to wrap in ``<span class="hll">``.
        title : str, optional
            Caption rendered, escaped, as a ``filename`` span ahead of the
            ``<pre>``.

        Returns
        -------
        str
            A ``<div class="codehilite" data-language="...">`` block.
        """
        lexer, resolved = self._lexer(language)
        formatter = HtmlFormatter(
            style=self.style,
            cssclass=CSS_CLASS,
            hl_lines=sorted(highlight_lines),
            wrapcode=True,
        )
        html = pygments_highlight(code, lexer, formatter)
        caption = f'<span class="filename">{escape(title)}</span>' if title else ""
        return html.replace(
            f'<div class="{CSS_CLASS}">',
            f'<div class="{CSS_CLASS}" data-language="{escape(resolved, quote=True)}">'
            f"{caption}",
            1,
        )

    def tokenize(self, code: str, language: str | None) -> list[tuple[str, str]]:
        """Return ``(text, scope)`` pairs such as ``("def", "keyword")``."""
        lexer, _ = self._lexer(language)
        return [
            (value, ".".join(part.lower() for part in token_type) or PLAIN_TEXT)
            for token_type, value in lexer.get_tokens(code)
        ]

    def _lexer(self, language: str | None) -> tuple[Lexer, str]:
        # stripnl=False keeps leading blank lines so hl_lines stay aligned.
        lexer = self.grammars.lexer_for(language, stripnl=False)
        if lexer is not None:
            return lexer, language.lower() if language else PLAIN_TEXT
        if language:
            logger.debug("No grammar for language %r; rendering plain text", language)
        return TextLexer(stripnl=False), PLAIN_TEXT


__all__ = ["CSS_CLASS", "GrammarRegistry", "Highlighter", "default_grammars"]
