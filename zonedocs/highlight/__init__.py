"""Server-side syntax highlighting built on Pygments."""

from .lexers import DotenvLexer, EdgeHtmlLexer, EdgeLexer, ShellLexer
from .registry import CSS_CLASS, GrammarRegistry, Highlighter, default_grammars

__all__ = [
    "CSS_CLASS",
    "DotenvLexer",
    "EdgeHtmlLexer",
    "EdgeLexer",
    "GrammarRegistry",
    "Highlighter",
    "ShellLexer",
    "default_grammars",
]
