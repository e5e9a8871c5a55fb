"""Custom Pygments grammars registered on top of the built-in lexers.

``edge``
    Edge templates: ``{{ expr }}``, ``{{{ raw }}}``, ``{{-- comment --}}`` and
    ``@tag(...)`` / ``@end`` blocks, with the surrounding markup delegated to
    Pygments' HTML lexer.
``sh``
    Shell sessions as written in docs: optional ``$`` prompts, the command
    name, flags, strings, variables and ``NAME=value`` prefixes.
``dotenv``
    ``.env`` files with ``export`` prefixes, comments and interpolations.
"""

from __future__ import annotations

import re

from pygments.lexer import DelegatingLexer, RegexLexer, bygroups, default, include
from pygments.lexers.html import HtmlLexer
from pygments.token import (
    Comment,
    Generic,
    Keyword,
    Name,
    Number,
    Operator,
    Other,
    Punctuation,
    String,
    Text,
    Whitespace,
)

_STRINGS = [
    (r'"(\\\\|\\"|[^"])*"', String.Double),
    (r"'(\\\\|\\'|[^'])*'", String.Single),
    (r"`(\\\\|\\`|[^`])*`", String.Backtick),
]


class EdgeLexer(RegexLexer):
    """Edge template tags; everything else is emitted as ``Other``."""

    name = "Edge tags"
    aliases = ["edge-tags"]
    flags = re.MULTILINE | re.DOTALL

    tokens = {
        "root": [
            (r"[^{@]+", Other),
            (r"\{\{--.*?--\}\}", Comment.Multiline),
            (r"\{\{\{", Comment.Preproc, "raw"),
            (r"\{\{", Comment.Preproc, "expression"),
            (r"(@!?)(end\w*)", bygroups(Keyword, Keyword)),
            (
                r"(@!?)([A-Za-z_][\w.]*)([ \t]*)(\()",
                bygroups(Keyword, Name.Tag, Whitespace, Punctuation),
                "arguments",
            ),
            (r"(@!?)([A-Za-z_][\w.]*)", bygroups(Keyword, Name.Tag)),
            (r"[{@]", Other),
        ],
        "expression": [
            (r"\}\}", Comment.Preproc, "#pop"),
            include("code"),
        ],
        "raw": [
            (r"\}\}\}", Comment.Preproc, "#pop"),
            include("code"),
        ],
        "arguments": [
            (r"\)", Punctuation, "#pop"),
            (r"\(", Punctuation, "#push"),
            include("code"),
        ],
        "code": [
            (r"\s+", Whitespace),
            *_STRINGS,
            (r"\d+(\.\d+)?", Number),
            (r"(true|false|null|undefined)\b", Keyword.Constant),
            (r"(await|async|new|typeof|in|of)\b", Keyword),
            (r"[A-Za-z_$][\w$]*(?=\s*\()", Name.Function),
            (r"[A-Za-z_$][\w$]*", Name.Variable),
            (r"[-+*/%=!<>&|?:]+", Operator),
            (r"[.,\[\]{}]", Punctuation),
            (r"[()]", Punctuation),
        ],
    }


class EdgeHtmlLexer(DelegatingLexer):
    """HTML with embedded Edge tags."""

    name = "Edge"
    aliases = ["edge"]
    filenames = ["*.edge"]

    def __init__(self, **options: object) -> None:
        super().__init__(HtmlLexer, EdgeLexer, **options)


class ShellLexer(RegexLexer):
    """Shell commands as they appear in documentation snippets."""

    name = "Shell command"
    aliases = ["sh"]

    tokens = {
        "root": [
            (r"\n", Whitespace),
            (r"^([$>])([ \t]+)", bygroups(Generic.Prompt, Whitespace), "command"),
            default("command"),
        ],
        "command": [
            (r"\n", Whitespace, "#pop"),
            (r"[ \t]+", Whitespace),
            (r"\\\n", String.Escape),
            (r"#.*", Comment.Single),
            (r"([A-Za-z_]\w*)(=)", bygroups(Name.Variable, Operator), "value"),
            (r"[^\s|&;<>()\"'#=$\\`]+", Name.Builtin, "arguments"),
            include("common"),
        ],
        "value": [
            *_STRINGS,
            (r"[^\s|&;]+", String),
            default("#pop"),
        ],
        "arguments": [
            (r"\n", Whitespace, "#pop:2"),
            (r"\\\n", String.Escape),
            (r"[ \t]+", Whitespace),
            (r"(?<=\s)#.*", Comment.Single),
            (r"(\|\||&&|[|;])", Operator, "#pop"),
            (r"--?[A-Za-z0-9][\w-]*", Name.Attribute),
            (r"[^\s|&;<>()\"'$\\`]+", Text),
            include("common"),
        ],
        "common": [
            *_STRINGS,
            (r"\$\{[^}]*\}|\$\w+", Name.Variable),
            (r"[|&;<>()]+", Operator),
            (r"\\.", String.Escape),
            (r".", Text),
        ],
    }


class DotenvLexer(RegexLexer):
    """``KEY=value`` environment files."""

    name = "Dotenv"
    aliases = ["dotenv", "env"]
    filenames = [".env", ".env.*", "*.env"]

    tokens = {
        "root": [
            (r"\s+", Whitespace),
            (r"#.*", Comment.Single),
            (r"(export)([ \t]+)", bygroups(Keyword.Declaration, Whitespace)),
            (
                r"([A-Za-z_][\w.-]*)([ \t]*)(=)",
                bygroups(Name.Variable, Whitespace, Operator),
                "value",
            ),
            (r".", Text),
        ],
        "value": [
            (r"\n", Whitespace, "#pop"),
            (r"[ \t]+#.*", Comment.Single),
            (r"[ \t]+", Whitespace),
            (r'"', String.Double, "double"),
            (r"'[^'\n]*'", String.Single),
            (r"\$\{[^}\n]*\}|\$\w+", String.Interpol),
            (r"[^\s#\"'$]+", String),
            (r"[#$]", String),
        ],
        "double": [
            (r'"', String.Double, "#pop"),
            (r"\\.", String.Escape),
            (r"\$\{[^}]*\}|\$\w+", String.Interpol),
            (r'[^"\\$]+', String.Double),
            (r"\$", String.Double),
        ],
    }


__all__ = ["DotenvLexer", "EdgeHtmlLexer", "EdgeLexer", "ShellLexer"]
