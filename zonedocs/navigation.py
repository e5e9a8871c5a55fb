r"""Load per-zone ``menu.json`` files into immutable navigation trees.

A menu is either a single group object or an array of groups::

    {"name": "root", "categories": [
        {"name": "Database", "docs": [
            {"title": "Raw queries", "permalink": "db/raw-query",
             "contentPath": "database/raw-query.md"}
        ]}
    ]}

Decoding and schema validation go through ``msgspec`` structs; the result is
converted into slotted dataclasses with permalink and content-path indexes so
lookups during URL resolution and link rewriting are O(1).

Example
-------
>>> tree = load_navigation(
...     '{"name": "root", "categories": [{"name": "root", "docs": ['
...     '{"title": "Intro", "permalink": "/intro/", "contentPath": "intro.md"}]}]}'
... )
>>> tree.get("intro").content_path
'intro.md'
"""

from __future__ import annotations

import dataclasses as dc
import posixpath
import typing as typ

import msgspec
import msgspec.json

from .errors import ConfigError

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

ROOT_SENTINEL = "root"


class _DocSpec(msgspec.Struct, rename="camel"):
    title: str
    permalink: str
    content_path: str


class _CategorySpec(msgspec.Struct):
    name: str
    docs: list[_DocSpec]


class _GroupSpec(msgspec.Struct):
    name: str
    categories: list[_CategorySpec]


_MenuSpec = list[_GroupSpec] | _GroupSpec


@dc.dataclass(frozen=True, slots=True)
class Doc:
    """A single navigable document.

    Attributes
    ----------
    title : str
        Label shown in the sidebar.
    permalink : str
        Zone-relative URL path without surrounding slashes.
    content_path : str
        Markdown file path relative to the zone content root.
    """

    title: str
    permalink: str
    content_path: str


@dc.dataclass(frozen=True, slots=True)
class Category:
    """Named bucket of docs; ``"root"`` hides the sidebar heading."""

    name: str
    docs: tuple[Doc, ...]

    @property
    def is_root(self) -> bool:
        return self.name == ROOT_SENTINEL


@dc.dataclass(frozen=True, slots=True)
class Group:
    """Top-level navigation group; ``"root"`` means ungrouped."""

    name: str
    categories: tuple[Category, ...]

    @property
    def is_root(self) -> bool:
        return self.name == ROOT_SENTINEL


@dc.dataclass(frozen=True, slots=True)
class NavigationTree:
    """Ordered groups plus lookup indexes for a single zone."""

    groups: tuple[Group, ...]
    by_permalink: typ.Mapping[str, Doc] = dc.field(repr=False)
    by_content_path: typ.Mapping[str, Doc] = dc.field(repr=False)

    def get(self, permalink: str) -> Doc | None:
        """Return the doc registered under ``permalink`` or ``None``."""
        return self.by_permalink.get(normalize_permalink(permalink))

    def get_by_content_path(self, content_path: str) -> Doc | None:
        """Return the doc whose source file is ``content_path`` or ``None``."""
        return self.by_content_path.get(normalize_content_path(content_path))

    def iter_docs(self) -> cabc.Iterator[Doc]:
        """Yield every doc in menu order."""
        for group in self.groups:
            for category in group.categories:
                yield from category.docs

    def __len__(self) -> int:
        return len(self.by_permalink)


def normalize_permalink(permalink: str) -> str:
    """Strip whitespace and surrounding slashes from ``permalink``."""
    return permalink.strip().strip("/")


def normalize_content_path(content_path: str) -> str:
    """Return ``content_path`` as a clean POSIX path relative to the content root."""
    cleaned = posixpath.normpath(content_path.strip()).lstrip("/")
    return "" if cleaned == "." else cleaned


def load_navigation(payload: bytes | str | object) -> NavigationTree:
    """Build a :class:`NavigationTree` from a ``menu.json`` payload.

    Parameters
    ----------
    payload : bytes | str | object
        Raw JSON text, or an object already decoded from JSON (a mapping for a
        single group, a list for several groups).

    Returns
    -------
    NavigationTree
        Immutable tree with permalink and content-path indexes.

    Raises
    ------
    ConfigError
        If the payload is not valid JSON, misses required fields, or repeats a
        permalink within the zone.
    """
    try:
        if isinstance(payload, bytes | str):
            spec = msgspec.json.decode(payload, type=_MenuSpec)
        else:
            spec = msgspec.convert(payload, type=_MenuSpec)
    except msgspec.ValidationError as exc:
        msg = f"Malformed navigation menu: {exc}"
        raise ConfigError(msg) from exc
    except msgspec.DecodeError as exc:
        msg = f"Navigation menu is not valid JSON: {exc}"
        raise ConfigError(msg) from exc

    group_specs = spec if isinstance(spec, list) else [spec]
    by_permalink: dict[str, Doc] = {}
    by_content_path: dict[str, Doc] = {}
    groups: list[Group] = []
    for group_spec in group_specs:
        categories: list[Category] = []
        for category_spec in group_spec.categories:
            docs: list[Doc] = []
            for doc_spec in category_spec.docs:
                doc = _build_doc(doc_spec)
                if doc.permalink in by_permalink:
                    msg = f"Duplicate permalink '{doc.permalink}' in navigation menu."
                    raise ConfigError(msg)
                by_permalink[doc.permalink] = doc
                by_content_path.setdefault(doc.content_path, doc)
                docs.append(doc)
            categories.append(Category(name=category_spec.name, docs=tuple(docs)))
        groups.append(Group(name=group_spec.name, categories=tuple(categories)))

    return NavigationTree(
        groups=tuple(groups),
        by_permalink=by_permalink,
        by_content_path=by_content_path,
    )


def load_navigation_file(path: Path) -> NavigationTree:
    """Read ``path`` and build its navigation tree.

    Raises
    ------
    ConfigError
        If the file is missing or its content is malformed.
    """
    try:
        raw = path.read_bytes()
    except OSError as exc:
        msg = f"Unable to read navigation menu '{path}': {exc}"
        raise ConfigError(msg) from exc
    return load_navigation(raw)


def _build_doc(spec: _DocSpec) -> Doc:
    permalink = normalize_permalink(spec.permalink)
    content_path = normalize_content_path(spec.content_path)
    if not permalink:
        msg = f"Doc '{spec.title}' has an empty permalink."
        raise ConfigError(msg)
    if any(segment in {".", ".."} for segment in permalink.split("/")):
        msg = f"Doc '{spec.title}' has a relative segment in permalink '{permalink}'."
        raise ConfigError(msg)
    if not content_path:
        msg = f"Doc '{spec.title}' has an empty contentPath."
        raise ConfigError(msg)
    return Doc(title=spec.title, permalink=permalink, content_path=content_path)


__all__ = [
    "ROOT_SENTINEL",
    "Category",
    "Doc",
    "Group",
    "NavigationTree",
    "load_navigation",
    "load_navigation_file",
    "normalize_content_path",
    "normalize_permalink",
]
