"""Read Markdown sources relative to a zone's content root."""

from __future__ import annotations

import typing as typ

from zonedocs.errors import NotFoundError

if typ.TYPE_CHECKING:
    from pathlib import Path


class SourceReader(typ.Protocol):
    """Capability used by the render cache to load document sources."""

    def read(self, root: Path, content_path: str) -> str:
        """Return the UTF-8 text of ``content_path`` under ``root``.

        Raises
        ------
        NotFoundError
            If the file does not exist.
        """
        ...

    def stamp(self, root: Path, content_path: str) -> int | None:
        """Return a cheap change marker (such as mtime) or ``None`` if unknown."""
        ...


class FileSourceReader:
    """Read sources from the local filesystem."""

    def read(self, root: Path, content_path: str) -> str:
        path = self._resolve(root, content_path)
        try:
            return path.read_text(encoding="utf-8")
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError) as exc:
            msg = f"Content file '{content_path}' not found under '{root}'."
            raise NotFoundError(msg) from exc

    def stamp(self, root: Path, content_path: str) -> int | None:
        path = self._resolve(root, content_path)
        try:
            return path.stat().st_mtime_ns
        except (FileNotFoundError, NotADirectoryError):
            return None

    @staticmethod
    def _resolve(root: Path, content_path: str) -> Path:
        base = root.resolve()
        candidate = (base / content_path).resolve()
        if not candidate.is_relative_to(base):
            msg = f"Content path '{content_path}' escapes the content root."
            raise NotFoundError(msg)
        return candidate


__all__ = ["FileSourceReader", "SourceReader"]
