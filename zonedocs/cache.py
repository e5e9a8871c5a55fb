"""Memoise compiled pages keyed on content identity.

A fingerprint is ``(zone name, content path, sha256 of source)``. When the
source reader offers a change stamp (mtime) that has not moved since the last
compile, the cached page is returned without re-reading the file. Concurrent
requests for the same fingerprint share one compile through an in-flight
:class:`~concurrent.futures.Future`; different fingerprints compile in
parallel. The guard lock only protects dictionary bookkeeping and is never
held while compiling. Failed compiles are not cached and their exception is
re-raised in every waiting caller.

Example
-------
>>> cache = RenderCache(DocumentCompiler(site))  # doctest: +SKIP
>>> page = cache.get_or_render(zone, doc, FileSourceReader())  # doctest: +SKIP
>>> cache.stats.misses  # doctest: +SKIP
1
"""

from __future__ import annotations

import dataclasses as dc
import hashlib
import logging
import threading
import typing as typ
from concurrent.futures import Future

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from zonedocs.navigation import Doc
    from zonedocs.pipeline import RenderedPage
    from zonedocs.site import Zone
    from zonedocs.sources import SourceReader

logger = logging.getLogger(__name__)

Compiler = typ.Callable[["Zone", "Doc", str], "RenderedPage"]


@dc.dataclass(frozen=True, slots=True)
class Fingerprint:
    """Content identity of a compiled page."""

    zone: str
    content_path: str
    digest: str

    @classmethod
    def of(cls, zone: str, content_path: str, source: str) -> Fingerprint:
        digest = hashlib.sha256(source.encode("utf-8")).hexdigest()
        return cls(zone=zone, content_path=content_path, digest=digest)


@dc.dataclass(frozen=True, slots=True)
class CacheStats:
    """Snapshot of cache counters."""

    hits: int
    misses: int
    entries: int


class RenderCache:
    """Thread-safe page cache with per-fingerprint compile coordination."""

    def __init__(self, compiler: Compiler) -> None:
        self._compiler = compiler
        self._guard = threading.Lock()
        self._entries: dict[Fingerprint, RenderedPage] = {}
        self._current: dict[tuple[str, str], Fingerprint] = {}
        self._stamps: dict[tuple[str, str], tuple[int, Fingerprint]] = {}
        self._inflight: dict[Fingerprint, Future[RenderedPage]] = {}
        self._hits = 0
        self._misses = 0

    def get_or_render(self, zone: Zone, doc: Doc, reader: SourceReader) -> RenderedPage:
        """Return the compiled page for ``doc``, compiling it at most once.

        Raises
        ------
        zonedocs.errors.NotFoundError
            If the reader cannot find the source file.
        Exception
            Whatever the compiler raised; nothing is cached in that case.
        """
        key = (zone.name, doc.content_path)
        stamp = reader.stamp(zone.content_root, doc.content_path)
        if stamp is not None:
            with self._guard:
                known = self._stamps.get(key)
                if known is not None and known[0] == stamp and known[1] in self._entries:
                    self._hits += 1
                    logger.debug("Cache hit (unchanged stamp) for %s/%s", *key)
                    return self._entries[known[1]]

        source = reader.read(zone.content_root, doc.content_path)
        fingerprint = Fingerprint.of(zone.name, doc.content_path, source)
        with self._guard:
            cached = self._entries.get(fingerprint)
            if cached is not None:
                self._hits += 1
                if stamp is not None:
                    self._stamps[key] = (stamp, fingerprint)
                logger.debug("Cache hit for %s/%s", *key)
                return cached
            future = self._inflight.get(fingerprint)
            owner = future is None
            if future is None:
                future = Future()
                self._inflight[fingerprint] = future
                self._misses += 1
            else:
                self._hits += 1

        if not owner:
            logger.debug("Waiting on in-flight compile for %s/%s", *key)
            return future.result()

        logger.debug("Cache miss for %s/%s; compiling", *key)
        try:
            page = self._compiler(zone, doc, source)
        except BaseException as exc:
            with self._guard:
                self._inflight.pop(fingerprint, None)
            future.set_exception(exc)
            raise

        with self._guard:
            stale = self._current.get(key)
            if stale is not None and stale != fingerprint:
                self._entries.pop(stale, None)
            self._entries[fingerprint] = page
            self._current[key] = fingerprint
            if stamp is not None:
                self._stamps[key] = (stamp, fingerprint)
            self._inflight.pop(fingerprint, None)
        future.set_result(page)
        return page

    def invalidate(self, zone: str, content_path: str) -> bool:
        """Drop the cached page for ``content_path``; return whether one existed."""
        key = (zone, content_path)
        with self._guard:
            self._stamps.pop(key, None)
            fingerprint = self._current.pop(key, None)
            if fingerprint is None:
                return False
            return self._entries.pop(fingerprint, None) is not None

    def clear(self) -> None:
        """Drop every cached page and reset counters."""
        with self._guard:
            self._entries.clear()
            self._current.clear()
            self._stamps.clear()
            self._hits = 0
            self._misses = 0

    @property
    def stats(self) -> CacheStats:
        with self._guard:
            return CacheStats(hits=self._hits, misses=self._misses, entries=len(self._entries))

    def __contains__(self, fingerprint: object) -> bool:
        with self._guard:
            return fingerprint in self._entries

    def fingerprints(self) -> cabc.Iterator[Fingerprint]:
        """Yield a snapshot of the cached fingerprints."""
        with self._guard:
            snapshot = list(self._entries)
        yield from snapshot


__all__ = ["CacheStats", "Compiler", "Fingerprint", "RenderCache"]
