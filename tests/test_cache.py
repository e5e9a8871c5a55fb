"""Tests for the fingerprint-keyed render cache."""

from __future__ import annotations

import threading
import time
import typing as typ
from concurrent.futures import ThreadPoolExecutor

import pytest

from zonedocs.cache import CacheStats, Fingerprint, RenderCache
from zonedocs.pipeline import RenderedPage

from .conftest import MODELS_MD, RAW_QUERY_MD, MemoryReader

if typ.TYPE_CHECKING:
    from zonedocs.navigation import Doc
    from zonedocs.site import SiteContext, Zone


class RecordingCompiler:
    """Compiler stub that records calls and can block or fail on demand."""

    def __init__(self) -> None:
        self.calls: list[str] = []
        self.release = threading.Event()
        self.release.set()
        self.fail_with: BaseException | None = None
        self._lock = threading.Lock()

    def __call__(self, zone: Zone, doc: Doc, source: str) -> RenderedPage:
        with self._lock:
            self.calls.append(source)
        assert self.release.wait(timeout=5)
        if self.fail_with is not None:
            raise self.fail_with
        return RenderedPage(html=f"<p>{len(source)}</p>", title=doc.title)


class UnstampedReader(MemoryReader):
    def stamp(self, root: typ.Any, content_path: str) -> int | None:
        return None


@pytest.fixture
def target(site: SiteContext) -> tuple[Zone, Doc]:
    zone = site.get_zone("reference")
    doc = zone.navigation.get("db/raw-query")
    assert doc is not None
    return zone, doc


@pytest.fixture
def compiler() -> RecordingCompiler:
    return RecordingCompiler()


@pytest.fixture
def cache(compiler: RecordingCompiler) -> RenderCache:
    return RenderCache(compiler)


def _wait_for(predicate: typ.Callable[[], bool], timeout: float = 5.0) -> None:
    deadline = time.monotonic() + timeout
    while not predicate():
        if time.monotonic() > deadline:
            pytest.fail("timed out waiting for concurrent requests")
        time.sleep(0.005)


def test_fingerprint_depends_on_content() -> None:
    first = Fingerprint.of("reference", "a.md", "# A")

    assert first == Fingerprint.of("reference", "a.md", "# A")
    assert first != Fingerprint.of("reference", "a.md", "# B")
    assert first != Fingerprint.of("guides", "a.md", "# A")
    assert len(first.digest) == 64


def test_unchanged_stamp_skips_reading(
    cache: RenderCache,
    compiler: RecordingCompiler,
    memory_reader: MemoryReader,
    target: tuple[Zone, Doc],
) -> None:
    first = cache.get_or_render(*target, memory_reader)
    second = cache.get_or_render(*target, memory_reader)

    assert second is first
    assert memory_reader.reads == 1
    assert compiler.calls == [RAW_QUERY_MD]
    assert cache.stats == CacheStats(hits=1, misses=1, entries=1)


def test_unstamped_reader_hits_on_fingerprint(
    cache: RenderCache, compiler: RecordingCompiler, target: tuple[Zone, Doc]
) -> None:
    reader = UnstampedReader({"database/raw-query.md": RAW_QUERY_MD})

    first = cache.get_or_render(*target, reader)
    second = cache.get_or_render(*target, reader)

    assert second is first
    assert reader.reads == 2
    assert len(compiler.calls) == 1


def test_changed_content_recompiles_and_evicts(
    cache: RenderCache,
    compiler: RecordingCompiler,
    memory_reader: MemoryReader,
    target: tuple[Zone, Doc],
) -> None:
    cache.get_or_render(*target, memory_reader)
    memory_reader.put("database/raw-query.md", MODELS_MD)

    page = cache.get_or_render(*target, memory_reader)

    assert page.html == f"<p>{len(MODELS_MD)}</p>"
    assert compiler.calls == [RAW_QUERY_MD, MODELS_MD]
    zone, doc = target
    assert list(cache.fingerprints()) == [
        Fingerprint.of(zone.name, doc.content_path, MODELS_MD)
    ]


def test_touched_but_identical_file_is_a_hit(
    cache: RenderCache,
    compiler: RecordingCompiler,
    memory_reader: MemoryReader,
    target: tuple[Zone, Doc],
) -> None:
    cache.get_or_render(*target, memory_reader)
    memory_reader.put("database/raw-query.md", RAW_QUERY_MD)

    cache.get_or_render(*target, memory_reader)
    cache.get_or_render(*target, memory_reader)

    assert len(compiler.calls) == 1
    assert memory_reader.reads == 2
    assert cache.stats.hits == 2


def test_failed_compile_is_not_cached(
    cache: RenderCache,
    compiler: RecordingCompiler,
    memory_reader: MemoryReader,
    target: tuple[Zone, Doc],
) -> None:
    compiler.fail_with = RuntimeError("boom")
    with pytest.raises(RuntimeError, match="boom"):
        cache.get_or_render(*target, memory_reader)
    assert cache.stats.entries == 0

    compiler.fail_with = None
    page = cache.get_or_render(*target, memory_reader)

    assert page.ok
    assert len(compiler.calls) == 2


def test_concurrent_requests_share_one_compile(
    cache: RenderCache,
    compiler: RecordingCompiler,
    memory_reader: MemoryReader,
    target: tuple[Zone, Doc],
) -> None:
    workers = 8
    barrier = threading.Barrier(workers)
    compiler.release.clear()

    def request() -> RenderedPage:
        barrier.wait(timeout=5)
        return cache.get_or_render(*target, memory_reader)

    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = [pool.submit(request) for _ in range(workers)]
        _wait_for(lambda: cache.stats.hits + cache.stats.misses == workers)
        compiler.release.set()
        pages = [future.result(timeout=5) for future in futures]

    assert len(compiler.calls) == 1
    assert all(page is pages[0] for page in pages)
    assert cache.stats == CacheStats(hits=workers - 1, misses=1, entries=1)


def test_concurrent_waiters_see_the_failure(
    cache: RenderCache,
    compiler: RecordingCompiler,
    memory_reader: MemoryReader,
    target: tuple[Zone, Doc],
) -> None:
    workers = 4
    compiler.release.clear()
    compiler.fail_with = RuntimeError("template exploded")

    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = [
            pool.submit(cache.get_or_render, *target, memory_reader)
            for _ in range(workers)
        ]
        _wait_for(lambda: cache.stats.hits + cache.stats.misses == workers)
        compiler.release.set()
        for future in futures:
            with pytest.raises(RuntimeError, match="template exploded"):
                future.result(timeout=5)

    assert len(compiler.calls) == 1
    assert cache.stats.entries == 0


def test_distinct_documents_compile_independently(
    cache: RenderCache,
    compiler: RecordingCompiler,
    memory_reader: MemoryReader,
    site: SiteContext,
) -> None:
    zone = site.get_zone("reference")
    docs = [zone.navigation.get("db/raw-query"), zone.navigation.get("db/models")]

    pages = [cache.get_or_render(zone, doc, memory_reader) for doc in docs if doc]

    assert pages[0] is not pages[1]
    assert cache.stats.entries == 2


def test_unrelated_document_renders_while_another_compiles(
    memory_reader: MemoryReader, site: SiteContext
) -> None:
    compiler = RecordingCompiler()
    slow = threading.Event()
    gate = threading.Event()

    def gated(zone: Zone, doc: Doc, source: str) -> RenderedPage:
        if source == RAW_QUERY_MD:
            slow.set()
            assert gate.wait(timeout=5)
        return compiler(zone, doc, source)

    cache = RenderCache(gated)
    zone = site.get_zone("reference")
    raw_query = zone.navigation.get("db/raw-query")
    models = zone.navigation.get("db/models")
    assert raw_query is not None
    assert models is not None

    with ThreadPoolExecutor(max_workers=1) as pool:
        pending = pool.submit(cache.get_or_render, zone, raw_query, memory_reader)
        assert slow.wait(timeout=5)

        page = cache.get_or_render(zone, models, memory_reader)

        assert page.html == f"<p>{len(MODELS_MD)}</p>"
        assert not pending.done()
        gate.set()
        assert pending.result(timeout=5).html == f"<p>{len(RAW_QUERY_MD)}</p>"

    assert cache.stats == CacheStats(hits=0, misses=2, entries=2)


def test_invalidate_and_clear(
    cache: RenderCache,
    compiler: RecordingCompiler,
    memory_reader: MemoryReader,
    target: tuple[Zone, Doc],
) -> None:
    zone, doc = target
    cache.get_or_render(zone, doc, memory_reader)
    fingerprint = Fingerprint.of(zone.name, doc.content_path, RAW_QUERY_MD)
    assert fingerprint in cache

    assert cache.invalidate(zone.name, doc.content_path) is True
    assert cache.invalidate(zone.name, doc.content_path) is False
    assert fingerprint not in cache

    cache.get_or_render(zone, doc, memory_reader)
    assert len(compiler.calls) == 2

    cache.clear()
    assert cache.stats == CacheStats(hits=0, misses=0, entries=0)
