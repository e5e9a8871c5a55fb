"""Cyclopts CLI entrypoint for rendering zoned Markdown documentation.

The ``zonedocs`` console script loads ``site.yaml``, builds the shared site
context, and then either renders one URL to stdout, pre-renders every doc into
an output directory, or checks that each doc's content file exists. Options
fall back to ``ZONEDOCS_*`` environment variables.

Examples
--------
Render a single page:

>>> from zonedocs.cli import app
>>> app(["render", "/reference/db/raw-query"])  # doctest: +SKIP

Build the whole site into ``public/``:

>>> app(["build", "--output-dir", "public"])  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import sys
import typing as typ
from pathlib import Path

import cyclopts
import msgspec
from cyclopts import App, Parameter

from .builder import StaticSiteBuilder
from .config import load_site_config
from .errors import NotFoundError
from .pipeline import ContentRenderer
from .site import build_site_context
from .sources import FileSourceReader

DEFAULT_CONFIG = Path("site.yaml")

app = App(name="zonedocs", config=cyclopts.config.Env("ZONEDOCS_", command=False))  # type: ignore[unknown-argument]


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:
            return str(path)
    return str(path)


@app.command(help="Render one URL and print its HTML or error payload.")
def render(
    url: str,
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to site config", env_var="ZONEDOCS_CONFIG")
    ] = DEFAULT_CONFIG,
    verbose: typ.Annotated[bool, Parameter(help="Enable debug logging")] = False,
) -> None:
    """Render ``url`` and write the HTML to stdout.

    Parameters
    ----------
    url : str
        Request URL or path, for example ``/reference/db/raw-query``.
    config : Path, optional
        Path to ``site.yaml`` (overridable via ``ZONEDOCS_CONFIG``).
    verbose : bool, optional
        Log at debug level.

    Raises
    ------
    SystemExit
        With status 1 when rendering fails; the JSON error payload is
        written to stderr.
    """
    _configure_logging(verbose)
    site = build_site_context(load_site_config(config))
    page = ContentRenderer(site).render(url)
    if page.error is not None:
        print(msgspec.json.encode(page.to_dict()).decode(), file=sys.stderr)
        raise SystemExit(1)
    print(page.html)


@app.command(help="Pre-render every doc into static HTML files.")
def build(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to site config", env_var="ZONEDOCS_CONFIG")
    ] = DEFAULT_CONFIG,
    output_dir: typ.Annotated[
        Path | None,
        Parameter(help="Override the output folder", env_var="ZONEDOCS_OUTPUT_DIR"),
    ] = None,
    workers: typ.Annotated[
        int | None, Parameter(help="Override the render worker count")
    ] = None,
    verbose: typ.Annotated[bool, Parameter(help="Enable debug logging")] = False,
) -> None:
    """Render all docs of all zones and write them under ``output_dir``.

    Parameters
    ----------
    config : Path, optional
        Path to ``site.yaml``.
    output_dir : Path or None, optional
        Destination folder; defaults to ``output_dir`` from the config.
    workers : int or None, optional
        Thread pool size; defaults to ``workers`` from the config.
    verbose : bool, optional
        Log at debug level.

    Raises
    ------
    SystemExit
        With status 1 when any page failed to render.
    """
    _configure_logging(verbose)
    site_config = load_site_config(config)
    site = build_site_context(site_config)
    builder = StaticSiteBuilder(
        ContentRenderer(site),
        output_dir or site_config.output_dir,
        workers=workers or site_config.options.workers,
    )
    report = builder.run()
    for path in report.written:
        print(f"wrote {_format_path(path)}")
    for url, error in sorted(report.failures.items()):
        print(f"failed {url}: [{error.kind}] {error.message}", file=sys.stderr)
    if not report.ok:
        raise SystemExit(1)


@app.command(help="Report docs whose content file is missing.")
def check(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to site config", env_var="ZONEDOCS_CONFIG")
    ] = DEFAULT_CONFIG,
    verbose: typ.Annotated[bool, Parameter(help="Enable debug logging")] = False,
) -> None:
    """Validate the site config and every doc's content path.

    Raises
    ------
    SystemExit
        With status 1 when at least one content file is missing.
    """
    _configure_logging(verbose)
    site = build_site_context(load_site_config(config))
    reader = FileSourceReader()
    missing = 0
    total = 0
    for zone in site.zones:
        for doc in zone.navigation.iter_docs():
            total += 1
            try:
                stamp = reader.stamp(zone.content_root, doc.content_path)
            except NotFoundError:
                stamp = None
            if stamp is None:
                missing += 1
                url = site.resolver.url_for(zone, doc)
                print(f"missing {zone.name}:{doc.content_path} ({url})")
    print(f"checked {total} docs in {len(site.zones)} zones, {missing} missing")
    if missing:
        raise SystemExit(1)


def main() -> None:
    """Invoke the Cyclopts application that powers the `zonedocs` console command.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
