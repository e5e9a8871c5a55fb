"""Utility helpers shared by the zonedocs configuration loader."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from zonedocs.errors import ConfigError
from zonedocs.parser.options import UnknownDirectivePolicy

from .models import RenderOptions

_KNOWN_OPTIONS = frozenset(
    {
        "pygments_style",
        "template",
        "unknown_directives",
        "toc_levels",
        "workers",
        "output_dir",
    }
)


def _normalize_base_url(value: object, zone: str) -> str:
    """Return ``value`` as ``/segment`` (or ``/``) without a trailing slash."""
    if not isinstance(value, str) or not value.strip():
        msg = f"Zone '{zone}' is missing 'base_url'."
        raise ConfigError(msg)
    text = "/" + value.strip().strip("/")
    return text


def _resolve_path(value: object, base_dir: Path, *, field: str, zone: str) -> Path:
    """Resolve a config path relative to the directory holding the config file."""
    if not isinstance(value, str) or not value.strip():
        msg = f"Zone '{zone}' is missing '{field}'."
        raise ConfigError(msg)
    path = Path(value.strip())
    return path if path.is_absolute() else base_dir / path


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _parse_policy(value: object) -> UnknownDirectivePolicy:
    try:
        return UnknownDirectivePolicy(str(value).strip().lower())
    except ValueError as exc:
        allowed = ", ".join(policy.value for policy in UnknownDirectivePolicy)
        msg = f"Invalid unknown_directives value '{value}'. Expected one of: {allowed}"
        raise ConfigError(msg) from exc


def _parse_toc_levels(value: object) -> tuple[int, ...]:
    match value:
        case list() | tuple():
            levels = tuple(int(level) for level in value)
        case int():
            levels = (value,)
        case _:
            msg = f"Invalid toc_levels value {value!r}; expected a list of integers."
            raise ConfigError(msg)
    if any(level < 1 or level > 6 for level in levels):
        msg = f"toc_levels must be between 1 and 6, got {list(levels)}."
        raise ConfigError(msg)
    return levels


def _build_render_options(payload: typ.Mapping[str, typ.Any]) -> RenderOptions:
    """Build :class:`RenderOptions` from the ``defaults`` mapping."""
    unknown = sorted(set(payload) - _KNOWN_OPTIONS)
    if unknown:
        msg = f"Unknown option(s) in defaults: {', '.join(unknown)}"
        raise ConfigError(msg)
    base = RenderOptions()
    workers = payload.get("workers", base.workers)
    if not isinstance(workers, int) or workers < 1:
        msg = f"workers must be a positive integer, got {workers!r}."
        raise ConfigError(msg)
    return RenderOptions(
        pygments_style=payload.get("pygments_style", base.pygments_style),
        template=payload.get("template", base.template),
        unknown_directives=_parse_policy(
            payload.get("unknown_directives", base.unknown_directives)
        ),
        toc_levels=_parse_toc_levels(payload.get("toc_levels", list(base.toc_levels))),
        workers=workers,
    )


__all__ = [
    "_build_render_options",
    "_normalize_base_url",
    "_optional_str",
    "_resolve_path",
]
