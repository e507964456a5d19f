"""Runtime feature flag helpers for console tracing."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping, Sequence

try:  # Python 3.11+
    import tomllib  # type: ignore[attr-defined]
except ModuleNotFoundError:  # pragma: no cover - fallback for older Python
    import tomli as tomllib  # type: ignore[import-untyped]

__all__ = ["get_trace_feature", "is_color_enabled", "is_descriptive_enabled", "reload"]

_FEATURES_FILENAME = "config/features.toml"

_DESCRIPTIVE_KEYS = ("CLI_DESCRIPTIVE", "SUDOKU_DESCRIPTIVE")
_COLORED_KEYS = ("CLI_COLORED", "SUDOKU_COLORED")


def _features_path() -> Path:
    return Path(__file__).resolve().parents[1] / _FEATURES_FILENAME


@lru_cache(maxsize=1)
def _load_features() -> dict[str, Any]:
    path = _features_path()
    if not path.exists():
        return {}
    with path.open("rb") as handle:
        return tomllib.load(handle)


def reload() -> None:
    """Clear the cached feature configuration."""

    _load_features.cache_clear()


def _coerce_bool(value: Any) -> bool | None:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        normalised = value.strip().lower()
        if normalised in {"1", "true", "yes", "on"}:
            return True
        if normalised in {"0", "false", "no", "off"}:
            return False
    return None


def get_trace_feature() -> dict[str, Any]:
    """Return the ``[trace]`` block from the feature file."""

    entry = _load_features().get("trace")
    return dict(entry) if isinstance(entry, dict) else {}


def _resolve(name: str, keys: Sequence[str], env: Mapping[str, str] | None) -> bool:
    enabled = bool(get_trace_feature().get(name, False))
    if env:
        # CLI_* keys come first and win over plain environment keys.
        for key in keys:
            override = _coerce_bool(env.get(key))
            if override is not None:
                return override
    return enabled


def is_descriptive_enabled(env: Mapping[str, str] | None = None) -> bool:
    """Return ``True`` when every solver event should be printed."""

    return _resolve("descriptive", _DESCRIPTIVE_KEYS, env)


def is_color_enabled(env: Mapping[str, str] | None = None) -> bool:
    """Return ``True`` when console output should carry ANSI colours."""

    return _resolve("colored", _COLORED_KEYS, env)
